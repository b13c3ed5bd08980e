import unittest
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_tracer.common.errors import MemoryFault

class TestChip8LoadInstructions(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu()
        self.state = self.cpu.get_state()
        self.machine = self.cpu.get_machine()
        self.memory = self.cpu.get_memory()

    def _execute(self, word):
        self.state.pc = 0x200
        op = decode_opcode(word, 0x200)
        self.state.pc += op.length
        execute_instruction(op, self.state, self.machine)

    def test_ld_byte_and_reg(self):
        self._execute(0x6A42)
        self.assertEqual(self.state.v[0xA], 0x42)
        self._execute(0x8BA0) # LD VB, VA
        self.assertEqual(self.state.v[0xB], 0x42)

    def test_ld_i(self):
        self._execute(0xA123)
        self.assertEqual(self.state.i, 0x123)

    def test_add_i_does_not_touch_vf(self):
        self.state.i = 0xFFF
        self.state.v[1] = 0x02
        self.state.v[0xF] = 0x00
        self._execute(0xF11E)
        self.assertEqual(self.state.i, 0x1001)
        self.assertEqual(self.state.vf, 0)

    def test_ld_f(self):
        self.state.v[2] = 0x1A # 下位ニブルのみ使用
        self._execute(0xF229)
        self.assertEqual(self.state.i, 0x050 + 0xA * 5)

    def test_ld_b(self):
        self.state.v[3] = 254
        self.state.i = 0x300
        self._execute(0xF333)
        self.assertEqual(self.memory.read_block(0x300, 3), bytes([2, 5, 4]))
        self.assertEqual(self.state.i, 0x300)

    def test_ld_b_out_of_range_writes_nothing(self):
        self.state.v[3] = 123
        self.state.i = 0xFFE
        with self.assertRaises(MemoryFault):
            self._execute(0xF333)
        self.assertEqual(self.memory.peek(0xFFE), 0)
        self.assertEqual(self.memory.peek(0xFFF), 0)

    def test_store_and_load_registers(self):
        self.state.v[0:4] = [1, 2, 3, 4]
        self.state.v[4] = 99
        self.state.i = 0x400
        self._execute(0xF355) # LD [I], V3
        self.assertEqual(self.memory.read_block(0x400, 5), bytes([1, 2, 3, 4, 0]))
        self.assertEqual(self.state.i, 0x400)

        self.state.v[0:5] = [0, 0, 0, 0, 0]
        self._execute(0xF365) # LD V3, [I]
        self.assertEqual(self.state.v[0:5], [1, 2, 3, 4, 0])
        self.assertEqual(self.state.i, 0x400)

    def test_store_registers_out_of_range(self):
        self.state.i = 0xFFD
        self.state.v[0:4] = [1, 2, 3, 4]
        with self.assertRaises(MemoryFault):
            self._execute(0xF355)
        self.assertEqual(self.memory.peek(0xFFD), 0)

    def test_load_registers_out_of_range(self):
        self.state.i = 0xFFF
        with self.assertRaises(MemoryFault):
            self._execute(0xF165)
        self.assertEqual(self.state.v[0:2], [0, 0])

    def test_timer_transfers(self):
        self.state.v[1] = 30
        self._execute(0xF115) # LD DT, V1
        self._execute(0xF118) # LD ST, V1
        self.assertEqual(self.machine.timers.get_delay(), 30)
        self.assertEqual(self.machine.timers.get_sound(), 30)
        self.machine.timers.tick()
        self._execute(0xF207) # LD V2, DT
        self.assertEqual(self.state.v[2], 29)
