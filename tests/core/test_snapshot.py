# tests/core/test_snapshot.py
"""
chip8_tracer.core.snapshotモジュールの単体テスト。
"""
import pytest

from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.core.snapshot import (
    DeviceState,
    MemoryAccess,
    MemoryAccessType,
    Metadata,
    Operation,
    Snapshot,
)

# @intent:test_suite CPUとデバイスの状態を記録する不変スナップショットデータ構造の検証。

class TestMemoryAccess:
    # @intent:test_case_init MemoryAccessが正しく初期化されることを検証します。
    def test_init(self):
        access = MemoryAccess(address=0x300, data=0xAA, access_type=MemoryAccessType.WRITE, previous_data=0x11)
        assert access.address == 0x300
        assert access.previous_data == 0x11

    def test_immutability(self):
        access = MemoryAccess(address=0x300, data=0xAA, access_type=MemoryAccessType.READ)
        with pytest.raises(AttributeError):
            access.address = 0x400

class TestOperation:
    def test_defaults(self):
        op = Operation(opcode_hex="00E0", mnemonic="CLS")
        assert op.operands == []
        assert op.length == 2
        assert op.cycle_count == 1

    def test_immutability(self):
        op = Operation(opcode_hex="1200", mnemonic="JP", operands=["#200"])
        with pytest.raises(AttributeError):
            op.mnemonic = "CALL"

class TestSnapshot:
    # @intent:test_case_init Snapshotが全ての構成要素を保持することを検証します。
    def test_init(self):
        state = Chip8CpuState(pc=0x202)
        snapshot = Snapshot(
            state=state,
            operation=Operation(opcode_hex="6005", mnemonic="LD", operands=["V0", "#05"]),
            metadata=Metadata(cycle_count=1, disassembly="0200: LD V0, #05"),
            devices=DeviceState(delay_timer=3),
        )
        assert snapshot.state.pc == 0x202
        assert snapshot.bus_activity == []
        assert snapshot.devices.delay_timer == 3
        assert snapshot.devices.awaiting_register is None

    def test_immutability(self):
        snapshot = Snapshot(
            state=Chip8CpuState(),
            operation=Operation(opcode_hex="00E0", mnemonic="CLS"),
            metadata=Metadata(cycle_count=0),
        )
        with pytest.raises(AttributeError):
            snapshot.state = Chip8CpuState()
