# chip8_tracer/debugger/debugger.py
"""
Chip-8 CPUのトレースデバッガ。

スナップショットの履歴を保持して1命令単位の前進・後退を可能にし、
PC・メモリアクセス・レジスタに対する条件で連続実行を中断します。
"""
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional
import time

from chip8_tracer.arch.chip8.cpu import WAIT_MNEMONIC, Chip8Cpu
from chip8_tracer.core.snapshot import MemoryAccessType, Snapshot
from chip8_tracer.core.state import CpuState

DEFAULT_HISTORY_SIZE = 1000

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    1つのブレークポイント条件。条件の種類に応じて value・address・register_name のいずれかを使います。
    register_name は "V0"〜"VF", "I", "PC", "SP" のいずれかです。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True                  # 有効/無効状態


def _read_register(state: CpuState, name: str) -> Optional[int]:
    try:
        return state.get_register(name)
    except (KeyError, AttributeError):
        return None


# @intent:responsibility Chip8Cpuの1命令実行を仲介し、履歴とブレークポイントを管理します。
class Debugger:
    """
    Chip8Cpuを1命令ずつ進め、その結果を履歴として保持するクラス。
    実行履歴は history_size 件まで保持され、step_back で1命令ずつ巻き戻せます。
    """
    def __init__(self, cpu: Chip8Cpu, history_size: int = DEFAULT_HISTORY_SIZE):
        if history_size < 1:
            raise ValueError("history_size must be at least 1.")
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_state = self._cpu.get_state().copy()
        self._last_snapshot: Optional[Snapshot] = None
        # 最大 history_size 件。溢れた分は基準点に畳み込む
        self._history: Deque[Snapshot] = deque()
        self._history_size = history_size
        self._capture_base()

    # @intent:responsibility 履歴が尽きた時に戻るための基準点（状態・デバイス・命令数）を保存します。
    def _capture_base(self) -> None:
        self._base_state = self._cpu.get_state().copy()
        self._base_devices = self._cpu.capture_devices()
        self._base_cycles = self._cpu.get_cycle_count()

    # @intent:responsibility 履歴を破棄し、現在の状態を新しい基準点にします（プログラムのロード後など）。
    def clear_history(self) -> None:
        self._history.clear()
        self._last_snapshot = None
        self._previous_state = self._cpu.get_state().copy()
        self._capture_base()

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        """
        ブレークポイント条件を追加します。
        """
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        """
        既存のブレークポイントを更新します。
        """
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def is_running(self) -> bool:
        return self._running

    def _hits_pc(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        """
        Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.bus_activity:
                    if access.access_type == MemoryAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == MemoryAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name:
                    if _read_register(current_state, bp.register_name) == bp.value:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name and self._previous_state:
                    before = _read_register(self._previous_state, bp.register_name)
                    after = _read_register(current_state, bp.register_name)
                    if before is not None and before != after:
                        return True
        return False

    # @intent:responsibility 実行直後のスナップショットが、いずれかのブレークポイント条件を満たすか判定します。
    # @intent:rationale PC_MATCH は「次に実行される命令のアドレス」（snapshot.state.pc）で評価します。
    def should_break(self, snapshot: Snapshot) -> bool:
        if snapshot.operation.mnemonic == WAIT_MNEMONIC:
            return False
        return self._hits_pc(snapshot.state.pc) or self._check_other_breakpoints(snapshot)

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        キー入力待ち中（WAIT）のスナップショットは履歴に記録しません。
        """
        self._previous_state = self._cpu.get_state().copy()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot

        if snapshot.operation.mnemonic != WAIT_MNEMONIC:
            self._history.append(snapshot)
            if len(self._history) > self._history_size:
                # 最古の履歴を捨て、その時点を新しい基準点とする
                dropped = self._history.popleft()
                self._base_state = dropped.state
                self._base_devices = dropped.devices
                self._base_cycles = dropped.metadata.cycle_count

        return snapshot

    def step_back(self) -> Optional[Snapshot]:
        """
        実行履歴を1つ戻り、CPU・デバイス・メモリの状態を復元します。
        """
        if not self._history:
            return None

        # 1. 履歴から最新のスナップショットを取り出し、削除する
        snapshot_to_revert = self._history.pop()

        # 2. メモリ書き込みの取り消し (Undo)
        memory = self._cpu.get_memory()
        for access in reversed(snapshot_to_revert.bus_activity):
            if access.access_type == MemoryAccessType.WRITE and access.previous_data is not None:
                memory.restore(access.address, access.previous_data)

        # 3. CPU状態の復元
        if self._history:
            previous_snapshot = self._history[-1]
            self._cpu.restore_snapshot(previous_snapshot)
            self._last_snapshot = previous_snapshot
            return previous_snapshot

        # 履歴が尽きた場合は基準点に復元
        self._cpu.restore_point(self._base_state, self._base_devices, self._base_cycles)
        self._last_snapshot = None
        return None

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def run(self, max_steps: Optional[int] = None) -> Optional[Snapshot]:
        """
        ブレークポイントにヒットするか、stop() が呼ばれるか、キー入力待ちになるまで実行を継続します。
        max_steps を指定した場合はその命令数で停止します。
        """
        self._running = True
        steps = 0
        snapshot = None

        # 現在のPCにブレークポイントがある場合は、まず1命令進める
        if self._hits_pc(self._cpu.get_state().pc):
            snapshot = self.step_instruction()
            steps += 1

        while self._running:
            if max_steps is not None and steps >= max_steps:
                self._running = False
                break

            time.sleep(0)
            snapshot = self.step_instruction()
            steps += 1

            if snapshot.operation.mnemonic == WAIT_MNEMONIC:
                self._running = False
                print(f"Waiting for key press at PC: {snapshot.state.pc:#06x}")
                break

            if self.should_break(snapshot):
                self._running = False
                print(f"Breakpoint hit at PC: {snapshot.state.pc:#06x}")

        return snapshot

    def stop(self) -> None:
        self._running = False
