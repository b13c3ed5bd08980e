# chip8_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.common.types import RegisterLayoutInfo
from chip8_tracer.core.snapshot import DeviceState, Metadata, Operation, Snapshot
from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.memory import Memory

logger = logging.getLogger(__name__)

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    CPUエミュレーションの基底となる抽象クラス。
    Memoryとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:responsibility CPUの状態とメモリへの参照を初期化します。
    # @intent:pre-condition `memory`は有効なMemoryオブジェクトである必要があります。
    def __init__(self, memory: Memory):
        self._memory = memory
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        具体的なCPUはこのメソッドを実装し、専用のCpuStateサブクラスを返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        """
        レジスタを初期値に戻します。メモリの内容（ロード済みのプログラム）は保持されます。
        """
        self._state = self._create_initial_state()
        self._cycle_count = 0
        self._memory.get_and_clear_activity_log()

    # @intent:responsibility 現在のCPUの状態を返します。
    def get_state(self) -> CpuState:
        return self._state

    def get_memory(self) -> Memory:
        return self._memory

    def get_cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 保存されたCPU状態を復元します（デバッガのステップバック用）。
    def restore_state(self, state: CpuState) -> None:
        self._state = state.copy()

    # @intent:responsibility メモリから次の命令（オペコード）をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCから命令語を読み出して返します。PCは変更しません。
        """
        pass

    # @intent:responsibility フェッチしたオペコードを解析し、Operationオブジェクトに変換します。
    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    #                  アーキテクチャ固有の振る舞い（キー入力待ちなど）はフックメソッドで対応します。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとデバイスの状態を含むSnapshotを返します。
        命令の実行中にChip8Errorが発生した場合、PCを実行前の値に戻してから例外を再送出します。
        """
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._memory.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. 実行停止状態の判定 (Hook)
        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        try:
            # 3. フェッチ
            opcode = self._fetch()

            # 4. デコード
            operation = self._decode(opcode)

            # 5. PC更新 (Hook)
            self._update_pc(operation)

            # 6. 実行
            self._execute(operation)
        except Chip8Error:
            # 各命令は検証後に状態を変更するため、ここで戻すのはPCのみでよい
            self._state.pc = initial_pc
            self._memory.get_and_clear_activity_log()
            raise

        # 7. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility 実行停止状態の場合の処理を行います。
    # @intent:return 停止中であればその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        """
        デフォルトは何もしない（Noneを返す）。
        """
        return None

    # @intent:responsibility 命令実行前にPCを更新します。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility CPU外のデバイス状態を取得します（Hook）。
    def _capture_devices(self) -> Optional[DeviceState]:
        return None

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        """
        実行結果からSnapshotオブジェクトを生成する共通ロジック。
        stateはコピーして格納するため、後続の実行の影響を受けません。
        """
        bus_activity = self._memory.get_and_clear_activity_log()
        self._cycle_count += operation.cycle_count

        disassembly = f"{initial_pc:04X}: {operation.mnemonic}"
        if operation.operands:
            disassembly += " " + ", ".join(operation.operands)
        logger.debug(disassembly)

        return Snapshot(
            state=self._state.copy(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, disassembly=disassembly),
            bus_activity=bus_activity,
            devices=self._capture_devices(),
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        UIがCPUの内部構造を知らなくても値を表示できるようにするために使用される。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをUI上でどのように配置・グループ化すべきかの定義を返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
