import random
from typing import Optional
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.debugger.debugger import Debugger
from chip8_tracer.loader.loader import get_loader
from chip8_tracer.runtime.driver import Driver, ErrorPolicy
from chip8_tracer.runtime.frontend import Frontend
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいて、CPUとデバイスを生成し、プログラムをロードします。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Chip8Cpu:
        random_source = None
        if config.random_seed is not None:
            # @intent:rationale シードを固定すると RND の結果が再現可能になる。
            rng = random.Random(config.random_seed)
            random_source = lambda: rng.getrandbits(8)

        cpu = Chip8Cpu(random_source=random_source)

        if config.rom:
            get_loader(config.format).load(config.rom, cpu)

        return cpu

    # @intent:responsibility CPUとフロントエンドを結び付ける駆動ループを生成します。
    def build_driver(self, cpu: Chip8Cpu, frontend: Frontend, config: SystemConfig,
                     debugger: Optional[Debugger] = None) -> Driver:
        return Driver(
            cpu,
            frontend,
            cpu_hz=config.cpu_hz,
            on_error=ErrorPolicy(config.on_error),
            debugger=debugger,
        )

    def build_debugger(self, cpu: Chip8Cpu, config: SystemConfig) -> Debugger:
        return Debugger(cpu, history_size=config.history_size)
