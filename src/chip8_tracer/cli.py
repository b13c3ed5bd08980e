# src/chip8_tracer/cli.py
"""
chip8-tracer コマンドラインインターフェース。

Usage:
  chip8-tracer ROM [--config FILE] [--hex] [--cpu-hz N] [--scale N]
                   [--log-level LEVEL] [--headless [--max-seconds S]]

--headless を指定しない場合はQtウィンドウを開きます。
"""
import argparse
import logging
import sys
from typing import List, Optional

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.loader import LOG_LEVELS, ConfigLoader
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.runtime.frontend import HeadlessFrontend

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8-tracer",
        description="Chip-8 virtual CPU with a tracing debugger.",
    )
    parser.add_argument("rom", nargs="?", default=None,
                        help="ROM file to load (raw binary, or a hex listing with --hex)")
    parser.add_argument("--config", "-c", type=str, default=None, metavar="FILE",
                        help="YAML system config")
    parser.add_argument("--hex", action="store_true",
                        help="Treat ROM as a hex listing (one 16-bit word per line)")
    parser.add_argument("--cpu-hz", type=int, default=None, metavar="N",
                        help="Instructions per second (default: 700)")
    parser.add_argument("--scale", type=int, default=None, metavar="N",
                        help="Display scale factor (default: 10)")
    parser.add_argument("--log-level", type=str.upper, default=None, choices=LOG_LEVELS,
                        help="Logging level (default: WARNING)")
    parser.add_argument("--headless", action="store_true",
                        help="Run without a window")
    parser.add_argument("--max-seconds", type=float, default=None, metavar="S",
                        help="Stop a headless run after S seconds")
    parser.add_argument("--dump", action="store_true",
                        help="Print the register file after a headless run")
    return parser


# @intent:responsibility 設定ファイルの値をコマンドライン引数で上書きします。
def apply_overrides(config: SystemConfig, args: argparse.Namespace) -> SystemConfig:
    if args.rom:
        config.rom = args.rom
    if args.hex:
        config.format = "hex"
    if args.cpu_hz is not None:
        if args.cpu_hz <= 0:
            raise ValueError("--cpu-hz must be positive")
        config.cpu_hz = args.cpu_hz
    if args.scale is not None:
        if args.scale <= 0:
            raise ValueError("--scale must be positive")
        config.display.scale = args.scale
    if args.log_level:
        config.log_level = args.log_level
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
        config = apply_overrides(config, args)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    logging.basicConfig(level=config.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    builder = SystemBuilder()
    try:
        cpu = builder.build_system(config)
    except (OSError, ValueError, Chip8Error) as e:
        logger.error("Failed to load ROM: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.headless:
        from chip8_tracer.ui.app import run_gui
        return run_gui(cpu, config)

    if config.rom is None:
        parser.error("--headless requires a ROM")

    driver = builder.build_driver(cpu, HeadlessFrontend(), config)
    driver.run(max_seconds=args.max_seconds)
    if args.dump:
        print(cpu.dump())
    if driver.last_error is not None:
        print(f"Error: {driver.last_error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
