"""Command-line entry point: ``chipvm --game ROM``."""

import argparse
import sys

from chipvm.config import RunConfig
from chipvm.constants import CPU_FREQUENCY
from chipvm.display import render_text
from chipvm.emulator import Interpreter
from chipvm.errors import Chip8Error
from chipvm.logging import EmulatorLogger
from chipvm.rendering import create_color_scheme
from chipvm.runner import run, run_headless


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipvm", description="Simple CHIP-8 emulator")
    parser.add_argument("-g", "--game", required=True, help="Path to the ROM image")
    parser.add_argument("--scale", type=int, default=16, help="Window pixels per CHIP-8 pixel")
    parser.add_argument("--colors", default="classic", help="Color scheme name")
    parser.add_argument("--wrap", action="store_true", help="Wrap sprites around screen edges instead of clipping")
    parser.add_argument("--tone", type=float, default=250.0, help="Beep frequency in Hz")
    parser.add_argument("--volume", type=float, default=0.2, help="Beep volume in [0, 1]")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument(
        "--headless", type=int, metavar="STEPS", default=None,
        help="Run STEPS instructions without a window and print the final screen",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = RunConfig(
            scale=args.scale,
            color_scheme=args.colors,
            sprite_wrap=args.wrap,
            tone_frequency=args.tone,
            volume=args.volume,
            log_level=args.log_level,
        )
        create_color_scheme(config.color_scheme)
        logger = EmulatorLogger(log_level=config.log_level)
    except ValueError as e:
        print(f"chipvm: {e}", file=sys.stderr)
        return 2

    try:
        interpreter = Interpreter.from_rom(args.game, sprite_wrap=config.sprite_wrap)
        logger.log_run_start(args.game, dict(config.items()) | {"cpu_hz": CPU_FREQUENCY})

        if args.headless is not None:
            run_headless(interpreter, args.headless)
            print(render_text(interpreter.state.display))
            logger.log_run_end(interpreter.instruction_count, "done")
            return 0

        from chipvm.frontend import PygameFrontend

        frontend = PygameFrontend(config)
        if not frontend.audio.available:
            logger.warning("No audio device, running without sound")
        try:
            run(interpreter, frontend, config.steps_per_frame, logger)
        finally:
            frontend.close()
    except Chip8Error as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
