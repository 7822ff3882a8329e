"""
Command-line entry point: ``python -m cannon_sim``.
"""

from pathlib import Path
from typing import List, Optional
import argparse
import logging
import sys
from .app import SimulationApp
from .io import ConfigLoader, TargetLayoutError
from .visualization import RenderSurfaceError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cannon-sim',
        description="Aim the cannon with the mouse, hold to charge, release to fire. "
                    "Press 'r' to reset.",
    )
    parser.add_argument("--config", type=Path, help="Simulation config file (.json/.yaml)")
    parser.add_argument("--targets", type=Path, help="Target layout file (.json/.yaml)")
    parser.add_argument("--width", type=float, help="Play area width")
    parser.add_argument("--height", type=float, help="Play area height")
    parser.add_argument("--fps", type=int, help="Frame rate of the animation loop")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = {}
    base_dir = None
    if args.config is not None:
        try:
            config = ConfigLoader.load_config(args.config) or {}
        except (OSError, ValueError) as exc:
            logger.error(f"Cannot load config: {exc}")
            return 2
        if not isinstance(config, dict):
            logger.error(f"Config {args.config} must be a mapping")
            return 2
        base_dir = args.config.parent

    canvas = config.get('canvas', {})
    if isinstance(canvas, dict):
        canvas = dict(canvas)
        if args.width is not None:
            canvas['width'] = args.width
        if args.height is not None:
            canvas['height'] = args.height
        config['canvas'] = canvas
    if args.fps is not None:
        config['frame_rate'] = args.fps
    if args.targets is not None:
        config.pop('targets', None)
        config['targets_file'] = str(args.targets)
        base_dir = None

    try:
        setup = ConfigLoader.create_game_from_config(config, base_dir=base_dir)
    except TargetLayoutError as exc:
        logger.error(f"Invalid target layout: {exc}")
        return 2
    except ValueError as exc:
        logger.error(f"Invalid configuration: {exc}")
        return 2

    try:
        app = SimulationApp(setup)
    except RenderSurfaceError as exc:
        logger.error(f"Cannot start renderer: {exc}")
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
