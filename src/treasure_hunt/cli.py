import argparse
import logging
import sys
from pathlib import Path

from .codec import read_map, serialize_map, write_map
from .engine import SimulationEngine
from .errors import SettingsError, TreasureHuntError
from .logging_config import configure_logging, resolve_level
from .settings import Settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MAP_ERROR = 1
EXIT_IO_ERROR = 2
EXIT_SETTINGS_ERROR = 3


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="treasure-hunt",
        description="Treasure Hunt - run adventurers across a map file and write the final map.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=None,
        help="Map description to read (default: paths.input from settings).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Where to write the final map (default: paths.output from settings).",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the final map instead of writing the output file.",
    )
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file to load/override defaults.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    stream = sys.stderr if args.stdout else None

    # Provisional level so the settings loader can report what it reads
    configure_logging(level=logging.DEBUG if args.debug else logging.INFO, stream=stream)
    try:
        settings = Settings.load(user_path=args.settings_path)
    except SettingsError as exc:
        logger.error("Invalid settings: %s", exc)
        return EXIT_SETTINGS_ERROR

    # --debug beats settings file and TREASURE_HUNT_LOG_LEVEL
    level = logging.DEBUG if args.debug else resolve_level(settings.logging.level)
    configure_logging(level=level, stream=stream)

    input_path = args.input or Path(settings.paths.input)
    output_path = args.output or Path(settings.paths.output)

    try:
        world = read_map(input_path)
    except TreasureHuntError as exc:
        logger.error("Invalid map %s: %s", input_path, exc)
        return EXIT_MAP_ERROR
    except OSError as exc:
        logger.error("Cannot read map %s: %s", input_path, exc)
        return EXIT_IO_ERROR

    SimulationEngine().run_to_completion(world)

    if args.stdout:
        print(serialize_map(world))
        return EXIT_OK

    try:
        write_map(world, output_path)
    except OSError as exc:
        logger.error("Cannot write map %s: %s", output_path, exc)
        return EXIT_IO_ERROR
    logger.info("Final map written to %s", output_path)
    return EXIT_OK
