"""Command line entry point for the isometric map scheduler.

The scheduler itself is embedded by the game server (it supplies the
renderer and the world). This entry point validates a map configuration
and the files it points to, which is the fail-fast part of startup.
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from services.color_table import load_color_table
from services.markers import read_markers
from services.settings_service import SettingsService
from services.warps import load_warps
from shared.constants import CONFIG_PATH, LOG_FILE
from shared.diagnostics import log_comprehensive_diagnostics

logger = logging.getLogger(__name__)


def setup_logging(log_file: str | Path = LOG_FILE, level: int = logging.INFO) -> Path:
    """Configure application logging to stdout and a UTF-8 log file.

    Returns:
        Path of the log file.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(str(log_path), encoding='utf-8'),
        ],
    )
    return log_path


def check_config(config_path: str | Path) -> int:
    """Validate settings and load every file the map needs at startup.

    Returns:
        Process exit code: 0 when everything loads.
    """
    try:
        settings = SettingsService(config_path).load()
    except ValidationError as e:
        logger.error('Invalid map settings in %s: %s', config_path, e)
        return 2

    try:
        colors = load_color_table(settings.colorset_path)
    except (OSError, ValueError):
        logger.exception('Failed to load colorset: %s', settings.colorset_path)
        return 1

    try:
        markers = read_markers(settings.marker_path)
    except (OSError, ValueError):
        logger.exception('Failed to load markers: %s', settings.marker_path)
        return 1

    warps = load_warps(settings.warps_path)

    print(f'colors:  {len(colors)} from {settings.colorset_path}')
    print(f'markers: {len(markers)} from {settings.marker_path}')
    print(f'warps:   {len(warps)} from {settings.warps_path}')
    print(f'tiles:   {settings.tile_path} (port {settings.server_port})')
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    parser = argparse.ArgumentParser(
        description='Isometric tile map - configuration check',
    )
    parser.add_argument(
        '--config',
        default=CONFIG_PATH,
        help='TOML file with map settings (default: %(default)s)',
    )
    parser.add_argument(
        '--check',
        action='store_true',
        help='Validate settings and load color table, markers and warps',
    )
    parser.add_argument(
        '--log-file',
        default=LOG_FILE,
        help='Log file path (default: %(default)s)',
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_file)
    log_comprehensive_diagnostics('startup check')

    if not args.check:
        parser.print_help()
        return 0
    return check_config(args.config)


if __name__ == '__main__':
    sys.exit(main())
