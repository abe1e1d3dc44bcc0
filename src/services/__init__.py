"""Services package - map manager, settings and boundary file formats."""

from services.color_table import ColorTable, load_color_table, parse_color_line
from services.map_manager import MapManager, MapStartupError
from services.markers import MarkerStore, read_markers, write_markers
from services.settings_service import SettingsService
from services.warps import load_warps

__all__ = [
    'ColorTable',
    'MapManager',
    'MapStartupError',
    'MarkerStore',
    'SettingsService',
    'load_color_table',
    'load_warps',
    'parse_color_line',
    'read_markers',
    'write_markers',
]
