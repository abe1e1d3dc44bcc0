"""Domain layer - settings, markers and collaborator contracts."""
from domain.interfaces import (
    MarkerPlayer,
    NotificationSink,
    TileRenderer,
    WorldHeightSource,
)
from domain.models import Location, MapMarker, MapSettings, Warp

__all__ = [
    'Location',
    'MapMarker',
    'MapSettings',
    'MarkerPlayer',
    'NotificationSink',
    'TileRenderer',
    'Warp',
    'WorldHeightSource',
]
