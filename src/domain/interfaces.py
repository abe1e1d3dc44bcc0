"""Collaborator contracts consumed by the map scheduler.

The scheduler never renders pixels, reads the world, or talks to players
itself. Callers plug these in when building a MapManager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tiles.store import TileRecord


class WorldHeightSource(Protocol):
    """Answers the height of the highest block in a world column."""

    def height_at(self, x: int, z: int) -> int: ...


class TileRenderer(Protocol):
    """Produces or refreshes the image artifact of one tile.

    May raise; the render worker retries failed tiles.
    """

    def render(self, tile: TileRecord) -> None: ...


class NotificationSink(Protocol):
    """Delivers a text message to a named recipient."""

    def send_message(self, recipient: str, text: str) -> None: ...


class MarkerPlayer(Protocol):
    """A player issuing marker commands."""

    name: str

    def send_message(self, text: str) -> None: ...

    def teleport_to(
        self,
        x: float,
        y: float,
        z: float,
        rotation: float,
        pitch: float,
    ) -> None: ...
