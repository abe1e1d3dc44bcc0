"""Player map markers persisted in a CSV file.

Every mutation rewrites the whole file. The in-memory map changes only
after the file was written, so memory and disk never disagree.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from domain.models import MapMarker
from shared.constants import (
    MARKER_FIELDS,
    MARKER_LINE_END,
    MARKER_SEPARATOR,
    MESSAGE_PREFIX,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from domain.interfaces import MarkerPlayer

logger = logging.getLogger(__name__)


def read_markers(path: str | Path) -> dict[str, MapMarker]:
    """Read markers from ``path``; a missing file yields no markers.

    Raises:
        ValueError: If a line is malformed.
    """
    path = Path(path)
    markers: dict[str, MapMarker] = {}
    try:
        f = path.open(encoding='utf-8', newline='')
    except FileNotFoundError:
        return markers
    with f:
        for lineno, line in enumerate(f, start=1):
            line = line.rstrip('\r\n')
            if not line:
                continue
            values = line.split(MARKER_SEPARATOR)
            if len(values) < MARKER_FIELDS:
                msg = f'{path}:{lineno}: ожидалось {MARKER_FIELDS} полей, получено {len(values)}'
                raise ValueError(msg)
            try:
                marker = MapMarker(
                    name=values[0],
                    owner=values[1],
                    x=float(values[2]),
                    y=float(values[3]),
                    z=float(values[4]),
                )
            except (ValidationError, ValueError) as e:
                msg = f'{path}:{lineno}: {e}'
                raise ValueError(msg) from e
            markers[marker.name] = marker
    return markers


def write_markers(path: str | Path, markers: Mapping[str, MapMarker]) -> None:
    """Write all markers to ``path`` atomically (temp file + rename).

    Raises:
        OSError: If the file cannot be written; the target is left intact.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f'.{path.name}.', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as out:
            for m in markers.values():
                out.write(
                    MARKER_SEPARATOR.join(
                        [m.name, m.owner, repr(m.x), repr(m.y), repr(m.z)],
                    )
                    + MARKER_LINE_END,
                )
        Path(tmp_name).replace(path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class MarkerStore:
    """Owner-authorised marker operations on top of the marker file.

    Usage:
        store = MarkerStore('markers.csv')
        store.load()
        store.add(player, 'home', 10.5, 64.0, -3.0)
        store.teleport(player, 'home')
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._markers: dict[str, MapMarker] = {}
        self._lock = threading.Lock()

    def load(self) -> int:
        """Load markers from disk, replacing the in-memory map.

        Returns:
            Number of markers loaded.
        """
        markers = read_markers(self.path)
        with self._lock:
            self._markers = markers
        logger.info('%d markers loaded from %s', len(markers), self.path)
        return len(markers)

    def get(self, name: str) -> MapMarker | None:
        with self._lock:
            return self._markers.get(name)

    def all(self) -> list[MapMarker]:
        with self._lock:
            return list(self._markers.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._markers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._markers

    def _commit(self, markers: dict[str, MapMarker]) -> bool:
        try:
            write_markers(self.path, markers)
        except OSError:
            logger.exception('Failed to save %s', self.path)
            return False
        self._markers = markers
        return True

    @staticmethod
    def _reply(player: MarkerPlayer, text: str) -> None:
        player.send_message(MESSAGE_PREFIX + text)

    def add(
        self,
        player: MarkerPlayer,
        name: str,
        x: float,
        y: float,
        z: float,
    ) -> bool:
        """Create a marker owned by ``player``.

        Returns:
            True if the marker was created and saved.
        """
        try:
            marker = MapMarker(name=name, owner=player.name, x=x, y=y, z=z)
        except ValidationError as e:
            fields = {err['loc'][0] for err in e.errors() if err['loc']}
            if 'name' in fields:
                self._reply(player, f'Invalid marker name "{name}".')
            else:
                self._reply(player, f'Player name "{player.name}" cannot own a marker.')
            return False

        with self._lock:
            if name in self._markers:
                self._reply(player, f'Marker "{name}" already exists.')
                return False
            updated = dict(self._markers)
            updated[name] = marker
            if not self._commit(updated):
                self._reply(player, f'Could not save marker "{name}".')
                return False
        logger.info('Marker "%s" added by %s', name, player.name)
        return True

    def remove(self, player: MarkerPlayer, name: str) -> bool:
        """Remove a marker; only its owner may do so (case-insensitive).

        Returns:
            True if the marker was removed and the file saved.
        """
        with self._lock:
            marker = self._markers.get(name)
            if marker is None:
                self._reply(player, f'Marker "{name}" does not exist.')
                return False
            if marker.owner.lower() != player.name.lower():
                self._reply(player, f'Marker "{name}" does not belong to you.')
                return False
            updated = dict(self._markers)
            del updated[name]
            if not self._commit(updated):
                self._reply(player, f'Could not save markers, "{name}" was kept.')
                return False
        logger.info('Marker "%s" removed by %s', name, player.name)
        return True

    def teleport(self, player: MarkerPlayer, name: str) -> bool:
        """Teleport ``player`` to a marker.

        Returns:
            True if the marker exists and the player was moved.
        """
        marker = self.get(name)
        if marker is None:
            self._reply(player, f'Marker "{name}" does not exist.')
            return False
        player.teleport_to(marker.x, marker.y, marker.z, 0.0, 0.0)
        return True
