from __future__ import annotations

import logging
from pathlib import Path

from domain.models import Location, Warp
from shared.constants import WARP_FIELDS, WARP_SEPARATOR

logger = logging.getLogger(__name__)


def load_warps(path: str | Path) -> list[Warp]:
    """Read server warps (``name:x:y:z:rotation:pitch`` per line).

    A missing file yields an empty list; malformed lines are skipped with
    a warning.
    """
    path = Path(path)
    warps: list[Warp] = []
    try:
        text = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        return warps

    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        values = line.split(WARP_SEPARATOR)
        if len(values) < WARP_FIELDS:
            logger.warning('%s:%d: skipping warp with %d field(s)', path, lineno, len(values))
            continue
        try:
            location = Location(
                x=float(values[1]),
                y=float(values[2]),
                z=float(values[3]),
                rotation=float(values[4]),
                pitch=float(values[5]),
            )
        except ValueError:
            logger.warning('%s:%d: skipping malformed warp %r', path, lineno, values[0])
            continue
        warps.append(Warp(name=values[0], location=location))
    return warps
