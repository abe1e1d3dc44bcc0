"""Material color table loader.

Each non-comment line of the colorset file is tab separated: the material
id followed by four RGBA quadruples (17 fields). The quadruples are stored
in raycast order, which differs from their order in the file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from shared.constants import (
    COLORS_PER_MATERIAL,
    COLORSET_COMMENT_PREFIX,
    COLORSET_MIN_FIELDS,
    COLORSET_SEPARATOR,
)

logger = logging.getLogger(__name__)

Rgba = tuple[int, int, int, int]
ColorTable = dict[int, tuple[Rgba, ...]]

# File quadruple index for each raycast slot: slot 1 is the third
# quadruple in the file, slot 3 the second.
_RAYCAST_ORDER = (0, 2, 3, 1)
_CHANNEL_MAX = 255


def _parse_rgba(fields: list[str]) -> Rgba:
    r, g, b, a = (int(v) for v in fields)
    for v in (r, g, b, a):
        if not (0 <= v <= _CHANNEL_MAX):
            msg = f'Компонента цвета вне диапазона [0, {_CHANNEL_MAX}]: {v}'
            raise ValueError(msg)
    return r, g, b, a


def parse_color_line(line: str) -> tuple[int, tuple[Rgba, ...]] | None:
    """Parse one colorset line.

    Returns:
        (material id, colors in raycast order), or None for comments, blank
        lines and rows with too few fields.

    Raises:
        ValueError: If a numeric field is malformed.
    """
    line = line.rstrip('\r\n')
    if not line or line.startswith(COLORSET_COMMENT_PREFIX):
        return None
    fields = line.split(COLORSET_SEPARATOR)
    if len(fields) < COLORSET_MIN_FIELDS:
        return None

    material_id = int(fields[0])
    quads = [
        _parse_rgba(fields[1 + i * 4 : 5 + i * 4]) for i in range(COLORS_PER_MATERIAL)
    ]
    return material_id, tuple(quads[i] for i in _RAYCAST_ORDER)


def load_color_table(path: str | Path) -> ColorTable:
    """Load the colorset file into a material id -> colors mapping.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If a row holds malformed numbers.
    """
    path = Path(path)
    colors: ColorTable = {}
    with path.open(encoding='utf-8') as f:
        for lineno, line in enumerate(f, start=1):
            try:
                parsed = parse_color_line(line)
            except ValueError as e:
                msg = f'{path}:{lineno}: {e}'
                raise ValueError(msg) from e
            if parsed is None:
                continue
            material_id, quads = parsed
            colors[material_id] = quads
    logger.info('%d colors loaded from %s', len(colors), path)
    return colors
