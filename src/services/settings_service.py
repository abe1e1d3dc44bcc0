from __future__ import annotations

import logging
from pathlib import Path

import tomlkit

from domain.models import MapSettings
from shared.constants import CONFIG_PATH

logger = logging.getLogger(__name__)


class SettingsService:
    """Loads and stores MapSettings as TOML.

    A missing file is not an error: the defaults are used. Keys may use
    either the field names or the server property names (``map-tilepath``).
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or CONFIG_PATH)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> MapSettings:
        """Загрузка и валидация настроек карты TOML -> MapSettings."""
        if not self.path.exists():
            logger.info('Config %s not found, using defaults', self.path)
            return MapSettings()
        text = self.path.read_text(encoding='utf-8')
        data = tomlkit.parse(text)
        # Параметры карты могут лежать в отдельной таблице [map]
        section = data.get('map', data)
        settings = MapSettings.model_validate(section.unwrap())
        logger.info(
            'Map settings loaded from %s: tiles=%s, colors=%s, markers=%s, port=%d',
            self.path,
            settings.tile_path,
            settings.colorset_path,
            settings.marker_path,
            settings.server_port,
        )
        return settings

    def save(self, settings: MapSettings) -> Path:
        """Сохранение настроек в TOML (таблица [map])."""
        data = settings.model_dump(exclude_none=True)
        doc = tomlkit.document()
        doc.add('map', data)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(tomlkit.dumps(doc), encoding='utf-8')
        logger.info('Map settings saved to %s', self.path)
        return self.path
