from pydantic import BaseModel, Field, field_validator

from shared.constants import (
    ANCHOR_X,
    ANCHOR_Y,
    ANCHOR_Z,
    COLORSET_PATH,
    EDGE_MARGIN,
    IDLE_WAIT_MS,
    MARKER_PATH,
    MAX_RENDER_RETRIES,
    MAX_TILE_AGE_MS,
    RENDER_WAIT_MS,
    SERVER_PORT,
    TILE_HEIGHT,
    TILE_PATH,
    TILE_WIDTH,
    WARPS_PATH,
)

MAX_PORT = 65535


class MapSettings(BaseModel):
    """
    Настройки динамической карты.

    Ключи файла конфигурации принимаются как в виде имён полей,
    так и в виде старых свойств сервера (``map-tilepath`` и т.п.).
    """

    model_config = {
        'extra': 'ignore',  # игнорировать лишние ключи конфигурации
        'populate_by_name': True,
    }

    # Каталог с изображениями тайлов (используется рендером)
    tile_path: str = Field(default=TILE_PATH, alias='map-tilepath')
    # Таблица цветов материалов
    colorset_path: str = Field(default=COLORSET_PATH, alias='map-colorsetpath')
    # Файл маркеров
    marker_path: str = Field(default=MARKER_PATH, alias='map-markerpath')
    # Файл варпов
    warps_path: str = Field(default=WARPS_PATH, alias='map-warpspath')
    # Порт веб-сервера тайлов
    server_port: int = Field(default=SERVER_PORT, alias='map-serverport')

    # Пауза между рендерами (мс)
    render_wait_ms: int = Field(default=RENDER_WAIT_MS, alias='map-renderwait')
    # Ожидание при пустой очереди (мс)
    idle_wait_ms: int = IDLE_WAIT_MS
    # Окно хранения истории обновлений (мс)
    max_tile_age_ms: int = MAX_TILE_AGE_MS
    # Отступ от края тайла для распространения инвалидации
    edge_margin: int = EDGE_MARGIN
    # Повторы рендера после ошибки
    max_render_retries: int = MAX_RENDER_RETRIES

    # Точка привязки проекции
    anchor_x: int = ANCHOR_X
    anchor_y: int = ANCHOR_Y
    anchor_z: int = ANCHOR_Z

    # Игрок, которому отправляются отладочные сообщения карты
    debug_player: str | None = Field(default=None, alias='map-debugplayer')

    @field_validator('server_port')
    @classmethod
    def validate_port(cls, v: int | str) -> int:
        v = int(v)
        if not (0 < v <= MAX_PORT):
            msg = f'Порт должен быть в диапазоне [1, {MAX_PORT}]'
            raise ValueError(msg)
        return v

    @field_validator('render_wait_ms', 'max_render_retries')
    @classmethod
    def validate_non_negative(cls, v: int | str) -> int:
        v = int(v)
        if v < 0:
            msg = 'Значение не может быть отрицательным'
            raise ValueError(msg)
        return v

    @field_validator('idle_wait_ms', 'max_tile_age_ms')
    @classmethod
    def validate_positive(cls, v: int | str) -> int:
        v = int(v)
        if v <= 0:
            msg = 'Значение должно быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('edge_margin')
    @classmethod
    def validate_edge_margin(cls, v: int | str) -> int:
        v = int(v)
        # Отступ больше половины тайла задевал бы тайлы через один
        if not (0 <= v < min(TILE_WIDTH, TILE_HEIGHT) // 2):
            msg = 'edge_margin должен быть меньше половины размера тайла'
            raise ValueError(msg)
        return v

    @field_validator('debug_player')
    @classmethod
    def validate_debug_player(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def anchor(self) -> tuple[int, int, int]:
        return self.anchor_x, self.anchor_y, self.anchor_z

    @property
    def render_wait_s(self) -> float:
        return self.render_wait_ms / 1000.0

    @property
    def idle_wait_s(self) -> float:
        return self.idle_wait_ms / 1000.0


class MapMarker(BaseModel):
    """Именованная метка на карте, принадлежащая игроку."""

    name: str
    owner: str
    x: float
    y: float
    z: float

    @field_validator('name', 'owner')
    @classmethod
    def validate_text(cls, v: str) -> str:
        # Разделитель CSV внутри поля испортил бы файл маркеров
        if not v or ',' in v or '\n' in v or '\r' in v:
            msg = 'Имя и владелец маркера не должны быть пустыми или содержать запятые'
            raise ValueError(msg)
        return v


class Location(BaseModel):
    """Позиция и ориентация в мире."""

    x: float
    y: float
    z: float
    rotation: float = 0.0
    pitch: float = 0.0


class Warp(BaseModel):
    """Точка телепорта сервера."""

    name: str
    location: Location
