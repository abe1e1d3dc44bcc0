"""Constants of the isometric tile map."""

# --- Сетка тайлов
# Ширина тайла в координатах проекции (фиксирована, не настраивается)
TILE_WIDTH = 128
# Высота тайла в координатах проекции
TILE_HEIGHT = 128

# Точка привязки проекции (мировые координаты x, y, z)
ANCHOR_X = 0
ANCHOR_Y = 127
ANCHOR_Z = 0

# Отступ от края тайла (единицы проекции), в пределах которого изменение
# блока задевает соседний тайл (рендер тайла сэмплирует соседей)
EDGE_MARGIN = 4

# Минимальная высота колонки, начиная с которой тайл считается непустым
MIN_COLUMN_HEIGHT = 1

# --- Фоновый рендер
# Пауза между рендерами тайлов (мс) для снижения нагрузки
RENDER_WAIT_MS = 500
# Ожидание при пустой очереди (мс)
IDLE_WAIT_MS = 1000
# Сколько раз повторять рендер тайла после ошибки, прежде чем отбросить его
MAX_RENDER_RETRIES = 3
# Имя потока рендера
RENDER_THREAD_NAME = 'map-renderer'

# --- История обновлений
# Сколько помнить обновления тайлов (мс)
MAX_TILE_AGE_MS = 60000

# --- Файлы и пути по умолчанию
TILE_PATH = 'tiles/'
COLORSET_PATH = 'colors.txt'
MARKER_PATH = 'markers.csv'
WARPS_PATH = 'warps.txt'
CONFIG_PATH = 'configs/map.toml'
LOG_FILE = 'log/isomap.log'

# Порт веб-сервера тайлов (используется внешним HTTP-слоем)
SERVER_PORT = 8123

# --- Формат таблицы цветов
# id + 4 цвета RGBA
COLORSET_MIN_FIELDS = 17
COLORS_PER_MATERIAL = 4
COLORSET_SEPARATOR = '\t'
COLORSET_COMMENT_PREFIX = '#'

# --- Маркеры и варпы
MARKER_SEPARATOR = ','
MARKER_FIELDS = 5
MARKER_LINE_END = '\r\n'
WARP_SEPARATOR = ':'
WARP_FIELDS = 6

# Префикс сообщений игрокам
MESSAGE_PREFIX = 'Map> '
