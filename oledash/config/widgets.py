"""
Widget Defaults

Applied by the config helper whenever a widget configuration leaves a field out.
"""

# =============================================================================
# Common
# =============================================================================
UPDATE_INTERVAL = 1.0  # seconds between update() calls by the widget poller
AUTO_HIDE_TIMEOUT = 2.0  # seconds a widget stays visible after trigger_auto_hide()
PADDING = 0

# =============================================================================
# Display Modes
# =============================================================================
DISPLAY_MODE = 'text'

TEXT_SIZE = 10
TEXT_H_ALIGN = 'center'
TEXT_V_ALIGN = 'center'
TEXT_FORMAT = '%.0f'
FONT_NAME = 'DejaVuSans.ttf'  # looked up on the system font path, falls back to PIL's default font
DUAL_TEXT_FORMAT = '%.0f/%.0f'

BAR_DIRECTION = 'horizontal'
BAR_BORDER = False
BAR_FILL = 255

GRAPH_HISTORY = 30
GRAPH_FILL = 255
GRAPH_LINE = 255

GAUGE_ARC = 200
GAUGE_NEEDLE = 255
GAUGE_TICKS = 150
GAUGE_SHOW_TICKS = True

# Dual I/O widgets (network rx/tx, disk read/write)
DUAL_PRIMARY_COLOR = 255
DUAL_SECONDARY_COLOR = 255
DUAL_PRIMARY_NEEDLE = 255
DUAL_SECONDARY_NEEDLE = 200
NETWORK_UNIT = 'Mbps'
DISK_UNIT = 'MB/s'

# =============================================================================
# Scrolling
# =============================================================================
SCROLL_SPEED = 30.0  # pixels per second
SCROLL_DIRECTION = 'left'
SCROLL_MODE = 'continuous'  # continuous, bounce, pause_ends
SCROLL_PAUSE_MS = 1000
SCROLL_GAP = 20  # pixels between the two copies in continuous mode

# =============================================================================
# Indicator Widgets
# =============================================================================
COLOR_ON = 255
COLOR_OFF = 100
BLINK_INTERVAL = 0.5  # seconds per blink phase

# Icon set thresholds by widget height (pixels): >=16 -> 16x16, >=12 -> 12x12, else 8x8
ICON_SIZE_LARGE = 16
ICON_SIZE_MEDIUM = 12

BLUETOOTH_FORMAT = '{icon}'
BLUETOOTH_API_URL = 'localhost:8765'

KEYBOARD_FORMAT = '{caps}{num}{scroll}'

MEDIA_SERVER_URL = 'http://localhost:8880'
MEDIA_FORMAT = '{artist} - {title}'
MEDIA_PLACEHOLDER_TEXT = '[Not running]'
MEDIA_TEXT_SIZE = 12

CLIPBOARD_MAX_LENGTH = 100
CLIPBOARD_POLL_INTERVAL_MS = 500
CLIPBOARD_FORMAT = '{content}'

CLOCK_FORMAT = '%H:%M:%S'
CLOCK_TEXT_SIZE = 12

MASCOT_IDLE_THRESHOLD = 5.0  # percent; below this the mascot falls asleep

GPU_ADAPTER = 0
GPU_METRIC = 'utilization'
GPU_PLACEHOLDER_TEXT = 'GPU N/A'

VOLUME_MODE = 'bar'  # text, bar, gauge, triangle
VOLUME_FORMAT = '%.0f%%'
VOLUME_MUTE_TEXT = 'MUTE'
VOLUME_POLL_INTERVAL_MS = 100
VOLUME_MUTE_COLOR = 128
