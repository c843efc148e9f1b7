"""Constants and defaults shared by engines, session and GUI."""

# Undo depth; pushing past it evicts the oldest snapshot
HISTORY_LIMIT = 50

# Working canvas; larger inputs are shrunk to fit on load
MAX_CANVAS_SIZE = (600, 600)

# Tolerance is given in percent, palette distance is in 0-255 RGB units
TOLERANCE_SCALE = 2.55

# Blur radius grows by one every BLUR_STRENGTH_STEP percent of strength
BLUR_STRENGTH_STEP = 25

# Pixels matched per vectorized quantization step once the palette is full
QUANTIZE_CHUNK = 8192

# Parameter ranges (min, max, default)
BLOCK_SIZE_RANGE = (1, 64, 8)
STRENGTH_RANGE = (0, 100, 30)
TOLERANCE_RANGE = (0, 100, 15)
MAX_COLORS_RANGE = (1, 256, 16)
ZOOM_RANGE = (0.1, 8.0, 1.0)
EXPORT_SCALE_RANGE = (10, 800, 100)
EXPORT_QUALITY_RANGE = (10, 100, 92)

GRID_OPACITY_DEFAULT = 30

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.tiff', '.webp', '.gif')

# Input file size limit for the GUI loader
MAX_FILE_BYTES = 10 * 1024 * 1024
