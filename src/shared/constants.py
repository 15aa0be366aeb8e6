"""Application-wide constants and defaults."""

APP_NAME = 'allrgb'
APP_DIR_NAME = 'AllRGB'

# --- Settings defaults (mirrors configs/profiles/default.toml) ---
DEFAULT_AVERAGE = True
DEFAULT_SEED = 0
# Fitness window side length in cells (odd)
DEFAULT_NEIGHBOURHOOD_WIDTH = 3
# Numba threads used for the frontier scan (1 = single-threaded)
DEFAULT_WORKERS = 1

# Quantization levels per channel; DEPTH**3 must equal WIDTH * HEIGHT
DEFAULT_COLOR_DEPTH = 32
DEFAULT_COLOR_DISTANCE = 'squared_euclidean'

DEFAULT_IMAGE_AMOUNT = 16
DEFAULT_IMAGE_WIDTH = 256
DEFAULT_IMAGE_HEIGHT = 128
DEFAULT_IMAGE_PATH = 'output'
DEFAULT_IMAGE_PREFIX = 'allrgb'
DEFAULT_IMAGE_FORMAT = 'png'

DEFAULT_START_X = 128
DEFAULT_START_Y = 64

# --- Profiles ---
PROFILES_DIR = 'configs/profiles'
PROFILE_EXTENSION = '.toml'

# --- Placement engine ---
# Frontier expansion always uses the 3x3 ring
FRONTIER_HALF_WIDTH = 1
# Minimum frontier size before the scan switches to the prange kernel
PARALLEL_SCAN_MIN_FRONTIER = 256
# How often (in placements) the progress callback fires
PROGRESS_REPORT_EVERY = 512

# --- Imaging ---
# Channel scale for 8-bit export
CHANNEL_MAX_8BIT = 255
# Background for formats without an alpha channel (RGB)
EXPORT_BACKGROUND_RGB = (0, 0, 0)
# Pillow formats that keep the alpha channel of RGBA snapshots
ALPHA_CAPABLE_FORMATS = frozenset({'PNG', 'WEBP', 'TIFF', 'GIF', 'TGA'})
# Number of concurrent checkpoint writers
EXPORT_MAX_WORKERS = 1

# --- Logging ---
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# --- CLI exit codes ---
EXIT_OK = 0
EXIT_EXPORT_FAILURES = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_INVARIANT_VIOLATION = 3
