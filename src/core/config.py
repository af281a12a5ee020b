# config.py
import os

# Directory Paths (relative to project root)
# Use absolute paths based on this file's location for robustness
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR = os.path.join(PROJECT_ROOT, "data")
REFERENCE_POINTS_FILE = os.path.join(DATA_DIR, "reference_points.json")
LOCATIONS_FILE = os.path.join(DATA_DIR, "locations.json")
SETTINGS_DIR = os.path.join(DATA_DIR, "config")
DEFAULT_SETTINGS_FILE = os.path.join(SETTINGS_DIR, "default.json")

# Projection
# Returned for locations with no reference points; far outside the canvas
OFF_MAP_POSITION = (-1000, -1000)

# Numbered dungeon levels share one reference-point set per bucket
LEVEL_PREFIX = "UndergroundMine"
LEVEL_DEEP_THRESHOLD = 120  # levels above this use the deep bucket
LEVEL_DEEP_BUCKET = "SkullCave"
LEVEL_STANDARD_BUCKET = "Mine"

# Location graph
# Upper bound on warp hops followed from a single starting location
MAX_WARP_DEPTH = 256

# Structures (movable buildings on the host location)
HOST_LOCATION = "Farm"
BARN_MARKER = "Barn"
BARN_Y_OFFSET = 3
GREENHOUSE_LOCATION = "Greenhouse"
# Greenhouse footprint is 5x7 tiles at 3px per tile on the overview image
GREENHOUSE_OFFSET = (-(5 // 2 * 3), -(7 // 2 * 3))

# Debug
DEBUG_MODE = False

# Logging
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
