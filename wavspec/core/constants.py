"""Global constants for wavspec."""

# Window timing defaults (seconds)
DEFAULT_START_TIME = 0.0
DEFAULT_WINDOW_LENGTH = 0.1  # "chunk size"

# Fraction of the half-spectrum kept in the transform map
DEFAULT_KEEP_FRACTION = 1 / 25

# Normalization
MAX_FLOOR = 1.0  # global max never drops below this (silent input)

# Rendering
DEFAULT_IMAGE_PATH = "graph.png"
DISPLAY_MAX = 255

# Bit depths the decoder hands to the engine
SUPPORTED_BIT_DEPTHS = (8, 16, 24, 32)
