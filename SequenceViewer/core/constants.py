"""Application-wide constants for SequenceViewer.

This module contains shared constants used across the application.
"""

import numpy as np

PROGRAM_NAME = "sv"
VERSION = "0.1.0"

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_NO_INPUT = 10

# Valid-value clamp defaults (full range of a single-precision float)
FLOAT32_MAX = float(np.finfo(np.float32).max)
DEFAULT_VMIN = -FLOAT32_MAX
DEFAULT_VMAX = FLOAT32_MAX

# Window position/size sentinel
UNSET = -1

# Watch polling
WATCH_POLL_INTERVAL = 0.5  # seconds
WATCH_FAILURE_WARN_THRESHOLD = 20  # consecutive failed stat calls before warning

# Zoom scale limits
MIN_ZOOM_SCALE = 1.0 / 32.0  # 1/32x (0.03125)
MAX_ZOOM_SCALE = 64.0  # 64x
