"""Constants for ECG beat delineation."""

# Slope magnitude (V/s) below which the signal counts as flat (about 45 degrees)
FLAT_SLOPE = 2.5

# Lowest slope (V/s) still accepted when trimming a beat window at the P onset / T offset
MIN_TRIM_SLOPE = -0.05

# Voltage margin above a baseline that makes a crossing significant
WAVE_THRESHOLD = 1 / 30

# Samples repeated at both ends of a beat before filtering
EDGE_EXTENSION = 20

# ST level is measured this many seconds after the J-point
ST_OFFSET_S = 0.08

# Peak-preserving aggregation
MAX_SAMPLE_JUMP = 2.0
CENTERING_LIMIT = 1.5
