"""
Configuration constants.

Centralizes the tolerances and tuning values used by the visibility sweep and
the layers built on top of it. Organized by functional area.
"""

# =============================================================================
# NUMERICAL TOLERANCE
# =============================================================================

# The one tolerance shared by every comparison in the sweep: point equality,
# angle grouping and the parallel-line test. The heap and the event loop must
# agree on it.
EPSILON = 0.0000001

# =============================================================================
# FRAMING
# =============================================================================

# Distance the synthetic bounding frame sits outside the observer and every
# occluder endpoint.
FRAME_MARGIN = 1.0

# The viewport frame is pushed outward by this many epsilons so it never
# coincides with clipped segment endpoints lying on the viewport edge.
VIEWPORT_FRAME_INFLATION = 10

# Normalized map space: the whole map is the unit square.
DEFAULT_VIEWPORT_MIN = (0.0, 0.0)
DEFAULT_VIEWPORT_MAX = (1.0, 1.0)

# =============================================================================
# VISION SOURCES
# =============================================================================

# Number of segments in the ellipse that limits a source's vision range.
ELLIPSE_STEPS = 32

# Distinct wall sets kept sanitized at once.
WALL_CACHE_SIZE = 8

# =============================================================================
# METRICS
# =============================================================================

# Ring buffer size for per-call timing metrics.
METRIC_SAMPLE_COUNT = 256
