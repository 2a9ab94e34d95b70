from __future__ import annotations

from typing import NewType, TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

# Coordinates are unit-agnostic: pixels, normalized map units (0.0-1.0) or
# world units all work, as long as one call uses one space.
Coord: TypeAlias = float  # Example: x=0.25

# Raw coordinate pair accepted at the public boundary. Always (x, y) order.
RawPoint: TypeAlias = tuple[Coord, Coord]  # Example: (0.25, 0.5)

# Raw directed segment: (start, end).
RawSegment: TypeAlias = tuple[RawPoint, RawPoint]  # Example: ((0, 0), (1, 0))

# Polar angle in degrees, in (-180, 180].
Degrees: TypeAlias = float

# =============================================================================
# METRIC TYPES
# =============================================================================

# Dotted metric name, e.g. "visibility.sweep_ms".
MetricName: TypeAlias = str

# Elapsed wall-clock time in milliseconds.
Milliseconds = NewType("Milliseconds", float)
