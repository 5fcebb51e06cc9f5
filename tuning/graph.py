"""Points of the scrolling cents graph and the bounded buffer that holds them."""
from collections import deque
from enum import Enum
from typing import NamedTuple, Optional, Tuple

DEFAULT_MAX_GRAPH_POINTS = 20

IN_TUNE_CENTS = 5.0
SLIGHT_CENTS = 15.0


class ColorTier(Enum):
    """How far a graph point sits from the target."""
    IN_TUNE = "in_tune"
    SLIGHT = "slight"
    FAR = "far"
    EMPTY = "empty"     # no stable reading during this tick


class GraphPoint(NamedTuple):
    cents_deviation: Optional[float]
    timestamp: float
    tier: ColorTier

    @property
    def has_data(self) -> bool:
        return self.tier is not ColorTier.EMPTY


def tier_for_cents(cents: float) -> ColorTier:
    magnitude = abs(cents)
    if magnitude < IN_TUNE_CENTS:
        return ColorTier.IN_TUNE
    if magnitude < SLIGHT_CENTS:
        return ColorTier.SLIGHT
    return ColorTier.FAR


def make_point(cents: Optional[float], timestamp: float) -> GraphPoint:
    """Build a point, EMPTY when there is no deviation to plot."""
    if cents is None:
        return GraphPoint(None, timestamp, ColorTier.EMPTY)
    return GraphPoint(cents, timestamp, tier_for_cents(cents))


class GraphBuffer:
    """FIFO of graph points capped at max_points. Not thread-safe on its own;
    the owning session serializes access."""

    def __init__(self, max_points: int = DEFAULT_MAX_GRAPH_POINTS):
        if max_points < 1:
            raise ValueError("max_points must be at least 1")
        self.max_points = max_points
        self._points = deque(maxlen=max_points)

    def __len__(self) -> int:
        return len(self._points)

    def append(self, point: GraphPoint):
        self._points.append(point)

    def clear(self):
        self._points.clear()

    def snapshot(self) -> Tuple[GraphPoint, ...]:
        """Current points, most recent last."""
        return tuple(self._points)
