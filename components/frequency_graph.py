"""Scrolling graph of cents deviation, one column per graph tick."""
from typing import Sequence

from rich.console import RenderableType
from rich.text import Text
from textual.widget import Widget

from tuning.graph import ColorTier, GraphPoint

POINT_STYLES = {
    ColorTier.IN_TUNE: "#00a39a",
    ColorTier.SLIGHT: "#ffc107",
    ColorTier.FAR: "#f44336",
}

# Row labels from top to bottom; the graph clamps at ±50 cents.
ROW_CENTS = (50, 40, 30, 20, 10, 0, -10, -20, -30, -40, -50)


class FrequencyGraph(Widget):
    """Renders the session's graph points, most recent at the right edge."""

    DEFAULT_CSS = """
    FrequencyGraph {
        height: 13;
        width: 100%;
        border: round #444444;
        padding: 0 1;
    }
    """

    def __init__(self, max_points: int = 20, **kwargs):
        super().__init__(**kwargs)
        self.max_points = max_points
        self.points: Sequence[GraphPoint] = ()
        self.listening = False

    def update_points(self, points: Sequence[GraphPoint], listening: bool):
        self.points = tuple(points)
        self.listening = listening
        self.refresh()

    def render(self) -> RenderableType:
        if not self.listening:
            return Text("\n\n\n\nStart tuning to see graph", style="dim italic #666666", justify="center")

        columns = [None] * (self.max_points - len(self.points)) + list(self.points[-self.max_points:])
        text = Text()
        for row_cents in ROW_CENTS:
            text.append(f"{row_cents:+4d}¢ ", style="#666666")
            for point in columns:
                text.append(*self._cell(point, row_cents))
            text.append("\n")
        return text

    @staticmethod
    def _row_for(cents: float) -> int:
        clamped = max(-50.0, min(50.0, cents))
        return int(round(clamped / 10.0)) * 10

    def _cell(self, point, row_cents: int):
        if point is not None and point.has_data and self._row_for(point.cents_deviation) == row_cents:
            return "● ", POINT_STYLES[point.tier]
        if point is not None and not point.has_data and row_cents == 0:
            return "· ", "#444444"
        if row_cents == 0:
            return "──", "#00a39a"
        return "  ", ""
