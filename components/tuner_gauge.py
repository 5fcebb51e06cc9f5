"""Needle gauge showing the detected note and its cents deviation."""
from typing import Optional

from rich.align import Align
from rich.console import RenderableType
from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from tuning.events import TuningStatus
from tuning.graph import ColorTier, tier_for_cents

TIER_STYLES = {
    ColorTier.IN_TUNE: "bold #00a39a",
    ColorTier.SLIGHT: "bold #ffc107",
    ColorTier.FAR: "bold #f44336",
    ColorTier.EMPTY: "dim #666666",
}


def needle_bar(cents: float, width: int = 41, span: float = 50.0) -> str:
    """ASCII scale from -span to +span cents with a caret at `cents`."""
    mid = width // 2
    clamped = max(-span, min(span, cents))
    caret = mid + int(round(clamped / span * mid))
    cells = ["─"] * width
    cells[0] = "├"
    cells[-1] = "┤"
    cells[mid] = "┼"
    cells[caret] = "▲"
    return "".join(cells)


class TunerGauge(Widget):
    """Displays the latest tuning status."""

    DEFAULT_CSS = """
    TunerGauge {
        height: 8;
        width: 100%;
    }
    """

    status: reactive[Optional[TuningStatus]] = reactive(None, init=False)

    def render(self) -> RenderableType:
        status = self.status
        result = Text(justify="center")

        if status is None or not status.is_active:
            result.append("\n♪ Press SPACE to start tuning\n", style="dim italic #666666")
            return Align.center(result)

        target = status.target_note_name or "auto"
        result.append(f"Target: {target}", style="#ffd700")
        if status.target_frequency:
            result.append(f"  ({status.target_frequency:.1f} Hz)", style="#888888")
        result.append("\n\n")

        if status.cents_deviation is None:
            heard = status.detected_note_name or "?"
            result.append(f"━━━  {heard}  ━━━\n", style=TIER_STYLES[ColorTier.EMPTY])
            result.append(needle_bar(0.0) + "\n", style="dim #444444")
            result.append("listening…", style="dim italic #666666")
            return Align.center(result)

        cents = status.cents_deviation
        style = TIER_STYLES[tier_for_cents(cents)]
        result.append(f"━━━  {status.detected_note_name}  ━━━\n", style=style)
        result.append(needle_bar(cents) + "\n", style=style)
        result.append(f"{status.detected_frequency:.1f} Hz   {cents:+.1f}¢   ", style="#ffffff")
        result.append(self._advice(cents), style=style)
        return Align.center(result)

    @staticmethod
    def _advice(cents: float) -> str:
        if tier_for_cents(cents) is ColorTier.IN_TUNE:
            return "✓ in tune"
        return "▼ tune down" if cents > 0 else "▲ tune up"
