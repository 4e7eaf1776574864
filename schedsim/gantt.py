from __future__ import annotations

from typing import Dict, List, Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttSegment


def merge_segments(segments: List[GanttSegment]) -> List[GanttSegment]:
    """
    Collapse back-to-back segments with the same owner for display.

    Only touching segments merge; the same pid separated by a gap or by
    another owner stays split.
    """
    merged: List[GanttSegment] = []
    for seg in segments:
        last = merged[-1] if merged else None
        if last is not None and last.pid == seg.pid and last.end_time == seg.start_time:
            last.end_time = seg.end_time
        else:
            merged.append(GanttSegment(pid=seg.pid, start_time=seg.start_time, end_time=seg.end_time))
    return merged


def _cell_width(seg: GanttSegment) -> int:
    """
    Columns for one segment: one per time unit, widened so the end-time mark
    fits with a space before it.
    """
    return max(1, seg.duration, len(str(seg.end_time)) + 1)


def render_gantt(segments: List[GanttSegment]) -> str:
    """
    Plain-text Gantt chart. Idle time is drawn with dots.
    """
    if not segments:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = str(segments[0].start_time)

    for seg in segments:
        width = _cell_width(seg)
        line += ("." if seg.is_idle else "=") * width
        labels += seg.label[:width].ljust(width)
        time_marks += f"{seg.end_time:>{width}}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            " " + labels,
            time_marks,
        ]
    )


def build_rich_gantt(segments: List[GanttSegment]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not segments:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[Optional[int], str] = {}

    def pid_color(pid: Optional[int]) -> str:
        if pid is None:
            return "grey37"
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = str(segments[0].start_time)

    for seg in segments:
        width = _cell_width(seg)
        timeline.append(" " * width, style=f"on {pid_color(seg.pid)}")
        labels.append(seg.label[:width].ljust(width), style="dim" if seg.is_idle else "bold")
        time_marks += f"{seg.end_time:>{width}}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
