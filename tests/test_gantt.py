from rich.panel import Panel

from schedsim.gantt import build_rich_gantt, merge_segments, render_gantt
from schedsim.models import GanttSegment


def _seg(pid, start, end):
    return GanttSegment(pid=pid, start_time=start, end_time=end)


def test_merge_adjacent_same_owner():
    merged = merge_segments([_seg(1, 0, 2), _seg(1, 2, 5), _seg(2, 5, 6)])
    assert [(s.pid, s.start_time, s.end_time) for s in merged] == [(1, 0, 5), (2, 5, 6)]


def test_merge_keeps_segments_split_by_other_owner():
    merged = merge_segments([_seg(1, 0, 2), _seg(2, 2, 3), _seg(1, 3, 5)])
    assert len(merged) == 3


def test_merge_keeps_segments_split_by_gap():
    merged = merge_segments([_seg(1, 0, 2), _seg(1, 4, 5)])
    assert len(merged) == 2


def test_merge_idle_runs_and_leaves_input_alone():
    segments = [_seg(None, 0, 1), _seg(None, 1, 3), _seg(7, 3, 4)]
    merged = merge_segments(segments)
    assert [(s.pid, s.start_time, s.end_time) for s in merged] == [(None, 0, 3), (7, 3, 4)]
    assert segments[0].end_time == 1


def test_render_gantt_plain_text():
    text = render_gantt([_seg(None, 0, 2), _seg(1, 2, 5)])
    lines = text.splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|..===|"
    assert "P1" in lines[2]
    assert lines[3].startswith("0")
    assert lines[3].endswith("5")


def test_render_gantt_widens_short_segments_for_time_marks():
    text = render_gantt([_seg(1, 0, 9), _seg(2, 9, 10), _seg(3, 10, 11)])
    lines = text.splitlines()
    assert lines[1] == "|" + "=" * 15 + "|"
    assert lines[3] == "0        9 10 11"
    # each mark ends in the column of its segment's last bar cell
    assert len(lines[3]) == len(lines[1]) - 1


def test_rich_gantt_time_marks_stay_separated():
    _, marks = build_rich_gantt([_seg(1, 0, 9), _seg(2, 9, 10), _seg(3, 10, 11)])
    assert marks == "0        9 10 11"


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_build_rich_gantt():
    panel, marks = build_rich_gantt([_seg(1, 0, 3), _seg(2, 3, 4)])
    assert isinstance(panel, Panel)
    assert marks.startswith("0")
    assert marks.endswith("4")

    empty_panel, empty_marks = build_rich_gantt([])
    assert isinstance(empty_panel, Panel)
    assert empty_marks == ""
