from pathlib import Path

import pytest

from schedsim.models import Process
from schedsim.workload_io import load_workload, new_process, next_pid, remove_process


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 1
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 1
    assert procs[1].remaining_burst_time == 2


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nP1,0,3,1\nP2,1,2,\n")
    procs = load_workload(p)
    assert [x.pid for x in procs] == [1, 2]
    assert procs[1].priority == 0


def test_missing_pids_are_assigned(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time\n0,3\n2,4\n")
    procs = load_workload(p)
    assert [x.pid for x in procs] == [1, 2]


@pytest.mark.parametrize(
    "row",
    [
        "1,0,0,1",   # burst must be positive
        "1,-1,3,1",  # arrival must be non-negative
        "1,0,3,-4",  # priority must be non-negative
        "1,x,3,1",
    ],
)
def test_invalid_rows_are_rejected(tmp_path: Path, row):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\n" + row + "\n")
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


@pytest.mark.parametrize(
    "entry",
    [
        '{"arrival_time": 1.9, "burst_time": 2}',
        '{"arrival_time": 0, "burst_time": 2.5}',
        '{"arrival_time": 0, "burst_time": true}',
        '{"arrival_time": false, "burst_time": 3}',
        '{"arrival_time": 0, "burst_time": 3, "priority": 0.5}',
        '{"arrival_time": 0, "burst_time": 3, "priority": true}',
        '{"pid": 1.5, "arrival_time": 0, "burst_time": 3}',
        '{"pid": true, "arrival_time": 0, "burst_time": 3}',
    ],
)
def test_json_fractional_and_boolean_fields_are_rejected(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text("[" + entry + "]")
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


def test_json_whole_floats_are_accepted(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid": 2.0, "arrival_time": 1.0, "burst_time": 4.0, "priority": 3.0}]')
    (proc,) = load_workload(p)
    assert (proc.pid, proc.arrival_time, proc.burst_time, proc.priority) == (2, 1, 4, 3)
    assert isinstance(proc.burst_time, int)


def test_duplicate_pid_is_rejected(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3},{"pid":1,"arrival_time":1,"burst_time":2}]')
    with pytest.raises(ValueError, match="Duplicate pid"):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("")
    with pytest.raises(ValueError, match="Unsupported"):
        load_workload(p)


def test_json_must_be_a_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid": 1}')
    with pytest.raises(ValueError):
        load_workload(p)


def test_new_process_ids_follow_current_max():
    procs = []
    assert next_pid(procs) == 1
    new_process(procs, 0, 5)
    new_process(procs, 1, 3, priority=2)
    new_process(procs, 2, 1)
    assert [p.pid for p in procs] == [1, 2, 3]

    remove_process(procs, 2)
    assert new_process(procs, 3, 2).pid == 4

    remove_process(procs, 4)
    assert new_process(procs, 4, 2).pid == 4


def test_new_process_validates():
    procs = []
    with pytest.raises(ValueError):
        new_process(procs, 0, 0)
    assert procs == []


def test_remove_unknown_pid():
    with pytest.raises(ValueError):
        remove_process([Process(1, 0, 1)], 9)
