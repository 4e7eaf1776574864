from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping

from .models import Process

logger = logging.getLogger(__name__)


def next_pid(processes: Iterable[Process]) -> int:
    """
    Id for a newly added process: one past the largest id in use.
    """
    return max((p.pid for p in processes), default=0) + 1


def validate_process(arrival_time: int, burst_time: int, priority: int) -> None:
    if arrival_time < 0:
        raise ValueError(f"arrival_time must be >= 0 (got {arrival_time})")
    if burst_time <= 0:
        raise ValueError(f"burst_time must be > 0 (got {burst_time})")
    if priority < 0:
        raise ValueError(f"priority must be >= 0 (got {priority})")


def new_process(processes: List[Process], arrival_time: int, burst_time: int, priority: int = 0) -> Process:
    """
    Validate the inputs, append a process with the next free id and return it.
    """
    validate_process(arrival_time, burst_time, priority)
    process = Process(
        pid=next_pid(processes),
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
    processes.append(process)
    return process


def remove_process(processes: List[Process], pid: int) -> Process:
    """
    Remove the process with ``pid``. Remaining ids are left as they are.
    """
    for idx, p in enumerate(processes):
        if p.pid == pid:
            return processes.pop(idx)
    raise ValueError(f"No process with pid {pid}")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return _build_processes(raw)


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return _build_processes(list(reader))


def _build_processes(entries: Iterable[Mapping]) -> List[Process]:
    processes: List[Process] = []
    for entry in entries:
        process = _process_from_mapping(entry, processes)
        if any(p.pid == process.pid for p in processes):
            raise ValueError(f"Duplicate pid {process.pid} in workload")
        processes.append(process)
    return processes


def _whole(value) -> int:
    # JSON hands over bools and floats as-is; time is counted in whole units.
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    return int(value)


def _parse_pid(value) -> int:
    if isinstance(value, str):
        return int(value.lstrip("Pp"))
    return _whole(value)


def _process_from_mapping(mapping: Mapping, existing: List[Process]) -> Process:
    try:
        arrival_time = _whole(mapping["arrival_time"])
        burst_time = _whole(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = _whole(priority_val) if priority_val not in (None, "") else 0
        pid_val = mapping.get("pid")
        pid = _parse_pid(pid_val) if pid_val not in (None, "") else next_pid(existing)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    try:
        validate_process(arrival_time, burst_time, priority)
    except ValueError as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}: {exc}") from exc

    if pid <= 0:
        raise ValueError(f"Invalid process entry: {mapping!r}: pid must be positive")

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
