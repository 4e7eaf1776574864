from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import GanttSegment, Process
from .ready_log import ReadyQueueLog

logger = logging.getLogger(__name__)

SortKey = Optional[Callable[[Process], int]]
EngineOutput = Tuple[List[Process], List[GanttSegment]]

# A None key leaves the ready queue in admission (FIFO) order.
SORT_KEYS: Dict[str, SortKey] = {
    "fcfs": None,
    "rr": None,
    "sjf": lambda p: p.burst_time,
    "srtf": lambda p: p.remaining_burst_time,
    "priority": lambda p: p.priority,
    "priority-rr": lambda p: p.priority,
}

NON_PREEMPTIVE_CRITERIA = ("fcfs", "sjf", "priority")
PREEMPTIVE_CRITERIA = ("srtf", "priority", "priority-rr")
ROUND_ROBIN_CRITERIA = ("rr", "priority-rr")


def _sort_key(criterion: str, allowed: Sequence[str]) -> SortKey:
    if criterion not in allowed:
        raise ValueError(f"Unknown criterion '{criterion}' (expected one of: {', '.join(allowed)})")
    return SORT_KEYS[criterion]


def _arrival_order(processes: Iterable[Process]) -> Deque[Process]:
    # sorted() is stable, so equal arrivals keep their input order.
    return deque(sorted(processes, key=lambda p: p.arrival_time))


def _admit(pending: Deque[Process], ready: List[Process], time: int) -> None:
    while pending and pending[0].arrival_time <= time:
        ready.append(pending.popleft())


def _reorder(ready: List[Process], key: SortKey) -> None:
    if key is not None:
        ready.sort(key=key)


def _skip_idle(pending: Deque[Process], time: int, timeline: List[GanttSegment]) -> int:
    """
    Jump the clock to the next arrival, recording the gap as an idle segment.
    """
    if not pending:
        raise RuntimeError(f"t={time}: nothing ready and nothing left to arrive")

    next_arrival = pending[0].arrival_time
    if time < next_arrival:
        timeline.append(GanttSegment(pid=None, start_time=time, end_time=next_arrival))
        logger.debug("t=%d: CPU idle until %d", time, next_arrival)
        return next_arrival
    return time


def _charge(process: Process, time: int, run_for: int, timeline: List[GanttSegment]) -> int:
    if process.start_time is None:
        process.start_time = time
    timeline.append(GanttSegment(pid=process.pid, start_time=time, end_time=time + run_for))
    process.remaining_burst_time -= run_for
    return time + run_for


def run_non_preemptive(processes: List[Process], criterion: str, log: ReadyQueueLog) -> EngineOutput:
    """
    FCFS, SJF and non-preemptive priority.

    The selected process always runs to completion. ``sjf`` orders the ready
    queue by burst time, ``priority`` by priority value, ``fcfs`` keeps
    arrival order. Ties keep admission order.
    """
    key = _sort_key(criterion, NON_PREEMPTIVE_CRITERIA)
    pending = _arrival_order(processes)
    total = len(pending)

    time = 0
    ready: List[Process] = []
    finished: List[Process] = []
    timeline: List[GanttSegment] = []

    while len(finished) < total:
        _admit(pending, ready, time)

        if not ready:
            log.record(time, ready, None)
            time = _skip_idle(pending, time, timeline)
            continue

        _reorder(ready, key)
        process = ready.pop(0)
        log.record(time, ready, process)
        logger.debug("t=%d: dispatch P%d until completion", time, process.pid)

        time = _charge(process, time, process.remaining_burst_time, timeline)
        process.finish(time)
        finished.append(process)

    log.record(time, [], None)
    return finished, timeline


def _should_preempt(current: Process, ready: List[Process], key: Callable[[Process], int], quantum: Optional[int]) -> bool:
    if ready and key(ready[0]) < key(current):
        return True
    return quantum is not None and current.remaining_quantum <= 0


def run_preemptive(
    processes: List[Process],
    criterion: str,
    log: ReadyQueueLog,
    quantum: Optional[int] = None,
) -> EngineOutput:
    """
    SRTF, preemptive priority and preemptive priority round robin.

    The ready queue is re-sorted at every decision point and the running
    process is displaced as soon as the queue head has a strictly smaller
    key (remaining burst for ``srtf``, priority otherwise). Under
    ``priority-rr`` an expired quantum also forces the running process back
    into the queue, and a fresh quantum is granted at dispatch.

    Each execution slice ends at the earliest of: completion, the next
    arrival, or (``priority-rr`` only) quantum expiry.
    """
    key = _sort_key(criterion, PREEMPTIVE_CRITERIA)
    if criterion == "priority-rr":
        if quantum is None or quantum <= 0:
            raise ValueError("priority-rr requires a positive quantum")
    else:
        quantum = None

    pending = _arrival_order(processes)
    total = len(pending)

    time = 0
    ready: List[Process] = []
    finished: List[Process] = []
    timeline: List[GanttSegment] = []
    current: Optional[Process] = None

    while len(finished) < total:
        _admit(pending, ready, time)
        _reorder(ready, key)

        if current is not None and _should_preempt(current, ready, key, quantum):
            logger.debug("t=%d: preempt P%d (remaining=%d)", time, current.pid, current.remaining_burst_time)
            if quantum is not None:
                current.remaining_quantum = 0
            ready.append(current)
            current = None

        if current is None and ready:
            current = ready.pop(0)
            if quantum is not None and current.remaining_quantum <= 0:
                current.remaining_quantum = quantum
            logger.debug("t=%d: dispatch P%d", time, current.pid)

        log.record(time, ready, current)

        if current is None:
            time = _skip_idle(pending, time, timeline)
            continue

        to_completion = current.remaining_burst_time
        to_arrival = pending[0].arrival_time - time if pending else None

        limits = [to_completion]
        if to_arrival is not None:
            limits.append(to_arrival)
        if quantum is not None:
            limits.append(current.remaining_quantum)
        run_for = min(limits)

        # Progress guards. Arrivals are admitted and expired quanta preempted
        # at the top of the loop, so neither branch fires for valid input;
        # they keep the loop from charging a zero-length slice forever if
        # that ordering changes.
        if to_arrival == 0:
            # Admit the arrival before charging any more CPU.
            continue
        if run_for <= 0 and to_completion > 0:
            run_for = 1

        time = _charge(current, time, run_for, timeline)
        if quantum is not None:
            current.remaining_quantum -= run_for

        if current.remaining_burst_time == 0:
            current.finish(time)
            finished.append(current)
            current = None

    log.record(time, [], None)
    return finished, timeline


def run_round_robin(processes: List[Process], quantum: int, criterion: str, log: ReadyQueueLog) -> EngineOutput:
    """
    Round robin and non-preemptive priority round robin.

    A dispatched process keeps the CPU for a full quantum (or until it
    finishes). Arrivals during the slice are queued before the rotated-out
    process goes to the back of the queue. ``priority-rr`` picks the next
    process by priority; plain ``rr`` is FIFO.
    """
    key = _sort_key(criterion, ROUND_ROBIN_CRITERIA)
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum")

    pending = _arrival_order(processes)
    total = len(pending)

    time = 0
    ready: List[Process] = []
    finished: List[Process] = []
    timeline: List[GanttSegment] = []

    while len(finished) < total:
        _admit(pending, ready, time)

        if not ready:
            log.record(time, ready, None)
            time = _skip_idle(pending, time, timeline)
            continue

        _reorder(ready, key)
        process = ready.pop(0)
        log.record(time, ready, process)

        run_for = min(quantum, process.remaining_burst_time)
        logger.debug("t=%d: P%d runs for %d", time, process.pid, run_for)
        time = _charge(process, time, run_for, timeline)

        _admit(pending, ready, time)

        if process.remaining_burst_time == 0:
            process.finish(time)
            finished.append(process)
        else:
            ready.append(process)

    log.record(time, [], None)
    return finished, timeline
