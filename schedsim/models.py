from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Process:
    """
    One simulated task.

    ``pid``, ``arrival_time``, ``burst_time`` and ``priority`` are the inputs;
    everything else is simulation state, rebuilt by ``reset()`` before a run.
    Lower ``priority`` values mean higher scheduling priority.
    """

    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0
    remaining_burst_time: int = field(init=False)
    remaining_quantum: int = field(default=0, init=False)
    start_time: Optional[int] = field(default=None, init=False)
    completion_time: int = field(default=0, init=False)
    waiting_time: int = field(default=0, init=False)
    turnaround_time: int = field(default=0, init=False)
    is_completed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.remaining_burst_time = self.burst_time

    def reset(self) -> None:
        self.remaining_burst_time = self.burst_time
        self.remaining_quantum = 0
        self.start_time = None
        self.completion_time = 0
        self.waiting_time = 0
        self.turnaround_time = 0
        self.is_completed = False

    def finish(self, time: int) -> None:
        """
        Record completion at ``time`` and derive turnaround and waiting time.
        """
        self.completion_time = time
        self.turnaround_time = time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time
        self.is_completed = True

    @property
    def response_time(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return self.start_time - self.arrival_time


@dataclass
class GanttSegment:
    """
    One contiguous interval of the CPU timeline. ``pid`` is None while idle.
    """

    pid: Optional[int]
    start_time: int
    end_time: int

    @property
    def is_idle(self) -> bool:
        return self.pid is None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def label(self) -> str:
        return "Idle" if self.pid is None else f"P{self.pid}"


@dataclass(frozen=True)
class QueuedProcess:
    pid: int
    remaining_burst_time: int
    priority: int


@dataclass
class ReadyQueueEntry:
    """
    Snapshot of the ready queue at one decision time.
    """

    time: int
    queue: List[QueuedProcess] = field(default_factory=list)
    running_pid: Optional[int] = None


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class SimulationResult:
    policy: str
    quantum: Optional[int]
    processes: List[Process] = field(default_factory=list)
    timeline: List[GanttSegment] = field(default_factory=list)
    ready_queue_log: List[ReadyQueueEntry] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
