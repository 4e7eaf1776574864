from __future__ import annotations

from typing import Iterable, List, Optional

from .models import Process, QueuedProcess, ReadyQueueEntry


class ReadyQueueLog:
    """
    Audit trail of the ready queue, one entry per distinct decision time.

    The log only observes a run; engines never read it back.
    """

    def __init__(self) -> None:
        self.entries: List[ReadyQueueEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def clear(self) -> None:
        self.entries = []

    def record(self, time: int, queue: Iterable[Process], running: Optional[Process]) -> None:
        """
        Snapshot ``queue`` (in its current order) and the running process at
        ``time``.

        A second record at the same time never appends. It only upgrades an
        idle entry to the process that was dispatched at that instant.
        """
        if self.entries and self.entries[-1].time == time:
            last = self.entries[-1]
            if last.running_pid is None and running is not None:
                last.running_pid = running.pid
            return

        snapshot = [
            QueuedProcess(pid=p.pid, remaining_burst_time=p.remaining_burst_time, priority=p.priority)
            for p in queue
        ]
        self.entries.append(
            ReadyQueueEntry(
                time=time,
                queue=snapshot,
                running_pid=running.pid if running is not None else None,
            )
        )
