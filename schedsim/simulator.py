from __future__ import annotations

import copy
import logging
from typing import Callable, Dict, Iterable, List, Optional

from .algorithms import EngineOutput, run_non_preemptive, run_preemptive, run_round_robin
from .metrics import compute_system_metrics
from .models import Process, SimulationResult
from .ready_log import ReadyQueueLog

logger = logging.getLogger(__name__)

Engine = Callable[[List[Process], Optional[int], ReadyQueueLog], EngineOutput]

POLICIES: Dict[str, Engine] = {
    "fcfs": lambda procs, q, log: run_non_preemptive(procs, "fcfs", log),
    "sjf-nonpreemptive": lambda procs, q, log: run_non_preemptive(procs, "sjf", log),
    "priority-nonpreemptive": lambda procs, q, log: run_non_preemptive(procs, "priority", log),
    "srtf-preemptive": lambda procs, q, log: run_preemptive(procs, "srtf", log),
    "priority-preemptive": lambda procs, q, log: run_preemptive(procs, "priority", log),
    "rr": lambda procs, q, log: run_round_robin(procs, q, "rr", log),
    "priority-rr-nonpreemptive": lambda procs, q, log: run_round_robin(procs, q, "priority-rr", log),
    "priority-rr-preemptive": lambda procs, q, log: run_preemptive(procs, "priority-rr", log, quantum=q),
}

QUANTUM_POLICIES = frozenset({"rr", "priority-rr-nonpreemptive", "priority-rr-preemptive"})


def simulate(processes: Iterable[Process], policy: str, quantum: Optional[int] = None) -> SimulationResult:
    """
    Run one policy over a private copy of ``processes``.

    The caller's records are never touched; every run owns its own copies
    and its own ready-queue log. Finished processes come back ordered by pid.
    """
    policy = policy.lower()
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy '{policy}' (choose from: {', '.join(POLICIES)})")

    procs = copy.deepcopy(list(processes))
    if not procs:
        raise ValueError("At least one process is required")

    if policy in QUANTUM_POLICIES:
        if quantum is None or quantum <= 0:
            raise ValueError(f"Policy '{policy}' requires a positive quantum (use --quantum)")
    else:
        quantum = None

    for p in procs:
        p.reset()

    log = ReadyQueueLog()
    finished, timeline = POLICIES[policy](procs, quantum, log)
    finished.sort(key=lambda p: p.pid)

    result = SimulationResult(
        policy=policy,
        quantum=quantum,
        processes=finished,
        timeline=timeline,
        ready_queue_log=log.entries,
    )
    compute_system_metrics(result)
    logger.info(
        "%s: %d processes finished at t=%d",
        policy,
        len(finished),
        result.system.makespan if result.system else 0,
    )
    return result


def compare(processes: List[Process], policies: Iterable[str], quantum: Optional[int] = None) -> List[SimulationResult]:
    """
    Run several policies on the same workload. The quantum only reaches the
    policies that use one.
    """
    results = []
    for policy in policies:
        q = quantum if policy.lower() in QUANTUM_POLICIES else None
        results.append(simulate(processes, policy, quantum=q))
    return results
