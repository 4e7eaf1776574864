from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .gantt import build_rich_gantt, merge_segments
from .metrics import summarize_process_metrics
from .models import SimulationResult
from .simulator import POLICIES, QUANTUM_POLICIES, compare, simulate
from .workload_io import load_workload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Discrete-time CPU scheduling simulator.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging verbosity (default: WARNING). DEBUG traces every dispatch and preemption.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling policy on a workload file.")
    run_parser.add_argument(
        "--policy",
        "-p",
        required=True,
        choices=list(POLICIES),
        help="Scheduling policy.",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum, required by: {', '.join(sorted(QUANTUM_POLICIES))}.",
    )
    run_parser.add_argument(
        "--queue-log",
        action="store_true",
        help="Also print the ready-queue log.",
    )
    run_parser.add_argument(
        "--raw",
        action="store_true",
        help="Draw the Gantt chart without merging adjacent segments of the same process.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple policies on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--policies",
        "-p",
        nargs="+",
        choices=list(POLICIES),
        default=list(POLICIES),
        help="Policies to compare (default: all).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used by the round-robin policies (default: 2).",
    )

    return parser


def configure_logging(level: str, console: Console) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_result(result: SimulationResult, console: Console, raw: bool = False) -> None:
    console.print(f"[bold]Policy:[/bold] {result.policy}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    segments = result.timeline if raw else merge_segments(result.timeline)
    panel, time_marks = build_rich_gantt(segments)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            "" if p.start_time is None else str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Idle time", str(sys.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_queue_log(result: SimulationResult, console: Console) -> None:
    log_table = Table(title="Ready-queue log", box=box.SIMPLE_HEAVY)
    log_table.add_column("Time", justify="right")
    log_table.add_column("Running", justify="center")
    log_table.add_column("Ready queue")

    for entry in result.ready_queue_log:
        queue_text = ", ".join(f"P{q.pid} (rem {q.remaining_burst_time}, pri {q.priority})" for q in entry.queue)
        log_table.add_row(
            str(entry.time),
            "Idle" if entry.running_pid is None else f"P{entry.running_pid}",
            queue_text or "[dim]empty[/dim]",
        )

    console.print(log_table)


def _print_comparison(results: list[SimulationResult], title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Policy")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Makespan", justify="right")

    for result in results:
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.policy,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            str(result.system.makespan) if result.system else "",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    configure_logging(args.log_level, console)

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "run":
            result = simulate(processes, args.policy, quantum=args.quantum)
            _print_result(result, console, raw=args.raw)
            if args.queue_log:
                console.print()
                _print_queue_log(result, console)
            return 0

        if args.command == "compare":
            results = compare(processes, args.policies, quantum=args.quantum)
            _print_comparison(results, f"Policy comparison: {args.workload}", console)
            return 0
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
