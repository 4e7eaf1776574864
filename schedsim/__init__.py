"""
schedsim package.

Discrete-time CPU scheduling simulator: eight dispatch policies on three
engines, producing a Gantt timeline, per-process metrics and a ready-queue
audit log.
"""

from .simulator import POLICIES, QUANTUM_POLICIES, simulate

__all__ = ["POLICIES", "QUANTUM_POLICIES", "simulate", "cli"]
