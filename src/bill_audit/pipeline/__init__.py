"""Analysis and metrics pipelines."""

from .metrics import MetricsExtractor
from .orchestrator import (
    PHASES,
    AttemptOutcome,
    AttemptPhase,
    AttemptRecord,
    PhaseObserver,
    RepairRetryOrchestrator,
)

__all__ = [
    "PHASES",
    "AttemptOutcome",
    "AttemptPhase",
    "AttemptRecord",
    "MetricsExtractor",
    "PhaseObserver",
    "RepairRetryOrchestrator",
]
