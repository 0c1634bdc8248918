"""Repair-retry orchestration of a bill analysis.

An analysis runs a fixed sequence of phases. Each phase makes one model
call and pushes the text through extract, parse and sanitize:

- ``FIRST_ATTEMPT`` uses the primary prompt (schema plus business rules).
- ``REPAIR_ATTEMPT`` runs only when the first answer held no usable JSON
  object, with a stricter prompt and the same document.

A format failure in the last phase is terminal. Transport failures are not
retried and propagate from whichever phase raised them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import logging
import time
from typing import TYPE_CHECKING

from bill_audit.client.base import bounded_generate
from bill_audit.constants import DEFAULT_REQUEST_TIMEOUT, LOG_EXCERPT_LENGTH
from bill_audit.core.types import Failure, Result, Success
from bill_audit.exceptions import (
    BillAuditError,
    ResponseFormatError,
    TerminalAnalysisError,
    TransportError,
)
from bill_audit.prompts import PRIMARY_PROMPT, REPAIR_PROMPT
from bill_audit.response.parsing import parse_model_text
from bill_audit.response.sanitizer import sanitize_analysis
from bill_audit.telemetry import TelemetryContext

if TYPE_CHECKING:
    from bill_audit.client.base import GenerationAdapter
    from bill_audit.core.types import Document
    from bill_audit.response.types import BillAnalysis
    from bill_audit.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class AttemptPhase(str, Enum):
    """Phases of one analysis, in the order they run."""

    FIRST_ATTEMPT = "first_attempt"
    REPAIR_ATTEMPT = "repair_attempt"

    @property
    def prompt(self) -> str:
        if self is AttemptPhase.FIRST_ATTEMPT:
            return PRIMARY_PROMPT
        return REPAIR_PROMPT

    @classmethod
    def get_telemetry_scope(cls, phase: AttemptPhase) -> str:
        """Map phase to telemetry scope name."""
        return {
            cls.FIRST_ATTEMPT: "analysis.primary",
            cls.REPAIR_ATTEMPT: "analysis.repair",
        }[phase]


# At most one model call per entry
PHASES: tuple[AttemptPhase, ...] = (
    AttemptPhase.FIRST_ATTEMPT,
    AttemptPhase.REPAIR_ATTEMPT,
)


class AttemptOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    FORMAT_ERROR = "format_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True, slots=True)
class AttemptRecord:
    """What happened during one phase of an analysis."""

    phase: AttemptPhase
    outcome: AttemptOutcome
    elapsed_s: float
    error: BillAuditError | None = None


type PhaseObserver = Callable[[AttemptPhase], None]


def excerpt(text: str, limit: int = LOG_EXCERPT_LENGTH) -> str:
    """Shorten model text for debug logs."""
    return text if len(text) <= limit else f"{text[:limit]}..."


class RepairRetryOrchestrator:
    """Runs one analysis with at most one repair attempt.

    The orchestrator holds no state between runs apart from the attempt log
    of the most recent run, exposed as `attempts`.

    Examples:
        orchestrator = RepairRetryOrchestrator(adapter, timeout_s=60)
        record = await orchestrator.run(document)
    """

    def __init__(
        self,
        adapter: GenerationAdapter,
        *,
        timeout_s: float = DEFAULT_REQUEST_TIMEOUT,
        telemetry: TelemetryContextProtocol | None = None,
        observer: PhaseObserver | None = None,
    ) -> None:
        self._adapter = adapter
        self._timeout_s = timeout_s
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()
        self._observer = observer
        self._attempts: list[AttemptRecord] = []

    @property
    def attempts(self) -> tuple[AttemptRecord, ...]:
        """Attempt log of the most recent `run`."""
        return tuple(self._attempts)

    async def run(self, document: Document) -> BillAnalysis:
        """Analyze ``document`` and return the canonical record.

        Raises:
            TerminalAnalysisError: If the repair attempt also yields no JSON object.
            TransportError: If a model call fails or times out.
        """
        self._attempts = []
        format_errors: list[ResponseFormatError] = []
        raw_text = ""

        for phase in PHASES:
            if self._observer is not None:
                self._observer(phase)
            result, raw_text = await self._run_phase(phase, document)
            if isinstance(result, Success):
                return result.value

            format_errors.append(result.error)
            if phase is not PHASES[-1]:
                log.warning(
                    "Phase %s produced no JSON object (%s); issuing repair prompt",
                    phase.value,
                    result.error,
                )
                self._telemetry.count("analysis.repairs")

        log.error(
            "Repair attempt failed; giving up after %d model calls", len(PHASES)
        )
        raise TerminalAnalysisError(
            "The model did not return a usable analysis after the repair attempt.",
            raw_text=raw_text,
            errors=format_errors,
        ) from format_errors[-1]

    async def _run_phase(
        self, phase: AttemptPhase, document: Document
    ) -> tuple[Result[BillAnalysis, ResponseFormatError], str]:
        """Run one model call and the extract/parse/sanitize chain.

        Format errors are returned as a `Failure`; transport errors raise.
        """
        start = time.perf_counter()
        with self._telemetry(AttemptPhase.get_telemetry_scope(phase)):
            try:
                text = await bounded_generate(
                    self._adapter,
                    phase.prompt,
                    document,
                    timeout_s=self._timeout_s,
                )
            except TransportError as e:
                self._record(phase, AttemptOutcome.TRANSPORT_ERROR, start, e)
                raise

            log.debug("Phase %s raw text: %s", phase.value, excerpt(text))
            try:
                parsed = parse_model_text(text)
            except ResponseFormatError as e:
                self._record(phase, AttemptOutcome.FORMAT_ERROR, start, e)
                return Failure(e), text

        record = sanitize_analysis(parsed)
        self._record(phase, AttemptOutcome.SUCCEEDED, start)
        if phase is AttemptPhase.REPAIR_ATTEMPT:
            log.info("Repair attempt produced a valid analysis")
        return Success(record), text

    def _record(
        self,
        phase: AttemptPhase,
        outcome: AttemptOutcome,
        start: float,
        error: BillAuditError | None = None,
    ) -> None:
        self._attempts.append(
            AttemptRecord(
                phase=phase,
                outcome=outcome,
                elapsed_s=time.perf_counter() - start,
                error=error,
            )
        )
