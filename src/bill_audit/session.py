"""Lifecycle of one user's analysis as an explicit state machine.

::

    IDLE -> SUBMITTED -> AWAITING_PRIMARY [-> AWAITING_REPAIR] -> SUCCEEDED | FAILED

Phase changes are driven by the orchestrator's observer callback. A session
accepts one document at a time; `reset` returns a finished session to
``IDLE`` and discards its record.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
from typing import TYPE_CHECKING

from bill_audit.constants import DEFAULT_REQUEST_TIMEOUT
from bill_audit.exceptions import (
    InvalidTransitionError,
    TerminalAnalysisError,
    TransportError,
)
from bill_audit.pipeline.orchestrator import AttemptPhase, RepairRetryOrchestrator

if TYPE_CHECKING:
    from bill_audit.client.base import GenerationAdapter
    from bill_audit.config import FrozenConfig
    from bill_audit.core.types import Document
    from bill_audit.pipeline.orchestrator import AttemptRecord
    from bill_audit.response.types import BillAnalysis
    from bill_audit.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    SUBMITTED = "submitted"
    AWAITING_PRIMARY = "awaiting_primary"
    AWAITING_REPAIR = "awaiting_repair"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_finished(self) -> bool:
        return self in (SessionState.SUCCEEDED, SessionState.FAILED)


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.SUBMITTED}),
    SessionState.SUBMITTED: frozenset(
        {SessionState.AWAITING_PRIMARY, SessionState.FAILED}
    ),
    SessionState.AWAITING_PRIMARY: frozenset(
        {SessionState.AWAITING_REPAIR, SessionState.SUCCEEDED, SessionState.FAILED}
    ),
    SessionState.AWAITING_REPAIR: frozenset(
        {SessionState.SUCCEEDED, SessionState.FAILED}
    ),
    SessionState.SUCCEEDED: frozenset({SessionState.IDLE}),
    SessionState.FAILED: frozenset({SessionState.IDLE}),
}

_PHASE_STATES = {
    AttemptPhase.FIRST_ATTEMPT: SessionState.AWAITING_PRIMARY,
    AttemptPhase.REPAIR_ATTEMPT: SessionState.AWAITING_REPAIR,
}


class FailureKind(str, Enum):
    """Why an analysis failed; each kind gets its own user-facing message."""

    ANALYSIS = "analysis"
    TRANSPORT = "transport"


@dataclass(frozen=True, slots=True)
class SessionFailure:
    kind: FailureKind
    message: str
    raw_text: str | None = None


class AnalysisSession:
    """One user's analysis, from upload to result.

    Examples:
        session = AnalysisSession(adapter)
        record = await session.analyze(document)
        ...
        session.reset()  # required before the next upload
    """

    def __init__(
        self,
        adapter: GenerationAdapter,
        *,
        config: FrozenConfig | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._adapter = adapter
        self._config = config
        self._telemetry = telemetry
        self._state = SessionState.IDLE
        self._document: Document | None = None
        self._record: BillAnalysis | None = None
        self._failure: SessionFailure | None = None
        self._attempts: tuple[AttemptRecord, ...] = ()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def document(self) -> Document | None:
        return self._document

    @property
    def record(self) -> BillAnalysis | None:
        """The canonical record once the session has succeeded."""
        return self._record

    @property
    def failure(self) -> SessionFailure | None:
        return self._failure

    @property
    def attempts(self) -> tuple[AttemptRecord, ...]:
        return self._attempts

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvalidTransitionError(
                f"Cannot move analysis session from {self._state.value} to "
                f"{target.value}"
            )
        log.debug("Session %s -> %s", self._state.value, target.value)
        self._state = target

    def submit(self, document: Document) -> None:
        """Accept a document for analysis.

        Raises:
            InvalidTransitionError: If the session is not idle.
            DocumentError: If the document exceeds the configured size limit.
        """
        if self._state is not SessionState.IDLE:
            raise InvalidTransitionError(
                f"Session is {self._state.value}; reset it before a new upload"
            )
        if self._config is not None:
            document.check_size(self._config.max_document_bytes)
        self._transition(SessionState.SUBMITTED)
        self._document = document

    async def run(self) -> BillAnalysis:
        """Run the submitted analysis to completion.

        Raises:
            InvalidTransitionError: If no document is waiting to be analyzed.
            TerminalAnalysisError: Recorded as an ``analysis`` failure.
            TransportError: Recorded as a ``transport`` failure.
            Exception: Anything else is recorded as an ``analysis`` failure.
        """
        if self._state is not SessionState.SUBMITTED or self._document is None:
            raise InvalidTransitionError(
                f"Session is {self._state.value}; submit a document first"
            )

        timeout_s = (
            self._config.request_timeout_s
            if self._config is not None
            else DEFAULT_REQUEST_TIMEOUT
        )
        orchestrator = RepairRetryOrchestrator(
            self._adapter,
            timeout_s=timeout_s,
            telemetry=self._telemetry,
            observer=self._on_phase,
        )
        try:
            record = await orchestrator.run(self._document)
        except TerminalAnalysisError as e:
            self._fail(FailureKind.ANALYSIS, str(e), raw_text=e.raw_text)
            raise
        except TransportError as e:
            self._fail(FailureKind.TRANSPORT, str(e))
            raise
        except asyncio.CancelledError:
            self._fail(FailureKind.TRANSPORT, "Analysis was cancelled")
            raise
        except Exception as e:
            self._fail(FailureKind.ANALYSIS, str(e) or type(e).__name__)
            raise
        finally:
            self._attempts = orchestrator.attempts

        self._transition(SessionState.SUCCEEDED)
        self._record = record
        return record

    async def analyze(self, document: Document) -> BillAnalysis:
        """`submit` then `run`."""
        self.submit(document)
        return await self.run()

    def reset(self) -> None:
        """Return a finished session to ``IDLE``, discarding its result.

        Raises:
            InvalidTransitionError: If the session has not finished.
        """
        self._transition(SessionState.IDLE)
        self._document = None
        self._record = None
        self._failure = None
        self._attempts = ()

    def _on_phase(self, phase: AttemptPhase) -> None:
        self._transition(_PHASE_STATES[phase])

    def _fail(self, kind: FailureKind, message: str, *, raw_text: str | None = None) -> None:
        self._transition(SessionState.FAILED)
        self._failure = SessionFailure(kind=kind, message=message, raw_text=raw_text)
