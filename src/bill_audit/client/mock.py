"""Deterministic in-process adapter (no network).

Used as the default adapter when ``use_real_api`` is off, and in tests to
script the model's answers call by call.
"""

from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
import json
import logging

from ..core.types import Document
from ..exceptions import TransportError
from ..prompts import METRICS_PROMPT

log = logging.getLogger(__name__)

type ScriptedResponse = str | Exception | Callable[[str, Document], str]

SAMPLE_ANALYSIS = {
    "errorAnalysis": {
        "likelihoodPct": 35,
        "verdict": "low",
        "reasons": [
            "Charges match the listed usage and rate schedule",
            "No duplicate line items were found",
        ],
        "suspectedIssues": [],
    },
    "mockEmail": None,
    "regionalComparison": {
        "providerName": "Sample Electric Utility",
        "providerEmail": None,
        "billType": "electric",
        "totalAmount": 128.4,
        "comparison": "about_average",
        "estimatedAverageRange": "$110-$140",
        "explanation": "Usage of 820 kWh is typical for a two-bedroom home.",
        "estimatedAnnualSavings": 96,
        "annualCO2ReductionTons": 0.4,
        "comparisonStatement": "About average for your region",
    },
    "savingsTips": [
        {
            "title": "Shift laundry off-peak",
            "action": "Run the washer and dryer after 9pm",
            "estimatedMonthlySavings": 8,
            "whyItFits": "The bill shows a time-of-use rate plan",
            "pageNumber": 1,
            "pinX": 62,
            "pinY": 41,
        },
    ],
}

SAMPLE_METRICS = {
    "billMonth": "2024-05",
    "billType": "electric",
    "provider": "Sample Electric Utility",
    "totalAmount": 128.4,
    "usageAmount": 820,
    "usageUnit": "kWh",
}


def _fenced(payload: dict[str, object]) -> str:
    # Models often wrap their answer in a code fence despite instructions
    return f"```json\n{json.dumps(payload, indent=2)}\n```"


def sample_response(prompt: str, document: Document) -> str:  # noqa: ARG001
    """Return the canned answer matching the kind of ``prompt``."""
    if prompt == METRICS_PROMPT:
        return _fenced(SAMPLE_METRICS)
    return _fenced(SAMPLE_ANALYSIS)


@dataclass(frozen=True, slots=True)
class ScriptedCall:
    """One recorded call to a `ScriptedAdapter`."""

    prompt: str
    document: Document


class ScriptedAdapter:
    """Replays queued responses in order and records every call.

    Each queued item is either the text to return, an exception to raise, or
    a callable ``(prompt, document) -> str``. Once the queue is empty the
    ``default`` response is used for every further call.

    Examples:
        adapter = ScriptedAdapter(["no json here", '{"errorAnalysis": {}}'])
        record = await RepairRetryOrchestrator(adapter).run(document)
        assert adapter.call_count == 2
    """

    def __init__(
        self,
        responses: Iterable[ScriptedResponse] = (),
        *,
        default: ScriptedResponse | None = None,
    ):
        self._queue: deque[ScriptedResponse] = deque(responses)
        self._default = default
        self.calls: list[ScriptedCall] = []

    @classmethod
    def sample(cls) -> "ScriptedAdapter":
        """Adapter that answers every call with the canned sample bill."""
        return cls(default=sample_response)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def prompts(self) -> list[str]:
        return [call.prompt for call in self.calls]

    async def generate(self, prompt: str, document: Document) -> str:
        self.calls.append(ScriptedCall(prompt=prompt, document=document))
        if self._queue:
            response = self._queue.popleft()
        elif self._default is not None:
            response = self._default
        else:
            raise TransportError(
                f"ScriptedAdapter has no response for call #{self.call_count}"
            )

        log.debug("Scripted response for call #%d", self.call_count)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt, document)
        return response
