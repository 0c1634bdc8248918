"""Bill metrics extraction.

A single model call with the metrics prompt, followed by extract, parse and
coerce. There is no repair step: extraction and parse errors propagate.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bill_audit.client.base import bounded_generate
from bill_audit.constants import DEFAULT_REQUEST_TIMEOUT
from bill_audit.prompts import METRICS_PROMPT
from bill_audit.response.parsing import parse_model_text
from bill_audit.response.sanitizer import sanitize_metrics
from bill_audit.telemetry import TelemetryContext

from .orchestrator import excerpt

if TYPE_CHECKING:
    from bill_audit.client.base import GenerationAdapter
    from bill_audit.core.types import Document
    from bill_audit.response.types import BillMetrics
    from bill_audit.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class MetricsExtractor:
    """Extracts `BillMetrics` from a document in one model call."""

    def __init__(
        self,
        adapter: GenerationAdapter,
        *,
        timeout_s: float = DEFAULT_REQUEST_TIMEOUT,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._adapter = adapter
        self._timeout_s = timeout_s
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    async def run(self, document: Document) -> BillMetrics:
        """Return the metrics of ``document``.

        Raises:
            ExtractionError: If the answer holds no brace-delimited region.
            ParseError: If that region is not a JSON object.
            TransportError: If the model call fails or times out.
        """
        with self._telemetry("metrics.extract"):
            text = await bounded_generate(
                self._adapter, METRICS_PROMPT, document, timeout_s=self._timeout_s
            )
            log.debug("Metrics raw text: %s", excerpt(text))
            parsed = parse_model_text(text)
        return sanitize_metrics(parsed)
