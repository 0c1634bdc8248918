"""Scenario-first entry points for analyzing a bill.

These functions resolve configuration, pick an adapter and run the
pipeline in one call. For step-by-step control, use `AnalysisSession` or
`RepairRetryOrchestrator` directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bill_audit.client import create_adapter
from bill_audit.config import FrozenConfig, resolve_config
from bill_audit.core.types import Document
from bill_audit.pipeline.metrics import MetricsExtractor
from bill_audit.pipeline.orchestrator import RepairRetryOrchestrator

if TYPE_CHECKING:
    from bill_audit.client.base import GenerationAdapter
    from bill_audit.response.types import BillAnalysis, BillMetrics
    from bill_audit.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


def _prepare(
    document: Document,
    cfg: FrozenConfig | None,
    adapter: GenerationAdapter | None,
) -> tuple[FrozenConfig, GenerationAdapter]:
    final_cfg = cfg or resolve_config().to_frozen()
    document.check_size(final_cfg.max_document_bytes)
    return final_cfg, adapter or create_adapter(final_cfg)


async def analyze_document(
    document: Document,
    *,
    cfg: FrozenConfig | None = None,
    adapter: GenerationAdapter | None = None,
    telemetry: TelemetryContextProtocol | None = None,
) -> BillAnalysis:
    """Analyze a document and return the canonical record.

    Args:
        document: The uploaded bill.
        cfg: Optional frozen configuration. If omitted, `resolve_config()` is used.
        adapter: Optional model adapter. If omitted, one is chosen from ``cfg``.
        telemetry: Optional telemetry context for phase timings.

    Raises:
        DocumentError: If the document exceeds ``max_document_bytes``.
        TerminalAnalysisError: If the repair attempt also fails.
        TransportError: If the model cannot be reached.
    """
    final_cfg, final_adapter = _prepare(document, cfg, adapter)
    log.debug("Analyzing %s with %s", document.name or "document", final_cfg)
    orchestrator = RepairRetryOrchestrator(
        final_adapter,
        timeout_s=final_cfg.request_timeout_s,
        telemetry=telemetry,
    )
    return await orchestrator.run(document)


async def analyze_bill(
    payload_b64: str,
    mime_type: str,
    *,
    cfg: FrozenConfig | None = None,
    adapter: GenerationAdapter | None = None,
) -> str:
    """Analyze a base64 payload and return the canonical record as JSON.

    A ``data:<mime>;base64,`` header on the payload is stripped.

    Example:
        ```python
        text = await analyze_bill(data_url, "application/pdf")
        record = json.loads(text)
        record["errorAnalysis"]["likelihoodPct"]
        ```
    """
    document = Document.from_base64(payload_b64, mime_type)
    record = await analyze_document(document, cfg=cfg, adapter=adapter)
    return record.to_json()


async def extract_document_metrics(
    document: Document,
    *,
    cfg: FrozenConfig | None = None,
    adapter: GenerationAdapter | None = None,
    telemetry: TelemetryContextProtocol | None = None,
) -> BillMetrics:
    """Extract `BillMetrics` from a document. There is no repair attempt.

    Raises:
        ExtractionError: If the answer holds no brace-delimited region.
        ParseError: If that region is not a JSON object.
        TransportError: If the model cannot be reached.
    """
    final_cfg, final_adapter = _prepare(document, cfg, adapter)
    extractor = MetricsExtractor(
        final_adapter,
        timeout_s=final_cfg.request_timeout_s,
        telemetry=telemetry,
    )
    return await extractor.run(document)


async def extract_bill_metrics(
    payload_b64: str,
    mime_type: str,
    *,
    cfg: FrozenConfig | None = None,
    adapter: GenerationAdapter | None = None,
) -> str:
    """Extract bill metrics from a base64 payload and return them as JSON."""
    document = Document.from_base64(payload_b64, mime_type)
    metrics = await extract_document_metrics(document, cfg=cfg, adapter=adapter)
    return metrics.to_json()
