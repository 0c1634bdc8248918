"""Tests for the analyze_bill / extract_bill_metrics entry points."""

import base64
import json

import pytest

from bill_audit.client import ScriptedAdapter
from bill_audit.client.mock import SAMPLE_METRICS
from bill_audit.config import config_override
from bill_audit.constants import DISPUTE_EMAIL_TEMPLATE
from bill_audit.exceptions import DocumentError, TerminalAnalysisError
from bill_audit.frontdoor import (
    analyze_bill,
    analyze_document,
    extract_bill_metrics,
)
from tests.helpers import DOUBLE_CHARGE_RESPONSE, NO_JSON_TEXT, fenced

pytestmark = pytest.mark.integration

PAYLOAD = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4 bill").decode()


@pytest.mark.asyncio
async def test_analyze_bill_returns_canonical_json(frozen_config):
    adapter = ScriptedAdapter([fenced(DOUBLE_CHARGE_RESPONSE)])

    text = await analyze_bill(PAYLOAD, "application/pdf", cfg=frozen_config, adapter=adapter)

    record = json.loads(text)
    assert record["mockEmail"] == DISPUTE_EMAIL_TEMPLATE
    assert record["regionalComparison"]["billType"] == "electric"
    assert adapter.calls[0].document.data == b"%PDF-1.4 bill"


@pytest.mark.asyncio
async def test_analyze_bill_defaults_to_scripted_sample(frozen_config):
    text = await analyze_bill(PAYLOAD, "application/pdf", cfg=frozen_config)
    assert json.loads(text)["regionalComparison"]["providerName"] == "Sample Electric Utility"


@pytest.mark.asyncio
async def test_analyze_bill_resolves_config_when_omitted(pdf_document):
    with config_override(request_timeout_s=3):
        record = await analyze_document(pdf_document)
    assert record.regional_comparison.bill_type == "electric"


@pytest.mark.asyncio
async def test_terminal_failure_propagates(frozen_config, pdf_document):
    adapter = ScriptedAdapter(default=NO_JSON_TEXT)

    with pytest.raises(TerminalAnalysisError):
        await analyze_document(pdf_document, cfg=frozen_config, adapter=adapter)


@pytest.mark.asyncio
async def test_document_size_limit(frozen_config, pdf_document):
    from dataclasses import replace

    with pytest.raises(DocumentError):
        await analyze_document(
            pdf_document, cfg=replace(frozen_config, max_document_bytes=1)
        )


@pytest.mark.asyncio
async def test_extract_bill_metrics_returns_json(frozen_config):
    text = await extract_bill_metrics(PAYLOAD, "application/pdf", cfg=frozen_config)
    assert json.loads(text) == SAMPLE_METRICS
