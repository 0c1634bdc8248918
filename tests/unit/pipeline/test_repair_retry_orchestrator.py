"""Scenario tests for the repair-retry orchestrator."""

import asyncio
import json

import pytest

from bill_audit.constants import DISPUTE_EMAIL_TEMPLATE
from bill_audit.exceptions import (
    ExtractionError,
    ParseError,
    TerminalAnalysisError,
    TransportError,
)
from bill_audit.pipeline.orchestrator import (
    PHASES,
    AttemptOutcome,
    AttemptPhase,
    RepairRetryOrchestrator,
)
from bill_audit.prompts import PRIMARY_PROMPT, REPAIR_PROMPT
from bill_audit.telemetry import InMemoryReporter, TelemetryContext
from tests.helpers import DOUBLE_CHARGE_RESPONSE, NO_JSON_TEXT, fenced

pytestmark = pytest.mark.unit


class TestFirstAttempt:
    @pytest.mark.asyncio
    async def test_valid_first_answer_needs_one_call(
        self, scripted_adapter_factory, pdf_document
    ):
        adapter = scripted_adapter_factory(fenced(DOUBLE_CHARGE_RESPONSE, lead="Sure! "))
        orchestrator = RepairRetryOrchestrator(adapter)

        record = await orchestrator.run(pdf_document)

        assert adapter.prompts == [PRIMARY_PROMPT]
        assert adapter.calls[0].document is pdf_document
        assert record.regional_comparison.bill_type == "electric"
        assert record.mock_email == DISPUTE_EMAIL_TEMPLATE
        assert [a.outcome for a in orchestrator.attempts] == [AttemptOutcome.SUCCEEDED]

    @pytest.mark.asyncio
    async def test_object_with_wrong_shape_is_sanitized_not_repaired(
        self, scripted_adapter_factory, pdf_document
    ):
        adapter = scripted_adapter_factory('{"unexpected": "shape"}')
        record = await RepairRetryOrchestrator(adapter).run(pdf_document)

        assert adapter.call_count == 1
        assert record.error_analysis.likelihood_pct == 0


class TestRepairAttempt:
    @pytest.mark.asyncio
    async def test_undecodable_integer_literal_triggers_repair(
        self, scripted_adapter_factory, pdf_document
    ):
        oversized = '{"errorAnalysis": {"likelihoodPct": ' + "9" * 5000 + "}}"
        adapter = scripted_adapter_factory(oversized, json.dumps(DOUBLE_CHARGE_RESPONSE))
        orchestrator = RepairRetryOrchestrator(adapter)

        await orchestrator.run(pdf_document)

        assert adapter.prompts == [PRIMARY_PROMPT, REPAIR_PROMPT]
        assert isinstance(orchestrator.attempts[0].error, ParseError)

    @pytest.mark.asyncio
    async def test_prose_then_valid_json_uses_repair_prompt(
        self, scripted_adapter_factory, pdf_document
    ):
        adapter = scripted_adapter_factory(NO_JSON_TEXT, json.dumps(DOUBLE_CHARGE_RESPONSE))
        orchestrator = RepairRetryOrchestrator(adapter)

        record = await orchestrator.run(pdf_document)

        assert adapter.prompts == [PRIMARY_PROMPT, REPAIR_PROMPT]
        assert adapter.calls[1].document is pdf_document
        assert len(record.error_analysis.suspected_issues) == 1
        assert [(a.phase, a.outcome) for a in orchestrator.attempts] == [
            (AttemptPhase.FIRST_ATTEMPT, AttemptOutcome.FORMAT_ERROR),
            (AttemptPhase.REPAIR_ATTEMPT, AttemptOutcome.SUCCEEDED),
        ]
        assert isinstance(orchestrator.attempts[0].error, ExtractionError)

    @pytest.mark.asyncio
    async def test_invalid_json_triggers_repair(self, scripted_adapter_factory, pdf_document):
        adapter = scripted_adapter_factory("{'python': 'dict'}", '{"errorAnalysis": {}}')
        orchestrator = RepairRetryOrchestrator(adapter)

        await orchestrator.run(pdf_document)

        assert adapter.call_count == 2
        assert isinstance(orchestrator.attempts[0].error, ParseError)

    @pytest.mark.asyncio
    async def test_two_failures_are_terminal(self, scripted_adapter_factory, pdf_document):
        adapter = scripted_adapter_factory(NO_JSON_TEXT, "still { broken")

        with pytest.raises(TerminalAnalysisError) as exc_info:
            await RepairRetryOrchestrator(adapter).run(pdf_document)

        error = exc_info.value
        assert adapter.call_count == 2
        assert error.raw_text == "still { broken"
        assert [type(e) for e in error.errors] == [ExtractionError, ExtractionError]
        assert error.__cause__ is error.errors[-1]

    @pytest.mark.asyncio
    async def test_never_more_than_two_calls(self, scripted_adapter_factory, pdf_document):
        adapter = scripted_adapter_factory(default=NO_JSON_TEXT)

        with pytest.raises(TerminalAnalysisError):
            await RepairRetryOrchestrator(adapter).run(pdf_document)

        assert adapter.call_count == len(PHASES) == 2


class TestTransportFailures:
    @pytest.mark.asyncio
    async def test_transport_error_is_not_retried(self, scripted_adapter_factory, pdf_document):
        adapter = scripted_adapter_factory(TransportError("network down"), NO_JSON_TEXT)
        orchestrator = RepairRetryOrchestrator(adapter)

        with pytest.raises(TransportError, match="network down"):
            await orchestrator.run(pdf_document)

        assert adapter.call_count == 1
        assert orchestrator.attempts[0].outcome is AttemptOutcome.TRANSPORT_ERROR

    @pytest.mark.asyncio
    async def test_transport_error_during_repair_propagates(
        self, scripted_adapter_factory, pdf_document
    ):
        adapter = scripted_adapter_factory(NO_JSON_TEXT, TransportError("quota"))

        with pytest.raises(TransportError):
            await RepairRetryOrchestrator(adapter).run(pdf_document)

    @pytest.mark.asyncio
    async def test_slow_model_times_out_as_transport_error(
        self, scripted_adapter_factory, pdf_document
    ):
        class _SlowAdapter:
            calls = 0

            async def generate(self, prompt, document):
                type(self).calls += 1
                await asyncio.sleep(1)
                return "{}"

        with pytest.raises(TransportError, match="timed out"):
            await RepairRetryOrchestrator(_SlowAdapter(), timeout_s=0.01).run(pdf_document)

        assert _SlowAdapter.calls == 1


class TestObservation:
    @pytest.mark.asyncio
    async def test_observer_sees_each_phase(self, scripted_adapter_factory, pdf_document):
        seen: list[AttemptPhase] = []
        adapter = scripted_adapter_factory(NO_JSON_TEXT, "{}")

        await RepairRetryOrchestrator(adapter, observer=seen.append).run(pdf_document)

        assert seen == [AttemptPhase.FIRST_ATTEMPT, AttemptPhase.REPAIR_ATTEMPT]

    @pytest.mark.asyncio
    async def test_attempts_reset_between_runs(self, scripted_adapter_factory, pdf_document):
        adapter = scripted_adapter_factory(NO_JSON_TEXT, "{}", "{}")
        orchestrator = RepairRetryOrchestrator(adapter)

        await orchestrator.run(pdf_document)
        await orchestrator.run(pdf_document)

        assert len(orchestrator.attempts) == 1

    @pytest.mark.asyncio
    async def test_telemetry_times_phases_and_counts_repairs(
        self, scripted_adapter_factory, pdf_document, monkeypatch
    ):
        monkeypatch.setenv("BILL_AUDIT_TELEMETRY", "1")
        reporter = InMemoryReporter()
        adapter = scripted_adapter_factory(NO_JSON_TEXT, "{}")

        await RepairRetryOrchestrator(
            adapter, telemetry=TelemetryContext(reporter)
        ).run(pdf_document)

        assert set(reporter.timings) == {"analysis.primary", "analysis.repair"}
        assert [v for v, _ in reporter.metrics["analysis.repairs"]] == [1]

    @pytest.mark.asyncio
    async def test_repair_transition_is_logged(
        self, scripted_adapter_factory, pdf_document, caplog
    ):
        adapter = scripted_adapter_factory(NO_JSON_TEXT, "{}")

        with caplog.at_level("INFO", logger="bill_audit.pipeline.orchestrator"):
            await RepairRetryOrchestrator(adapter).run(pdf_document)

        levels = [r.levelname for r in caplog.records]
        assert "WARNING" in levels
        assert "INFO" in levels
        assert NO_JSON_TEXT not in caplog.text
