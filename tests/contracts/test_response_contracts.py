"""Contract tests for the response-normalization layer.

These hold for every input, so they are checked against a deterministic
stream of generated JSON values as well as hand-picked cases.
"""

import json
import math
import random
from typing import Any, get_args

import pytest

from bill_audit.constants import EMAIL_LIKELIHOOD_THRESHOLD, MAX_SAVINGS_TIPS
from bill_audit.exceptions import ExtractionError
from bill_audit.response.extraction import extract_json_object
from bill_audit.response.normalizers import (
    clamp_pct,
    coordinate,
    number_or_none,
    normalize_bill_type,
    normalize_comparison,
    normalize_verdict,
)
from bill_audit.response.sanitizer import sanitize_analysis, sanitize_metrics
from bill_audit.response.types import BillType, Comparison, Verdict
from tests.helpers import DOUBLE_CHARGE_RESPONSE, LOW_RISK_RESPONSE

pytestmark = pytest.mark.contract

_SCALARS: list[Any] = [
    None,
    True,
    False,
    0,
    -7,
    49,
    50,
    72.5,
    1e308,
    math.inf,
    -math.inf,
    math.nan,
    "",
    "   ",
    "high",
    "Electricity Co",
    "above",
    "42",
    "not a number",
    "A long enough dispute email body for the provider.",
]

_KEYS = [
    "errorAnalysis",
    "regionalComparison",
    "savingsTips",
    "mockEmail",
    "likelihoodPct",
    "verdict",
    "reasons",
    "suspectedIssues",
    "issue",
    "evidence",
    "amount",
    "pageNumber",
    "pinX",
    "pinY",
    "action",
    "title",
    "billType",
    "comparison",
]


def _random_json(rng: random.Random, depth: int = 0) -> Any:
    roll = rng.random()
    if depth >= 4 or roll < 0.45:
        return rng.choice(_SCALARS)
    if roll < 0.7:
        return [_random_json(rng, depth + 1) for _ in range(rng.randint(0, 7))]
    return {
        rng.choice(_KEYS): _random_json(rng, depth + 1) for _ in range(rng.randint(0, 6))
    }


def _random_analysis(rng: random.Random) -> Any:
    """A value shaped roughly like an answer, with random leaves."""
    return {
        "errorAnalysis": {
            "likelihoodPct": rng.choice(_SCALARS),
            "verdict": rng.choice(_SCALARS),
            "reasons": _random_json(rng, 3),
            "suspectedIssues": [
                {key: rng.choice(_SCALARS) for key in rng.sample(_KEYS, 5)}
                for _ in range(rng.randint(0, 3))
            ],
        },
        "mockEmail": rng.choice(_SCALARS),
        "regionalComparison": _random_json(rng, 2),
        "savingsTips": [_random_json(rng, 3) for _ in range(rng.randint(0, 8))],
    }


def _generated_inputs() -> list[Any]:
    rng = random.Random(20240501)
    values: list[Any] = [DOUBLE_CHARGE_RESPONSE, LOW_RISK_RESPONSE]
    values += [_random_json(rng) for _ in range(150)]
    values += [_random_analysis(rng) for _ in range(150)]
    return values


GENERATED = _generated_inputs()


class TestNormalizerContracts:
    """Normalizers are total and stay inside their target domain."""

    @pytest.mark.parametrize("value", _SCALARS + [[1], {"a": 1}])
    def test_clamp_pct_is_integer_in_range(self, value):
        result = clamp_pct(value)
        assert isinstance(result, int)
        assert 0 <= result <= 100

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_clamp_pct_non_finite_is_zero(self, value):
        assert clamp_pct(value) == 0

    @pytest.mark.parametrize("value", _SCALARS + [[1], {"a": 1}])
    def test_enumerations_stay_in_their_sets(self, value):
        assert normalize_bill_type(value) in get_args(BillType)
        assert normalize_comparison(value) in get_args(Comparison)
        assert normalize_verdict(value) in get_args(Verdict)


class TestOversizedIntegers:
    """Integers beyond float range decode fine but have no numeric reading."""

    HUGE = json.loads("1" + "0" * 400)

    def test_normalizers_treat_them_as_missing(self):
        assert clamp_pct(self.HUGE) == 0
        assert clamp_pct(-self.HUGE) == 0
        assert number_or_none(self.HUGE) is None
        assert coordinate(self.HUGE) == 50

    def test_sanitizer_falls_back_to_defaults(self):
        raw = json.loads(
            json.dumps(
                {
                    "errorAnalysis": {
                        "likelihoodPct": self.HUGE,
                        "suspectedIssues": [
                            {
                                "issue": "late fee",
                                "evidence": "page 1",
                                "amount": self.HUGE,
                                "pinX": self.HUGE,
                                "pageNumber": self.HUGE,
                            }
                        ],
                    },
                    "regionalComparison": {"totalAmount": self.HUGE},
                }
            )
        )

        record = sanitize_analysis(raw)

        assert record.error_analysis.likelihood_pct == 0
        (found,) = record.error_analysis.suspected_issues
        assert found.amount is None
        assert found.pin_x == 50
        assert found.page_number == 1
        assert record.regional_comparison.total_amount is None
        assert record.mock_email is not None

    def test_metrics_total_amount_is_none(self):
        assert sanitize_metrics({"totalAmount": self.HUGE}).total_amount is None

    def test_float_range_integers_are_kept(self):
        big = 10**300
        assert number_or_none(big) == big
        assert clamp_pct(big) == 100


class TestSanitizerContracts:
    """Properties of every sanitized record."""

    @pytest.mark.parametrize("raw", GENERATED)
    def test_never_raises_and_email_invariant_holds(self, raw):
        record = sanitize_analysis(raw)
        analysis = record.error_analysis

        required = (
            analysis.likelihood_pct >= EMAIL_LIKELIHOOD_THRESHOLD
            or len(analysis.suspected_issues) > 0
        )
        assert required == (record.mock_email is not None)

    @pytest.mark.parametrize("raw", GENERATED)
    def test_tips_are_bounded_and_actionable(self, raw):
        tips = sanitize_analysis(raw).savings_tips
        assert 0 <= len(tips) <= MAX_SAVINGS_TIPS
        assert all(tip.action for tip in tips)

    @pytest.mark.parametrize("raw", GENERATED)
    def test_sanitizing_is_idempotent(self, raw):
        record = sanitize_analysis(raw)
        assert sanitize_analysis(record.to_dict()) == record

    @pytest.mark.parametrize("raw", GENERATED[:50])
    def test_json_round_trip_is_stable(self, raw):
        record = sanitize_analysis(raw)
        assert sanitize_analysis(json.loads(record.to_json())) == record


class TestExtractorContracts:
    def test_fenced_object_in_noise(self):
        assert extract_json_object('noise ```json {"a":1} ``` noise') == '{"a":1}'

    def test_no_opening_brace_fails(self):
        with pytest.raises(ExtractionError):
            extract_json_object("the model refused } to answer")
