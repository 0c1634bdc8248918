"""
Turn an untrusted parsed model answer into a canonical record

The sanitizer never raises: every field falls back to a fixed default, so
any decoded JSON value produces a complete, valid record.
"""

import re

from ..constants import (
    ABOUT_AVERAGE_STATEMENT,
    ABOVE_AVERAGE_STATEMENT,
    DEFAULT_AVERAGE_RANGE,
    DEFAULT_EVIDENCE,
    DEFAULT_EXPLANATION,
    DEFAULT_ISSUE,
    DEFAULT_TIP_TITLE,
    DISPUTE_EMAIL_TEMPLATE,
    EMAIL_LIKELIHOOD_THRESHOLD,
    MAX_REASONS,
    MAX_SAVINGS_TIPS,
    MIN_EMAIL_LENGTH,
)
from .normalizers import (
    as_object,
    as_text,
    clamp_pct,
    coordinate,
    normalize_bill_type,
    normalize_comparison,
    normalize_verdict,
    number_or_none,
    object_items,
    positive_int,
    string_list,
    text_or_default,
    text_or_none,
)
from .types import (
    BillAnalysis,
    BillMetrics,
    ErrorAnalysis,
    Issue,
    JsonValue,
    RegionalComparison,
    SavingsTip,
)

_BILL_MONTH = re.compile(r"^(\d{4})-(\d{2})(?:-\d{2})?$")
_NULL_UNITS = frozenset({"unknown", "null", "none"})


def _issue(item: dict[str, JsonValue]) -> Issue:
    return Issue(
        issue=text_or_default(item.get("issue"), DEFAULT_ISSUE),
        evidence=text_or_default(item.get("evidence"), DEFAULT_EVIDENCE),
        amount=number_or_none(item.get("amount")),
        page_number=positive_int(item.get("pageNumber")),
        pin_x=coordinate(item.get("pinX")),
        pin_y=coordinate(item.get("pinY")),
    )


def _tip(item: dict[str, JsonValue]) -> SavingsTip | None:
    action = as_text(item.get("action")).strip()
    if not action:
        return None
    return SavingsTip(
        title=text_or_default(item.get("title"), DEFAULT_TIP_TITLE),
        action=action,
        estimated_monthly_savings=number_or_none(item.get("estimatedMonthlySavings")),
        why_it_fits=as_text(item.get("whyItFits")).strip(),
        page_number=positive_int(item.get("pageNumber")),
        pin_x=coordinate(item.get("pinX")),
        pin_y=coordinate(item.get("pinY")),
    )


def _mock_email(value: JsonValue, *, required: bool) -> str | None:
    if not required:
        return None
    email = as_text(value)
    if len(email.strip()) < MIN_EMAIL_LENGTH:
        return DISPUTE_EMAIL_TEMPLATE
    return email


def sanitize_analysis(raw: JsonValue) -> BillAnalysis:
    """Project an arbitrary parsed value onto the canonical analysis record.

    Sanitizing the ``to_dict()`` form of a canonical record returns an equal
    record.
    """
    root = as_object(raw)
    error_raw = as_object(root.get("errorAnalysis"))
    regional_raw = as_object(root.get("regionalComparison"))

    issues = tuple(_issue(item) for item in object_items(error_raw.get("suspectedIssues")))

    tips = tuple(
        tip
        for tip in map(_tip, object_items(root.get("savingsTips"))[:MAX_SAVINGS_TIPS])
        if tip is not None
    )

    error_analysis = ErrorAnalysis(
        likelihood_pct=clamp_pct(error_raw.get("likelihoodPct")),
        verdict=normalize_verdict(error_raw.get("verdict")),
        reasons=tuple(string_list(error_raw.get("reasons"))[:MAX_REASONS]),
        suspected_issues=issues,
    )

    comparison = normalize_comparison(regional_raw.get("comparison"))
    default_statement = (
        ABOVE_AVERAGE_STATEMENT if comparison == "above" else ABOUT_AVERAGE_STATEMENT
    )
    regional = RegionalComparison(
        provider_name=text_or_none(regional_raw.get("providerName")),
        provider_email=text_or_none(regional_raw.get("providerEmail")),
        bill_type=normalize_bill_type(regional_raw.get("billType")),
        total_amount=number_or_none(regional_raw.get("totalAmount")),
        comparison=comparison,
        estimated_average_range=text_or_default(
            regional_raw.get("estimatedAverageRange"), DEFAULT_AVERAGE_RANGE
        ),
        explanation=text_or_default(regional_raw.get("explanation"), DEFAULT_EXPLANATION),
        estimated_annual_savings=number_or_none(regional_raw.get("estimatedAnnualSavings")),
        annual_co2_reduction_tons=number_or_none(regional_raw.get("annualCO2ReductionTons")),
        comparison_statement=text_or_default(
            regional_raw.get("comparisonStatement"), default_statement
        ),
    )

    # Depends on the normalized likelihood and issues above
    required = (
        error_analysis.likelihood_pct >= EMAIL_LIKELIHOOD_THRESHOLD or len(issues) > 0
    )

    return BillAnalysis(
        error_analysis=error_analysis,
        mock_email=_mock_email(root.get("mockEmail"), required=required),
        regional_comparison=regional,
        savings_tips=tips,
    )


def _bill_month(value: JsonValue) -> str | None:
    text = as_text(value).strip()
    match = _BILL_MONTH.match(text)
    if match is None or not 1 <= int(match.group(2)) <= 12:
        return None
    return f"{match.group(1)}-{match.group(2)}"


def _usage_unit(value: JsonValue) -> str | None:
    unit = text_or_none(value)
    if unit is None or unit.lower() in _NULL_UNITS:
        return None
    return unit


def sanitize_metrics(raw: JsonValue) -> BillMetrics:
    """Coerce an arbitrary parsed value into a `BillMetrics` record."""
    root = as_object(raw)
    return BillMetrics(
        bill_month=_bill_month(root.get("billMonth")),
        bill_type=normalize_bill_type(root.get("billType")),
        provider=text_or_none(root.get("provider")),
        total_amount=number_or_none(root.get("totalAmount")),
        usage_amount=number_or_none(root.get("usageAmount")),
        usage_unit=_usage_unit(root.get("usageUnit")),
    )
