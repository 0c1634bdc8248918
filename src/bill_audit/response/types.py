"""
Typed records produced from model responses

`BillAnalysis` is the canonical analysis record and `BillMetrics` the
smaller metrics record. Both are frozen and serialise with the camelCase
keys the presentation layer reads.
"""

from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..constants import EMAIL_LIKELIHOOD_THRESHOLD

# Untrusted decoded JSON; only the normalizers look inside it
type JsonValue = (
    None | bool | int | float | str | list[JsonValue] | dict[str, JsonValue]
)

Verdict = Literal["low", "medium", "high"]
BillType = Literal["water", "electric", "gas", "internet", "unknown"]
Comparison = Literal["below", "about_average", "above"]

Number = int | float


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self) -> str:
        """Return the record as a JSON string with camelCase keys."""
        return self.model_dump_json(by_alias=True)


class Issue(_Record):
    """A suspected billing error, located on the document by a pin."""

    issue: str = Field(min_length=1)
    evidence: str = Field(min_length=1)
    amount: Number | None = None
    page_number: int = Field(default=1, ge=1)
    pin_x: Number = 50.0
    pin_y: Number = 50.0


class ErrorAnalysis(_Record):
    likelihood_pct: int = Field(ge=0, le=100)
    verdict: Verdict
    reasons: tuple[str, ...] = Field(default=(), max_length=6)
    suspected_issues: tuple[Issue, ...] = ()


class RegionalComparison(_Record):
    provider_name: str | None = None
    provider_email: str | None = None
    bill_type: BillType = "unknown"
    total_amount: Number | None = None
    comparison: Comparison = "about_average"
    estimated_average_range: str = Field(min_length=1)
    explanation: str = Field(min_length=1)
    estimated_annual_savings: Number | None = None
    annual_co2_reduction_tons: Number | None = Field(
        default=None, alias="annualCO2ReductionTons"
    )
    comparison_statement: str = Field(min_length=1)


class SavingsTip(_Record):
    title: str = Field(min_length=1)
    action: str = Field(min_length=1)
    estimated_monthly_savings: Number | None = None
    why_it_fits: str = ""
    page_number: int = Field(default=1, ge=1)
    pin_x: Number = 50.0
    pin_y: Number = 50.0


class BillAnalysis(_Record):
    """The canonical analysis record.

    ``mock_email`` is present exactly when the likelihood of an error is at
    least 50% or at least one issue is suspected.
    """

    error_analysis: ErrorAnalysis
    mock_email: str | None
    regional_comparison: RegionalComparison
    savings_tips: tuple[SavingsTip, ...] = Field(default=(), max_length=5)

    @property
    def requires_email(self) -> bool:
        return (
            self.error_analysis.likelihood_pct >= EMAIL_LIKELIHOOD_THRESHOLD
            or len(self.error_analysis.suspected_issues) > 0
        )

    @model_validator(mode="after")
    def _email_presence_matches_rule(self) -> Self:
        if self.requires_email != (self.mock_email is not None):
            raise ValueError(
                "mockEmail must be present exactly when likelihoodPct >= "
                f"{EMAIL_LIKELIHOOD_THRESHOLD} or suspectedIssues is non-empty"
            )
        return self


class BillMetrics(_Record):
    """Key figures of a single bill."""

    bill_month: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    bill_type: BillType = "unknown"
    provider: str | None = None
    total_amount: Number | None = None
    usage_amount: Number | None = None
    usage_unit: str | None = None
