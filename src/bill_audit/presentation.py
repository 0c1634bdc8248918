"""Data helpers for the results view: document pins and the dispute email.

Nothing here renders anything. The functions turn a canonical record into
the plain values the viewer and the email export consume.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal
from urllib.parse import quote

from .constants import FALLBACK_PROVIDER_EMAIL, PIN_DISPLAY_MAX, PIN_DISPLAY_MIN
from .response.normalizers import as_text
from .response.types import BillAnalysis

PinType = Literal["error", "saving"]

# Characters encodeURIComponent leaves as-is, besides the always-safe ones
_URI_COMPONENT_SAFE = "!*'()"

_GREETING_FALLBACK = "Utility Provider"


def _clamp_display(value: float) -> float:
    return max(PIN_DISPLAY_MIN, min(PIN_DISPLAY_MAX, value))


@dataclass(frozen=True, slots=True)
class Pin:
    """A numbered marker on a page of the document.

    ``pin_x``/``pin_y`` are the stored percentages; the display values keep
    the marker inside the page edges.
    """

    id: int
    page_number: int
    pin_x: float
    pin_y: float
    type: PinType

    @property
    def display_x(self) -> float:
        return _clamp_display(self.pin_x)

    @property
    def display_y(self) -> float:
        return _clamp_display(self.pin_y)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "pageNumber": self.page_number,
            "pinX": self.pin_x,
            "pinY": self.pin_y,
            "type": self.type,
        }


def build_pins(record: BillAnalysis) -> tuple[Pin, ...]:
    """Pins for every suspected issue, then every savings tip.

    Ids are numbered from 1 within each type, matching the numbering of the
    issue and tip lists.
    """
    errors = (
        Pin(
            id=i,
            page_number=issue.page_number,
            pin_x=issue.pin_x,
            pin_y=issue.pin_y,
            type="error",
        )
        for i, issue in enumerate(record.error_analysis.suspected_issues, start=1)
    )
    savings = (
        Pin(
            id=i,
            page_number=tip.page_number,
            pin_x=tip.pin_x,
            pin_y=tip.pin_y,
            type="saving",
        )
        for i, tip in enumerate(record.savings_tips, start=1)
    )
    return (*errors, *savings)


def pins_on_page(
    pins: Iterable[Pin], page: int, pin_type: PinType | None = None
) -> list[Pin]:
    """Pins shown on ``page``, optionally only those of ``pin_type``."""
    return [
        pin
        for pin in pins
        if pin.page_number == page and (pin_type is None or pin.type == pin_type)
    ]


def page_for_pin(pins: Iterable[Pin], pin_id: int, pin_type: PinType) -> int:
    """Page holding the pin, or 1 when there is no such pin."""
    for pin in pins:
        if pin.id == pin_id and pin.type == pin_type:
            return pin.page_number
    return 1


@dataclass(frozen=True, slots=True)
class DisputeEmail:
    to: str
    subject: str
    body: str

    def mailto_link(self) -> str:
        return (
            f"mailto:{self.to}"
            f"?subject={quote(self.subject, safe=_URI_COMPONENT_SAFE)}"
            f"&body={quote(self.body, safe=_URI_COMPONENT_SAFE)}"
        )

    def clipboard_text(self) -> str:
        return f"Subject: {self.subject}\n\n{self.body}"


def build_dispute_email(record: BillAnalysis) -> DisputeEmail:
    """Draft a dispute email listing the record's suspected issues.

    The model's own ``mockEmail`` is kept on the record; this draft is built
    from the structured issue list instead.
    """
    regional = record.regional_comparison
    provider = regional.provider_name or _GREETING_FALLBACK

    items = []
    for i, issue in enumerate(record.error_analysis.suspected_issues, start=1):
        amount = f" ({as_text(issue.amount)})" if issue.amount else ""
        items.append(f"{i}. {issue.issue}{amount}\n   {issue.evidence}")
    issue_list = "\n\n".join(items)

    body = (
        f"Dear {provider} Customer Service,\n\n"
        "I am writing to report the following billing errors found on my "
        "recent utility bill. I kindly request a review and correction of "
        "these charges.\n\n"
        f"{issue_list}\n\n"
        "I would appreciate a prompt resolution and a corrected bill. Please "
        "contact me at your earliest convenience to discuss these "
        "discrepancies.\n\n"
        "Thank you for your attention to this matter.\n\n"
        "Sincerely,\n"
        "[Your Name]\n"
        "[Your Account Number]"
    )
    return DisputeEmail(
        to=regional.provider_email or FALLBACK_PROVIDER_EMAIL,
        subject=f"Billing Errors on Account - {provider}",
        body=body,
    )
