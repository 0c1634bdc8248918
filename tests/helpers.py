"""Shared payloads and builders for bill-audit tests."""

import json
from typing import Any

# The model answer from the documented double-charge scenario
DOUBLE_CHARGE_RESPONSE: dict[str, Any] = {
    "errorAnalysis": {
        "likelihoodPct": 72,
        "verdict": "high",
        "reasons": ["math error"],
        "suspectedIssues": [
            {
                "issue": "double charge",
                "evidence": "line 3",
                "amount": 40,
                "pageNumber": 1,
                "pinX": 80,
                "pinY": 20,
            }
        ],
    },
    "mockEmail": None,
    "regionalComparison": {
        "providerName": "Acme Power",
        "providerEmail": None,
        "billType": "electric",
        "totalAmount": 200,
        "comparison": "above",
        "estimatedAverageRange": "$150-180",
        "explanation": "higher usage",
        "estimatedAnnualSavings": 120,
        "annualCO2ReductionTons": 1.2,
        "comparisonStatement": "15% above average",
    },
    "savingsTips": [
        {
            "title": "Shift laundry",
            "action": "Run after 9pm",
            "estimatedMonthlySavings": 10,
            "whyItFits": "off-peak rates",
            "pageNumber": 1,
            "pinX": 50,
            "pinY": 50,
        }
    ],
}

LOW_RISK_RESPONSE: dict[str, Any] = {
    "errorAnalysis": {
        "likelihoodPct": 10,
        "verdict": "low",
        "reasons": ["charges match usage"],
        "suspectedIssues": [],
    },
    "mockEmail": "This text should be dropped because no email is required.",
    "regionalComparison": {
        "providerName": "City Water",
        "billType": "Water",
        "comparison": "below",
    },
    "savingsTips": [],
}

NO_JSON_TEXT = "I'm sorry, I could not read this bill clearly."


def fenced(payload: dict[str, Any], *, lead: str = "", trail: str = "") -> str:
    """Render a payload the way models usually answer: inside a json fence."""
    return f"{lead}```json\n{json.dumps(payload)}\n```{trail}"


def tip(action: str = "Turn off the lights", **fields: Any) -> dict[str, Any]:
    return {"title": "Tip", "action": action, **fields}


def issue(name: str = "late fee", **fields: Any) -> dict[str, Any]:
    return {"issue": name, "evidence": "page 1", **fields}
