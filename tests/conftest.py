"""
Global test configuration with support for different test types.
"""

from collections.abc import Generator
import logging
import os
from unittest.mock import patch

import pytest

from bill_audit.client import ScriptedAdapter
from bill_audit.config import FrozenConfig
from bill_audit.constants import DEFAULT_MODEL, MAX_DOCUMENT_SIZE
from bill_audit.core.types import Document

_ISOLATED_PREFIXES = ("BILL_AUDIT_", "GEMINI_")


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Tests should only see environment that they explicitly set.

    Opt-in escape hatch: mark a test with @pytest.mark.allow_dotenv
    to permit .env loading for that specific test.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    monkeypatch.setattr(
        "bill_audit.config.env_loader.load_dotenv",
        lambda *_args, **_kwargs: False,
    )


@pytest.fixture(autouse=True)
def isolate_bill_audit_env(request, monkeypatch):
    """Ensure a clean BILL_AUDIT_* / GEMINI_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith(_ISOLATED_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles enabling telemetry
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture
def clean_env_patch():
    """Helper to apply a clean env baseline plus overrides.

    Usage:
        with clean_env_patch({"BILL_AUDIT_MODEL": "env-model"}):
            ...
    """

    def _apply(extra: dict[str, str] | None = None) -> Generator[None]:
        base = {
            k: v for k, v in os.environ.items() if not k.startswith(_ISOLATED_PREFIXES)
        }
        if extra:
            base.update(extra)
        with patch.dict(os.environ, base, clear=True):
            yield

    return _apply


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Behavioural guarantees of the public API",
        "integration: Component integration tests with scripted adapters",
        "security: Secrets never leak into logs or reprs",
        "allow_dotenv: Permit .env loading in this test",
        "allow_env_pollution: Keep the real environment in this test",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def pdf_document() -> Document:
    return Document(data=b"%PDF-1.4\n% test bill\n", mime_type="application/pdf", name="bill.pdf")


@pytest.fixture
def frozen_config() -> FrozenConfig:
    """Mock-mode configuration that does not depend on the environment."""
    return FrozenConfig(
        api_key=None,
        model=DEFAULT_MODEL,
        use_real_api=False,
        request_timeout_s=5.0,
        max_document_bytes=MAX_DOCUMENT_SIZE,
    )


@pytest.fixture
def scripted_adapter_factory():
    """Build a `ScriptedAdapter` from a list of responses."""

    def _make(*responses, default=None) -> ScriptedAdapter:
        return ScriptedAdapter(responses, default=default)

    return _make
