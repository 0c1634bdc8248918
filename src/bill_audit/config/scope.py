"""Ambient configuration scoping.

A scope only affects `resolve_config()` calls made inside it. Once a
`FrozenConfig` is handed to the orchestrator, later scope changes are not
observed.
"""

from collections.abc import Generator
from contextlib import contextmanager
import contextvars
from typing import Any

from .types import ResolvedConfig

_ambient_resolved_config: contextvars.ContextVar[ResolvedConfig] = (
    contextvars.ContextVar("bill_audit_resolved_config")
)


def get_ambient_resolved_config() -> ResolvedConfig | None:
    """Return the config set by the innermost active scope, if any."""
    try:
        return _ambient_resolved_config.get()
    except LookupError:
        return None


@contextmanager
def config_scope(config: ResolvedConfig) -> Generator[None]:
    """Temporarily use ``config`` for configuration resolution.

    Example:
        base = resolve_config()
        with config_scope(base.with_overrides(model="gemini-2.5-pro")):
            text = await analyze_bill(payload, "application/pdf")
    """
    token = _ambient_resolved_config.set(config)
    try:
        yield
    finally:
        _ambient_resolved_config.reset(token)


@contextmanager
def config_override(**overrides: Any) -> Generator[None]:
    """Temporarily override individual fields of the current configuration."""
    base_config = get_ambient_resolved_config()
    if base_config is None:
        from .api import resolve_config

        base_config = resolve_config()
    with config_scope(base_config.with_overrides(**overrides)):
        yield
