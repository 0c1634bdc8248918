"""Adapter selection from resolved configuration."""

import logging

from ..config import FrozenConfig
from ..exceptions import MissingKeyError
from .base import GenerationAdapter
from .gemini import GeminiAdapter
from .mock import ScriptedAdapter

log = logging.getLogger(__name__)


def create_adapter(config: FrozenConfig) -> GenerationAdapter:
    """Return the Gemini adapter when ``use_real_api`` is set, else the sample.

    Raises:
        MissingKeyError: If the real API is requested without an API key.
    """
    if not config.use_real_api:
        log.debug("use_real_api is off; answering with the scripted sample")
        return ScriptedAdapter.sample()
    if not config.api_key:
        raise MissingKeyError(
            "use_real_api is enabled but no API key is configured. Set "
            "BILL_AUDIT_API_KEY or GEMINI_API_KEY."
        )
    return GeminiAdapter(config.api_key, model=config.model)
