"""Model adapters: Gemini, the scripted mock, and error mapping."""

from .base import GenerationAdapter, bounded_generate
from .error_handler import GenerationErrorHandler
from .factory import create_adapter
from .gemini import GeminiAdapter
from .mock import (
    SAMPLE_ANALYSIS,
    SAMPLE_METRICS,
    ScriptedAdapter,
    ScriptedCall,
    sample_response,
)

__all__ = [
    "SAMPLE_ANALYSIS",
    "SAMPLE_METRICS",
    "GeminiAdapter",
    "GenerationAdapter",
    "GenerationErrorHandler",
    "ScriptedAdapter",
    "ScriptedCall",
    "bounded_generate",
    "create_adapter",
    "sample_response",
]
