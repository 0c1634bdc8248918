"""Error handling for Gemini generation requests"""

from typing import NoReturn

from google.genai import errors as genai_errors

from ..exceptions import TransportError


class GenerationErrorHandler:
    """Maps SDK and network errors onto an informative `TransportError`"""

    def handle_generation_error(
        self,
        error: Exception,
        *,
        model: str,
        mime_type: str = "unknown",
    ) -> NoReturn:
        """Transform API errors into informative error messages"""
        error_str = str(error).lower()
        code = error.code if isinstance(error, genai_errors.APIError) else None

        if code in (401, 403) or "api key" in error_str or "api_key" in error_str:
            raise TransportError(
                "Gemini rejected the API key. Check BILL_AUDIT_API_KEY or "
                f"GEMINI_API_KEY. Original error: {error}",
            ) from error
        if code == 429 or "quota" in error_str or "resource_exhausted" in error_str:
            raise TransportError(
                f"Gemini quota or rate limit exceeded for {model}. Retry later. "
                f"Original error: {error}",
            ) from error
        if code == 404 or ("model" in error_str and "not found" in error_str):
            raise TransportError(
                f"Model {model!r} is not available. Original error: {error}",
            ) from error
        if "mime" in error_str or "unsupported" in error_str:
            raise TransportError(
                f"Gemini could not read the {mime_type} document. "
                f"Original error: {error}",
            ) from error
        if code == 504 or "deadline" in error_str or "timed out" in error_str:
            raise TransportError(
                f"Gemini did not answer in time. Original error: {error}",
            ) from error

        raise TransportError(
            f"Content generation failed for {mime_type}: {error}",
        ) from error
