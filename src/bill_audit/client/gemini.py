"""Adapter for the Google Gemini API (``google-genai``)."""

import logging

from google import genai
from google.genai import types

from ..constants import DEFAULT_MODEL
from ..core.types import Document
from ..exceptions import MissingKeyError
from .error_handler import GenerationErrorHandler

log = logging.getLogger(__name__)


class GeminiAdapter:
    """Sends the instruction and the inline document to Gemini.

    Examples:
        adapter = GeminiAdapter(api_key, model="gemini-2.5-flash")
        text = await adapter.generate(PRIMARY_PROMPT, document)
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        client: genai.Client | None = None,
        error_handler: GenerationErrorHandler | None = None,
    ):
        if client is None:
            if not api_key:
                raise MissingKeyError(
                    "A Gemini API key is required. Set BILL_AUDIT_API_KEY or "
                    "GEMINI_API_KEY."
                )
            client = genai.Client(api_key=api_key)
        self.model = model
        self._client = client
        self._error_handler = error_handler or GenerationErrorHandler()

    def _build_contents(self, prompt: str, document: Document) -> list[object]:
        return [
            prompt,
            types.Part.from_bytes(
                data=document.data, mime_type=document.normalized_mime_type
            ),
        ]

    async def generate(self, prompt: str, document: Document) -> str:
        """Return the text of Gemini's answer, or "" when it has none.

        Raises:
            TransportError: If the SDK call fails.
        """
        log.debug(
            "Calling %s with a %d-byte %s document",
            self.model,
            document.size_bytes,
            document.normalized_mime_type,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=self._build_contents(prompt, document),
            )
        except Exception as e:
            self._error_handler.handle_generation_error(
                e, model=self.model, mime_type=document.normalized_mime_type
            )

        text = response.text or ""
        log.debug("Received %d characters from %s", len(text), self.model)
        return text
