"""Model adapter protocol and the bounded call helper."""

import asyncio
import logging
from typing import Protocol, runtime_checkable

from ..core.types import Document
from ..exceptions import TransportError

log = logging.getLogger(__name__)


@runtime_checkable
class GenerationAdapter(Protocol):
    """Text-in/text-out contract for the hosted model.

    Implementations send the instruction and the document together and
    return the model's raw answer. No structure is guaranteed; callers run
    the text through extraction and sanitizing.
    """

    async def generate(self, prompt: str, document: Document) -> str:
        """Return the raw model text for ``prompt`` applied to ``document``.

        Raises:
            TransportError: If the model cannot be reached or rejects the call.
        """
        ...


async def bounded_generate(
    adapter: GenerationAdapter,
    prompt: str,
    document: Document,
    *,
    timeout_s: float,
) -> str:
    """Call ``adapter`` with an upper bound on the wait.

    Raises:
        TransportError: If the call fails or takes longer than ``timeout_s``.
    """
    try:
        return await asyncio.wait_for(
            adapter.generate(prompt, document), timeout=timeout_s
        )
    except TimeoutError as e:
        log.warning("Model call timed out after %.1fs", timeout_s)
        raise TransportError(
            f"Model call timed out after {timeout_s:g}s. "
            "Increase request_timeout_s or retry later."
        ) from e
