"""Query-relevant excerpt extraction with an OpenAI chat model."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, List

import openai

from sharefinder.utils.text import DEFAULT_MAX_WINDOW_TOKENS, window_text

if TYPE_CHECKING:
    from sharefinder.config import AppConfig

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
NO_INFORMATION = "No information provided"
ERROR_PREFIX = "Error processing text with OpenAI: "

SYSTEM_PROMPT = (
    "You are a helpful assistant that finds relevant content in text based on a query. "
    "You only return the relevant sentences, and you return a maximum of {max_sentences} "
    "sentences"
)
USER_PROMPT = (
    'Based on this question: **"{query}"**, get the relevant parts from the following '
    "text:*****\n\n{text}*****. If you cannot answer the question based on the text, "
    "respond with '" + NO_INFORMATION + "'"
)


class RelevanceExtractor:
    """Distills the sentences of a document that answer a question.

    Pass ``client`` to share an existing :class:`openai.AsyncOpenAI`; otherwise
    the extractor builds one and closes it in :meth:`aclose`.
    """

    def __init__(
        self,
        *,
        model_name: str = DEFAULT_MODEL,
        max_window_tokens: int = DEFAULT_MAX_WINDOW_TOKENS,
        max_excerpt_sentences: int = 10,
        max_completion_tokens: int = 1000,
        window_concurrency: int = 4,
        client: openai.AsyncOpenAI | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self.model_name = model_name
        self.max_window_tokens = max_window_tokens
        self.max_excerpt_sentences = max_excerpt_sentences
        self.max_completion_tokens = max_completion_tokens
        self.window_concurrency = window_concurrency
        self._owns_client = client is None
        self._client = client or openai.AsyncOpenAI(api_key=api_key, base_url=base_url)

    @classmethod
    def from_config(
        cls, config: "AppConfig", client: openai.AsyncOpenAI | None = None
    ) -> "RelevanceExtractor":
        return cls(
            model_name=config.model_name,
            max_window_tokens=config.max_window_tokens,
            max_excerpt_sentences=config.max_excerpt_sentences,
            max_completion_tokens=config.max_completion_tokens,
            window_concurrency=config.window_concurrency,
            client=client,
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
        )

    async def __aenter__(self) -> "RelevanceExtractor":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.close()

    async def extract(self, text: str, query: str) -> str:
        """Return the relevant sentences of one window, or an error marker."""
        try:
            response = await self._client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {
                        "role": "system",
                        "content": SYSTEM_PROMPT.format(max_sentences=self.max_excerpt_sentences),
                    },
                    {"role": "user", "content": USER_PROMPT.format(query=query, text=text)},
                ],
                temperature=0,
                max_tokens=self.max_completion_tokens,
            )
        except openai.OpenAIError as exc:
            LOGGER.error("Error with OpenAI: %s", exc)
            return ERROR_PREFIX + str(exc)

        if not response.choices:
            LOGGER.warning("OpenAI returned no choices for a window")
            return NO_INFORMATION
        content = response.choices[0].message.content
        return content if content is not None else NO_INFORMATION

    async def extract_document(self, text: str, query: str) -> str:
        """Extract per window and join the excerpts in window order."""
        windows = window_text(text, max_tokens=self.max_window_tokens)
        if not windows:
            return NO_INFORMATION

        semaphore = asyncio.Semaphore(self.window_concurrency)

        async def _bounded(window: str) -> str:
            async with semaphore:
                return await self.extract(window, query)

        LOGGER.debug("Extracting from %s window(s)", len(windows))
        excerpts: List[str] = await asyncio.gather(*(_bounded(window) for window in windows))
        return "\n".join(excerpts)
