from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List

from openai import OpenAI


class CompletionClient(ABC):
    """Free-text completion boundary used for clustering and summaries."""

    @abstractmethod
    def complete(self, prompt: str, temperature: float) -> str:
        """Return the model's text for ``prompt``."""


class OpenAICompletionClient(CompletionClient):
    """Calls the OpenAI Responses API once per prompt, without retries."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 120.0) -> None:
        if not api_key:
            raise ValueError("OpenAICompletionClient requires an API key")
        self._client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model

    def complete(self, prompt: str, temperature: float) -> str:
        response = self._client.responses.create(model=self._model, input=prompt, temperature=temperature)
        return extract_output_text(response)


def extract_output_text(response: Any) -> str:
    text = getattr(response, "output_text", None)
    if isinstance(text, str):
        return text
    parts: List[str] = []
    for item in getattr(response, "output", None) or []:
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "output_text" and isinstance(getattr(content, "text", None), str):
                parts.append(content.text)
    return "\n".join(parts)
