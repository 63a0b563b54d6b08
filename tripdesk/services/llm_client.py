"""
LLM Client - Unified interface for multiple LLM providers.
Supports OpenAI, OpenRouter, Ollama and an offline mock.
"""
from dataclasses import dataclass, field
from openai import AsyncOpenAI
from typing import Optional
import json
import logging
import re

from ..config import get_llm_config, settings

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    """Assistant text plus the token usage reported by the provider."""
    content: str
    model: str
    usage: dict = field(default_factory=dict)


class LLMClient:
    """Async LLM client with OpenAI-compatible API."""

    def __init__(self):
        config = get_llm_config()
        self.temperature = config["temperature"]

        # Use mock client if provider is 'mock'
        if settings.llm_provider == "mock":
            from .mock_llm import MockLLMClient
            self._mock = MockLLMClient()
            self.client = None
        else:
            self._mock = None
            self.client = AsyncOpenAI(
                api_key=config["api_key"],
                base_url=config["base_url"]
            )

    async def complete(
        self,
        messages: list[dict],
        model: str,
        max_tokens: int,
        temperature: Optional[float] = None,
        json_mode: bool = False
    ) -> Completion:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model name to request
            max_tokens: Completion token budget
            temperature: Override default temperature
            json_mode: If True, request JSON response format

        Returns:
            The assistant's response content and usage
        """
        if self._mock is not None:
            return await self._mock.complete(messages, model, max_tokens, json_mode)

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature or self.temperature,
            "max_tokens": max_tokens,
        }

        # JSON mode support (not all providers support this)
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ValueError(f"No content received from {model}")

        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        return Completion(content=content, model=model, usage=usage)

    async def chat_json(
        self,
        messages: list[dict],
        model: str,
        max_tokens: int,
        temperature: Optional[float] = None
    ) -> tuple[dict, Completion]:
        """
        Send a chat request and parse JSON response.

        Raises ValueError when the reply holds no JSON object.
        """
        completion = await self.complete(
            messages=messages,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            json_mode=True
        )
        data = extract_json(completion.content)
        if not data:
            raise ValueError("Invalid JSON response from AI")
        return data, completion


FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def _json_candidates(text: str):
    yield text
    fenced = FENCED_JSON.search(text)
    if fenced:
        yield fenced.group(1).strip()
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        yield text[start:end + 1]


def extract_json(text: str) -> dict:
    """
    Pull a JSON object out of a model reply.

    Models sometimes wrap the object in a markdown fence or surround it with
    prose; returns {} when nothing parses to an object.
    """
    for candidate in _json_candidates((text or "").strip()):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    logger.warning("Could not parse JSON from LLM response")
    return {}


# Global LLM client instance
llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the global LLM client."""
    global llm_client
    if llm_client is None:
        llm_client = LLMClient()
    return llm_client
