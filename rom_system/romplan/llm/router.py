"""
Model invoker and it does:
- Serializes role-tagged prompt blocks for the configured backend
  (chat messages for Groq, one flat string for Hugging Face)
- Makes ONE bounded call per invoke (deadline + max output tokens)
- Translates transport failures into BackendUnavailable / BackendTimeout

Retries are the orchestrator's decision, never made here.

Main purpose:
Central interface for all model calls.
"""


import asyncio
from typing import Any, Optional, Sequence

import httpx

from romplan.core.config import Settings
from romplan.core.errors import BackendTimeout, BackendUnavailable
from romplan.core.logging import get_logger
from romplan.llm.schemas import PromptBlock

log = get_logger("llm.router")


def render_blocks(blocks: Sequence[PromptBlock]) -> str:
    """Flatten chat blocks into a single prompt string for completion-style backends."""
    return "\n\n".join(f"{b.role}: {b.content}" for b in blocks if b.content)


def _raise_for_status(r: httpx.Response, provider: str) -> None:
    if r.status_code >= 400:
        raise BackendUnavailable(f"{provider} error {r.status_code}: {r.text[:300]}")


def _json_body(r: httpx.Response, provider: str) -> Any:
    try:
        return r.json()
    except ValueError:
        raise BackendUnavailable(f"{provider} returned non-JSON body: {r.text[:300]}")


class GroqChatBackend:
    name = "groq"

    def __init__(self, client: httpx.AsyncClient, *, api_key: str, base_url: str, model: str):
        self.client = client
        self.api_key = api_key
        self.base_url = base_url
        self.model = model

    async def complete(self, blocks: Sequence[PromptBlock], *, max_tokens: int) -> str:
        if not self.api_key:
            raise BackendUnavailable("Missing GROQ_API_KEY. Put it in your .env")

        url = f"{self.base_url.rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload = {
            "model": self.model,
            "messages": [b.model_dump() for b in blocks],
            "temperature": 0.2,
            "max_tokens": max_tokens,
        }
        r = await self.client.post(url, headers=headers, json=payload)
        _raise_for_status(r, "Groq")

        data = _json_body(r, "Groq")
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            raise BackendUnavailable(f"Unexpected Groq response: {data}")


class HFTextBackend:
    name = "hf"

    def __init__(self, client: httpx.AsyncClient, *, api_token: str, base_url: str, model: str):
        self.client = client
        self.api_token = api_token
        self.base_url = base_url
        self.model = model

    async def complete(self, blocks: Sequence[PromptBlock], *, max_tokens: int) -> str:
        url = f"{self.base_url.rstrip('/')}/models/{self.model}"
        headers = {"Authorization": f"Bearer {self.api_token}"} if self.api_token else {}
        payload = {
            "inputs": render_blocks(blocks),
            "parameters": {"max_new_tokens": max_tokens, "return_full_text": False},
        }
        r = await self.client.post(url, headers=headers, json=payload)
        _raise_for_status(r, "HF")

        data = _json_body(r, "HF")
        if isinstance(data, list) and data:
            data = data[0]
        if isinstance(data, dict) and isinstance(data.get("generated_text"), str):
            return data["generated_text"]
        raise BackendUnavailable(f"Unexpected HF response: {data}")


class MockBackend:
    """Canned text for no-key dev. Empty text makes every plan fall back."""

    name = "mock"

    def __init__(self, text: str = ""):
        self.text = text

    async def complete(self, blocks: Sequence[PromptBlock], *, max_tokens: int) -> str:
        return self.text


class ModelInvoker:
    def __init__(self, backend, *, timeout: Optional[float] = None):
        self.backend = backend
        self.timeout = timeout

    async def invoke(
        self,
        blocks: Sequence[PromptBlock],
        *,
        max_tokens: int,
        timeout: Optional[float] = None,
    ) -> str:
        deadline = self.timeout if timeout is None else timeout
        name = getattr(self.backend, "name", type(self.backend).__name__)
        try:
            return await asyncio.wait_for(
                self.backend.complete(blocks, max_tokens=max_tokens), deadline
            )
        except asyncio.TimeoutError:
            log.warning(f"{name} call exceeded {deadline}s deadline")
            raise BackendTimeout(f"{name} call exceeded {deadline}s deadline")
        except httpx.TimeoutException as e:
            log.warning(f"{name} transport timeout: {e!r}")
            raise BackendTimeout(f"{name} transport timeout: {e!r}") from e
        except httpx.HTTPError as e:
            log.warning(f"{name} call failed: {e!r}")
            raise BackendUnavailable(f"{name} call failed: {e!r}") from e


def build_backend(settings: Settings, client: httpx.AsyncClient):
    provider = (settings.LLM_PROVIDER or "").lower().strip()
    if provider == "groq":
        return GroqChatBackend(
            client,
            api_key=settings.GROQ_API_KEY,
            base_url=settings.GROQ_BASE_URL,
            model=settings.LLM_MODEL,
        )
    if provider == "hf":
        return HFTextBackend(
            client,
            api_token=settings.HF_API_TOKEN,
            base_url=settings.HF_BASE_URL,
            model=settings.HF_MODEL,
        )
    if provider == "mock":
        return MockBackend(settings.MOCK_RESPONSE)
    raise ValueError(f"Unsupported LLM_PROVIDER={settings.LLM_PROVIDER}. Use groq, hf or mock.")


def make_http_client(settings: Settings) -> httpx.AsyncClient:
    timeout = httpx.Timeout(settings.LLM_TIMEOUT_SECONDS, connect=settings.LLM_CONNECT_TIMEOUT_SECONDS)
    return httpx.AsyncClient(timeout=timeout)


def build_invoker(settings: Settings, client: httpx.AsyncClient) -> ModelInvoker:
    return ModelInvoker(build_backend(settings, client), timeout=settings.LLM_TIMEOUT_SECONDS)
