# =============================================================================
# appforge/llms/gemini_client.py - Google Generative Language API client
# =============================================================================
# One generateContent call per generate(); no retries here, the invoker
# strategies in router.py decide what happens after a failed attempt.
# Non-2xx answers come back as a ProviderCallResult carrying the truncated
# error body; transport failures and unreadable bodies raise ProviderError.
# =============================================================================

import httpx

from appforge.core.errors import ProviderError
from appforge.llms.base import BaseLLM, ModelInfo, ProviderCallResult
from appforge.utils.text import preview

GENERATE_METHOD = "generateContent"


def _first(value) -> dict:
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def extract_text(data: dict) -> str:
    """candidates[0].content.parts[0].text, or "" when any level is missing."""
    if not isinstance(data, dict):
        return ""
    content = _first(data.get("candidates")).get("content")
    if not isinstance(content, dict):
        return ""
    text = _first(content.get("parts")).get("text")
    return text if isinstance(text, str) else ""


class GeminiClient(BaseLLM):
    def __init__(
        self,
        api_key: str,
        base_url: str,
        max_output_tokens: int = 4096,
        temperature: float = 0.7,
        timeout: float = 60.0,
        error_preview_chars: int = 300,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._max_output_tokens = max_output_tokens
        self._temperature = min(2.0, max(0.0, temperature))
        self._timeout = timeout
        self._error_preview_chars = error_preview_chars
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _redact(self, message: str) -> str:
        if not self._api_key:
            return message
        return message.replace(self._api_key, "***")

    def build_payload(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": self._max_output_tokens,
                "temperature": self._temperature,
            },
        }

    async def generate(self, model: str, prompt: str) -> ProviderCallResult:
        client = await self._get_client()
        url = f"{self._base_url}/models/{model}:{GENERATE_METHOD}"
        try:
            r = await client.post(url, params={"key": self._api_key}, json=self.build_payload(prompt))
        except httpx.RequestError as e:
            raise ProviderError(model, None, f"Gemini API unreachable: {self._redact(str(e))}") from e
        if not r.is_success:
            return ProviderCallResult(
                model=model,
                status_code=r.status_code,
                error=preview(r.text, self._error_preview_chars),
            )
        try:
            data = r.json()
        except ValueError as e:
            raise ProviderError(
                model,
                r.status_code,
                f"Gemini API returned unreadable body: {preview(r.text, self._error_preview_chars)}",
            ) from e
        return ProviderCallResult(model=model, status_code=r.status_code, text=extract_text(data))

    async def list_models(self) -> list[ModelInfo]:
        client = await self._get_client()
        r = await client.get(f"{self._base_url}/models", params={"key": self._api_key})
        r.raise_for_status()
        data = r.json()
        if not isinstance(data, dict):
            raise ValueError("model listing is not a JSON object")
        listed = data.get("models") or []
        if not isinstance(listed, list):
            raise ValueError("model listing has no models array")
        models = []
        for item in listed:
            if not isinstance(item, dict) or not isinstance(item.get("name"), str):
                continue
            name = item["name"]
            if name.startswith("models/"):
                name = name[len("models/"):]
            if not name:
                continue
            methods = item.get("supportedGenerationMethods") or ()
            if not isinstance(methods, (list, tuple)):
                methods = ()
            methods = tuple(m for m in methods if isinstance(m, str))
            models.append(ModelInfo(name=name, supported_generation_methods=methods))
        return models
