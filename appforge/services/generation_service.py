from typing import Callable

import httpx

from appforge.core.config import Settings
from appforge.core.errors import ParsingError
from appforge.core.security import require_google_key
from appforge.llms.base import BaseLLM
from appforge.llms.gemini_client import GeminiClient
from appforge.llms.router import get_strategy
from appforge.prompts.builder import build_prompt
from appforge.schemas.request import GenerationRequest
from appforge.schemas.response import GenerationResponse
from appforge.services.recovery import recover, strip_fences
from appforge.utils.logger import logger
from appforge.utils.text import preview

ClientFactory = Callable[[str, Settings], BaseLLM]


def make_client_factory(transport: httpx.AsyncBaseTransport | None = None) -> ClientFactory:
    """Build Gemini clients from settings; ``transport`` overrides the network layer."""

    def factory(api_key: str, settings: Settings) -> BaseLLM:
        return GeminiClient(
            api_key=api_key,
            base_url=settings.base_url,
            max_output_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
            error_preview_chars=settings.error_preview_chars,
            transport=transport,
        )

    return factory


default_client_factory = make_client_factory()


class GenerationService:
    """One app idea in, one artifact (or one error) out."""

    def __init__(self, settings: Settings, client_factory: ClientFactory = default_client_factory) -> None:
        self.settings = settings
        self._client_factory = client_factory

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        # Fails before any network call when the key is absent.
        api_key = require_google_key(self.settings)
        strategy = get_strategy(self.settings)
        prompt = build_prompt(request.message, request.prompt, self.settings.include_category)

        client = self._client_factory(api_key, self.settings)
        try:
            result = await strategy.invoke(client, prompt)
        finally:
            await client.close()

        artifact = recover(result.text)
        if artifact is None:
            cleaned = strip_fences(result.text)
            logger.warning("generation_failed", extra={"model": result.model, "reason": "parsing"})
            raise ParsingError(
                details="AI output was not valid code.",
                debug=preview(cleaned, self.settings.debug_preview_chars),
            )
        return GenerationResponse(reply=artifact, model=result.model or None)
