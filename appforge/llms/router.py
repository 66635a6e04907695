# =============================================================================
# appforge/llms/router.py - Provider invocation strategies
# =============================================================================
# fixed    : one call to one model, provider errors surface immediately.
# scan     : walk an ordered candidate list, first success wins.
# discover : ask the provider which models exist, call the first one that
#            supports generateContent (static default when nothing fits).
# One strategy is active per process (Settings.strategy).
# =============================================================================

from dataclasses import dataclass

import httpx

from appforge.core.config import Settings
from appforge.core.errors import GenerationFailed, ProviderError, ProviderUnavailable
from appforge.llms.base import BaseLLM, ProviderCallResult
from appforge.llms.gemini_client import GENERATE_METHOD
from appforge.utils.logger import logger

# 404: model name unknown for this key. 503: model overloaded.
SKIP_STATUSES = (404, 503)


@dataclass
class InvocationResult:
    text: str
    model: str


def _raise_for_result(result: ProviderCallResult) -> None:
    if result.ok:
        return
    if result.status_code in SKIP_STATUSES:
        raise ProviderUnavailable(result.model, result.status_code)
    raise ProviderError(
        result.model,
        result.status_code,
        f"Gemini API error {result.status_code}: {result.error or ''}",
    )


class FixedEndpointStrategy:
    name = "fixed"

    def __init__(self, model: str) -> None:
        self.model = model

    async def invoke(self, client: BaseLLM, prompt: str) -> InvocationResult:
        logger.info("model_attempt", extra={"model": self.model, "strategy": self.name})
        result = await client.generate(self.model, prompt)
        try:
            _raise_for_result(result)
        except ProviderUnavailable as e:
            raise ProviderError(result.model, result.status_code, e.details) from e
        return InvocationResult(text=result.text, model=result.model)


class BoundedScanStrategy:
    """Try each candidate in order; stop at the first success.

    404 and 503 mean "try the next name". Every other failure is recorded
    as the last error and the scan moves on as well.
    """

    name = "scan"

    def __init__(self, candidates: tuple[str, ...]) -> None:
        if not candidates:
            raise ValueError("at least one candidate model is required")
        self.candidates = tuple(candidates)

    async def invoke(self, client: BaseLLM, prompt: str) -> InvocationResult:
        last_error = ""
        for model in self.candidates:
            logger.info("model_attempt", extra={"model": model, "strategy": self.name})
            try:
                result = await client.generate(model, prompt)
                _raise_for_result(result)
            except ProviderUnavailable as e:
                logger.warning("model_skipped", extra={"model": model, "status": e.provider_status})
                last_error = e.details
                continue
            except ProviderError as e:
                logger.warning("model_failed", extra={"model": model, "status": e.provider_status})
                last_error = e.details
                continue
            logger.info("model_selected", extra={"model": model, "strategy": self.name})
            return InvocationResult(text=result.text, model=model)
        raise GenerationFailed(details=f"All models failed. Last error: {last_error}")


class DiscoveryStrategy:
    name = "discover"

    def __init__(self, default_model: str) -> None:
        self.default_model = default_model

    async def select_model(self, client: BaseLLM) -> str:
        try:
            models = await client.list_models()
        except (httpx.HTTPError, ValueError) as e:
            # httpx messages embed the request URL, which carries the key.
            status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            logger.warning("discovery_failed", extra={"error": type(e).__name__, "status": status})
            return self.default_model
        for info in models:
            if info.supports(GENERATE_METHOD):
                return info.name
        logger.warning("discovery_empty", extra={"fallback": self.default_model})
        return self.default_model

    async def invoke(self, client: BaseLLM, prompt: str) -> InvocationResult:
        model = await self.select_model(client)
        logger.info("model_selected", extra={"model": model, "strategy": self.name})
        result = await client.generate(model, prompt)
        try:
            _raise_for_result(result)
        except ProviderUnavailable as e:
            raise ProviderError(result.model, result.status_code, e.details) from e
        return InvocationResult(text=result.text, model=model)


def get_strategy(settings: Settings):
    if settings.strategy == "scan":
        return BoundedScanStrategy(settings.model_candidates)
    if settings.strategy == "fixed":
        return FixedEndpointStrategy(settings.default_model)
    if settings.strategy == "discover":
        return DiscoveryStrategy(settings.default_model)
    raise ValueError(f"Unknown generation strategy: {settings.strategy}")
