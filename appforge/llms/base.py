from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ProviderCallResult:
    """Outcome of one provider attempt. Discarded once recovery has run."""

    model: str
    status_code: int
    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass
class ModelInfo:
    name: str
    supported_generation_methods: tuple[str, ...] = ()

    def supports(self, method: str) -> bool:
        return method in self.supported_generation_methods


class BaseLLM(ABC):
    @abstractmethod
    async def generate(self, model: str, prompt: str) -> ProviderCallResult:
        ...

    @abstractmethod
    async def list_models(self) -> list[ModelInfo]:
        ...

    async def close(self) -> None:
        return None
