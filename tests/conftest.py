import httpx
import pytest
from fastapi.testclient import TestClient

from appforge.core.config import Settings
from appforge.llms.gemini_client import GeminiClient
from appforge.main import app, get_generation_service
from appforge.services.generation_service import GenerationService, make_client_factory

BASE_URL = "https://gemini.test/v1beta"


def _candidate_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGemini:
    """In-process stand-in for the Generative Language API.

    ``responses`` maps model name -> (status, body); unknown models get 404.
    """

    def __init__(self, responses=None, models=None, list_status: int = 200) -> None:
        self.responses = responses or {}
        self.models = models or []
        self.list_status = list_status
        self.calls: list[str] = []
        self.requests: list[httpx.Request] = []
        self.list_calls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path.endswith("/models"):
            self.list_calls += 1
            if self.list_status != 200:
                return httpx.Response(self.list_status, text="listing unavailable")
            return httpx.Response(200, json={"models": self.models})
        model = path.rsplit("/", 1)[-1].split(":", 1)[0]
        self.calls.append(model)
        status, body = self.responses.get(model, (404, "model not found"))
        if isinstance(body, dict):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def candidate_body():
    return _candidate_body


@pytest.fixture
def make_fake():
    return FakeGemini


@pytest.fixture
def client_for():
    """GeminiClient whose requests all go to the given FakeGemini."""

    def _make(fake: FakeGemini, api_key: str = "test-key", **kwargs) -> GeminiClient:
        return GeminiClient(api_key=api_key, base_url=BASE_URL, transport=fake.transport, **kwargs)

    return _make


@pytest.fixture
def settings():
    return Settings(
        google_api_key="test-key",
        base_url=BASE_URL,
        strategy="scan",
        model_candidates=("model-a", "model-b", "model-c"),
        default_model="model-default",
    )


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def make_service(fake_gemini):
    def _make(settings: Settings) -> GenerationService:
        return GenerationService(settings, make_client_factory(fake_gemini.transport))

    return _make


@pytest.fixture
def api_client(settings, make_service):
    app.dependency_overrides[get_generation_service] = lambda: make_service(settings)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
