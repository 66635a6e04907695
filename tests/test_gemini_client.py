import json

import httpx
import pytest

from appforge.core.errors import ProviderError
from appforge.llms.gemini_client import GeminiClient, extract_text


def test_extract_text_handles_missing_levels(candidate_body):
    assert extract_text(candidate_body("hi")) == "hi"
    assert extract_text({}) == ""
    assert extract_text({"candidates": []}) == ""
    assert extract_text({"candidates": [{"content": {}}]}) == ""
    assert extract_text({"candidates": [{"content": {"parts": [{}]}}]}) == ""


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": {"x": 1}},
        {"candidates": ["not an object"]},
        {"candidates": [{"content": "text"}]},
        {"candidates": [{"content": {"parts": {"0": {"text": "x"}}}}]},
        {"candidates": [{"content": {"parts": ["x"]}}]},
        {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
        ["candidates"],
    ],
)
def test_extract_text_tolerates_malformed_bodies(body):
    assert extract_text(body) == ""


@pytest.mark.asyncio
async def test_generate_sends_expected_payload(make_fake, client_for, candidate_body):
    fake = make_fake(responses={"model-a": (200, candidate_body("raw text"))})
    client = client_for(fake, max_output_tokens=4096, temperature=0.7)
    try:
        result = await client.generate("model-a", "build me an app")
    finally:
        await client.close()

    assert result.ok
    assert result.text == "raw text"
    request = fake.requests[0]
    assert request.url.path == "/v1beta/models/model-a:generateContent"
    assert request.url.params["key"] == "test-key"
    body = json.loads(request.content)
    assert body == {
        "contents": [{"parts": [{"text": "build me an app"}]}],
        "generationConfig": {"maxOutputTokens": 4096, "temperature": 0.7},
    }


@pytest.mark.asyncio
async def test_generate_returns_truncated_error_on_failure(make_fake, client_for):
    fake = make_fake(responses={"model-a": (500, "x" * 1000)})
    client = client_for(fake, error_preview_chars=50)
    try:
        result = await client.generate("model-a", "p")
    finally:
        await client.close()

    assert not result.ok
    assert result.status_code == 500
    assert result.error == "x" * 50


@pytest.mark.asyncio
async def test_generate_raises_on_unreadable_body(make_fake, client_for):
    fake = make_fake(responses={"model-a": (200, "<not json>")})
    client = client_for(fake)
    with pytest.raises(ProviderError):
        await client.generate("model-a", "p")
    await client.close()


@pytest.mark.asyncio
async def test_generate_raises_on_transport_error():
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    client = GeminiClient(
        api_key="SECRET-KEY-123",
        base_url="https://gemini.test/v1beta",
        transport=httpx.MockTransport(boom),
    )
    with pytest.raises(ProviderError) as info:
        await client.generate("model-a", "p")
    await client.close()
    assert "unreachable" in info.value.details
    assert "SECRET-KEY-123" not in info.value.details


@pytest.mark.asyncio
async def test_list_models_strips_prefix(make_fake, client_for):
    fake = make_fake(
        models=[
            {"name": "models/embedding-001", "supportedGenerationMethods": ["embedContent"]},
            {"name": "models/gemini-pro", "supportedGenerationMethods": ["generateContent"]},
        ]
    )
    client = client_for(fake)
    try:
        models = await client.list_models()
    finally:
        await client.close()

    assert [m.name for m in models] == ["embedding-001", "gemini-pro"]
    assert not models[0].supports("generateContent")
    assert models[1].supports("generateContent")


@pytest.mark.asyncio
async def test_list_models_skips_malformed_entries(make_fake, client_for):
    fake = make_fake(
        models=[
            "gemini-pro",
            {"name": 7},
            {"name": "models/gemini-flash", "supportedGenerationMethods": "generateContent"},
            {"name": "models/gemini-ok", "supportedGenerationMethods": ["generateContent"]},
        ]
    )
    client = client_for(fake)
    try:
        models = await client.list_models()
    finally:
        await client.close()

    assert [m.name for m in models] == ["gemini-flash", "gemini-ok"]
    assert not models[0].supports("generateContent")
    assert models[1].supports("generateContent")
