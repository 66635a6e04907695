from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from appforge.core.config import get_settings
from appforge.core.errors import GenerationError, MethodNotAllowed
from appforge.core.security import key_status
from appforge.schemas.request import GenerationRequest
from appforge.schemas.response import ErrorResponse
from appforge.services.generation_service import GenerationService
from appforge.utils.logger import logger

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Content-Type": "application/json",
}

# Methods listed here reach chat(); any other verb is turned into the same
# 405 envelope by method_not_allowed_handler.
CHAT_PATH = "/api/chat"
CHAT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

app = FastAPI(title="App Idea Generator")


def get_generation_service() -> GenerationService:
    return GenerationService(get_settings())


def _json(payload: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)


def _error(exc: GenerationError) -> JSONResponse:
    body = ErrorResponse(**exc.to_payload())
    return _json(body.model_dump(exclude_none=True), status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405 and request.url.path == CHAT_PATH:
        return _error(MethodNotAllowed())
    return await http_exception_handler(request, exc)


@app.get("/")
async def root():
    return {"message": "App Idea Generator API", "docs": "/docs", "health": "/health", "generate": "POST /api/chat"}


@app.get("/health")
async def get_health():
    s = get_settings()
    provider = key_status(s)
    return {
        "status": "ok" if provider == "configured" else "degraded",
        "provider": provider,
        "strategy": s.strategy,
    }


@app.api_route(CHAT_PATH, methods=CHAT_METHODS)
async def chat(request: Request, service: GenerationService = Depends(get_generation_service)):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    if request.method != "POST":
        return _error(MethodNotAllowed())

    try:
        body = await request.json()
        gen_request = GenerationRequest.model_validate(body if isinstance(body, dict) else {})
        result = await service.generate(gen_request)
    except GenerationError as e:
        logger.warning("request_failed", extra={"error": e.error, "status": e.status_code})
        return _error(e)
    except Exception as e:
        logger.exception("unhandled_error")
        return _json({"error": f"Server Error: {e}"}, status_code=500)

    return _json(result.to_dict())
