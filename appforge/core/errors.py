# =============================================================================
# appforge/core/errors.py - Error taxonomy for the generation endpoint
# =============================================================================
# Every error that reaches the route boundary becomes a JSON envelope:
# {"error": ..., "details"?: ..., "debug"?: ...}
# =============================================================================


class GenerationError(Exception):
    status_code: int = 500
    error: str = "Server Error"

    def __init__(
        self,
        error: str | None = None,
        details: str | None = None,
        debug: str | None = None,
    ) -> None:
        if error is not None:
            self.error = error
        self.details = details
        self.debug = debug
        super().__init__(details or self.error)

    def to_payload(self) -> dict:
        payload = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        if self.debug is not None:
            payload["debug"] = self.debug
        return payload


class MethodNotAllowed(GenerationError):
    status_code = 405
    error = "Method Not Allowed"


class ConfigurationError(GenerationError):
    error = "Server Error: API Key missing."


class ProviderUnavailable(GenerationError):
    """404/503 for one candidate model. Only meaningful inside the scan."""

    error = "Provider Unavailable"

    def __init__(self, model: str, status_code: int) -> None:
        self.model = model
        self.provider_status = status_code
        super().__init__(details=f"{model} failed ({status_code})")


class ProviderError(GenerationError):
    error = "Provider Error"

    def __init__(self, model: str, status_code: int | None, message: str) -> None:
        self.model = model
        self.provider_status = status_code
        super().__init__(details=message)


class GenerationFailed(GenerationError):
    error = "Generation Failed"


class ParsingError(GenerationError):
    error = "Parsing Error"
