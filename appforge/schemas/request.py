from pydantic import BaseModel, field_validator


class GenerationRequest(BaseModel):
    message: str = ""
    prompt: str = ""  # supplementary detail, may be empty

    @field_validator("message", "prompt", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)
