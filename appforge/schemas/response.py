from pydantic import BaseModel, ConfigDict


class GeneratedArtifact(BaseModel):
    # Strictly parsed replies are passed through as-is, extra keys included.
    model_config = ConfigDict(extra="allow")

    code: str
    icon: str | None = None
    category: str | None = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_unset=True)


class GenerationResponse(BaseModel):
    reply: GeneratedArtifact
    model: str | None = None

    def to_dict(self) -> dict:
        payload = {"reply": self.reply.to_dict()}
        if self.model:
            payload["model"] = self.model
        return payload


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    debug: str | None = None
