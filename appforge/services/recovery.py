# =============================================================================
# appforge/services/recovery.py - Turn raw model text into a GeneratedArtifact
# =============================================================================
# Ladder, first hit wins:
#   1. strict JSON object with a string "code"
#   2. <!DOCTYPE html ... </html> cut out of the text, default icon
#   3. anything that looks like markup (<html + body), whole text as code
# Each rung is a pure function (text) -> GeneratedArtifact | None.
# =============================================================================

import json
import re

from pydantic import ValidationError

from appforge.schemas.response import GeneratedArtifact
from appforge.utils.logger import logger

DOC_START = "<!DOCTYPE html"
DOC_END = "</html>"

DEFAULT_ICON = (
    '<svg viewBox="0 0 100 100" xmlns="http://www.w3.org/2000/svg">'
    '<rect width="100" height="100" fill="#333"/>'
    '<text x="50" y="55" font-size="50" text-anchor="middle" dy=".3em">\U0001F3AE</text>'
    "</svg>"
)

_LEADING_FENCE = re.compile(r"^```(?:json|html)?\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


def strip_fences(text: str) -> str:
    cleaned = (text or "").strip()
    while True:
        stripped = _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", cleaned, count=1), count=1).strip()
        if stripped == cleaned:
            return cleaned
        cleaned = stripped


def parse_strict(text: str) -> GeneratedArtifact | None:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        logger.warning("json_parse_failed", extra={"length": len(text)})
        return None
    if not isinstance(data, dict) or not isinstance(data.get("code"), str):
        return None
    # Keys the model left out stay unset, so they are omitted on output.
    try:
        return GeneratedArtifact.model_validate(data)
    except ValidationError:
        logger.warning("json_shape_mismatch", extra={"keys": sorted(data)})
        return None


def extract_document(text: str) -> GeneratedArtifact | None:
    start = text.find(DOC_START)
    end = text.rfind(DOC_END)
    if start == -1 or end == -1 or start >= end:
        return None
    return GeneratedArtifact(code=text[start:end + len(DOC_END)], icon=DEFAULT_ICON)


def loose_markup(text: str) -> GeneratedArtifact | None:
    if "<html" in text and "body" in text:
        return GeneratedArtifact(code=text, icon="")
    return None


RECOVERY_LADDER = (parse_strict, extract_document, loose_markup)


def recover(raw: str) -> GeneratedArtifact | None:
    """Strip fences, then walk the ladder. None when every rung misses."""
    cleaned = strip_fences(raw)
    for rung in RECOVERY_LADDER:
        artifact = rung(cleaned)
        if artifact is not None:
            logger.info("recovered", extra={"rung": rung.__name__})
            return artifact
    return None
