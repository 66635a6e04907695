def preview(text: str | None, limit: int) -> str:
    """First ``limit`` characters of ``text``; never the full payload."""
    if not text:
        return ""
    return text[: max(0, limit)]
