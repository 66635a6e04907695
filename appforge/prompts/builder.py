# =============================================================================
# appforge/prompts/builder.py - Instruction text sent to the provider
# =============================================================================
# Output shape, fixed technical constraints, then the raw user request.
# =============================================================================

CATEGORIES = ("game", "defi", "nft", "social", "utility")

OUTPUT_SHAPE = '{ "code": "...", "icon": "..." }'
OUTPUT_SHAPE_WITH_CATEGORY = '{ "code": "...", "icon": "...", "category": "..." }'

PROMPT_TEMPLATE = """\
You are a High-Speed Web3 App Generator.
Return strictly valid JSON: {shape}

INSTRUCTIONS:
1. Write COMPACT, working code.
2. Combine CSS/JS into a single HTML document starting with <!DOCTYPE html>.
3. Dark Mode, Neon Style.
4. Include a 'START' overlay button; the game loop starts automatically once it is pressed.
5. Use Ethers.js: <script src="https://cdn.jsdelivr.net/npm/ethers@6/dist/ethers.umd.min.js"></script>
6. "icon" is a small inline SVG string (viewBox 0 0 100 100).
{category_rule}
USER REQUEST: """


def build_prompt(message: str, prompt: str, include_category: bool = True) -> str:
    """Build the provider instruction for one app idea.

    The user's ``message`` and ``prompt`` are appended verbatim at the end,
    in that order, even when empty.
    """
    if include_category:
        shape = OUTPUT_SHAPE_WITH_CATEGORY
        category_rule = f'7. "category" is exactly one of: {", ".join(CATEGORIES)}.\n'
    else:
        shape = OUTPUT_SHAPE
        category_rule = ""
    header = PROMPT_TEMPLATE.format(shape=shape, category_rule=category_rule)
    # User text never goes through str.format.
    return header + (message or "") + " " + (prompt or "")
