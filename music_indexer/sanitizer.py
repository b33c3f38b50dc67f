"""Normalization of free-text metadata into filesystem-safe path components."""

UNKNOWN = "Unknown"

REPLACED_CHARACTERS = {"/", "\\", "\0", ":"}
COLLAPSED_CHARACTERS = {" ", "_"}


def sanitize_component(text):
    """Turn free text into a single filesystem-safe path component.

    Path separators, NUL, colons and control characters become underscores,
    runs of spaces/underscores are collapsed to their first character and
    surrounding whitespace is trimmed.

    Args:
        text: Raw text, may be None or empty

    Returns:
        Non-empty sanitized string, "Unknown" when nothing usable remains
    """
    text = (text or "").strip()
    if not text:
        return UNKNOWN

    replaced = [
        "_" if ch in REPLACED_CHARACTERS or ord(ch) < 32 else ch for ch in text
    ]

    collapsed = []
    for ch in replaced:
        if (
            ch in COLLAPSED_CHARACTERS
            and collapsed
            and collapsed[-1] in COLLAPSED_CHARACTERS
        ):
            continue
        collapsed.append(ch)

    result = "".join(collapsed).strip()
    return result or UNKNOWN
