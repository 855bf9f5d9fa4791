"""Tag string tokenization.

Tags arrive as free-form text such as ``foo, "bar, baz", qux``:
- commas separate tags
- a tag wrapped in ``"`` or ``'`` may contain commas and keeps its inner
  whitespace verbatim
- ``\\"`` and ``\\'`` are literal quote characters, never delimiters
- a single quote only opens a quoted tag at the start of a tag or after a
  space, so apostrophes (``don't``) are plain text
"""

from typing import Sequence

from quill.domain.error import ValidationError

QUOTES = ('"', "'")

# Escaped quotes are swapped for private-use placeholders while scanning.
_ESCAPES = {'\\"': "\ue000", "\\'": "\ue001"}
_UNESCAPES = {"\ue000": '"', "\ue001": "'"}


def _closing_quote(text: str, start: int) -> int:
    """Index of the quote closing the one at ``start``, or -1.

    A closing quote must be followed by a non-word character or the end of
    the text.
    """
    quote = text[start]
    pos = text.find(quote, start + 1)
    while pos != -1:
        if pos + 1 == len(text) or not (text[pos + 1].isalnum() or text[pos + 1] == "_"):
            return pos
        pos = text.find(quote, pos + 1)
    return -1


def _opens_quote(text: str, pos: int, buffer: list[str]) -> bool:
    char = text[pos]
    if char == '"':
        return True
    if char == "'":
        return not "".join(buffer).strip() or text[pos - 1] == " "
    return False


def _unwrap(tag: str) -> str:
    tag = tag.strip()
    # Only a single quoted span covering the whole tag is unwrapped
    if len(tag) >= 2 and tag[0] in QUOTES and _closing_quote(tag, 0) == len(tag) - 1:
        tag = tag[1:-1]
    for placeholder, quote in _UNESCAPES.items():
        tag = tag.replace(placeholder, quote)
    return tag


def tokenize_tags(raw: str | Sequence[str]) -> list[str]:
    """Split a free-form tag string into an ordered list of tags.

    Args:
        raw: Tag text, or an already tokenized sequence of tags

    Returns:
        Tags in input order; a sequence input is returned as a list
        without re-tokenizing. Blank tags are dropped.

    Raises:
        ValidationError: If raw is neither a string nor a sequence of strings
    """
    if isinstance(raw, str):
        pass
    elif isinstance(raw, Sequence) and all(isinstance(t, str) for t in raw):
        return list(raw)
    else:
        raise ValidationError(f"Tags must be a string or a list of strings, got {raw!r}")

    text = raw
    for escape, placeholder in _ESCAPES.items():
        text = text.replace(escape, placeholder)

    tags: list[str] = []
    buffer: list[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == ",":
            tags.append("".join(buffer))
            buffer = []
        elif _opens_quote(text, pos, buffer) and (end := _closing_quote(text, pos)) != -1:
            buffer.append(text[pos : end + 1])
            pos = end
        else:
            buffer.append(char)
        pos += 1
    tags.append("".join(buffer))

    unwrapped = (_unwrap(tag) for tag in tags)
    return [tag for tag in unwrapped if tag.strip()]


def join_tags(tags: Sequence[str]) -> str:
    """Join tags into text that tokenizes back to the same tags.

    Tags holding commas, quotes or edge whitespace are quoted.
    """
    parts = []
    for tag in tags:
        needs_quotes = (
            "," in tag or '"' in tag or "'" in tag or tag != tag.strip()
        )
        if not needs_quotes:
            parts.append(tag)
        elif '"' not in tag:
            parts.append(f'"{tag}"')
        elif "'" not in tag:
            parts.append(f"'{tag}'")
        else:
            escaped = tag.replace('"', '\\"')
            parts.append(f'"{escaped}"')
    return ", ".join(parts)
