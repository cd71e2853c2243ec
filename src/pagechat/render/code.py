"""Code block classification.

Hides how a fence's language tag and text are turned into a highlighter
and a handler tag. Runs once per block at parse time so that no other
module inspects language strings.
"""

import re
from functools import lru_cache

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .blocks import CodeKind

PLAIN_LEXER = "text"

_LANGUAGE_RE = re.compile(r"\w+")
_DOCUMENT_MARKERS = ("<!doctype html>", "<html")


def language_from_info(info: str) -> str | None:
    """Extract the language tag from a fence info string.

    The tag is the leading word characters of the first token, so
    "python {linenos}" gives "python" and "c++" gives "c".
    """
    parts = info.split(maxsplit=1)
    if not parts:
        return None
    match = _LANGUAGE_RE.match(parts[0])
    return match.group(0) if match else None


@lru_cache(maxsize=256)
def resolve_lexer(language: str | None) -> str:
    """Map a language tag to a Pygments lexer alias, or plain text."""
    if not language:
        return PLAIN_LEXER
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        return PLAIN_LEXER
    return lexer.aliases[0] if lexer.aliases else PLAIN_LEXER


def is_previewable(language: str | None, text: str) -> bool:
    """Judge whether a code block holds a renderable HTML document.

    True when the tag is "html", or the text carries a full-document
    marker (<!DOCTYPE html> or an opening <html tag). Case-insensitive.
    """
    if language and language.lower() == "html":
        return True
    lowered = text.lower()
    return any(marker in lowered for marker in _DOCUMENT_MARKERS)


def classify_code(language: str | None, text: str) -> tuple[str, CodeKind]:
    """Resolve the highlighter and handler tag for one code block.

    Returns:
        Tuple of (lexer alias, kind)
    """
    lexer = resolve_lexer(language)
    if is_previewable(language, text):
        # an untagged page is still highlighted as markup
        return (lexer if lexer != PLAIN_LEXER else "html"), CodeKind.HTML_DOCUMENT
    if lexer == PLAIN_LEXER:
        return lexer, CodeKind.PLAIN
    return lexer, CodeKind.SOURCE
