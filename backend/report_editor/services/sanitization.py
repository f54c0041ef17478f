"""Input sanitization applied to every user edit before it reaches the report model."""
import re
from typing import Optional

from report_editor.config import get_settings

# Tags the allow-list cleaner keeps, with the attributes they may carry.
ALLOWED_TAGS = frozenset({"b", "strong", "i", "em", "u", "br", "p", "span", "div"})
ALLOWED_ATTRIBUTES = frozenset({"class", "style"})

_SCRIPT_BLOCK_PATTERN = re.compile(r"<(script|style)[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_PATTERN = re.compile(r"<[^>]*>")
_CLEANER_TAG_PATTERN = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9-]*)([^>]*)>")
_ATTRIBUTE_PATTERN = re.compile(r"""([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*("[^"]*"|'[^']*'|[^\s"'>]+)""")

_JAVASCRIPT_SCHEME_PATTERN = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_PATTERN = re.compile(r"on\w+=", re.IGNORECASE)
_SCRIPT_SPAN_PATTERN = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_JAVASCRIPT_TAG_PATTERN = re.compile(r"<[^>]*javascript:[^>]*>", re.IGNORECASE)
_TAG_OPENER_PATTERN = re.compile(r"<(?=[a-zA-Z/!?])")

_NON_NUMERIC_PATTERN = re.compile(r"[^0-9,.\-()\s]")
_NON_ABN_PATTERN = re.compile(r"[^0-9\s]")


def _clean_tag(match: re.Match) -> str:
    closing, name, attributes = match.groups()
    tag = name.lower()
    if tag not in ALLOWED_TAGS:
        return ""
    if closing:
        return f"</{tag}>"

    kept = [
        f"{attr.lower()}={value}"
        for attr, value in _ATTRIBUTE_PATTERN.findall(attributes)
        if attr.lower() in ALLOWED_ATTRIBUTES
    ]
    return f"<{tag}{''.join(' ' + item for item in kept)}>"


def allow_list_clean(value: str) -> str:
    """
    Drop every tag outside ``ALLOWED_TAGS`` and every attribute outside
    ``ALLOWED_ATTRIBUTES``.

    Args:
        value: Text that may contain markup

    Returns:
        Text with only allow-listed inline formatting tags left
    """
    return _CLEANER_TAG_PATTERN.sub(_clean_tag, value)


def _remove_dangerous_patterns(value: str) -> str:
    # Unterminated openers such as "</script" lose their "<". A removal can
    # splice a new match together ("javajavascript:script:"), so repeat until
    # a pass changes nothing.
    previous = None
    while previous != value:
        previous = value
        value = _JAVASCRIPT_SCHEME_PATTERN.sub("", value)
        value = _EVENT_HANDLER_PATTERN.sub("", value)
        value = _SCRIPT_SPAN_PATTERN.sub("", value)
        value = _JAVASCRIPT_TAG_PATTERN.sub("", value)
        value = _TAG_OPENER_PATTERN.sub("", value)
    return value


def sanitize_text(value: Optional[str]) -> str:
    """
    Clean free text typed into a report field.

    Script and style blocks are removed with their contents, every remaining
    tag-like substring is stripped, the residue goes through the allow-list
    cleaner, and finally scheme and event-handler patterns are removed.
    The result contains no markup and ``sanitize_text`` applied to it again
    returns it unchanged.

    Args:
        value: Raw user input (may be None)

    Returns:
        Sanitized text, empty string for empty input
    """
    if not value:
        return ""

    cleaned = _SCRIPT_BLOCK_PATTERN.sub("", value)
    cleaned = _TAG_PATTERN.sub("", cleaned)
    cleaned = allow_list_clean(cleaned)
    return _remove_dangerous_patterns(cleaned)


def filter_numeric_text(value: Optional[str]) -> str:
    """Keep only digits, commas, periods, parentheses, minus signs and whitespace."""
    if not value:
        return ""
    return _NON_NUMERIC_PATTERN.sub("", value)


def sanitize_abn(value: Optional[str]) -> str:
    """Sanitize an Australian Business Number, keeping digits and spaces."""
    return _NON_ABN_PATTERN.sub("", sanitize_text(value))


def is_acceptable(text: str, max_length: Optional[int] = None) -> bool:
    """
    Return True when ``text`` is non-empty and no longer than ``max_length``.

    Without an explicit limit the configured ``max_input_length`` applies.
    """
    if max_length is None:
        max_length = get_settings().max_input_length
    return 0 < len(text) <= max_length
