"""Terminal Formatting — grapheme-aware reversal of right-to-left text for console output.

Invariants:
    - None or empty input returns "" (never raises)
    - Text with no code point in the Hebrew/Arabic blocks is returned unchanged
    - RTL text is reversed by grapheme cluster, never inside one (emoji ZWJ
      sequences and combining marks stay intact)
    - Mixed LTR/RTL text is reversed as a single unit (known limitation, no UAX #9)
    - format_structure_for_display never mutates its input

Design Decisions:
    - Display only: stored or transmitted data (MCP results) is never passed through here
    - regex \\X for extended grapheme clusters: stdlib re has no grapheme support
    - Lazy import with try/except: without regex, degrade to code-point reversal
      instead of failing (breaks multi-code-point clusters, logged once)
    - Block-membership test, not bidi-class lookup: Arabic-Indic digits count as RTL
"""

import logging
import re
from collections.abc import Collection, Mapping
from typing import Any

logger = logging.getLogger(__name__)

try:
    import regex
    _GRAPHEME_CLUSTER = regex.compile(r"\X")
    _GRAPHEME_SEGMENTATION_AVAILABLE = True
except ImportError:
    logger.warning("regex not installed, RTL reversal falls back to code points")
    _GRAPHEME_SEGMENTATION_AVAILABLE = False

# Hebrew, Arabic, Arabic Supplement, Presentation Forms-A, Presentation Forms-B
_RTL_PATTERN = re.compile(
    "[\u0590-\u05FF\u0600-\u06FF\u0750-\u077F\uFB50-\uFDFF\uFE70-\uFEFF]"
)

DEFAULT_RTL_FIELDS: frozenset[str] = frozenset({"title", "notes"})


def contains_rtl(text: str) -> bool:
    """True when at least one code point falls in an RTL block."""
    return bool(_RTL_PATTERN.search(text))


def split_graphemes(text: str) -> list[str]:
    """Split into grapheme clusters (single code points without regex)."""
    if _GRAPHEME_SEGMENTATION_AVAILABLE:
        return _GRAPHEME_CLUSTER.findall(text)
    return list(text)


def format_for_display(text: str | None) -> str:
    """Reverse RTL text for terminals without bidi support.

    Returns "" for None/empty input, the input unchanged when it holds no RTL
    code point, and otherwise the grapheme clusters in reverse order.
    "Hello שלום" becomes "םולש olleH": the LTR run is reversed too.
    """
    if not text:
        return ""
    if not contains_rtl(text):
        return text
    return "".join(reversed(split_graphemes(text)))


def format_structure_for_display(
    data: Any, rtl_fields: Collection[str] = DEFAULT_RTL_FIELDS,
) -> Any:
    """Return a copy of data with string values under rtl_fields keys formatted.

    Maps keep every key; only str values whose key is in rtl_fields are
    formatted, all other values are traversed. Sequences keep their order.
    Scalars and None come back unchanged.
    """
    if isinstance(data, Mapping):
        formatted = {}
        for key, value in data.items():
            if key in rtl_fields and isinstance(value, str):
                formatted[key] = format_for_display(value)
            else:
                formatted[key] = format_structure_for_display(value, rtl_fields)
        return formatted

    if isinstance(data, list):
        return [format_structure_for_display(item, rtl_fields) for item in data]

    if isinstance(data, tuple):
        return tuple(format_structure_for_display(item, rtl_fields) for item in data)

    return data
