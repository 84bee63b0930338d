"""Page title extraction."""

from __future__ import annotations

import html
import re

_TITLE_RE: re.Pattern[str] = re.compile(r"<title\b[^>]*>([^<]*)<", re.IGNORECASE)


def normalize_title(raw: str) -> str:
    """Unescape entity references and collapse whitespace runs to one space.

    ``str.split()`` also treats Unicode spaces (``&nbsp;`` after unescaping)
    as separators.
    """
    return " ".join(html.unescape(raw).split())


def extract_title(text: str) -> str | None:
    """Return the normalised text of the first ``<title>`` element.

    Capture stops at the first ``<`` after the opening tag. A missing or
    unterminated element, or one whose text normalises to nothing, yields
    None ("no title"), never an error.
    """
    match = _TITLE_RE.search(text)
    if match is None:
        return None
    title = normalize_title(match.group(1))
    return title or None
