"""
Normalization of user-supplied Google Maps links.
"""

from __future__ import annotations

from typing import Sequence

SHORT_LINK_MARKERS: tuple[str, ...] = ("maps.app.goo.gl", "goo.gl/maps")


def is_short_link(url: str, markers: Sequence[str] = SHORT_LINK_MARKERS) -> bool:
    """Return True if ``url`` is a shortened Google Maps link that needs expanding."""
    return any(marker in url for marker in markers)


def normalize_url(raw: str, markers: Sequence[str] = SHORT_LINK_MARKERS) -> str:
    """
    Ensure ``raw`` carries an http(s) scheme and strip tracking parameters from short links.

    For short links everything from the first ``?`` onward is dropped, unless a ``#``
    appears before that ``?``, in which case the link is cut at the ``#``. Applying
    this function twice gives the same result as applying it once.
    """
    normalized = raw.strip()

    if not normalized.startswith(("http://", "https://")):
        normalized = "https://" + normalized

    if is_short_link(normalized, markers):
        question_mark = normalized.find("?")
        if question_mark > -1:
            hash_index = normalized.find("#")
            if -1 < hash_index < question_mark:
                normalized = normalized[:hash_index]
            else:
                normalized = normalized[:question_mark]

    return normalized.rstrip()
