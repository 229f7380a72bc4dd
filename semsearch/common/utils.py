"""Text normalization shared by the splitter, the adapters and the cache.

Document text is cleaned but never case-folded, since sentence splitting
relies on capitalization. Cache keys are additionally trimmed and
case-folded so equivalent queries share one entry.
"""

import unicodedata

_INVISIBLE = str.maketrans("", "", "\ufeff\ufffd")


def clean_text(text: str, *, normalize: bool = True) -> str:
    """Strip BOMs and replacement characters, then NFKC-normalize unless told not to."""
    if not text:
        return ""
    cleaned = text.translate(_INVISIBLE)
    return unicodedata.normalize("NFKC", cleaned) if normalize else cleaned


def normalize_key(text: str) -> str:
    """Cache key for ``text``: cleaned, trimmed and case-folded."""
    return clean_text(text).strip().casefold()
