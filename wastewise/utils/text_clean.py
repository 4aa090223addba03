# wastewise/utils/text_clean.py
from __future__ import annotations
import re

from ..config import MAX_INPUT_CHARS

_WS_RE = re.compile(r"\s+")
# zero-width and other invisible characters that sneak in from copy/paste or OCR
_INVISIBLE_RE = re.compile(r"[\u0000-\u0008\u000b\u000c\u000e-\u001f\u007f\u200b-\u200d\ufeff]")


def clean_query_text(q: str | None, max_len: int = MAX_INPUT_CHARS) -> str:
    """
    Item names and vision labels arrive from keyboards, OCR and other
    services. Drop invisible characters, collapse whitespace, trim, and cap
    the length so a pasted paragraph cannot blow up trigram scoring.
    """
    if q is None:
        return ""
    text = _INVISIBLE_RE.sub("", str(q))
    text = _WS_RE.sub(" ", text).strip()
    return text[:max_len].rstrip()
