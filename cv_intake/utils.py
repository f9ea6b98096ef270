import re
import unicodedata
from typing import Any, Iterable, List


def coerce_text(value: Any) -> str:
    """
    Turn whatever the caller handed us into a string.
    Bytes are decoded as UTF-8 and numbers go through str(). None and
    anything else (dicts, lists, arbitrary objects) become "".
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def normalize_text(text: str) -> str:
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\u00ad", "")  # soft hyphen
    return re.sub("[\u00a0\u2007\u202f]", " ", text)


def dedupe_preserving_order(items: Iterable[str]) -> List[str]:
    """
    Drop repeated entries (compared case-insensitively), keeping the first
    surface form of each.
    """
    seen = set()
    unique = []
    for item in items:
        key = item.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def non_empty_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def prefer(extracted: str, fallback: str) -> str:
    """Extracted value when it has content, otherwise the fallback."""
    if extracted and extracted.strip():
        return extracted.strip()
    return (fallback or "").strip()
