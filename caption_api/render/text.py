"""
Purpose:
- Turn raw query strings into safe strings for the overlay.
- Percent-decoding of the stat label is guarded: clients send it encoded zero,
  one or two times, so we only decode when encoded octets are really present.
- Greedy character wrapping for body text (count based, not pixel measured).
"""

from __future__ import annotations
import re
from typing import List, Optional
from urllib.parse import unquote_to_bytes

ELLIPSIS = "..."

_ENCODED_OCTET = re.compile(r"%[0-9A-Fa-f]{2}")
_STRAY_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")
# C0 controls, DEL, C1 controls and U+FFFD mark a decode that corrupted the text
_SUSPICIOUS = re.compile("[\x00-\x1f\x7f-\x9f\ufffd]")

_XML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}

def escape_xml(value: Optional[str]) -> str:
    """Replace & < > " ' with their XML entities."""
    return re.sub(r"[&<>\"']", lambda m: _XML_ENTITIES[m.group(0)], str(value or ""))

def has_encoded_octets(value: str) -> bool:
    return bool(_ENCODED_OCTET.search(value))

def decode_component(value: str) -> str:
    """
    Strict percent-decode: a '%' must start a hex pair and the octets must be
    valid UTF-8, otherwise ValueError.
    """
    if _STRAY_PERCENT.search(value):
        raise ValueError(f"malformed percent escape in {value!r}")
    # UnicodeDecodeError is a ValueError
    return unquote_to_bytes(value).decode("utf-8")

def safe_decode_once(value: Optional[str]) -> str:
    """
    Decode percent-encoding once, and only when encoded octets are present.
    Never raises; falls back to the input on malformed escapes.
    """
    if value is None:
        return ""
    raw = str(value)
    if not has_encoded_octets(raw):
        return raw
    v = raw.replace("+", " ")
    try:
        return decode_component(v)
    except ValueError:
        pass
    try:
        return decode_component(_STRAY_PERCENT.sub("%25", v))
    except ValueError:
        return raw

def strict_decode(value: Optional[str], max_passes: int = 2) -> str:
    """
    Up to max_passes decode passes; a pass producing control characters or
    U+FFFD is rejected and the last accepted value is returned.
    """
    current = "" if value is None else str(value)
    for _ in range(max_passes):
        if not has_encoded_octets(current):
            break
        decoded = safe_decode_once(current)
        if decoded == current or _SUSPICIOUS.search(decoded):
            break
        current = decoded
    return current

def cap_length(value: str, max_len: int) -> str:
    if len(value) > max_len:
        return value[:max_len] + ELLIPSIS
    return value

def normalize_stat(raw: Optional[str], max_len: int = 400, strict: bool = False) -> str:
    decoded = strict_decode(raw) if strict else safe_decode_once(raw)
    return cap_length(decoded, max_len)

def wrap_text(text: str, max_chars: int) -> List[str]:
    """
    Greedy wrap by character count: a line is flushed once it holds max_chars
    characters and the next line starts with the character that overflowed.
    """
    if not text or max_chars <= 0:
        return [text]
    if len(text) <= max_chars:
        return [text]
    lines: List[str] = []
    current = ""
    for ch in text:
        if len(current) >= max_chars:
            lines.append(current)
            current = ch
        else:
            current += ch
    if current:
        lines.append(current)
    return lines
