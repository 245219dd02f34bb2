"""
Deterministic canonical encoding.

Pool records are sized for the storage reserve by the length of their
canonical JSON encoding, so the bytes must not depend on dict ordering,
whitespace or float formatting.
"""

from __future__ import annotations

import json
from typing import Any


CANONICAL_ENCODING_VERSION = 1


def _check_text(s: str) -> None:
    # Lone surrogates are not Unicode scalar values; encoders disagree on them.
    if any(0xD800 <= ord(ch) <= 0xDFFF for ch in s):
        raise TypeError("surrogate code points are not allowed in canonical encoding")


def _check_encodable(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, str):
        _check_text(value)
    elif isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError("dict keys must be str for canonical encoding")
            _check_text(key)
            _check_encodable(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_encodable(item)


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON encoding.

    Rules:
    - UTF-8, sorted keys, no whitespace
    - NaN/Infinity and floats rejected (ints only)
    """
    _check_encodable(value)
    text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return text.encode("utf-8")


def canonical_json_size(value: Any) -> int:
    """Byte length of `canonical_json_bytes(value)`."""
    return len(canonical_json_bytes(value))
