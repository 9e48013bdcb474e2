"""Wire codec for the verified set.

A note's verifiers are persisted as a JSON array of verifier ids serialized
into one string field, e.g. ``["v1-uuid","v2-uuid"]``.
"""

import json
from typing import Iterable

from truthnotes.domain.errors import DecodeError
from truthnotes.domain.result import Err, Ok


def unique_ids(ids: Iterable[str]) -> list[str]:
    """Drop repeated ids, keeping the first occurrence of each."""
    seen: set[str] = set()
    result = []
    for verifier_id in ids:
        if verifier_id not in seen:
            seen.add(verifier_id)
            result.append(verifier_id)
    return result


def decode_verified_by(raw: str | None) -> Ok[list[str]] | Err[DecodeError]:
    """Parse the serialized verified set.

    An absent or empty field is an empty set. Anything other than a JSON array
    of strings is a decode error.
    """
    if raw is None or not raw.strip():
        return Ok(value=[])
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(error=DecodeError(message=f"verified set is not valid JSON: {e}", raw=raw))
    if not isinstance(data, list):
        return Err(error=DecodeError(message="verified set is not a JSON array", raw=raw))
    if not all(isinstance(item, str) for item in data):
        return Err(error=DecodeError(message="verified set contains non-string ids", raw=raw))
    return Ok(value=unique_ids(data))


def encode_verified_by(ids: Iterable[str]) -> str:
    return json.dumps(unique_ids(ids))
