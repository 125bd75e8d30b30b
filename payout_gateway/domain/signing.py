"""payOS request signing: sorted query-string canonicalization + HMAC-SHA256"""

import hashlib
import hmac
import json
from typing import Any, Dict, Mapping
from urllib.parse import quote

# Characters left untouched by JavaScript's encodeURI (alphanumerics are implicit)
ENCODE_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"

_EMPTY_MARKERS = ("null", "undefined")


def sort_by_key(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of payload with keys in lexicographic order"""
    return {key: payload[key] for key in sorted(payload)}


def _js_numbers(value: Any) -> Any:
    """Integral floats as ints, recursively, so JSON text matches JSON.stringify"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, list):
        return [_js_numbers(v) for v in value]
    if isinstance(value, dict):
        return {k: _js_numbers(v) for k, v in value.items()}
    return value


def _stringify(value: Any) -> str:
    if value is None or (isinstance(value, str) and value in _EMPTY_MARKERS):
        return ""
    if isinstance(value, (list, dict)):
        return json.dumps(_js_numbers(value), separators=(",", ":"), ensure_ascii=False)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def canonical_query_string(payload: Mapping[str, Any]) -> str:
    """
    Serialize payload as `key=value` pairs joined by `&`.

    Values are stringified (null markers collapse to "", lists and objects
    become compact JSON) and then percent-encoded the way encodeURI does,
    so the string matches what the payOS verifier rebuilds.
    """
    return "&".join(
        f"{key}={quote(_stringify(value), safe=ENCODE_URI_SAFE)}"
        for key, value in payload.items()
    )


def sign(payload: Mapping[str, Any], secret: str) -> str:
    """Hex HMAC-SHA256 of the canonical form of payload, keyed by secret"""
    message = canonical_query_string(sort_by_key(payload))
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256)
    return digest.hexdigest()
