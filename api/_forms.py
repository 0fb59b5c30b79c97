import base64
import binascii
import json
import logging
from urllib.parse import parse_qsl

logger = logging.getLogger("api")

MULTIPART_NOTE = "multipart received (demo only)"


def _as_text(body, is_base64_encoded: bool = False) -> str:
    if body is None:
        return ''
    if isinstance(body, (bytes, bytearray)):
        raw = bytes(body)
    else:
        raw = str(body).encode('utf-8')
    if is_base64_encoded:
        try:
            raw = base64.b64decode(raw)
        except (binascii.Error, ValueError):
            logger.debug("Body flagged base64 but did not decode; using as-is")
    return raw.decode('utf-8', errors='replace')


def _raw_bytes(body, is_base64_encoded: bool = False) -> bytes:
    """
    Multipart bodies reach us base64 encoded from function hosts and as plain
    bytes from WSGI servers. Text bodies are always treated as base64.
    """
    if body is None:
        return b''
    if isinstance(body, (bytes, bytearray)) and not is_base64_encoded:
        return bytes(body)
    encoded = body if isinstance(body, (bytes, bytearray)) else str(body).encode('utf-8')
    try:
        return base64.b64decode(encoded)
    except (binascii.Error, ValueError):
        return bytes(encoded)


def _stringify(value):
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def _parse_json(text: str) -> dict:
    try:
        data = json.loads(text or '{}')
    except ValueError:
        logger.debug("JSON body did not parse; treating as empty form")
        return {}
    if not isinstance(data, dict):
        return {}
    out = {}
    for k, v in data.items():
        s = _stringify(v)
        if s is not None:
            out[str(k)] = s
    return out


def decode_form(content_type: str, body, is_base64_encoded: bool = False) -> dict:
    """
    Flatten a request body into {field: value}.

    Handles url-encoded forms (the widget's normal path), JSON, and multipart
    (length only, parts are never read). Never raises: anything unexpected
    comes back as an empty dict.
    """
    ct = (content_type or '').lower()

    if 'application/x-www-form-urlencoded' in ct:
        text = _as_text(body, is_base64_encoded)
        return dict(parse_qsl(text, keep_blank_values=True))

    if 'application/json' in ct:
        return _parse_json(_as_text(body, is_base64_encoded))

    if 'multipart/form-data' in ct:
        return {
            'is_raw': True,
            'byte_length': len(_raw_bytes(body, is_base64_encoded)),
            'note': MULTIPART_NOTE,
        }

    return {}
