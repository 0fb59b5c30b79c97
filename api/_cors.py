import logging

logger = logging.getLogger("api")

ALLOW_METHODS = "POST,OPTIONS"
ALLOW_HEADERS = "Content-Type"


def allowed_origin(origin: str, allow_origins) -> str:
    """Return the origin to echo back, or '' when it is not on the allow-list."""
    origin = origin or ''
    if origin and origin in allow_origins:
        return origin
    if origin:
        logger.debug("Origin not allowed: %s", origin)
    return ''


def cors_headers(origin: str, allow_origins) -> dict:
    headers = {"Content-Type": "text/html; charset=utf-8"}
    echo = allowed_origin(origin, allow_origins)
    if echo:
        headers["Access-Control-Allow-Origin"] = echo
    headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    return headers
