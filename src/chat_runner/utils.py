import os
import re
from urllib.parse import urlsplit

ALLOWED_SCHEMES = ("http", "https")
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class UnsafeUrlError(ValueError):
    """Raised for URLs the browser must never be pointed at."""


def check_navigable_url(url: str) -> str:
    """Return ``url`` unchanged if it is an absolute http(s) URL."""
    try:
        parsed = urlsplit(url)
    except ValueError as e:
        raise UnsafeUrlError(f'Invalid URL: "{url}" - {e}') from e
    if parsed.scheme not in ALLOWED_SCHEMES:
        raise UnsafeUrlError(f'Only http and https URLs are allowed, got "{parsed.scheme}:"')
    if not parsed.netloc:
        raise UnsafeUrlError(f'Invalid URL: "{url}" - missing host')
    return url


def sanitize_screenshot_name(name: str, default: str = "screenshot") -> str:
    # drop any directory part, then every char outside [A-Za-z0-9_.-]
    safe = _UNSAFE_NAME_CHARS.sub("", os.path.basename(name.replace("\\", "/")))
    if not safe.strip("."):
        return default
    return safe
