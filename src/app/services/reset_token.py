"""
Reset token codec.

The plain token only ever travels inside the reset link; storage and lookup
use its SHA-256 digest.
"""

import hashlib
import secrets
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.domain.exceptions import InvalidUrlError

# 32 bytes = 256 bits of entropy, 64 hex characters
TOKEN_BYTES = 32


def generate_reset_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def build_reset_link(base_url: str, token: str) -> str:
    """
    Set the token query parameter on base_url.

    An existing token parameter is replaced; other parameters and the
    fragment are kept.

    Raises:
        InvalidUrlError: base_url is not an absolute http(s) URL
    """
    try:
        parts = urlsplit(base_url)
        # Accessing port validates it
        parts.port
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidUrlError(base_url) from exc

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidUrlError(base_url)

    query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != "token"]
    query.append(("token", token))

    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path or "/", urlencode(query), parts.fragment)
    )
