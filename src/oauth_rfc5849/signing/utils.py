"""
Utility functions for request signing

This module provides utility functions for RFC 5849 request signing,
including percent-encoding, timestamp and nonce generation, URL splitting,
empty parameter filtering and Authorization header formatting.
"""

import re
import time
import uuid
from collections import OrderedDict
from typing import Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

from ..exceptions import EncodingError
from .types import SigningErrorCodes

AMPERSAND = "&"
EQUALS = "="
HEADER_PREFIX = "OAuth "
HEADER_SEPARATOR = ", "

# key="value" pairs in an Authorization header
_HEADER_PARAM_PATTERN = re.compile(r'\s*([^=,\s]+)="([^"]*)"\s*(?:,|$)')


def percent_encode(value: Optional[str]) -> str:
    """
    Percent-encode a value per RFC 3986.

    Only the unreserved set (letters, digits, ``-``, ``.``, ``_``, ``~``) is
    left as-is; a space becomes ``%20``.

    Args:
        value: Value to encode (None encodes as empty string)

    Returns:
        str: Encoded value
    """
    if value is None:
        return ""
    return quote(value, safe='~')


def is_blank(value: Optional[str]) -> bool:
    """Check whether a value is None, empty or whitespace only."""
    return value is None or not value.strip()


def generate_timestamp() -> int:
    """
    Generate current Unix timestamp.

    Returns:
        int: Current Unix timestamp (seconds since epoch)
    """
    return int(time.time())


def generate_nonce() -> str:
    """
    Generate a random nonce.

    Returns:
        str: UUID v4 with the ``-`` separators removed
    """
    return nonce_from_unique_id(str(uuid.uuid4()))


def nonce_from_unique_id(unique_id: str) -> str:
    """
    Derive a nonce from a message unique id by stripping ``:`` and ``-``.

    Args:
        unique_id: Unique identifier of the message being signed

    Returns:
        str: Nonce value
    """
    return unique_id.replace(":", "").replace("-", "")


def split_url(url: str) -> Tuple[str, Optional[str]]:
    """
    Split a URL into its base string URI and raw query string.

    The base URI is scheme, host, optional port and path; query and fragment
    are dropped. The query is returned without the leading ``?``.

    Args:
        url: Absolute URL

    Returns:
        tuple: (base URI, query string or None)

    Raises:
        EncodingError: If the URL has no scheme or host
    """
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
        port = parsed.port
    except (ValueError, AttributeError, TypeError) as e:
        raise EncodingError(
            f"Failed to parse URL: {e}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "original_error": str(e)}
        )

    if not parsed.scheme or not host:
        raise EncodingError(
            f"Invalid URL format: {url}",
            SigningErrorCodes.INVALID_URL,
            {"url": url}
        )

    if ':' in host:
        host = f"[{host}]"
    netloc = host if port is None else f"{host}:{port}"
    base_uri = urlunsplit((parsed.scheme, netloc, parsed.path, '', ''))
    return base_uri, (parsed.query or None)


def split_query(query: Optional[str]) -> List[Tuple[str, str]]:
    """
    Split a raw query string into key/value pairs.

    Pairs are split on ``&`` and then on the first ``=``. Values are kept
    exactly as they appear; nothing is decoded. A pair without ``=`` gets an
    empty value and empty segments are skipped.

    Args:
        query: Raw query string (without ``?``)

    Returns:
        list: (key, value) pairs in source order
    """
    pairs = []
    if not query:
        return pairs

    for key_value in query.split(AMPERSAND):
        if not key_value:
            continue
        key, _, value = key_value.partition(EQUALS)
        pairs.append((key, value))

    return pairs


def filter_empty_params(params: Mapping[str, Optional[str]], include_empty: bool = False) -> Dict[str, str]:
    """
    Drop parameters whose value is blank.

    Args:
        params: Parameters to filter
        include_empty: When True nothing is removed

    Returns:
        dict: New dictionary in the same order, blank values removed
    """
    if include_empty:
        return OrderedDict(params)
    return OrderedDict((k, v) for k, v in params.items() if not is_blank(v))


def format_authorization_header(params: Mapping[str, Optional[str]]) -> str:
    """
    Render parameters as an OAuth Authorization header value.

    Every value is wrapped in double quotes, including empty ones.

    Args:
        params: Header parameters in output order

    Returns:
        str: ``OAuth k1="v1", k2="v2", ...``
    """
    rendered = HEADER_SEPARATOR.join(
        f'{key}{EQUALS}"{value or ""}"' for key, value in params.items()
    )
    return HEADER_PREFIX + rendered


def parse_authorization_header(header: str) -> Dict[str, str]:
    """
    Parse an OAuth Authorization header value back into its parameters.

    Args:
        header: Header value, with or without the ``OAuth`` prefix

    Returns:
        dict: Parameters in header order with the quotes removed
    """
    body = header.strip()
    if body[:len(HEADER_PREFIX)].lower() == HEADER_PREFIX.lower():
        body = body[len(HEADER_PREFIX):]
    return OrderedDict(_HEADER_PARAM_PATTERN.findall(body))


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
