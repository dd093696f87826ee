"""
Signature base string construction for RFC 5849

This module builds the canonical "signature base string" of RFC 5849
section 3.4.1 from the HTTP method, the target URL and the request
parameters.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .utils import (
    AMPERSAND,
    EQUALS,
    percent_encode,
    split_query,
    split_url,
)


class CaseInsensitiveParameters:
    """
    Request parameters keyed case-insensitively, iterated in sorted key order.

    A later ``put`` of an existing key (in any case) replaces the value but
    keeps the spelling of the key that was stored first.
    """

    def __init__(self, params: Optional[Mapping[str, str]] = None):
        self._entries: Dict[str, Tuple[str, str]] = {}
        if params:
            self.put_all(params.items())

    def put(self, key: str, value: str) -> None:
        folded = key.lower()
        existing = self._entries.get(folded)
        stored_key = existing[0] if existing else key
        self._entries[folded] = (stored_key, value)

    def put_all(self, pairs: Iterable[Tuple[str, str]]) -> None:
        for key, value in pairs:
            self.put(key, value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._entries.get(key.lower())
        return entry[1] if entry else default

    def items(self) -> List[Tuple[str, str]]:
        """Entries sorted by case-insensitive key."""
        return [self._entries[folded] for folded in sorted(self._entries)]

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self.items())

    def __len__(self) -> int:
        return len(self._entries)


def collect_request_parameters(
    url: str,
    oauth_params: Mapping[str, str],
    additional_data: Optional[Mapping[str, str]] = None
) -> CaseInsensitiveParameters:
    """
    Merge every parameter that is covered by the signature.

    Protocol parameters go in first, then the additional data, then the
    pairs of the URL query string. Each later source replaces a same-named
    (case-insensitive) earlier one, so a query parameter wins over an
    ``oauth_*`` or additional parameter with the same name.

    Args:
        url: Target URL, possibly with a query string
        oauth_params: Filtered ``oauth_*`` protocol parameters
        additional_data: Extra signed parameters, already percent-encoded

    Returns:
        CaseInsensitiveParameters: Merged parameters
    """
    params = CaseInsensitiveParameters(oauth_params)
    if additional_data:
        params.put_all(additional_data.items())

    _, query = split_url(url)
    params.put_all(split_query(query))
    return params


def build_parameter_string(params: CaseInsensitiveParameters) -> str:
    """
    Render parameters as ``k1=v1&k2=v2`` in sorted key order.

    Values are used as they are, without further encoding.
    """
    return AMPERSAND.join(f"{key}{EQUALS}{value}" for key, value in params.items())


def build_signature_base_string(
    http_method: str,
    url: str,
    oauth_params: Mapping[str, str],
    additional_data: Optional[Mapping[str, str]] = None
) -> str:
    """
    Build the signature base string.

    ``METHOD&encoded(base URI)&encoded(parameter string)``

    Args:
        http_method: HTTP method, upper-cased here
        url: Target URL; query and fragment are excluded from the base URI
        oauth_params: Filtered ``oauth_*`` protocol parameters
        additional_data: Extra signed parameters

    Returns:
        str: Signature base string

    Raises:
        EncodingError: If the URL cannot be split
    """
    base_uri, _ = split_url(url)
    params = collect_request_parameters(url, oauth_params, additional_data)
    parameter_string = build_parameter_string(params)

    return AMPERSAND.join([
        http_method.upper(),
        percent_encode(base_uri),
        percent_encode(parameter_string),
    ])
