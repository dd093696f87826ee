"""
Type definitions for OAuth 1.0a request signing

This module provides the signature method enumeration and the data classes
passed into and returned from RFC 5849 signing operations.
"""

import hmac
import logging
from typing import Dict, Optional, Union, Callable
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class SignatureMethod(str, Enum):
    """
    Signature methods for ``oauth_signature_method``.

    The member value is the protocol wire-name.
    """
    PLAIN_TEXT = "PLAINTEXT"
    HMAC_MD5 = "HMAC-MD5"
    HMAC_SHA1 = "HMAC-SHA1"
    HMAC_SHA256 = "HMAC-SHA256"
    HMAC_SHA384 = "HMAC-SHA384"
    HMAC_SHA512 = "HMAC-SHA512"

    def formal_name(self) -> str:
        """Wire-name used for ``oauth_signature_method``, always upper-case."""
        return self.value.upper()

    def digest(self, key: Union[str, bytes], message: Union[str, bytes]) -> bytes:
        """
        Digest a message with the signing key.

        PLAINTEXT returns the key itself; the HMAC variants return the raw MAC.
        Neither is Base64-encoded here.

        Args:
            key: Signing key (``consumer_secret&token_secret``)
            message: Signature base string

        Returns:
            bytes: Raw digest bytes
        """
        key_bytes = _to_bytes(key)
        digestmod = _HMAC_DIGESTS.get(self)
        if digestmod is None:
            return key_bytes
        return hmac.new(key_bytes, _to_bytes(message), digestmod).digest()

    @classmethod
    def lookup(cls, name: Optional[str]) -> 'SignatureMethod':
        """
        Find a signature method by member name or wire-name.

        Matching is case-insensitive; anything unrecognised falls back to
        HMAC-SHA1.

        Args:
            name: Configured method name (e.g. ``"HMAC_MD5"`` or ``"hmac-md5"``)

        Returns:
            SignatureMethod: Matching method, or HMAC_SHA1 when nothing matches
        """
        if name:
            wanted = name.strip().upper()
            for method in cls:
                if method.formal_name() == wanted or method.name == wanted:
                    return method
        logger.debug(f"Unrecognised signature method {name!r}, using {cls.HMAC_SHA1.formal_name()}")
        return cls.HMAC_SHA1


# hashlib algorithm names; PLAINTEXT has no entry
_HMAC_DIGESTS: Dict[SignatureMethod, str] = {
    SignatureMethod.HMAC_MD5: "md5",
    SignatureMethod.HMAC_SHA1: "sha1",
    SignatureMethod.HMAC_SHA256: "sha256",
    SignatureMethod.HMAC_SHA384: "sha384",
    SignatureMethod.HMAC_SHA512: "sha512",
}


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode('utf-8')


def hash_algorithm_name(method: SignatureMethod) -> Optional[str]:
    """
    Get the hashlib algorithm name behind a signature method.

    Returns:
        str: hashlib name, or None for PLAINTEXT
    """
    return _HMAC_DIGESTS.get(method)


@dataclass
class SigningRequest:
    """
    Per-call request data covered by the signature

    Attributes:
        method: HTTP method (case-insensitive)
        url: Target URL; an existing query string is part of the signed input
        additional_data: Extra signed parameters, already percent-encoded
    """
    method: str
    url: str
    additional_data: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Normalise optional parameters"""
        if self.additional_data is None:
            self.additional_data = {}


@dataclass
class SignatureResult:
    """
    Result of building an Authorization header

    Attributes:
        header: Complete ``Authorization`` header value
        base_string: Signature base string that was signed
        signature: Percent-encoded Base64 signature
        timestamp: ``oauth_timestamp`` used
        nonce: ``oauth_nonce`` used
        parameters: Parameters rendered into the header, in header order
    """
    header: str
    base_string: str
    signature: str
    timestamp: str
    nonce: str
    parameters: Dict[str, str]


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    SECRET_DECODE_FAILED = "SECRET_DECODE_FAILED"
    UNRESOLVED_EXPRESSION = "UNRESOLVED_EXPRESSION"

    # Request errors
    INVALID_URL = "INVALID_URL"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"

    # Configuration file errors
    PARSE_ERROR = "PARSE_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    FILE_ERROR = "FILE_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"


# Type aliases for convenience
SecretDecodeFunction = Callable[[str], str]
TimestampGenerator = Callable[[], int]
