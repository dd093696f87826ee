"""
RFC 5849 Authorization header builder

This module provides the builder that turns a configured set of OAuth 1.0a
credentials and one HTTP request into an ``Authorization`` header value.
It is not normally configured directly; configure an AuthorizationSpec and
use ``AuthorizationSpec.builder_for()`` to get a pre-populated instance.

A builder holds per-request state and must not be shared between threads.
"""

import base64
import logging
from collections import OrderedDict
from typing import Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError, OAuthSDKError
from .base_string import build_signature_base_string
from .types import (
    SignatureMethod,
    SignatureResult,
    SigningErrorCodes,
    TimestampGenerator,
)
from .utils import (
    AMPERSAND,
    PerformanceTimer,
    filter_empty_params,
    format_authorization_header,
    generate_timestamp,
    is_blank,
    percent_encode,
)

logger = logging.getLogger(__name__)

OAUTH_CONSUMER_KEY = "oauth_consumer_key"
OAUTH_SIGNATURE_METHOD = "oauth_signature_method"
OAUTH_TIMESTAMP = "oauth_timestamp"
OAUTH_VERSION = "oauth_version"
OAUTH_NONCE = "oauth_nonce"
OAUTH_TOKEN = "oauth_token"
OAUTH_VERIFIER = "oauth_verifier"
OAUTH_SIGNATURE = "oauth_signature"
REALM = "realm"

DEFAULT_VERSION = "1.0"


def _require_not_blank(value: Optional[str], name: str) -> str:
    if is_blank(value):
        raise ConfigurationError(
            f"{name} may not be blank",
            SigningErrorCodes.MISSING_REQUIRED_FIELD,
            {"field": name}
        )
    return value


def _require_not_none(value, name: str):
    if value is None:
        raise ConfigurationError(
            f"{name} may not be null",
            SigningErrorCodes.MISSING_REQUIRED_FIELD,
            {"field": name}
        )
    return value


class SignatureBuilder:
    """
    Builds the RFC 5849 ``Authorization`` header for one request.
    """

    def __init__(self):
        self._url: Optional[str] = None
        self._method: Optional[str] = None
        self._consumer_key: Optional[str] = None
        self._consumer_secret: Optional[str] = None
        self._access_token: str = ""
        self._token_secret: str = ""
        self._nonce: Optional[str] = None
        self._realm: str = ""
        self._version: str = DEFAULT_VERSION
        self._verifier: str = ""
        self._include_empty_params: bool = False
        self._signature_method: SignatureMethod = SignatureMethod.HMAC_SHA1
        self._additional_data: Dict[str, str] = {}
        self._timestamp_generator: TimestampGenerator = generate_timestamp

    def with_url(self, url: str) -> 'SignatureBuilder':
        """Set the target URL; its query string is covered by the signature."""
        self._url = _require_not_none(url, "url")
        return self

    def with_method(self, method: str) -> 'SignatureBuilder':
        """Set the HTTP method."""
        self._method = _require_not_blank(method, "method")
        return self

    def with_consumer_key(self, consumer_key: str) -> 'SignatureBuilder':
        """Set the ``oauth_consumer_key``."""
        self._consumer_key = _require_not_blank(consumer_key, "consumerKey")
        return self

    def with_consumer_secret(self, consumer_secret: str) -> 'SignatureBuilder':
        """Set the consumer secret (first half of the signing key)."""
        self._consumer_secret = _require_not_blank(consumer_secret, "consumerSecret")
        return self

    def with_access_token(self, access_token: Optional[str]) -> 'SignatureBuilder':
        """Set the ``oauth_token``; None means no token."""
        self._access_token = access_token or ""
        return self

    def with_token_secret(self, token_secret: Optional[str]) -> 'SignatureBuilder':
        """Set the token secret (second half of the signing key)."""
        self._token_secret = token_secret or ""
        return self

    def with_nonce(self, nonce: str) -> 'SignatureBuilder':
        """Set the ``oauth_nonce``."""
        self._nonce = _require_not_blank(nonce, "nonce")
        return self

    def with_realm(self, realm: Optional[str]) -> 'SignatureBuilder':
        self._realm = "" if is_blank(realm) else realm
        return self

    def with_version(self, version: Optional[str]) -> 'SignatureBuilder':
        self._version = DEFAULT_VERSION if is_blank(version) else version
        return self

    def with_verifier(self, verifier: Optional[str]) -> 'SignatureBuilder':
        self._verifier = "" if is_blank(verifier) else verifier
        return self

    def with_include_empty_params(self, include: bool) -> 'SignatureBuilder':
        """Keep blank ``oauth_token`` / ``oauth_verifier`` as ``key=""``."""
        self._include_empty_params = bool(include)
        return self

    def with_signature_method(self, method: Union[SignatureMethod, str]) -> 'SignatureBuilder':
        """
        Set the signature method.

        A string is looked up by member name or wire-name and falls back to
        HMAC-SHA1 when it does not match.
        """
        _require_not_none(method, "signatureMethod")
        if not isinstance(method, SignatureMethod):
            method = SignatureMethod.lookup(method)
        self._signature_method = method
        return self

    def with_additional_data(self, data: Optional[Mapping[str, str]]) -> 'SignatureBuilder':
        """
        Set extra signed parameters such as form fields.

        Values must already be percent-encoded.
        """
        self._additional_data = dict(data) if data else {}
        return self

    def with_timestamp_generator(self, generator: Optional[TimestampGenerator]) -> 'SignatureBuilder':
        """Set the clock used for ``oauth_timestamp``; it is read on every build."""
        self._timestamp_generator = generator or generate_timestamp
        return self

    def build(self) -> str:
        """
        Build the Authorization header value.

        Returns:
            str: ``OAuth k1="v1", k2="v2", ...``

        Raises:
            ConfigurationError: If a required field is missing
            EncodingError: If the URL cannot be split
        """
        return self.build_result().header

    def build_result(self) -> SignatureResult:
        """
        Build the Authorization header together with the signing details.

        Returns:
            SignatureResult: Header, base string, signature and parameters

        Raises:
            ConfigurationError: If a required field is missing
            EncodingError: If the URL cannot be split
        """
        self._validate()
        timer = PerformanceTimer()

        try:
            timestamp = str(self._timestamp_generator())
            oauth_params = self._oauth_params(timestamp)

            base_string = build_signature_base_string(
                self._method, self._url, oauth_params, self._additional_data
            )
            logger.debug(f"Signing string [{base_string}]")

            raw_signature = self._signature_method.digest(self._signing_key(), base_string)
            signature = percent_encode(base64.b64encode(raw_signature).decode('ascii'))

            # signature and realm are added after filtering so they are always present
            auth_params = OrderedDict(oauth_params)
            auth_params[OAUTH_SIGNATURE] = signature
            auth_params[REALM] = self._realm

            header = format_authorization_header(auth_params)

            elapsed_ms = timer.elapsed_ms()
            if elapsed_ms > 10:
                logger.warning(f"Signing operation took {elapsed_ms:.2f}ms (target: <10ms)")

            return SignatureResult(
                header=header,
                base_string=base_string,
                signature=signature,
                timestamp=timestamp,
                nonce=self._nonce,
                parameters=dict(auth_params)
            )

        except Exception as e:
            if isinstance(e, OAuthSDKError):
                raise

            raise OAuthSDKError(
                f"Request signing failed: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            ) from e

    def _validate(self) -> None:
        _require_not_blank(self._consumer_key, "consumerKey")
        _require_not_blank(self._consumer_secret, "consumerSecret")
        _require_not_blank(self._nonce, "nonce")
        _require_not_blank(self._method, "method")
        _require_not_none(self._signature_method, "signatureMethod")
        _require_not_none(self._url, "url")

    def _oauth_params(self, timestamp: str) -> Dict[str, str]:
        params = OrderedDict([
            (OAUTH_CONSUMER_KEY, self._consumer_key),
            (OAUTH_SIGNATURE_METHOD, self._signature_method.formal_name()),
            (OAUTH_TIMESTAMP, timestamp),
            (OAUTH_VERSION, self._version),
            (OAUTH_NONCE, self._nonce),
            (OAUTH_TOKEN, self._access_token),
            (OAUTH_VERIFIER, self._verifier),
        ])
        return filter_empty_params(params, self._include_empty_params)

    # RFC 5849 3.4.2: the '&' is present even when the token secret is empty
    def _signing_key(self) -> str:
        return self._consumer_secret + AMPERSAND + (self._token_secret or "")
