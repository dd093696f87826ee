"""
HTTP client integration for request signing

This module attaches RFC 5849 Authorization headers to outbound requests
made with the ``requests`` library. It never sends anything itself; the
caller's session does. Each request gets its own SignatureBuilder so the
timestamp and nonce are fresh.
"""

import logging
from typing import Callable, Dict, Optional
from urllib.parse import unquote_plus

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.sessions import Session

from ..exceptions import ConfigurationError
from .authorization_spec import AuthorizationSpec
from .context import MessageContext
from .secret_decoder import SecretDecoder
from .types import SigningErrorCodes
from .utils import percent_encode, split_query

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

ContextFactory = Callable[[], MessageContext]


def _form_parameters(request: PreparedRequest) -> Dict[str, str]:
    """
    Form fields of a url-encoded body, re-encoded per RFC 3986.

    Form encoding writes a space as ``+``; the signature needs ``%20``.
    """
    content_type = request.headers.get('Content-Type', '') if request.headers else ''
    if not content_type.lower().startswith(FORM_CONTENT_TYPE) or not request.body:
        return {}

    body = request.body
    if isinstance(body, bytes):
        body = body.decode('utf-8')
    if not isinstance(body, str):
        # streamed bodies cannot be signed
        return {}
    return {
        percent_encode(unquote_plus(key)): percent_encode(unquote_plus(value))
        for key, value in split_query(body)
    }


class OAuth1Auth(AuthBase):
    """
    requests authentication handler that signs each request per RFC 5849.

    Args:
        spec: Signing configuration
        context_factory: Creates the message context for each request;
            a fresh MessageContext (and so a fresh derived nonce) by default
        decoder: Secret decoder used when building the header
    """

    def __init__(
        self,
        spec: AuthorizationSpec,
        context_factory: Optional[ContextFactory] = None,
        decoder: Optional[SecretDecoder] = None
    ):
        self.spec = spec
        self.context_factory = context_factory or MessageContext
        self.decoder = decoder

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        context = self.context_factory()
        header = (self.spec
                  .builder(request.method, request.url, context, self.decoder)
                  .with_additional_data(_form_parameters(request))
                  .build())
        request.headers['Authorization'] = header
        logger.debug(f"Signed {request.method} request to {request.url}")
        return request


def sign_prepared_request(
    prepared_request: PreparedRequest,
    spec: AuthorizationSpec,
    context: Optional[MessageContext] = None,
    decoder: Optional[SecretDecoder] = None
) -> PreparedRequest:
    """
    Sign a prepared request.

    Args:
        prepared_request: Prepared request to sign
        spec: Signing configuration
        context: Message context; a fresh one if None
        decoder: Secret decoder used when building the header

    Returns:
        PreparedRequest: Request with the Authorization header set
    """
    auth = OAuth1Auth(spec, (lambda: context) if context else None, decoder)
    return auth(prepared_request)


class SigningSession:
    """
    HTTP session wrapper with automatic request signing capability.

    This class wraps a requests.Session and signs outgoing requests with
    the configured AuthorizationSpec while signing is enabled.
    """

    def __init__(
        self,
        spec: Optional[AuthorizationSpec] = None,
        session: Optional[Session] = None,
        auto_sign: bool = True,
        decoder: Optional[SecretDecoder] = None
    ):
        self.session = session or requests.Session()
        self.spec = spec
        self.decoder = decoder
        self.auth = OAuth1Auth(spec, decoder=decoder) if spec else None
        self.auto_sign = auto_sign

    def configure_signing(self, spec: AuthorizationSpec, auto_sign: bool = True) -> None:
        """
        Configure request signing for this session.

        Args:
            spec: Signing configuration
            auto_sign: Whether to automatically sign requests
        """
        self.spec = spec
        self.auth = OAuth1Auth(spec, decoder=self.decoder)
        self.auto_sign = auto_sign
        logger.info(f"Configured request signing for consumer key: {spec.consumer_key}")

    def disable_signing(self) -> None:
        """Disable automatic request signing."""
        self.auto_sign = False
        logger.info("Disabled automatic request signing")

    def enable_signing(self) -> None:
        """Enable automatic request signing (if configured)."""
        if self.auth:
            self.auto_sign = True
            logger.info("Enabled automatic request signing")
        else:
            logger.warning("Cannot enable signing - no authorization spec configured")

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make HTTP request, signed when signing is enabled.

        Signing errors propagate; an unsigned request is never sent in
        place of a signed one.
        """
        if self.auto_sign and self.auth:
            kwargs['auth'] = self.auth
        return self.session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def create_signing_session(
    spec: Optional[AuthorizationSpec] = None,
    auto_sign: bool = True,
    decoder: Optional[SecretDecoder] = None,
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        spec: Optional signing configuration
        auto_sign: Whether to automatically sign requests
        decoder: Secret decoder used when building the header
        **session_kwargs: Attributes to set on the requests.Session

    Returns:
        SigningSession: Configured signing session

    Raises:
        ConfigurationError: If a keyword is not a requests.Session attribute
    """
    session = requests.Session()

    # Apply session configuration
    for key, value in session_kwargs.items():
        if not hasattr(session, key):
            session.close()
            raise ConfigurationError(
                f"Unknown session setting: {key}",
                SigningErrorCodes.INVALID_FORMAT,
                {"key": key}
            )
        setattr(session, key, value)

    return SigningSession(spec=spec, session=session, auto_sign=auto_sign, decoder=decoder)
