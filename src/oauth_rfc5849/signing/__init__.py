"""
OAuth RFC 5849 Python SDK - Request Signing Module

RFC 5849 (OAuth 1.0a) signature base string construction, HMAC/PLAINTEXT
signing and Authorization header generation.
"""

from .types import (
    SignatureMethod,
    SigningRequest,
    SignatureResult,
    SigningErrorCodes,
)

from .builder import (
    SignatureBuilder,
)

from .authorization_spec import (
    AuthorizationSpec,
    AuthorizationSpecBuilder,
    create_authorization_spec,
    lookup_signature_method,
    sign_request,
)

from .base_string import (
    CaseInsensitiveParameters,
    build_parameter_string,
    build_signature_base_string,
    collect_request_parameters,
)

from .context import (
    MessageContext,
)

from .secret_decoder import (
    SecretDecoder,
    decode_secret,
)

from .utils import (
    percent_encode,
    generate_nonce,
    generate_timestamp,
    nonce_from_unique_id,
    split_url,
    split_query,
    filter_empty_params,
    format_authorization_header,
    parse_authorization_header,
)

from .header_service import (
    GenerateRfc5849Header,
    MetadataFilter,
)

from .integration import (
    OAuth1Auth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Types
    'SignatureMethod',
    'SigningRequest',
    'SignatureResult',
    'SigningErrorCodes',
    # Core signing
    'SignatureBuilder',
    'sign_request',
    'build_signature_base_string',
    'build_parameter_string',
    'collect_request_parameters',
    'CaseInsensitiveParameters',
    # Configuration
    'AuthorizationSpec',
    'AuthorizationSpecBuilder',
    'create_authorization_spec',
    'lookup_signature_method',
    'MessageContext',
    'SecretDecoder',
    'decode_secret',
    # Utilities
    'percent_encode',
    'generate_nonce',
    'generate_timestamp',
    'nonce_from_unique_id',
    'split_url',
    'split_query',
    'filter_empty_params',
    'format_authorization_header',
    'parse_authorization_header',
    # Header service
    'GenerateRfc5849Header',
    'MetadataFilter',
    # HTTP Integration
    'OAuth1Auth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
