"""
OAuth RFC 5849 Python SDK
OAuth 1.0a request signing and Authorization header generation
"""

import hashlib

from .version import __version__
from .exceptions import (
    OAuthSDKError,
    ConfigurationError,
    SecretDecodeError,
    EncodingError,
)
from .signing import (
    # Types
    SignatureMethod,
    SigningRequest,
    SignatureResult,
    SigningErrorCodes,
    # Core signing
    SignatureBuilder,
    build_signature_base_string,
    # Configuration
    AuthorizationSpec,
    AuthorizationSpecBuilder,
    create_authorization_spec,
    lookup_signature_method,
    sign_request,
    MessageContext,
    SecretDecoder,
    decode_secret,
    # Utilities
    percent_encode,
    generate_nonce,
    generate_timestamp,
    parse_authorization_header,
    # Header service
    GenerateRfc5849Header,
    MetadataFilter,
    # HTTP Integration
    OAuth1Auth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)
from .signing.types import hash_algorithm_name
from .config import (
    AuthorizationConfigManager,
    load_authorization_config_from_json,
    load_authorization_config_from_file,
    load_default_authorization_config,
)


# Initialize the SDK
def initialize_sdk():
    """
    Initialize the SDK and check that every signature method can be used.
    
    Returns:
        dict: Compatibility information with 'compatible' (bool) and 'warnings' (list)
    """
    warnings = []
    compatible = True
    
    for method in SignatureMethod:
        algorithm = hash_algorithm_name(method)
        if algorithm is None:
            continue
        try:
            hashlib.new(algorithm)
        except ValueError as e:
            warnings.append(f'{method.formal_name()} unavailable: {e}')
            if method == SignatureMethod.HMAC_SHA1:
                compatible = False
    
    return {
        'compatible': compatible,
        'warnings': warnings
    }


def is_compatible():
    """
    Quick synchronous compatibility check.
    
    Returns:
        bool: True if the default signature method is usable
    """
    return initialize_sdk()['compatible']


# Public API exports
__all__ = [
    '__version__',
    'initialize_sdk',
    'is_compatible',
    # Exceptions
    'OAuthSDKError',
    'ConfigurationError',
    'SecretDecodeError',
    'EncodingError',
    # Types
    'SignatureMethod',
    'SigningRequest',
    'SignatureResult',
    'SigningErrorCodes',
    # Core signing
    'SignatureBuilder',
    'sign_request',
    'build_signature_base_string',
    # Configuration
    'AuthorizationSpec',
    'AuthorizationSpecBuilder',
    'create_authorization_spec',
    'lookup_signature_method',
    'MessageContext',
    'SecretDecoder',
    'decode_secret',
    'AuthorizationConfigManager',
    'load_authorization_config_from_json',
    'load_authorization_config_from_file',
    'load_default_authorization_config',
    # Utilities
    'percent_encode',
    'generate_nonce',
    'generate_timestamp',
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
