"""
Exception classes for OAuth RFC 5849 SDK
"""

from typing import Optional, Dict, Any


class OAuthSDKError(Exception):
    """Base exception for all OAuth RFC 5849 SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"


class ConfigurationError(OAuthSDKError):
    """Exception raised when a required signing input is missing or invalid"""
    pass


class SecretDecodeError(ConfigurationError):
    """Exception raised when an encoded or external secret cannot be decoded"""
    pass


class EncodingError(OAuthSDKError):
    """Exception raised when a URL cannot be split into the parts needed for signing"""
    pass
