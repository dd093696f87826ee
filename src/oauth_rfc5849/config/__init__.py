"""
Configuration management for OAuth RFC 5849 SDK

This module loads named AuthorizationSpec profiles from JSON configuration.
"""

from .spec_config import (
    SpecConfig,
    AuthorizationConfigManager,
    load_authorization_config_from_json,
    load_authorization_config_from_file,
    load_default_authorization_config,
)

__all__ = [
    'SpecConfig',
    'AuthorizationConfigManager',
    'load_authorization_config_from_json',
    'load_authorization_config_from_file',
    'load_default_authorization_config',
]
