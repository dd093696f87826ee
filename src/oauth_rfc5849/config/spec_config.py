"""
Configuration file support for the OAuth RFC 5849 SDK

Authorization settings are kept in a JSON document holding one or more
named profiles, each describing an AuthorizationSpec:

    {
      "config_format_version": "1.0",
      "defaults": {"profile": "netsuite"},
      "profiles": {
        "netsuite": {
          "consumerKey": "%env{NS_CONSUMER_KEY}",
          "consumerSecret": "ENC:...",
          "signatureMethod": "HMAC-SHA256",
          "realm": "1234567"
        }
      }
    }
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import ConfigurationError
from ..signing.authorization_spec import AuthorizationSpec
from ..signing.types import SigningErrorCodes

logger = logging.getLogger(__name__)

CONFIG_FORMAT_VERSION = "1.0"
DEFAULT_CONFIG_PATHS = [
    Path("config/oauth-rfc5849.json"),
    Path("../config/oauth-rfc5849.json"),
]


@dataclass
class SpecConfig:
    """Parsed configuration document"""
    config_format_version: str
    default_profile: str
    profiles: Dict[str, AuthorizationSpec]


class AuthorizationConfigManager:
    """Loads named AuthorizationSpec profiles from JSON configuration"""

    def __init__(self, config: SpecConfig, profile: Optional[str] = None):
        self.config = config
        self.current_profile = profile or config.default_profile
        self._validate()

    @classmethod
    def from_json(cls, json_string: str, profile: Optional[str] = None) -> 'AuthorizationConfigManager':
        """Load configuration from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", SigningErrorCodes.PARSE_ERROR)
        return cls(cls._parse_config_dict(data), profile)

    @classmethod
    def from_file(cls, file_path: Union[str, Path], profile: Optional[str] = None) -> 'AuthorizationConfigManager':
        """Load configuration from file"""
        try:
            path = Path(file_path)
            with open(path, 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", SigningErrorCodes.FILE_ERROR)
        logger.debug(f"Loaded authorization configuration from {path}")
        return cls.from_json(json_string, profile)

    @classmethod
    def load_default(cls, profile: Optional[str] = None) -> 'AuthorizationConfigManager':
        """Load configuration from the first default location that exists"""
        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                return cls.from_file(path, profile)

        raise ConfigurationError("Default configuration file not found", SigningErrorCodes.FILE_NOT_FOUND)

    def set_profile(self, profile: str) -> None:
        """Set current profile"""
        if profile not in self.config.profiles:
            raise ConfigurationError(f"Profile '{profile}' not found", SigningErrorCodes.PROFILE_NOT_FOUND)
        self.current_profile = profile

    def get_spec(self, profile: Optional[str] = None) -> AuthorizationSpec:
        """Get the AuthorizationSpec for a profile (current profile if None)"""
        name = profile or self.current_profile
        spec = self.config.profiles.get(name)
        if spec is None:
            raise ConfigurationError(f"Profile '{name}' not found", SigningErrorCodes.PROFILE_NOT_FOUND)
        return spec

    def list_profiles(self) -> List[str]:
        """List available profiles"""
        return list(self.config.profiles.keys())

    def get_current_profile(self) -> str:
        return self.current_profile

    def _validate(self) -> None:
        if self.current_profile not in self.config.profiles:
            raise ConfigurationError(
                f"Profile '{self.current_profile}' not found",
                SigningErrorCodes.PROFILE_NOT_FOUND,
                {"available_profiles": self.list_profiles()}
            )

    @staticmethod
    def _parse_config_dict(data: Dict[str, Any]) -> SpecConfig:
        """Parse configuration dictionary into structured objects"""
        try:
            profiles = {}
            for name, profile_data in data['profiles'].items():
                profiles[name] = AuthorizationSpec.from_dict(profile_data)

            defaults = data.get('defaults', {})
            default_profile = defaults.get('profile') or next(iter(profiles), None)
            if default_profile is None:
                raise ConfigurationError("Configuration defines no profiles", SigningErrorCodes.INVALID_FORMAT)

            return SpecConfig(
                config_format_version=data.get('config_format_version', CONFIG_FORMAT_VERSION),
                default_profile=default_profile,
                profiles=profiles
            )
        except ConfigurationError:
            raise
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}", SigningErrorCodes.INVALID_FORMAT)


def load_authorization_config_from_json(json_string: str, profile: Optional[str] = None) -> AuthorizationConfigManager:
    """Load authorization configuration from JSON string"""
    return AuthorizationConfigManager.from_json(json_string, profile)


def load_authorization_config_from_file(
    file_path: Union[str, Path],
    profile: Optional[str] = None
) -> AuthorizationConfigManager:
    """Load authorization configuration from file"""
    return AuthorizationConfigManager.from_file(file_path, profile)


def load_default_authorization_config(profile: Optional[str] = None) -> AuthorizationConfigManager:
    """Load default authorization configuration"""
    return AuthorizationConfigManager.load_default(profile)
