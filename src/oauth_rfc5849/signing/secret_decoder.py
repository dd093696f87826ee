"""
Secret decoding for consumer and token secrets

Secrets in configuration may be plain text, a reference to an external
source (environment variable or OS keyring) or a Fernet-encrypted value.
SecretDecoder turns any of these into the plain secret immediately before
signing. Failures raise SecretDecodeError, which fails the whole signing
operation.
"""

import os
import re
import logging
from typing import Optional, Union

import keyring
from keyring.errors import KeyringError
from cryptography.fernet import Fernet, InvalidToken

from ..exceptions import SecretDecodeError
from .types import SigningErrorCodes

logger = logging.getLogger(__name__)

ENCRYPTED_PREFIX = "ENC:"
SECRET_KEY_ENV_VAR = "OAUTH_RFC5849_SECRET_KEY"
DEFAULT_KEYRING_SERVICE = "OAuth RFC5849 SDK"

ENV_REFERENCE = re.compile(r'^%env\{([^}]+)\}$')
# %keyring{username} or %keyring{service:username}
KEYRING_REFERENCE = re.compile(r'^%keyring\{(?:([^:}]+):)?([^}]+)\}$')


class SecretDecoder:
    """
    Decodes encoded or externally stored secrets.

    Args:
        fernet_key: Fernet key for ``ENC:`` values; defaults to the
            ``OAUTH_RFC5849_SECRET_KEY`` environment variable
        keyring_service: Service used for ``%keyring{username}`` references
    """

    def __init__(
        self,
        fernet_key: Optional[Union[str, bytes]] = None,
        keyring_service: Optional[str] = None
    ):
        self._fernet_key = fernet_key
        self.keyring_service = keyring_service or DEFAULT_KEYRING_SERVICE

    def __call__(self, value: Optional[str]) -> Optional[str]:
        return self.decode(value)

    def decode(self, value: Optional[str]) -> Optional[str]:
        """
        Decode a possibly encoded secret.

        Args:
            value: Plain secret, ``%env{NAME}``, ``%keyring{[service:]user}``
                or ``ENC:<token>``

        Returns:
            str: Plain secret (None stays None)

        Raises:
            SecretDecodeError: If the secret cannot be resolved or decrypted
        """
        if value is None:
            return None

        resolved = self.resolve_external(value)
        if resolved.startswith(ENCRYPTED_PREFIX):
            return self.decrypt(resolved[len(ENCRYPTED_PREFIX):])
        return resolved

    def resolve_external(self, value: str) -> str:
        """
        Replace an environment or keyring reference with its value.

        Raises:
            SecretDecodeError: If the referenced value does not exist
        """
        env_match = ENV_REFERENCE.match(value)
        if env_match:
            name = env_match.group(1)
            if name not in os.environ:
                raise SecretDecodeError(
                    f"Environment variable not set: {name}",
                    SigningErrorCodes.SECRET_DECODE_FAILED,
                    {"reference": value}
                )
            return os.environ[name]

        keyring_match = KEYRING_REFERENCE.match(value)
        if keyring_match:
            service = keyring_match.group(1) or self.keyring_service
            username = keyring_match.group(2)
            return self._from_keyring(service, username)

        return value

    def decrypt(self, token: str) -> str:
        """
        Decrypt a Fernet token.

        Raises:
            SecretDecodeError: If no key is configured or the token is invalid
        """
        try:
            return self._fernet().decrypt(token.encode('ascii')).decode('utf-8')
        except (InvalidToken, UnicodeError) as e:
            raise SecretDecodeError(
                "Encrypted secret could not be decrypted",
                SigningErrorCodes.SECRET_DECODE_FAILED,
                {"original_error": type(e).__name__}
            )

    def encrypt(self, plain: str) -> str:
        """
        Encrypt a secret for use in configuration.

        Returns:
            str: ``ENC:<token>``
        """
        token = self._fernet().encrypt(plain.encode('utf-8'))
        return ENCRYPTED_PREFIX + token.decode('ascii')

    @staticmethod
    def generate_key() -> str:
        """Generate a new Fernet key for encrypting secrets."""
        return Fernet.generate_key().decode('ascii')

    def _fernet(self) -> Fernet:
        key = self._fernet_key or os.environ.get(SECRET_KEY_ENV_VAR)
        if not key:
            raise SecretDecodeError(
                f"No secret key configured; set {SECRET_KEY_ENV_VAR}",
                SigningErrorCodes.SECRET_DECODE_FAILED
            )
        try:
            return Fernet(key)
        except (ValueError, TypeError) as e:
            raise SecretDecodeError(
                f"Invalid secret key: {e}",
                SigningErrorCodes.SECRET_DECODE_FAILED
            )

    def _from_keyring(self, service: str, username: str) -> str:
        try:
            secret = keyring.get_password(service, username)
        except KeyringError as e:
            raise SecretDecodeError(
                f"Keyring retrieval failed: {e}",
                SigningErrorCodes.SECRET_DECODE_FAILED,
                {"service": service, "username": username}
            )

        if secret is None:
            raise SecretDecodeError(
                f"No keyring entry for {service}:{username}",
                SigningErrorCodes.SECRET_DECODE_FAILED,
                {"service": service, "username": username}
            )
        logger.debug(f"Resolved secret from keyring service '{service}'")
        return secret


def decode_secret(value: Optional[str]) -> Optional[str]:
    """Decode a secret with a decoder that reads its key from the environment."""
    return SecretDecoder().decode(value)
