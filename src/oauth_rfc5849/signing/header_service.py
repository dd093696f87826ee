"""
Offline Authorization header generation

Generating the header needs no connectivity, so it can be produced ahead
of the HTTP call and stored as message metadata for a later step to use.
If the payload is going to be ``application/x-www-form-urlencoded`` the
form fields must also be signed; select them from the metadata with a
MetadataFilter.
"""

import logging
import re
from typing import Dict, Iterable, Optional

from ..exceptions import ConfigurationError
from .authorization_spec import AuthorizationSpec
from .context import MessageContext
from .secret_decoder import SecretDecoder
from .types import SigningErrorCodes
from .utils import is_blank, percent_encode

logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"
DEFAULT_HTTP_METHOD = "POST"


class MetadataFilter:
    """
    Selects metadata entries whose key fully matches one of the patterns.

    With no patterns nothing is selected.
    """

    def __init__(self, include_patterns: Iterable[str] = ()):
        self.include_patterns = [re.compile(p) for p in include_patterns]

    def filter(self, metadata: Dict[str, str]) -> Dict[str, str]:
        return {
            key: value for key, value in metadata.items()
            if any(p.fullmatch(key) for p in self.include_patterns)
        }


class GenerateRfc5849Header:
    """
    Builds an RFC 5849 Authorization header and stores it as metadata.

    Args:
        url: Target URL (expression-capable)
        authorization_spec: Signing configuration
        http_method: HTTP method (expression-capable), POST by default
        target_metadata_key: Metadata key for the result
        additional_data: Filter selecting metadata to sign as form fields
        decoder: Secret decoder used when building the header
    """

    def __init__(
        self,
        url: Optional[str] = None,
        authorization_spec: Optional[AuthorizationSpec] = None,
        http_method: str = DEFAULT_HTTP_METHOD,
        target_metadata_key: Optional[str] = None,
        additional_data: Optional[MetadataFilter] = None,
        decoder: Optional[SecretDecoder] = None
    ):
        self.url = url
        self.authorization_spec = authorization_spec
        self.http_method = http_method
        self.target_metadata_key = target_metadata_key
        self.additional_data = additional_data
        self.decoder = decoder

    def init(self) -> None:
        """
        Validate configuration before use.

        Raises:
            ConfigurationError: If url, method or spec is missing
        """
        if is_blank(self.url):
            raise ConfigurationError("url may not be blank", SigningErrorCodes.MISSING_REQUIRED_FIELD, {"field": "url"})
        if self.authorization_spec is None:
            raise ConfigurationError(
                "authorizationSpec may not be null",
                SigningErrorCodes.MISSING_REQUIRED_FIELD,
                {"field": "authorizationSpec"}
            )
        if is_blank(self.http_method):
            raise ConfigurationError(
                "httpMethod may not be blank",
                SigningErrorCodes.MISSING_REQUIRED_FIELD,
                {"field": "httpMethod"}
            )

    def do_service(self, context: MessageContext) -> str:
        """
        Generate the header for a message and store it in its metadata.

        Args:
            context: Message to sign for; receives the header

        Returns:
            str: The generated header value
        """
        self.init()

        additional = {
            percent_encode(key): percent_encode(value)
            for key, value in self._additional_data_filter().filter(context.metadata).items()
        }
        builder = (self.authorization_spec
                   .builder(context.resolve(self.http_method), context.resolve(self.url), context, self.decoder)
                   .with_additional_data(additional))
        header = builder.build()

        key = self.resolved_target_metadata_key()
        context.add_metadata(key, header)
        logger.debug(f"Stored RFC5849 header in metadata key '{key}' for message {context.unique_id}")
        return header

    def resolved_target_metadata_key(self) -> str:
        return AUTHORIZATION if is_blank(self.target_metadata_key) else self.target_metadata_key

    def _additional_data_filter(self) -> MetadataFilter:
        return self.additional_data or MetadataFilter()
