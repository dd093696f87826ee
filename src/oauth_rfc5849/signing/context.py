"""
Message context for resolving expression-style configuration

A MessageContext stands in for the message being processed by the host
system: it carries the unique id used to derive nonces and the metadata
that ``%message{key}`` expressions are resolved against.
"""

import re
import uuid
from typing import Dict, Optional

from ..exceptions import ConfigurationError
from .types import SigningErrorCodes

MESSAGE_EXPRESSION = re.compile(r'%message\{([^}]+)\}')
UNIQUE_ID_EXPRESSION = "%uniqueId"


class MessageContext:
    """
    Per-message values available to expression resolution.

    Attributes:
        unique_id: Unique identifier of the message
        metadata: Message metadata (string keys and values)
    """

    def __init__(self, unique_id: Optional[str] = None, metadata: Optional[Dict[str, str]] = None):
        self.unique_id = unique_id or str(uuid.uuid4())
        self.metadata: Dict[str, str] = dict(metadata) if metadata else {}

    def resolve(self, expression: Optional[str]) -> Optional[str]:
        """
        Resolve ``%message{key}`` and ``%uniqueId`` tokens in a value.

        Values without tokens are returned unchanged; None stays None.

        Raises:
            ConfigurationError: If a referenced metadata key does not exist
        """
        if expression is None:
            return None

        def _lookup(match):
            key = match.group(1)
            if key not in self.metadata:
                raise ConfigurationError(
                    f"No metadata value for expression {match.group(0)}",
                    SigningErrorCodes.UNRESOLVED_EXPRESSION,
                    {"expression": match.group(0), "key": key}
                )
            return self.metadata[key]

        resolved = MESSAGE_EXPRESSION.sub(_lookup, expression)
        return resolved.replace(UNIQUE_ID_EXPRESSION, self.unique_id)

    def get_metadata(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.metadata.get(key, default)

    def add_metadata(self, key: str, value: str) -> None:
        self.metadata[key] = value

    def __repr__(self) -> str:
        return f"MessageContext(unique_id='{self.unique_id}', metadata_keys={sorted(self.metadata)})"
