"""
Field Resolver - Maps logical GitHub fields to Jira custom field IDs.

Custom fields are created by a Jira administrator, so their numeric IDs
differ between instances. They are looked up once by name from the field
metadata endpoint.
"""

import logging
from typing import Any, Optional

from ...core.domain.value_objects import FieldName
from ...core.exceptions import ConfigurationError


class FieldResolver:
    """
    Resolves every FieldName to its `customfield_<N>` key.

    Resolution is lazy and cached for the lifetime of the resolver.
    """

    def __init__(self, client: Any):
        """
        Args:
            client: JiraApiClient (anything with `get_fields()`)
        """
        self.client = client
        self.logger = logging.getLogger("FieldResolver")
        self._ids: Optional[dict[FieldName, str]] = None

    def resolve(self) -> dict[FieldName, str]:
        """
        Look up the numeric ID of every tracked custom field.

        Returns:
            Mapping of FieldName to numeric custom field ID (as a string)

        Raises:
            ConfigurationError: If any tracked field doesn't exist in Jira
        """
        if self._ids is not None:
            return self._ids

        self.logger.debug("Collecting field IDs")
        by_name = {field.value: field for field in FieldName}
        ids: dict[FieldName, str] = {}

        for meta in self.client.get_fields():
            name = by_name.get(meta.get("name"))
            custom_id = (meta.get("schema") or {}).get("customId")
            if name is not None and custom_id is not None:
                ids[name] = str(custom_id)

        for name in FieldName:
            if name not in ids:
                raise ConfigurationError(f"Could not find ID of custom field {name.value!r}")

        self.logger.debug("All fields have been checked")
        self._ids = ids
        return ids

    def field_id(self, name: FieldName) -> str:
        """Numeric ID, as used in JQL `cf[<N>]` clauses."""
        return self.resolve()[name]

    def field_key(self, name: FieldName) -> str:
        """Field key, as used in issue JSON (`customfield_<N>`)."""
        return f"customfield_{self.field_id(name)}"

    def keys(self) -> dict[str, FieldName]:
        """Reverse mapping from field key to FieldName."""
        return {f"customfield_{custom_id}": name for name, custom_id in self.resolve().items()}
