# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Fluent configurator for one DataProperty."""

import logging
from typing import Any, Optional

from entity_metadata.config import Config
from entity_metadata.errors import InvalidOperationError
from entity_metadata.logging_setup import metadata_fields
from entity_metadata.models import AutoGeneratedKeyType, DataProperty, EntityType
from entity_metadata.store import MetadataStore

logger = logging.getLogger(__name__)


class DataPropertyBuilder:
    """Mutates the flags of one DataProperty.

    Every method returns the builder, so calls chain:

        builder.data_property("id").is_part_of_key().is_auto_incrementing()

    Values are not checked against the property's data type; a caller can
    set a default the type cannot hold.
    """

    def __init__(
        self,
        data_property: DataProperty,
        metadata_store: Optional[MetadataStore] = None,
        config: Optional[Config] = None,
    ) -> None:
        self.data_property = data_property
        self._metadata_store = metadata_store
        self._config = config if config is not None else Config.from_dict({})

    def is_nullable(self) -> "DataPropertyBuilder":
        """Allow None values.

        Raises:
            InvalidOperationError: For key and complex-valued properties,
                which are never nullable. The call is rejected rather than
                silently applied, so a key can never end up nullable.
        """
        dp = self.data_property
        if dp.is_part_of_key:
            raise InvalidOperationError(f"Key property '{dp.name}' cannot be nullable")
        if dp.is_complex_property:
            raise InvalidOperationError(f"Complex property '{dp.name}' cannot be nullable")
        dp.is_nullable = True
        return self

    def is_required(self) -> "DataPropertyBuilder":
        self.data_property.is_nullable = False
        return self

    def is_part_of_key(self) -> "DataPropertyBuilder":
        """Mark the property as (part of) the primary key.

        Forces the property non-nullable and appends it to the owning
        entity type's key list once. A draft entity type is published to
        the store when it gets its first key, unless disabled in config.

        Raises:
            MetadataError: If the draft cannot be published. The property and
                the key list are left untouched.
        """
        dp = self.data_property
        entity_type = dp.parent_type
        if not isinstance(entity_type, EntityType):
            dp.is_part_of_key = True
            dp.is_nullable = False
            return self

        publisher = None
        if not entity_type.is_published and self._config.auto_publish_on_key:
            publisher = self._metadata_store
        if publisher is not None:
            publisher.check_can_publish(entity_type)

        entity_type.add_key_property(dp)
        if publisher is not None:
            publisher.add_entity_type(entity_type)
            logger.debug(
                f"Published {entity_type.name} on key '{dp.name}'",
                extra=metadata_fields(entity_type, dp.name),
            )
        return self

    def is_auto_incrementing(self) -> "DataPropertyBuilder":
        """Mark the property as store-generated.

        The owning entity type becomes Identity-keyed. Last call wins when
        several properties are marked; composite identity keys are not
        modelled.
        """
        dp = self.data_property
        dp.is_auto_incrementing = True

        entity_type = dp.parent_type
        if isinstance(entity_type, EntityType):
            if self._config.warn_on_identity_overwrite:
                others = [
                    other.name
                    for other in entity_type.data_properties
                    if other is not dp and other.is_auto_incrementing
                ]
                if others:
                    logger.warning(
                        f"{entity_type.name}: '{dp.name}' marked auto-incrementing "
                        f"after {others}; only one identity column is supported",
                        extra=metadata_fields(entity_type, dp.name),
                    )
            entity_type.auto_generated_key_type = AutoGeneratedKeyType.IDENTITY
        return self

    def default_value(self, value: Any) -> "DataPropertyBuilder":
        """Set the default value.

        Raises:
            InvalidOperationError: For complex-valued properties, which carry
                no default.
        """
        if self.data_property.is_complex_property:
            raise InvalidOperationError(
                f"Complex property '{self.data_property.name}' cannot have a default value"
            )
        self.data_property.default_value = value
        return self

    def concurrency_mode(self, mode: str) -> "DataPropertyBuilder":
        self.data_property.concurrency_mode = mode
        return self

    def max_length(self, max_length: Optional[int]) -> "DataPropertyBuilder":
        self.data_property.max_length = max_length
        return self

    def is_scalar(self, is_scalar: bool) -> "DataPropertyBuilder":
        self.data_property.is_scalar = is_scalar
        return self
