# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Entity type builder.

Top-level entry point for declaring the metadata of one entity class. It
owns the lazy get-or-create of DataProperty and NavigationProperty nodes
and hands out the fluent builders that configure them.

Flow: Entity class -> EntityTypeBuilder -> DataPropertyBuilder /
NavigationPropertyBuilder -> metadata graph in the store
"""

import logging
from typing import Optional

from entity_metadata.config import Config
from entity_metadata.data_property_builder import DataPropertyBuilder
from entity_metadata.entity import Entity
from entity_metadata.errors import InvalidOperationError, MetadataError
from entity_metadata.logging_setup import metadata_fields
from entity_metadata.member_resolver import (
    MemberRef,
    is_complex_type,
    navigation_target,
    resolve_member,
    unwrap_optional,
)
from entity_metadata.models import (
    DataProperty,
    DataType,
    EntityType,
    NavigationProperty,
    structural_name,
    type_name_from_host_type,
)
from entity_metadata.navigation_property_builder import NavigationPropertyBuilder
from entity_metadata.store import MetadataStore, get_default_store

logger = logging.getLogger(__name__)


class EntityTypeBuilder:
    """Declares data and navigation properties of one entity class.

    The EntityType is looked up in the store, or created there as a draft
    stamped with the host class. Any number of builders may exist for the
    same class; they all share one EntityType.

    Usage:
        order = EntityTypeBuilder(Order, store)
        order.data_property(lambda o: o.id).is_part_of_key().is_auto_incrementing()
        order.navigation_property(lambda o: o.customer).has_foreign_key("customer_id")
    """

    def __init__(
        self,
        host_type: type,
        metadata_store: Optional[MetadataStore] = None,
        config: Optional[Config] = None,
    ) -> None:
        if not (isinstance(host_type, type) and issubclass(host_type, Entity)):
            raise InvalidOperationError(f"{host_type!r} is not an Entity subclass")

        self.host_type = host_type
        self.metadata_store = metadata_store if metadata_store is not None else get_default_store()
        self.config = config if config is not None else Config.from_dict({})

        entity_type = self.metadata_store.get_entity_type(host_type, ok_if_missing=True)
        if entity_type is None:
            # Not published until it has a key
            entity_type = self.metadata_store.get_or_create_draft(host_type)
        self.entity_type: EntityType = entity_type

    def builder_for(self, host_type: type) -> "EntityTypeBuilder":
        """Builder for another entity class sharing this store and config."""
        return EntityTypeBuilder(host_type, self.metadata_store, self.config)

    def data_property(self, member_ref: MemberRef) -> DataPropertyBuilder:
        """Get or create the DataProperty for a member.

        Args:
            member_ref: Attribute name or accessor lambda.

        Returns:
            Builder wrapping the (possibly pre-existing) DataProperty.

        Raises:
            UnresolvableMemberError: If member_ref is not a plain member access.
            InvalidOperationError: If the member is a navigation.
            MetadataError: If the member's complex type is not registered, or
                its type is unmapped while strict_data_types is set.
        """
        member = resolve_member(self.host_type, member_ref)
        dp = self.entity_type.get_data_property(member.name)
        if dp is not None:
            return self._data_property_builder(dp)

        if navigation_target(member.declared_type) is not None:
            raise InvalidOperationError(
                f"{self.host_type.__qualname__}.{member.name} is a navigation, "
                f"use navigation_property()"
            )

        prop_type, is_optional = unwrap_optional(member.declared_type)
        if is_complex_type(member.declared_type):
            # complex objects have no default value
            dp = DataProperty(
                name=member.name,
                complex_type=self.metadata_store.get_complex_type(prop_type),
                is_nullable=False,
            )
        else:
            data_type = DataType.from_host_type(prop_type)
            if data_type == DataType.UNDEFINED:
                if self.config.strict_data_types:
                    raise MetadataError(
                        f"No data type for {self.host_type.__qualname__}.{member.name}: {prop_type!r}"
                    )
                logger.warning(
                    f"{self.host_type.__qualname__}.{member.name}: no data type for "
                    f"{prop_type!r}, using {DataType.UNDEFINED}",
                    extra=metadata_fields(self.entity_type, member.name),
                )
            dp = DataProperty(
                name=member.name,
                data_type=data_type,
                is_nullable=is_optional,
                default_value=None if is_optional else DataType.default_value(data_type),
            )

        self.entity_type.add_data_property(dp)
        logger.debug(
            f"Added data property {self.entity_type.short_name}.{dp.name}",
            extra=metadata_fields(self.entity_type, dp.name),
        )
        return self._data_property_builder(dp)

    def navigation_property(self, member_ref: MemberRef) -> NavigationPropertyBuilder:
        """Get or create the NavigationProperty for a member.

        An ``Entity`` (or ``Optional[Entity]``) annotation gives a scalar
        navigation, ``NavigationSet[Entity]`` a collection.

        Raises:
            UnresolvableMemberError: If member_ref is not a plain member access.
            InvalidOperationError: If the member is not a navigation.
        """
        member = resolve_member(self.host_type, member_ref)
        target = navigation_target(member.declared_type)
        if target is None:
            raise InvalidOperationError(
                f"{self.host_type.__qualname__}.{member.name} is not a navigation: "
                f"{member.declared_type!r}"
            )
        target_type, is_scalar = target
        return self._navigation_property_builder(member.name, target_type, is_scalar)

    def _navigation_property_builder(
        self, name: str, target_type: type, is_scalar: bool
    ) -> NavigationPropertyBuilder:
        np = self.entity_type.get_navigation_property(name)
        if np is None:
            np = NavigationProperty(
                name=name,
                is_scalar=is_scalar,
                entity_type_name=structural_name(*type_name_from_host_type(target_type)),
            )
            # may change later when paired with an inverse
            np.association_name = (
                f"{self.entity_type.name}{self.config.association_name_separator}{np.name}"
            )
            self.entity_type.add_navigation_property(np)
            logger.debug(
                f"Added navigation property {self.entity_type.short_name}.{np.name}",
                extra=metadata_fields(self.entity_type, np.name),
            )
        return NavigationPropertyBuilder(self, np, target_type)

    def _data_property_builder(self, dp: DataProperty) -> DataPropertyBuilder:
        return DataPropertyBuilder(dp, self.metadata_store, self.config)
