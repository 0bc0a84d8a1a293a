# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Fluent configurator for one NavigationProperty.

Wires a navigation to its foreign keys and pairs it with its inverse on the
related entity type. Every call is a get-or-create keyed by member name, so
a relationship declared from either end, or from both, converges to one
bidirectional edge.
"""

import logging
from typing import TYPE_CHECKING

from entity_metadata.errors import InvalidOperationError
from entity_metadata.logging_setup import metadata_fields
from entity_metadata.member_resolver import MemberRef, navigation_target, resolve_member
from entity_metadata.models import NavigationProperty

if TYPE_CHECKING:
    from entity_metadata.entity_type_builder import EntityTypeBuilder

logger = logging.getLogger(__name__)


class NavigationPropertyBuilder:
    """Configures one navigation of the entity type behind an EntityTypeBuilder.

    Usage:
        (order_builder.navigation_property(lambda o: o.customer)
            .has_foreign_key(lambda o: o.customer_id)
            .has_inverse(lambda c: c.orders))
    """

    def __init__(
        self,
        entity_type_builder: "EntityTypeBuilder",
        navigation_property: NavigationProperty,
        target_type: type,
    ) -> None:
        self._etb = entity_type_builder
        self.navigation_property = navigation_property
        self.target_type = target_type

    def has_foreign_key(self, member_ref: MemberRef) -> "NavigationPropertyBuilder":
        """Declare a foreign key column on the owning entity.

        Args:
            member_ref: Data member of the owning entity.

        Raises:
            InvalidOperationError: If the navigation is collection-valued.
        """
        np = self.navigation_property
        if not np.is_scalar:
            raise InvalidOperationError(
                f"Can only call 'has_foreign_key' on a scalar navigation property, "
                f"'{np.name}' is a collection"
            )

        fk_prop = self._etb.data_property(member_ref).data_property
        fk_prop.is_foreign_key = True
        fk_prop.related_navigation_property = np
        if np.add_foreign_key_name(fk_prop.name):
            logger.debug(
                f"{self._etb.entity_type.short_name}.{np.name}: foreign key {fk_prop.name}",
                extra=metadata_fields(self._etb.entity_type, np.name),
            )
        return self

    # Only needed when the key column lives on the related entity.
    def has_inverse_foreign_key(self, member_ref: MemberRef) -> "NavigationPropertyBuilder":
        """Declare a foreign key column on the related entity.

        Args:
            member_ref: Data member of the target entity.
        """
        np = self.navigation_property
        inv_etb = self._etb.builder_for(self.target_type)
        inv_fk_prop = inv_etb.data_property(member_ref).data_property
        inv_fk_prop.is_foreign_key = True
        inv_fk_prop.inverse_navigation_property = np
        if np.add_inv_foreign_key_name(inv_fk_prop.name):
            logger.debug(
                f"{self._etb.entity_type.short_name}.{np.name}: "
                f"inverse foreign key {inv_etb.entity_type.short_name}.{inv_fk_prop.name}",
                extra=metadata_fields(self._etb.entity_type, np.name),
            )
        return self

    def has_inverse(self, member_ref: MemberRef) -> "NavigationPropertyBuilder":
        """Pair this navigation with a navigation on the target entity.

        The target navigation may be scalar or a NavigationSet; it is created
        if neither side declared it yet. Both nodes point at each other and
        take this side's association name.

        Args:
            member_ref: Navigation member of the target entity.

        Raises:
            InvalidOperationError: If the target member does not navigate
                back to this entity type, or either side is already paired
                with a different navigation.
        """
        member = resolve_member(self.target_type, member_ref)
        target = navigation_target(member.declared_type)
        owner_type = self._etb.host_type
        if target is None or not issubclass(owner_type, target[0]):
            raise InvalidOperationError(
                f"{self.target_type.__qualname__}.{member.name} does not navigate back to "
                f"{owner_type.__qualname__}"
            )

        paired = self.navigation_property.inverse
        if paired is not None and (
            paired.name != member.name
            or paired.parent_type is None
            or paired.parent_type.host_type is not self.target_type
        ):
            raise InvalidOperationError(
                f"Navigation '{self.navigation_property.name}' is already paired "
                f"with '{paired.name}'"
            )

        inv_etb = self._etb.builder_for(self.target_type)
        inv_np = inv_etb.navigation_property(member.name).navigation_property
        return self._has_inverse_core(inv_np)

    def _has_inverse_core(self, inv_np: NavigationProperty) -> "NavigationPropertyBuilder":
        np = self.navigation_property
        if inv_np is np:
            raise InvalidOperationError(f"Navigation '{np.name}' cannot be its own inverse")

        for node, partner in ((np, inv_np), (inv_np, np)):
            if node.inverse is not None and node.inverse is not partner:
                raise InvalidOperationError(
                    f"Navigation '{node.name}' is already paired with '{node.inverse.name}'"
                )

        np.inverse = inv_np
        inv_np.inverse = np
        inv_np.association_name = np.association_name
        logger.debug(
            f"Paired {np.name} <-> {inv_np.name} as {np.association_name}",
            extra=metadata_fields(self._etb.entity_type, np.name),
        )
        return self
