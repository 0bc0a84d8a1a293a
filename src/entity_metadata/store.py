# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Metadata store abstraction.

The store maps host classes to their EntityType/ComplexType nodes and is the
arena every builder shares.

Components:
- MetadataStore: Abstract interface for store backends
- InMemoryMetadataStore: Dict-indexed in-memory implementation
- get_default_store / set_default_store: Process-wide store instance

EntityType lifecycle: a type starts as a draft (known to builders through
get_or_create_draft, invisible to queries) and is published by
add_entity_type once it has at least one key property.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from entity_metadata.errors import MetadataError
from entity_metadata.logging_setup import metadata_fields
from entity_metadata.models import ComplexType, EntityType

logger = logging.getLogger(__name__)


class MetadataStore(ABC):
    """Abstract interface for the shared metadata graph."""

    @abstractmethod
    def get_entity_type(self, host_type: type, ok_if_missing: bool = False) -> Optional[EntityType]:
        """Get the published EntityType for a host class.

        Args:
            host_type: Mapped entity class.
            ok_if_missing: Return None instead of raising when not published.

        Raises:
            MetadataError: If not published and ok_if_missing is False.
        """
        pass

    @abstractmethod
    def get_or_create_draft(self, host_type: type) -> EntityType:
        """Get the EntityType for a host class, published or draft.

        Creates a new draft stamped with host_type when none exists yet.
        """
        pass

    @abstractmethod
    def add_entity_type(self, entity_type: EntityType) -> None:
        """Publish an EntityType.

        Raises:
            MetadataError: If it has no key properties, or another EntityType
                is already published under the same host class or name.
        """
        pass

    @abstractmethod
    def check_can_publish(self, entity_type: EntityType) -> None:
        """Check that add_entity_type would accept an EntityType once it has a key.

        Lets callers validate before mutating the graph.

        Raises:
            MetadataError: If it has no host type, or another EntityType is
                already published under the same host class or name.
        """
        pass

    @abstractmethod
    def get_entity_type_by_name(self, name: str) -> Optional[EntityType]:
        """Get a published EntityType by structural name. None if not found."""
        pass

    @abstractmethod
    def get_entity_types(self) -> List[EntityType]:
        """Get all published EntityTypes in publication order."""
        pass

    @abstractmethod
    def add_complex_type(self, complex_type: ComplexType) -> None:
        """Register a ComplexType."""
        pass

    @abstractmethod
    def get_complex_type(self, host_type: type) -> ComplexType:
        """Get the ComplexType for a value-object class.

        Raises:
            MetadataError: If no ComplexType is registered for host_type.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop all types, published and draft."""
        pass


class InMemoryMetadataStore(MetadataStore):
    """In-memory store.

    Limitations:
    - NOT thread-safe: all builder calls are expected to run during a
      single-threaded configuration phase before the graph is read
      concurrently.

    Data Structure:
    - _by_host_type: host class -> EntityType (drafts and published)
    - _by_name: structural name -> published EntityType
    - _complex_types: host class -> ComplexType
    """

    def __init__(self) -> None:
        self._by_host_type: Dict[type, EntityType] = {}
        self._by_name: Dict[str, EntityType] = {}
        self._complex_types: Dict[type, ComplexType] = {}

    def get_entity_type(self, host_type: type, ok_if_missing: bool = False) -> Optional[EntityType]:
        entity_type = self._by_host_type.get(host_type)
        if entity_type is not None and entity_type.is_published:
            return entity_type
        if ok_if_missing:
            return None
        raise MetadataError(f"No published entity type for {host_type.__qualname__}")

    def get_or_create_draft(self, host_type: type) -> EntityType:
        entity_type = self._by_host_type.get(host_type)
        if entity_type is None:
            entity_type = EntityType.for_host_type(host_type)
            self._by_host_type[host_type] = entity_type
            logger.debug(
                f"Created draft entity type {entity_type.name}",
                extra=metadata_fields(entity_type),
            )
        return entity_type

    def check_can_publish(self, entity_type: EntityType) -> None:
        if entity_type.host_type is None:
            raise MetadataError(f"Entity type {entity_type.name} has no host type")

        existing = self._by_host_type.get(entity_type.host_type)
        if existing is not None and existing is not entity_type and existing.is_published:
            raise MetadataError(
                f"Another entity type is already published for "
                f"{entity_type.host_type.__qualname__}"
            )
        named = self._by_name.get(entity_type.name)
        if named is not None and named is not entity_type:
            raise MetadataError(f"Entity type name {entity_type.name} is already published")

    def add_entity_type(self, entity_type: EntityType) -> None:
        self.check_can_publish(entity_type)
        if not entity_type.key_properties:
            raise MetadataError(
                f"Entity type {entity_type.name} cannot be published without key properties"
            )
        assert entity_type.host_type is not None

        if entity_type.is_published:
            return

        self._by_host_type[entity_type.host_type] = entity_type
        self._by_name[entity_type.name] = entity_type
        entity_type.is_published = True
        logger.info(
            f"Published entity type {entity_type.name} "
            f"(key: {[dp.name for dp in entity_type.key_properties]})",
            extra=metadata_fields(entity_type),
        )

    def get_entity_type_by_name(self, name: str) -> Optional[EntityType]:
        return self._by_name.get(name)

    def get_entity_types(self) -> List[EntityType]:
        return list(self._by_name.values())

    def add_complex_type(self, complex_type: ComplexType) -> None:
        if complex_type.host_type is None:
            raise MetadataError(f"Complex type {complex_type.name} has no host type")
        self._complex_types[complex_type.host_type] = complex_type

    def get_complex_type(self, host_type: type) -> ComplexType:
        complex_type = self._complex_types.get(host_type)
        if complex_type is None:
            raise MetadataError(f"No complex type registered for {host_type.__qualname__}")
        return complex_type

    def clear(self) -> None:
        """Drop all types.

        Used for testing and rebuilding the model from scratch.
        """
        self._by_host_type.clear()
        self._by_name.clear()
        self._complex_types.clear()


_default_store: Optional[MetadataStore] = None


def get_default_store() -> MetadataStore:
    """Get the process-wide store, creating an InMemoryMetadataStore on first use."""
    global _default_store
    if _default_store is None:
        _default_store = InMemoryMetadataStore()
    return _default_store


def set_default_store(store: Optional[MetadataStore]) -> None:
    """Replace the process-wide store. Passing None resets it."""
    global _default_store
    _default_store = store
