# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Declarative builders for an entity metadata graph."""

from .config import Config, ConfigurationError
from .data_property_builder import DataPropertyBuilder
from .entity import ComplexObject, Entity, NavigationSet
from .entity_type_builder import EntityTypeBuilder
from .errors import InvalidOperationError, MetadataError, UnresolvableMemberError
from .logging_setup import StructuredFormatter, setup_logging
from .member_resolver import MemberInfo, resolve_member
from .models import (
    AutoGeneratedKeyType,
    ComplexType,
    ConcurrencyMode,
    DataProperty,
    DataType,
    EntityType,
    NavigationProperty,
)
from .navigation_property_builder import NavigationPropertyBuilder
from .store import InMemoryMetadataStore, MetadataStore, get_default_store, set_default_store

__version__ = "0.1.0"

__all__ = [
    "EntityTypeBuilder",
    "DataPropertyBuilder",
    "NavigationPropertyBuilder",
    "Entity",
    "ComplexObject",
    "NavigationSet",
    "EntityType",
    "ComplexType",
    "DataProperty",
    "NavigationProperty",
    "DataType",
    "AutoGeneratedKeyType",
    "ConcurrencyMode",
    "MetadataStore",
    "InMemoryMetadataStore",
    "get_default_store",
    "set_default_store",
    "MemberInfo",
    "resolve_member",
    "Config",
    "ConfigurationError",
    "MetadataError",
    "UnresolvableMemberError",
    "InvalidOperationError",
    "StructuredFormatter",
    "setup_logging",
]
