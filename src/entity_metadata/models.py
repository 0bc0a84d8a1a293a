# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Core data models for the entity metadata graph.

This module defines the nodes of the metadata graph and the vocabularies
they use:
- DataType: Primitive data kinds and their host-type mapping
- AutoGeneratedKeyType: How an entity's key values are generated
- ConcurrencyMode: Optimistic concurrency behavior of a data property
- EntityType: Metadata for one mapped entity class
- ComplexType: Metadata for one value-object class
- DataProperty: A scalar or complex-valued member
- NavigationProperty: A relational member pointing at another entity type

Cross-node edges (parent_type, inverse, related/inverse navigation) are
non-owning references into the same graph. They are left out of repr and
rendered as names by to_dict(), so cycles never recurse.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

from entity_metadata.errors import MetadataError

logger = logging.getLogger(__name__)


class DataType:
    """Primitive data kinds for data properties.

    Design: Using class constants (not Enum) for JSON-compatible strings.
    """

    STRING = "String"
    INT64 = "Int64"
    DOUBLE = "Double"
    DECIMAL = "Decimal"
    BOOLEAN = "Boolean"
    DATE_TIME = "DateTime"
    DATE = "Date"
    TIME = "Time"
    TIME_SPAN = "TimeSpan"
    GUID = "Guid"
    BINARY = "Binary"
    UNDEFINED = "Undefined"

    # Order matters: bool is a subclass of int, datetime of date
    _HOST_TYPES: List[Tuple[type, str]] = [
        (bool, BOOLEAN),
        (int, INT64),
        (float, DOUBLE),
        (Decimal, DECIMAL),
        (str, STRING),
        (datetime, DATE_TIME),
        (date, DATE),
        (time, TIME),
        (timedelta, TIME_SPAN),
        (uuid.UUID, GUID),
        (bytes, BINARY),
    ]

    _DEFAULT_VALUES: Dict[str, Any] = {
        STRING: "",
        INT64: 0,
        DOUBLE: 0.0,
        DECIMAL: Decimal(0),
        BOOLEAN: False,
        DATE_TIME: datetime.min,
        DATE: date.min,
        TIME: time.min,
        TIME_SPAN: timedelta(0),
        GUID: uuid.UUID(int=0),
        BINARY: b"",
    }

    @classmethod
    def from_host_type(cls, host_type: Any) -> str:
        """Map a Python type to a DataType value.

        Args:
            host_type: Declared (already unwrapped) Python type.

        Returns:
            DataType value, UNDEFINED when the type has no primitive mapping.
        """
        if isinstance(host_type, type):
            for py_type, data_type in cls._HOST_TYPES:
                if issubclass(host_type, py_type):
                    return data_type
        return cls.UNDEFINED

    @classmethod
    def default_value(cls, data_type: str) -> Any:
        """Zero value for a DataType (None for UNDEFINED)."""
        return cls._DEFAULT_VALUES.get(data_type)


class AutoGeneratedKeyType:
    """How key values of an entity type are generated."""

    NONE = "None"
    IDENTITY = "Identity"  # generated by the data store
    KEY_GENERATOR = "KeyGenerator"  # generated by a client-side key generator


class ConcurrencyMode:
    """Concurrency behavior of a data property."""

    NONE = "None"
    FIXED = "Fixed"  # value participates in optimistic concurrency checks


def structural_name(short_name: str, namespace: str) -> str:
    """Build a structural type name like "Order:#myapp.models"."""
    return f"{short_name}:#{namespace}"


def type_name_from_host_type(host_type: type) -> Tuple[str, str]:
    """Split a host class into (short_name, namespace).

    The short name is the qualified name, so nested classes such as
    ``A.Item`` and ``B.Item`` in one module stay distinct.
    """
    return host_type.__qualname__, host_type.__module__


@dataclass(eq=False)
class StructuralType:
    """Common part of EntityType and ComplexType.

    Nodes compare by identity: two EntityType objects for the same class
    are never interchangeable.
    """

    short_name: str
    namespace: str
    host_type: Optional[type] = field(default=None, repr=False)
    data_properties: List["DataProperty"] = field(default_factory=list, repr=False)

    @classmethod
    def for_host_type(cls, host_type: type) -> "StructuralType":
        short_name, namespace = type_name_from_host_type(host_type)
        return cls(short_name=short_name, namespace=namespace, host_type=host_type)

    @property
    def name(self) -> str:
        return structural_name(self.short_name, self.namespace)

    def get_data_property(self, name: str) -> Optional["DataProperty"]:
        """Look up a data property by name.

        Returns:
            DataProperty if found, None otherwise.
        """
        for dp in self.data_properties:
            if dp.name == name:
                return dp
        return None

    def add_data_property(self, dp: "DataProperty") -> None:
        """Append a data property and make this type its parent.

        Raises:
            MetadataError: If a property with the same name already exists.
        """
        if self.get_data_property(dp.name) is not None:
            raise MetadataError(f"{self.name} already has a data property named '{dp.name}'")
        dp.parent_type = self
        self.data_properties.append(dp)


@dataclass(eq=False)
class ComplexType(StructuralType):
    """Metadata for a value-object class."""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "short_name": self.short_name,
            "namespace": self.namespace,
            "is_complex_type": True,
            "data_properties": [dp.to_dict() for dp in self.data_properties],
        }


@dataclass(eq=False)
class EntityType(StructuralType):
    """Metadata for one mapped entity class.

    Invariant: a DataProperty is in key_properties iff its is_part_of_key
    flag is set, and appears there at most once.

    Lifecycle: a new EntityType is a draft (is_published False) and is not
    returned by store queries until the store publishes it.
    """

    navigation_properties: List["NavigationProperty"] = field(default_factory=list, repr=False)
    auto_generated_key_type: str = AutoGeneratedKeyType.NONE
    is_published: bool = False
    _key_properties: List["DataProperty"] = field(default_factory=list, repr=False)

    @property
    def key_properties(self) -> Tuple["DataProperty", ...]:
        return tuple(self._key_properties)

    @property
    def foreign_key_properties(self) -> List["DataProperty"]:
        return [dp for dp in self.data_properties if dp.is_foreign_key]

    def add_data_property(self, dp: "DataProperty") -> None:
        super().add_data_property(dp)
        if dp.is_part_of_key:
            self.add_key_property(dp)

    def add_key_property(self, dp: "DataProperty") -> bool:
        """Add one of this type's data properties to the key if not already present.

        Marks the property as part of the key and non-nullable, so key
        membership and the property flags never disagree.

        Returns:
            True if the property was added, False if it was already a key.

        Raises:
            MetadataError: If the property belongs to another type.
        """
        if dp.parent_type is not self:
            raise MetadataError(f"Data property '{dp.name}' does not belong to {self.name}")
        dp.is_part_of_key = True
        dp.is_nullable = False
        if dp in self._key_properties:
            return False
        self._key_properties.append(dp)
        return True

    def get_navigation_property(self, name: str) -> Optional["NavigationProperty"]:
        """Look up a navigation property by name.

        Returns:
            NavigationProperty if found, None otherwise.
        """
        for np in self.navigation_properties:
            if np.name == name:
                return np
        return None

    def add_navigation_property(self, np: "NavigationProperty") -> None:
        """Append a navigation property and make this type its parent.

        Raises:
            MetadataError: If a navigation with the same name already exists.
        """
        if self.get_navigation_property(np.name) is not None:
            raise MetadataError(f"{self.name} already has a navigation property named '{np.name}'")
        np.parent_type = self
        self.navigation_properties.append(np)

    def get_property(self, name: str) -> Optional[Union["DataProperty", "NavigationProperty"]]:
        """Look up a data or navigation property by name."""
        return self.get_data_property(name) or self.get_navigation_property(name)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "short_name": self.short_name,
            "namespace": self.namespace,
            "auto_generated_key_type": self.auto_generated_key_type,
            "key_properties": [dp.name for dp in self._key_properties],
            "data_properties": [dp.to_dict() for dp in self.data_properties],
            "navigation_properties": [np.to_dict() for np in self.navigation_properties],
        }


@dataclass(eq=False)
class DataProperty:
    """A scalar or complex-valued member of an entity or complex type.

    Exactly one of data_type and complex_type is set.
    """

    name: str
    data_type: Optional[str] = None
    complex_type: Optional[ComplexType] = field(default=None, repr=False)
    is_nullable: bool = True
    default_value: Any = None
    is_part_of_key: bool = False
    is_auto_incrementing: bool = False
    is_foreign_key: bool = False
    concurrency_mode: str = ConcurrencyMode.NONE
    max_length: Optional[int] = None
    is_scalar: bool = True

    # Non-owning graph edges
    parent_type: Optional[StructuralType] = field(default=None, repr=False)
    related_navigation_property: Optional["NavigationProperty"] = field(default=None, repr=False)
    inverse_navigation_property: Optional["NavigationProperty"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if (self.data_type is None) == (self.complex_type is None):
            raise MetadataError(
                f"Data property '{self.name}' needs exactly one of data_type or complex_type"
            )

    @property
    def is_complex_property(self) -> bool:
        return self.complex_type is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict.

        Returns:
            Dictionary with flags always present and optional fields only
            when set. Graph edges are rendered by name.
        """
        result: Dict[str, Any] = {
            "name": self.name,
            "is_nullable": self.is_nullable,
            "is_part_of_key": self.is_part_of_key,
            "is_auto_incrementing": self.is_auto_incrementing,
            "is_foreign_key": self.is_foreign_key,
            "is_scalar": self.is_scalar,
            "concurrency_mode": self.concurrency_mode,
        }
        if self.data_type is not None:
            result["data_type"] = self.data_type
        if self.complex_type is not None:
            result["complex_type_name"] = self.complex_type.name
        if self.default_value is not None:
            result["default_value"] = repr(self.default_value)
        if self.max_length is not None:
            result["max_length"] = self.max_length
        if self.related_navigation_property is not None:
            result["related_navigation_property"] = self.related_navigation_property.name
        if self.inverse_navigation_property is not None:
            result["inverse_navigation_property"] = self.inverse_navigation_property.name
        return result


@dataclass(eq=False)
class NavigationProperty:
    """A relational member pointing at another entity type.

    States: unpaired (inverse is None) -> paired. Once paired, both sides
    share association_name and a.inverse.inverse is a.
    """

    name: str
    entity_type_name: str  # structural name of the target entity type
    is_scalar: bool = True
    association_name: Optional[str] = None
    _foreign_key_names: List[str] = field(default_factory=list)
    _inv_foreign_key_names: List[str] = field(default_factory=list)

    # Non-owning graph edges
    inverse: Optional["NavigationProperty"] = field(default=None, repr=False)
    parent_type: Optional[EntityType] = field(default=None, repr=False)

    @property
    def foreign_key_names(self) -> Tuple[str, ...]:
        return tuple(self._foreign_key_names)

    @property
    def inv_foreign_key_names(self) -> Tuple[str, ...]:
        return tuple(self._inv_foreign_key_names)

    @property
    def is_paired(self) -> bool:
        return self.inverse is not None

    def add_foreign_key_name(self, name: str) -> bool:
        """Record a foreign key on the owning side. Returns False if already known."""
        if name in self._foreign_key_names:
            return False
        self._foreign_key_names.append(name)
        return True

    def add_inv_foreign_key_name(self, name: str) -> bool:
        """Record a foreign key on the related side. Returns False if already known."""
        if name in self._inv_foreign_key_names:
            return False
        self._inv_foreign_key_names.append(name)
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        result: Dict[str, Any] = {
            "name": self.name,
            "entity_type_name": self.entity_type_name,
            "is_scalar": self.is_scalar,
            "association_name": self.association_name,
        }
        if self._foreign_key_names:
            result["foreign_key_names"] = list(self._foreign_key_names)
        if self._inv_foreign_key_names:
            result["inv_foreign_key_names"] = list(self._inv_foreign_key_names)
        if self.inverse is not None:
            result["inverse"] = self.inverse.name
        return result
