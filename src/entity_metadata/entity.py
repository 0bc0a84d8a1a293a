# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Host-side marker types for mapped classes.

Application classes opt into metadata building by subclassing one of these:
- Entity: a mapped entity with its own identity
- ComplexObject: a value object embedded in an entity
- NavigationSet: annotation type for collection-valued navigations
"""

from typing import List, TypeVar

T = TypeVar("T", bound="Entity")


class Entity:
    """Base class for mapped entity classes."""

    pass


class ComplexObject:
    """Base class for value objects stored inside an entity."""

    pass


class NavigationSet(List[T]):
    """Collection of related entities.

    Used as an annotation (``orders: NavigationSet["Order"]``) to mark a
    to-many navigation property.
    """

    pass
