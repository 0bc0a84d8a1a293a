# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Member resolution for builder calls.

Builders identify a member of a host class either by name or by a
one-argument accessor such as ``lambda o: o.customer_id``. The accessor is
evaluated against a recording proxy, so only a single plain attribute access
is accepted. Declared types come from the class annotations.

Flow: member reference -> MemberInfo(name, declared_type)
"""

import logging
import types
from typing import (
    Any,
    Callable,
    List,
    NamedTuple,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from entity_metadata.entity import ComplexObject, Entity, NavigationSet
from entity_metadata.errors import UnresolvableMemberError

logger = logging.getLogger(__name__)

MemberRef = Union[str, Callable[[Any], Any]]

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES += (types.UnionType,)


class MemberInfo(NamedTuple):
    """Stable descriptor of a resolved member."""

    name: str
    declared_type: Any


class _AccessRecorder:
    """Proxy that records every attribute read made through it."""

    def __init__(self, accessed: List[str]) -> None:
        object.__setattr__(self, "_accessed", accessed)

    def __getattr__(self, name: str) -> "_AccessRecorder":
        if name.startswith("__"):
            raise AttributeError(name)
        self._accessed.append(name)
        return _AccessRecorder(self._accessed)


def _member_name_from_accessor(accessor: Callable[[Any], Any]) -> str:
    accessed: List[str] = []
    root = _AccessRecorder(accessed)
    try:
        result = accessor(root)
    except Exception as e:
        raise UnresolvableMemberError(
            f"Unable to resolve property for accessor {accessor!r}: {e}"
        ) from e

    if not isinstance(result, _AccessRecorder) or result is root or len(accessed) != 1:
        raise UnresolvableMemberError(
            f"Unable to resolve {accessor!r} as a property: "
            f"expected a single attribute access, got {accessed or 'none'}"
        )
    return accessed[0]


def resolve_member(host_type: type, member_ref: MemberRef) -> MemberInfo:
    """Resolve a member reference on a host class.

    Args:
        host_type: The class that declares the member.
        member_ref: Attribute name, or accessor lambda doing one attribute read.

    Returns:
        MemberInfo with the member name and its annotated type.

    Raises:
        UnresolvableMemberError: If the reference is not a plain member access
            or the member has no annotation on host_type.
    """
    if isinstance(member_ref, str):
        name = member_ref
    elif callable(member_ref):
        name = _member_name_from_accessor(member_ref)
    else:
        raise UnresolvableMemberError(f"Unsupported member reference: {member_ref!r}")

    try:
        hints = get_type_hints(host_type)
    except NameError as e:
        raise UnresolvableMemberError(
            f"Unable to evaluate annotations of {host_type.__qualname__}: {e}"
        ) from e

    if name not in hints:
        raise UnresolvableMemberError(f"{host_type.__qualname__} has no annotated member '{name}'")

    logger.debug(f"Resolved {host_type.__qualname__}.{name} -> {hints[name]!r}")
    return MemberInfo(name=name, declared_type=hints[name])


def unwrap_optional(declared_type: Any) -> Tuple[Any, bool]:
    """Strip None from a union annotation.

    Returns:
        Tuple of (remaining type, whether None was part of the union).
    """
    if get_origin(declared_type) not in _UNION_TYPES:
        return declared_type, False

    args = get_args(declared_type)
    non_none = tuple(a for a in args if a is not type(None))
    if len(non_none) == len(args):
        return declared_type, False
    if len(non_none) == 1:
        return non_none[0], True
    return Union[non_none], True


def navigation_target(declared_type: Any) -> Optional[Tuple[type, bool]]:
    """Classify an annotation as a navigation.

    Returns:
        (target entity class, is_scalar) for ``Entity``, ``Optional[Entity]``
        and ``NavigationSet[Entity]`` annotations, None otherwise.
    """
    inner, _ = unwrap_optional(declared_type)
    if isinstance(inner, type) and issubclass(inner, Entity):
        return inner, True

    origin = get_origin(inner)
    if isinstance(origin, type) and issubclass(origin, NavigationSet):
        args = get_args(inner)
        if args and isinstance(args[0], type) and issubclass(args[0], Entity):
            return args[0], False
    return None


def is_complex_type(declared_type: Any) -> bool:
    """Whether an annotation names a ComplexObject subclass."""
    inner, _ = unwrap_optional(declared_type)
    return isinstance(inner, type) and issubclass(inner, ComplexObject)
