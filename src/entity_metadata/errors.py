# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Exception taxonomy for metadata building.

All errors are raised at configuration time and indicate a mistake in the
model declaration. None of them are retryable.
"""


class MetadataError(Exception):
    """Base class for metadata graph errors."""

    pass


class UnresolvableMemberError(MetadataError):
    """Raised when a member reference is not a plain attribute access."""

    pass


class InvalidOperationError(MetadataError):
    """Raised when a builder call does not apply to the node it targets.

    Example: declaring a foreign key on a collection-valued navigation.
    """

    pass
