from apilisting.models import AccessLevel

INCLUDED_ACCESS_LEVELS = frozenset({AccessLevel.PUBLIC, AccessLevel.PROTECTED})


def is_included(access: AccessLevel) -> bool:
    """
    Return True when a declaration with *access* is part of the public API.
    Private and package-private declarations are left out of the listing.
    """
    return access in INCLUDED_ACCESS_LEVELS
