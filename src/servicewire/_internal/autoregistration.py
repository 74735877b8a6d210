from __future__ import annotations

import datetime
import decimal
import pathlib
import uuid
from typing import Any, TypeGuard

from servicewire._internal.type_checks import is_instantiable, is_runtime_class

# Classes with perfectly good constructors that are values, never services.
VALUE_OBJECT_BASES: tuple[type[Any], ...] = (
    pathlib.PurePath,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    decimal.Decimal,
)


class ConcreteTypeAutoregistrationPolicy:
    """Decide which unbound identifiers the container may build as their own concrete."""

    __slots__ = ("_excluded_bases",)

    def __init__(self, excluded_bases: tuple[type[Any], ...] = VALUE_OBJECT_BASES) -> None:
        self._excluded_bases = excluded_bases

    def is_eligible_concrete(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true for user classes that calling can turn into a service.

        Builtins, metaclasses, abstract classes, protocols and value objects
        such as paths, dates and UUIDs are never built implicitly.

        Args:
            candidate: Identifier being checked.

        """
        return (
            is_runtime_class(candidate)
            and candidate.__module__ != "builtins"
            and not issubclass(candidate, type)
            and is_instantiable(candidate)
            and not issubclass(candidate, self._excluded_bases)
        )
