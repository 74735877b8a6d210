from typing import Any, NamedTuple


class Named(NamedTuple):
    """Resolve a constructor parameter by a named identifier instead of its type.

    Attach ``Named`` metadata to ``typing.Annotated`` when the service is
    registered under a string identifier. Contextual overrides registered with
    ``needs("name")`` match the same identifier.

    Examples:
        .. code-block:: python

            from typing import Annotated


            class ReportMailer:
                def __init__(self, cache: Annotated[CacheStore, Named("cache.advanced")]) -> None:
                    self.cache = cache

    """

    identifier: Any
