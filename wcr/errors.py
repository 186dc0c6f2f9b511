from __future__ import annotations

from typing import Iterable, Optional


class WCRError(Exception):
    """Base class for failures scoped to a single dataset or chart computation."""


class EntityNotFound(WCRError, LookupError):
    def __init__(self, entity: str, available: Optional[Iterable[str]] = None) -> None:
        self.entity = entity
        self.available = [str(x) for x in (available or [])]
        msg = f"Unknown entity {entity!r}"
        if self.available:
            msg += f"; expected one of: {', '.join(self.available)}"
        super().__init__(msg)


class DataUnavailable(WCRError):
    pass


class InvalidParameter(WCRError, ValueError):
    pass
