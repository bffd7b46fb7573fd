"""Static bearer-token identity table loaded from a JSON document."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from pydantic import BaseModel, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class Identity(BaseModel):
    """One named credential entry."""
    name: str
    token: str


_IDENTITY_LIST = TypeAdapter(list[Identity])


class TokenStore:
    """Read-only ``token -> name`` lookup.

    Built once at start-up and shared by every request without locking.
    When two identities carry the same token the later one wins.
    """

    def __init__(self, identities: Iterable[Identity] = ()):
        self._names: Mapping[str, str] = MappingProxyType(
            {identity.token: identity.name for identity in identities}
        )

    @classmethod
    def load(cls, path: str | Path) -> TokenStore:
        """Load identities from ``path``.

        A missing, unreadable or malformed document yields an empty store,
        which disables authentication instead of failing start-up.
        """
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            logger.warning("Identity table %s not readable (%s), authentication disabled", path, e)
            return cls()

        try:
            identities = _IDENTITY_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Identity table %s is malformed (%d errors), authentication disabled",
                path, e.error_count(),
            )
            return cls()

        store = cls(identities)
        logger.info("Loaded %d identities from %s", len(store), path)
        return store

    @property
    def is_empty(self) -> bool:
        return not self._names

    def resolve(self, token: str) -> str | None:
        """Return the identity name for ``token``, or None if unknown."""
        return self._names.get(token)

    def __contains__(self, token: object) -> bool:
        return token in self._names

    def __len__(self) -> int:
        return len(self._names)
