"""Per-request authorization decision against the identity table."""

from __future__ import annotations

import logging

from asset_files.services.token_store import TokenStore

logger = logging.getLogger(__name__)

READ_METHODS = frozenset({"GET", "HEAD"})


class AuthError(Exception):
    """Request rejected before any file operation runs."""


class MissingCredentialError(AuthError):
    """No bearer credential was presented."""


class InvalidCredentialError(AuthError):
    """The presented credential matches no identity."""


def authorize(
    tokens: TokenStore,
    method: str,
    credential: str | None,
    public_reads: bool = False,
) -> str | None:
    """Decide whether a request may proceed.

    Returns the resolved identity name, or None when the request is allowed
    without one (no identities configured, or a public read). Raises an
    ``AuthError`` subclass when the request must be rejected.
    """
    if tokens.is_empty:
        return None

    if public_reads and method.upper() in READ_METHODS:
        return None

    if not credential:
        raise MissingCredentialError("No bearer credential provided")

    name = tokens.resolve(credential)
    if name is None:
        raise InvalidCredentialError("Unknown bearer credential")

    logger.debug("Authorized %s request as %s", method, name)
    return name
