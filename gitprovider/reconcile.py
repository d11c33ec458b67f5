"""Reconciliation of desired state against a backend.

Every resource wrapper reconciles through :func:`reconcile_resource`. The
wrapper supplies the backend-specific pieces (fetching the actual object,
creating, updating and projecting specs) and the function decides what to do:

- the fetch raises ``NotFoundError``: create from the desired spec, return
  ``True``;
- the fetch raises anything else: nothing is written, the error propagates;
- the spec projections are equal: nothing is written, return ``False``;
- the spec projections differ: run the resource-specific update, return
  ``True``.

Only spec fields are compared, so status drift (IDs, timestamps) never
triggers a write. At most one corrective write sequence happens per call.
Two concurrent reconciles of the same missing resource may both try to
create it; the loser surfaces ``AlreadyExistsError``.
"""

from __future__ import annotations

import enum
import typing as typ

from .errors import GitProviderError, NotFoundError
from .logging import get_logger, log_error, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import msgspec

logger = get_logger(__name__)


class ReconcileAction(enum.StrEnum):
    """Outcome of one reconciliation, used in structured log lines."""

    CREATE = "reconcile.create"
    UPDATE = "reconcile.update"
    NOOP = "reconcile.noop"


class Reconcilable[T: msgspec.Struct](typ.Protocol):
    """Backend-specific hooks driven by :func:`reconcile_resource`."""

    def describe(self) -> str:
        """Return a short identifier of the resource for log lines."""
        ...

    def desired_object(self) -> T:
        """Return the wire object holding the desired state."""
        ...

    def project_spec(self, obj: T) -> T:
        """Return the spec projection of ``obj``."""
        ...

    async def fetch_actual(self) -> T:
        """Fetch the current object, raising ``NotFoundError`` if absent."""
        ...

    async def create(self) -> None:
        """Create the resource and store the server's response."""
        ...

    async def update_from(self, actual: T) -> None:
        """Make ``actual`` match the desired state and store the result."""
        ...


async def reconcile_resource[T: msgspec.Struct](target: Reconcilable[T]) -> bool:
    """Converge the backend towards ``target``'s desired state.

    Returns
    -------
    bool
        ``True`` when a create or update was performed, ``False`` when the
        actual state already matched.

    Raises
    ------
    GitProviderError
        Any failure of the fetch (other than not-found), create or update,
        unchanged.

    """
    try:
        actual = await target.fetch_actual()
    except NotFoundError:
        actual = None
    return await reconcile_against(target, actual)


async def reconcile_against[T: msgspec.Struct](
    target: Reconcilable[T], actual: T | None
) -> bool:
    """Converge ``target`` against an ``actual`` object fetched by the caller.

    ``None`` means the resource does not exist. Callers that have just read
    the resource use this to skip the second fetch of
    :func:`reconcile_resource`.
    """
    resource = target.describe()
    if actual is None:
        log_info(logger, "[%s] resource=%s", ReconcileAction.CREATE, resource)
        await _logged(target.create(), ReconcileAction.CREATE, resource)
        return True

    if target.project_spec(target.desired_object()) == target.project_spec(actual):
        log_info(logger, "[%s] resource=%s", ReconcileAction.NOOP, resource)
        return False

    log_info(logger, "[%s] resource=%s", ReconcileAction.UPDATE, resource)
    await _logged(target.update_from(actual), ReconcileAction.UPDATE, resource)
    return True


async def _logged(
    write: cabc.Awaitable[None], action: ReconcileAction, resource: str
) -> None:
    try:
        await write
    except GitProviderError as exc:
        log_error(
            logger,
            "[reconcile.failed] action=%s resource=%s error=%s",
            action,
            resource,
            type(exc).__name__,
        )
        raise


__all__ = [
    "Reconcilable",
    "ReconcileAction",
    "reconcile_against",
    "reconcile_resource",
]
