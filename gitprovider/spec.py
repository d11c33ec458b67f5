"""Projection of wire objects down to their caller-controlled fields.

A backend object mixes *spec* fields, which a create or update request would
send, with *status* fields assigned by the server (IDs, timestamps, URLs).
Comparing whole objects would make every fetched object look different from
the desired one, so reconciliation compares projections instead.
"""

from __future__ import annotations

import copy
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def project_spec[S: msgspec.Struct](obj: S, fields: cabc.Iterable[str]) -> S:
    """Return a new struct holding only ``fields`` copied from ``obj``.

    Every other field keeps its default (``None`` for wire types), so two
    projections compare equal exactly when their spec fields are deeply
    equal. ``obj`` is never modified and values are deep-copied, so later
    mutation of ``obj`` cannot leak into the projection.

    Parameters
    ----------
    obj
        A wire object whose non-spec fields all have defaults.
    fields
        Names of the spec fields to keep.

    Returns
    -------
    S
        A fresh instance of ``type(obj)``.

    """
    values = {name: copy.deepcopy(getattr(obj, name)) for name in fields}
    return type(obj)(**values)


__all__ = ["project_spec"]
