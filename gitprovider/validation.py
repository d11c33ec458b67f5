"""Field validation for provider-neutral and wire objects.

A :class:`Validator` accumulates violations for one named object and turns
them into a single :class:`~gitprovider.errors.ValidationError`. The same
validator serves two callers with different semantics:

- caller-supplied ``Info`` values, where a failure is an invalid argument;
- data decoded from a backend response, where a failure means the server broke
  its contract and is raised as ``InvalidServerDataError`` instead.
"""

from __future__ import annotations

import typing as typ

from .errors import InvalidServerDataError, ValidationError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class Validator:
    """Accumulate field violations for a named object."""

    def __init__(self, name: str) -> None:
        """Initialise an empty validator for the object called ``name``."""
        self._name = name
        self._violations: list[str] = []

    @property
    def name(self) -> str:
        """Return the name of the validated object."""
        return self._name

    def required(self, field: str) -> None:
        """Record that ``field`` is required but missing."""
        self._violations.append(f"field {field} is required")

    def invalid(self, field: str, value: object, *valid: object) -> None:
        """Record that ``field`` holds ``value``, which is not allowed."""
        message = f"field {field} is invalid: {value!r}"
        if valid:
            choices = ", ".join(repr(choice) for choice in valid)
            message = f"{message} (expected one of {choices})"
        self._violations.append(message)

    def error(self) -> ValidationError | None:
        """Return a combined error, or ``None`` when nothing was recorded."""
        if not self._violations:
            return None
        return ValidationError(self._name, self._violations)


class Validatable(typ.Protocol):
    """Objects that can validate themselves."""

    def validate(self) -> None:
        """Raise :class:`ValidationError` when the object is invalid."""
        ...


def validate_targets(name: str, *targets: Validatable) -> None:
    """Validate several objects, raising one error naming every failure.

    Parameters
    ----------
    name
        Name reported on the combined error.
    *targets
        Objects whose ``validate`` method is called in order.

    Raises
    ------
    ValidationError
        If any target fails validation.

    """
    violations: list[str] = []
    for target in targets:
        try:
            target.validate()
        except ValidationError as exc:
            violations.extend(f"{exc.name}: {v}" for v in exc.violations)
    if violations:
        raise ValidationError(name, violations)


def validate_api_object(name: str, fn: cabc.Callable[[Validator], None]) -> None:
    """Run ``fn`` against a fresh validator for server-provided data.

    Raises
    ------
    InvalidServerDataError
        Wrapping the :class:`ValidationError` when any field was reported.

    """
    validator = Validator(name)
    fn(validator)
    err = validator.error()
    if err is not None:
        raise InvalidServerDataError.wrap(err)


__all__ = [
    "Validatable",
    "Validator",
    "validate_api_object",
    "validate_targets",
]
