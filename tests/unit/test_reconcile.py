"""Unit tests for the reconciliation driver."""

from __future__ import annotations

import dataclasses

import msgspec
import pytest

from gitprovider.errors import HTTPError, NotFoundError
from gitprovider.reconcile import reconcile_against, reconcile_resource
from gitprovider.spec import project_spec
from tests.helpers.femtologging_capture import capture_logs


class _Widget(msgspec.Struct, kw_only=True):
    id: int | None = None
    name: str | None = None
    colour: str | None = None


_SPEC_FIELDS = ("name", "colour")


@dataclasses.dataclass(slots=True)
class _FakeTarget:
    desired: _Widget
    actual: _Widget | None = None
    fetch_error: Exception | None = None
    write_error: Exception | None = None
    writes: list[str] = dataclasses.field(default_factory=list)

    def describe(self) -> str:
        return f"widget/{self.desired.name}"

    def desired_object(self) -> _Widget:
        return self.desired

    def project_spec(self, obj: _Widget) -> _Widget:
        return project_spec(obj, _SPEC_FIELDS)

    async def fetch_actual(self) -> _Widget:
        if self.fetch_error is not None:
            raise self.fetch_error
        if self.actual is None:
            raise NotFoundError.named("widget", str(self.desired.name))
        return self.actual

    async def create(self) -> None:
        self.writes.append("create")
        if self.write_error is not None:
            raise self.write_error
        self.actual = msgspec.structs.replace(self.desired, id=1)

    async def update_from(self, actual: _Widget) -> None:
        self.writes.append("update")
        if self.write_error is not None:
            raise self.write_error
        self.actual = msgspec.structs.replace(self.desired, id=actual.id)


@pytest.mark.asyncio
async def test_missing_resource_is_created() -> None:
    """A not-found fetch leads to exactly one create."""
    target = _FakeTarget(desired=_Widget(name="w", colour="red"))

    with capture_logs("gitprovider.reconcile") as logs:
        changed = await reconcile_resource(target)
        logs.wait_for_message("[reconcile.create] resource=widget/w")

    assert changed is True
    assert target.writes == ["create"]


@pytest.mark.asyncio
async def test_status_drift_does_not_trigger_a_write() -> None:
    """Only spec fields are compared."""
    target = _FakeTarget(
        desired=_Widget(name="w", colour="red"),
        actual=_Widget(id=42, name="w", colour="red"),
    )

    with capture_logs("gitprovider.reconcile") as logs:
        changed = await reconcile_resource(target)
        logs.wait_for_message("[reconcile.noop] resource=widget/w")

    assert changed is False
    assert target.writes == []


@pytest.mark.asyncio
async def test_spec_difference_is_updated() -> None:
    """Differing spec fields lead to exactly one update."""
    target = _FakeTarget(
        desired=_Widget(name="w", colour="blue"),
        actual=_Widget(id=42, name="w", colour="red"),
    )

    changed = await reconcile_resource(target)

    assert changed is True
    assert target.writes == ["update"]
    assert target.actual == _Widget(id=42, name="w", colour="blue")


@pytest.mark.asyncio
async def test_second_reconcile_is_a_noop() -> None:
    """Reconciling twice converges."""
    target = _FakeTarget(desired=_Widget(name="w", colour="red"))

    assert await reconcile_resource(target) is True
    assert await reconcile_resource(target) is False
    assert target.writes == ["create"]


@pytest.mark.asyncio
async def test_fetch_failures_propagate_without_writes() -> None:
    """Errors other than not-found abort before any write."""
    failure = HTTPError.from_response_details(500, body="oops")
    target = _FakeTarget(desired=_Widget(name="w"), fetch_error=failure)

    with pytest.raises(HTTPError) as excinfo:
        await reconcile_resource(target)

    assert excinfo.value is failure
    assert target.writes == []


@pytest.mark.asyncio
async def test_write_failures_are_logged_and_reraised() -> None:
    """A failed create is logged and surfaces unchanged."""
    failure = HTTPError.from_response_details(422, body="Validation Failed")
    target = _FakeTarget(desired=_Widget(name="w"), write_error=failure)

    with capture_logs("gitprovider.reconcile") as logs:
        with pytest.raises(HTTPError) as excinfo:
            await reconcile_resource(target)
        record = logs.wait_for_message("[reconcile.failed]")

    assert excinfo.value is failure
    assert "action=reconcile.create" in record.message
    assert "error=HTTPError" in record.message



@pytest.mark.asyncio
async def test_reconcile_against_uses_the_given_object() -> None:
    """A caller-supplied object replaces the fetch."""
    target = _FakeTarget(
        desired=_Widget(name="w", colour="blue"),
        fetch_error=HTTPError.from_response_details(500, body="unreachable"),
    )

    updated = await reconcile_against(target, _Widget(id=7, name="w", colour="red"))
    unchanged = await reconcile_against(target, _Widget(id=7, name="w", colour="blue"))
    created = await reconcile_against(target, None)

    assert (updated, unchanged, created) == (True, False, True)
    assert target.writes == ["update", "create"]
