"""Tests des flux réactifs"""

from contextlib import aclosing

import pytest

from freshtrack.core.flow import Flow, MutableStateFlow, Subscription, combine
from freshtrack.utils.exceptions import StorageError


class BrokenFlow(Flow):
    """Source qui signale un échec dès l'abonnement"""

    def __init__(self):
        self.active = 0

    def subscribe(self, observer, on_error=None):
        self.active += 1

        def release():
            self.active -= 1

        subscription = Subscription(on_dispose=release)
        if on_error is not None:
            on_error(StorageError("no such table: products"))
        return subscription


def test_state_flow_emits_current_then_changes(make_recorder):
    state = MutableStateFlow(1)
    recorder = make_recorder()

    state.subscribe(recorder)
    state.value = 2
    state.value = 2
    state.update(lambda v: v + 1)

    assert recorder.values == [1, 2, 3]


def test_dispose_stops_delivery(make_recorder):
    state = MutableStateFlow("a")
    recorder = make_recorder()

    subscription = state.subscribe(recorder)
    subscription.dispose()
    subscription.dispose()
    state.value = "b"

    assert recorder.values == ["a"]
    assert subscription.disposed


def test_subscribers_are_independent(make_recorder):
    state = MutableStateFlow(0)
    first, second = make_recorder(), make_recorder()

    first_subscription = state.subscribe(first)
    state.value = 1
    state.subscribe(second)
    first_subscription.dispose()
    state.value = 2

    assert first.values == [0, 1]
    assert second.values == [1, 2]


def test_failing_subscriber_does_not_break_others(make_recorder):
    state = MutableStateFlow(0)
    recorder = make_recorder()

    def broken(value):
        raise RuntimeError("boom")

    state.subscribe(broken)
    state.subscribe(recorder)
    state.value = 1

    assert recorder.values == [0, 1]


def test_map_and_distinct(make_recorder):
    state = MutableStateFlow(1)
    recorder = make_recorder()

    state.map(lambda v: v % 2).distinct_until_changed().subscribe(recorder)
    state.value = 3
    state.value = 4

    assert recorder.values == [1, 0]


def test_combine_latest_waits_for_every_source(make_recorder):
    left = MutableStateFlow("a")
    right = MutableStateFlow(1)
    recorder = make_recorder()

    combine(left, right, transform=lambda l, r: f"{l}{r}").subscribe(recorder)
    left.value = "b"
    right.value = 2

    assert recorder.values == ["a1", "b1", "b2"]


def test_combine_dispose_releases_upstreams(make_recorder):
    left = MutableStateFlow(0)
    right = MutableStateFlow(0)
    recorder = make_recorder()

    subscription = combine(left, right, transform=lambda l, r: l + r).subscribe(recorder)
    subscription.dispose()
    left.value = 5

    assert recorder.values == [0]
    assert left._registrations == []
    assert right._registrations == []


@pytest.mark.asyncio
async def test_first_returns_current_value():
    state = MutableStateFlow([1, 2])
    assert await state.first() == [1, 2]
    assert state._registrations == []


@pytest.mark.asyncio
async def test_async_iteration_unsubscribes_on_exit():
    state = MutableStateFlow(0)
    seen = []

    async with aclosing(state.values()) as values:
        async for value in values:
            seen.append(value)
            if value == 0:
                state.value = 1
            else:
                break

    assert seen == [0, 1]
    assert state._registrations == []


@pytest.mark.asyncio
async def test_first_raises_source_failure():
    source = BrokenFlow()

    with pytest.raises(StorageError):
        await source.map(len).distinct_until_changed().first()

    assert source.active == 0


@pytest.mark.asyncio
async def test_combine_forwards_source_failure():
    source = BrokenFlow()
    combined = combine(MutableStateFlow(1), source, transform=lambda a, b: (a, b))

    with pytest.raises(StorageError):
        await combined.first()

    assert source.active == 0


@pytest.mark.asyncio
async def test_async_iteration_raises_source_failure():
    with pytest.raises(StorageError):
        async with aclosing(BrokenFlow().values()) as values:
            async for _ in values:
                pass


def test_failure_without_error_callback_is_ignored(make_recorder):
    recorder = make_recorder()

    subscription = BrokenFlow().map(len).subscribe(recorder)

    assert recorder.values == []
    subscription.dispose()


def test_attach_after_dispose_releases_immediately():
    released = []
    subscription = Subscription()

    subscription.dispose()
    subscription.attach(lambda: released.append(True))

    assert released == [True]


@pytest.mark.parametrize("operator", ["map", "distinct"])
def test_dispose_during_initial_delivery_releases_upstream(monkeypatch, operator):
    from freshtrack.core import flow as flow_module

    created = []

    class TrackedSubscription(Subscription):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(flow_module, "Subscription", TrackedSubscription)

    state = MutableStateFlow(1)
    derived = state.map(str) if operator == "map" else state.distinct_until_changed()

    # created[0] est l'abonnement dérivé, créé avant celui de la source
    subscription = derived.subscribe(lambda value: created[0].dispose())

    assert subscription.disposed
    assert state._registrations == []
