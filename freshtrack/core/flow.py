"""
Flux réactifs push-based, multi-abonnés.

Un ``Flow`` émet sa valeur courante à chaque abonné puis une nouvelle valeur
à chaque changement. ``subscribe`` retourne une ``Subscription`` : après
``dispose()`` l'observateur ne reçoit plus rien.
"""

import asyncio
import logging
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Observer = Callable[[Any], None]
ErrorObserver = Callable[[BaseException], None]

_UNSET = object()


class Subscription:
    """Handle d'abonnement. ``dispose`` est idempotent."""

    def __init__(self, on_dispose: Optional[Callable[[], None]] = None):
        self._disposed = False
        self._on_dispose = on_dispose

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self):
        if self._disposed:
            return
        self._disposed = True
        if self._on_dispose:
            on_dispose, self._on_dispose = self._on_dispose, None
            on_dispose()

    close = dispose

    def attach(self, on_dispose: Callable[[], None]):
        """Associe la libération ; exécutée tout de suite si déjà clos."""
        if self._disposed:
            on_dispose()
            return
        self._on_dispose = on_dispose

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.dispose()


def deliver(observer: Observer, value: Any, subscription: Subscription):
    """Appelle l'observateur sauf si l'abonnement est clos.

    Une exception levée par l'observateur est journalisée et n'interrompt
    pas les autres abonnements.
    """
    if subscription.disposed:
        return
    try:
        observer(value)
    except Exception as e:
        logger.error(f"Subscriber callback failed: {e}", exc_info=True)


def deliver_error(
    on_error: Optional[ErrorObserver], error: BaseException, subscription: Subscription
):
    """Signale un échec à l'abonné ; sans ``on_error`` l'échec est seulement journalisé."""
    if subscription.disposed:
        return
    if on_error is None:
        logger.warning(f"Unobserved flow error: {error}")
        return
    try:
        on_error(error)
    except Exception as e:
        logger.error(f"Error callback failed: {e}", exc_info=True)


class _Failure:
    def __init__(self, error: BaseException):
        self.error = error


class Flow(Generic[T]):
    def subscribe(
        self,
        observer: Callable[[T], None],
        on_error: Optional[ErrorObserver] = None,
    ) -> Subscription:
        raise NotImplementedError

    def map(self, transform: Callable[[T], R]) -> "Flow[R]":
        return MappedFlow(self, transform)

    def distinct_until_changed(self) -> "Flow[T]":
        return DistinctFlow(self)

    async def first(self) -> T:
        """Attend la première émission puis se désabonne.

        Un échec signalé par la source est levé ici.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def on_value(value):
            if not future.done():
                future.set_result(value)

        def on_error(error):
            if not future.done():
                future.set_exception(error)

        subscription = self.subscribe(on_value, on_error)
        try:
            return await future
        finally:
            subscription.dispose()

    async def values(self):
        """Itère sur les émissions ; le désabonnement a lieu à la sortie."""
        queue: asyncio.Queue = asyncio.Queue()
        subscription = self.subscribe(
            queue.put_nowait, lambda error: queue.put_nowait(_Failure(error))
        )
        try:
            while True:
                item = await queue.get()
                if isinstance(item, _Failure):
                    raise item.error
                yield item
        finally:
            subscription.dispose()

    def __aiter__(self):
        return self.values()


class MutableStateFlow(Flow[T]):
    """Valeur observable, émise de façon synchrone (ignore les doublons)."""

    def __init__(self, value: T):
        self._value = value
        self._registrations: List[tuple] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T):
        if new_value == self._value:
            return
        self._value = new_value
        for observer, subscription in list(self._registrations):
            deliver(observer, new_value, subscription)

    def update(self, transform: Callable[[T], T]):
        self.value = transform(self._value)

    def subscribe(
        self,
        observer: Callable[[T], None],
        on_error: Optional[ErrorObserver] = None,
    ) -> Subscription:
        # Une valeur en mémoire ne peut pas échouer : on_error n'est jamais appelé
        subscription = Subscription()
        registration = (observer, subscription)
        self._registrations.append(registration)
        subscription.attach(lambda: self._registrations.remove(registration))

        deliver(observer, self._value, subscription)
        return subscription


class MappedFlow(Flow[R]):
    def __init__(self, upstream: Flow, transform: Callable[[Any], R]):
        self._upstream = upstream
        self._transform = transform

    def subscribe(
        self,
        observer: Callable[[R], None],
        on_error: Optional[ErrorObserver] = None,
    ) -> Subscription:
        subscription = Subscription()

        def on_value(value):
            if subscription.disposed:
                return
            deliver(observer, self._transform(value), subscription)

        def on_upstream_error(error):
            deliver_error(on_error, error, subscription)

        subscription.attach(
            self._upstream.subscribe(on_value, on_upstream_error).dispose
        )
        return subscription


class DistinctFlow(Flow[T]):
    """Supprime les émissions égales à la précédente, par abonné."""

    def __init__(self, upstream: Flow[T]):
        self._upstream = upstream

    def subscribe(
        self,
        observer: Callable[[T], None],
        on_error: Optional[ErrorObserver] = None,
    ) -> Subscription:
        subscription = Subscription()
        last = [_UNSET]

        def on_value(value):
            if last[0] is not _UNSET and last[0] == value:
                return
            last[0] = value
            deliver(observer, value, subscription)

        def on_upstream_error(error):
            deliver_error(on_error, error, subscription)

        subscription.attach(
            self._upstream.subscribe(on_value, on_upstream_error).dispose
        )
        return subscription


class CombinedFlow(Flow[R]):
    """
    Combine-latest : ré-émet à chaque émission d'une source, avec la
    dernière valeur de chacune. Rien n'est émis tant qu'une source n'a
    pas encore produit de valeur. L'échec d'une source est transmis tel quel.
    """

    def __init__(self, flows: Sequence[Flow], transform: Callable[..., R]):
        self._flows = list(flows)
        self._transform = transform

    def subscribe(
        self,
        observer: Callable[[R], None],
        on_error: Optional[ErrorObserver] = None,
    ) -> Subscription:
        latest = [_UNSET] * len(self._flows)
        upstreams: List[Subscription] = []
        subscription = Subscription(
            on_dispose=lambda: [upstream.dispose() for upstream in upstreams]
        )

        def on_value_at(index):
            def on_value(value):
                if subscription.disposed:
                    return
                latest[index] = value
                if any(item is _UNSET for item in latest):
                    return
                try:
                    combined = self._transform(*latest)
                except Exception as e:
                    logger.error(f"Combine transform failed: {e}", exc_info=True)
                    return
                deliver(observer, combined, subscription)

            return on_value

        def on_upstream_error(error):
            deliver_error(on_error, error, subscription)

        for index, flow in enumerate(self._flows):
            upstreams.append(flow.subscribe(on_value_at(index), on_upstream_error))
            if subscription.disposed:
                upstreams[-1].dispose()
                break

        return subscription


def combine(*flows: Flow, transform: Callable[..., R]) -> Flow[R]:
    return CombinedFlow(flows, transform)
