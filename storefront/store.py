import threading
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

Listener = Callable[[T], None]


class Store(Generic[T]):
    """
    Observable holder for one piece of state.

    Values are treated as immutable: writers build a new value and `set` it,
    then every subscriber is called with the new value.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
            listeners = list(self._listeners)
        for listener in listeners:
            listener(value)

    def update(self, fn: Callable[[T], T]) -> T:
        """Apply `fn` to the current value under the store lock and set the result."""
        with self._lock:
            value = fn(self._value)
            self._value = value
            listeners = list(self._listeners)
        for listener in listeners:
            listener(value)
        return value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
