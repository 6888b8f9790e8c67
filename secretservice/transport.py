"""Transport contract used by the proxies.

Object references are plain object path strings. Variants travel as
``(signature, value)`` pairs. Errors raised by an implementation, including
errors reported by the daemon, reach the caller unchanged.
"""
from abc import ABC, abstractmethod
from typing import Any, AsyncContextManager, Sequence


class SignalReceiver(ABC):

    @abstractmethod
    async def get(self) -> tuple:
        """Wait for the next matching signal and return its body."""
        raise NotImplementedError


class Transport(ABC):

    @abstractmethod
    async def call(
        self,
        path: str,
        interface: str,
        method: str,
        signature: str = '',
        body: Sequence[Any] = (),
    ) -> tuple:
        """Call ``interface.method`` on ``path`` and return the reply body."""
        raise NotImplementedError

    @abstractmethod
    async def send(
        self,
        path: str,
        interface: str,
        method: str,
        signature: str = '',
        body: Sequence[Any] = (),
    ) -> None:
        """Call ``interface.method`` on ``path`` without waiting for a reply."""
        raise NotImplementedError

    @abstractmethod
    async def get_property(self, path: str, interface: str, name: str) -> Any:
        """Read a property; the variant is unwrapped."""
        raise NotImplementedError

    @abstractmethod
    async def set_property(
        self, path: str, interface: str, name: str, signature: str, value: Any
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def signals(
        self, path: str, interface: str, member: str
    ) -> AsyncContextManager[SignalReceiver]:
        """Subscribe to ``interface.member`` broadcast by ``path``.

        The subscription lasts for the ``async with`` block.
        """
        raise NotImplementedError
