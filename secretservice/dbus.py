"""D-Bus transport built on jeepney's asyncio router."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence

from jeepney.bus_messages import MatchRule, message_bus
from jeepney.io.asyncio import DBusRouter, Proxy, open_dbus_router
from jeepney.low_level import MessageFlag
from jeepney.wrappers import DBusAddress, Properties, new_method_call, unwrap_msg

from .conf import BUS_NAME
from .transport import SignalReceiver, Transport

logger = logging.getLogger("secretservice")


class MessageBodies(SignalReceiver):
    """Signal bodies from a router filter queue."""

    def __init__(self, queue: asyncio.Queue):
        self._queue = queue

    async def get(self) -> tuple:
        message = await self._queue.get()
        return message.body


class DBusTransport(Transport):
    """Talk to the Secret Service daemon over D-Bus.

    Errors returned by the daemon raise ``jeepney.wrappers.DBusErrorResponse``
    and are not translated.
    """

    def __init__(self, router: DBusRouter, bus_name: str = BUS_NAME):
        self._router = router
        self._bus_name = bus_name

    @classmethod
    @asynccontextmanager
    async def connect(
        cls, bus: str = 'SESSION', bus_name: str = BUS_NAME
    ) -> AsyncIterator["DBusTransport"]:
        """Open a connection to ``bus`` for the lifetime of the block."""
        async with open_dbus_router(bus) as router:
            logger.debug("Connected to the %s bus", bus)
            yield cls(router, bus_name)

    def _address(self, path: str, interface: str) -> DBusAddress:
        return DBusAddress(path, bus_name=self._bus_name, interface=interface)

    async def call(
        self,
        path: str,
        interface: str,
        method: str,
        signature: str = '',
        body: Sequence[Any] = (),
    ) -> tuple:
        msg = new_method_call(
            self._address(path, interface), method, signature or None, tuple(body)
        )
        return unwrap_msg(await self._router.send_and_get_reply(msg))

    async def send(
        self,
        path: str,
        interface: str,
        method: str,
        signature: str = '',
        body: Sequence[Any] = (),
    ) -> None:
        msg = new_method_call(
            self._address(path, interface), method, signature or None, tuple(body)
        )
        msg.header.flags |= MessageFlag.no_reply_expected
        await self._router.send(msg)

    async def get_property(self, path: str, interface: str, name: str) -> Any:
        msg = Properties(self._address(path, interface)).get(name)
        (variant,) = unwrap_msg(await self._router.send_and_get_reply(msg))
        return variant[1]

    async def set_property(
        self, path: str, interface: str, name: str, signature: str, value: Any
    ) -> None:
        msg = Properties(self._address(path, interface)).set(name, signature, value)
        unwrap_msg(await self._router.send_and_get_reply(msg))

    @asynccontextmanager
    async def signals(
        self, path: str, interface: str, member: str
    ) -> AsyncIterator[SignalReceiver]:
        rule = MatchRule(type='signal', interface=interface, member=member, path=path)
        bus = Proxy(message_bus, self._router)
        await bus.AddMatch(rule)
        try:
            with self._router.filter(rule, bufsize=8) as queue:
                yield MessageBodies(queue)
        finally:
            await bus.RemoveMatch(rule)
