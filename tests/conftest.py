"""Shared fixtures: a recording in-memory transport and a fake daemon."""
import asyncio
import inspect
from contextlib import asynccontextmanager

import pytest

from secretservice.conf import IFACE_PROMPT, IFACE_SERVICE
from secretservice.crypto import (
    compute_shared_secret,
    derive_session_key,
    generate_keypair,
    public_bytes,
)
from secretservice.transport import SignalReceiver, Transport


class FakeSignals(SignalReceiver):

    def __init__(self):
        self.queue = asyncio.Queue()

    async def get(self) -> tuple:
        return await self.queue.get()


class FakeTransport(Transport):
    """Transport double that records every interaction.

    Replies are registered per ``Interface.Method`` name, either as a value,
    an exception instance, or a callable receiving ``(path, *body)``.
    """

    def __init__(self):
        self.calls = []
        self.sent = []
        self.replies = {}
        self.properties = {}
        self.property_sets = []
        self.subscriptions = []
        self.active = {}

    def reply(self, interface: str, method: str, value) -> None:
        self.replies[f"{interface}.{method}"] = value

    def calls_to(self, method: str) -> list:
        return [call for call in self.calls if call[2] == method]

    async def call(self, path, interface, method, signature='', body=()):
        body = tuple(body)
        self.calls.append((path, interface, method, signature, body))
        try:
            handler = self.replies[f"{interface}.{method}"]
        except KeyError:
            raise LookupError(f"unexpected call {interface}.{method} on {path}")
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            result = handler(path, *body)
            if inspect.isawaitable(result):
                result = await result
            return result
        return handler

    async def send(self, path, interface, method, signature='', body=()):
        self.sent.append((path, interface, method, signature, tuple(body)))

    async def get_property(self, path, interface, name):
        value = self.properties[(path, interface, name)]
        if isinstance(value, Exception):
            raise value
        return value

    async def set_property(self, path, interface, name, signature, value):
        self.property_sets.append((path, interface, name, signature, value))
        self.properties[(path, interface, name)] = value

    @asynccontextmanager
    async def signals(self, path, interface, member):
        key = (path, interface, member)
        receiver = FakeSignals()
        self.subscriptions.append(key)
        self.active[key] = receiver
        try:
            yield receiver
        finally:
            del self.active[key]

    def emit(self, path, interface, member, *body) -> None:
        self.active[(path, interface, member)].queue.put_nowait(body)

    def complete_prompts(self, result=('s', ''), dismissed=False) -> None:
        """Make every ``Prompt`` call answer with a ``Completed`` signal."""
        def handler(path, window_id):
            self.emit(path, IFACE_PROMPT, 'Completed', dismissed, result)
            return ()
        self.reply(IFACE_PROMPT, 'Prompt', handler)


class FakeKeyExchange:
    """Daemon side of ``OpenSession`` for the DH algorithm."""

    def __init__(self, path: str = '/org/freedesktop/secrets/session/1'):
        self.path = path
        self.client_publics = []
        self.keys = []

    def __call__(self, path, algorithm, variant):
        _, client_public = variant
        self.client_publics.append(client_public)
        private_key = generate_keypair()
        shared = compute_shared_secret(private_key, client_public)
        self.keys.append(derive_session_key(shared))
        return (('ay', public_bytes(private_key)), self.path)


@pytest.fixture
def transport():
    """A fresh FakeTransport."""
    return FakeTransport()


@pytest.fixture
def key_exchange(transport):
    """FakeTransport answering DH ``OpenSession`` calls."""
    exchange = FakeKeyExchange()
    transport.reply(IFACE_SERVICE, 'OpenSession', exchange)
    return exchange
