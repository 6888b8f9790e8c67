"""Service — entry point of the Secret Service API.

Example::

    async with DBusTransport.connect() as transport:
        service = Service(transport)
        async with await service.open_session() as session:
            collection = service.default_collection()
            for item in await collection.search_items({'user': 'jesus'}):
                print(session.decode(await item.get_secret(session)))
"""
from typing import Iterable, Optional, Union

from .base import DBusProxy, object_path
from .collection import Collection
from .conf import IFACE_COLLECTION, IFACE_SERVICE, NO_OBJECT, SERVICE_PATH
from .config import SecretServiceConfig
from .item import Item
from .secret import Secret
from .session import Session, open_session
from .transport import Transport


class Service(DBusProxy):
    """Proxy for ``org.freedesktop.Secret.Service``."""

    interface = IFACE_SERVICE

    def __init__(
        self,
        transport: Transport,
        path: str = SERVICE_PATH,
        config: Optional[SecretServiceConfig] = None,
    ):
        super().__init__(transport, path, config)

    def collection(self, path: str) -> Collection:
        return Collection(self._transport, path, self._config)

    def item(self, path: str) -> Item:
        return Item(self._transport, path, self._config)

    async def open_session(self, algorithm: Optional[str] = None) -> Session:
        """Open a session, using the configured algorithm by default."""
        return await open_session(
            self._transport,
            self._config.algorithm if algorithm is None else algorithm,
            self._path,
        )

    async def collections(self) -> list[Collection]:
        return [self.collection(path) for path in await self._get('Collections')]

    def default_collection(self) -> Collection:
        """The configured collection, the ``default`` alias unless overridden."""
        return self.collection(self._config.collection)

    async def create_collection(self, label: str, alias: str = '') -> Collection:
        """Create a collection; the daemon usually prompts for a password.

        Raises:
            PromptDismissed: If the user dismissed the prompt.
            PromptTimeout: If the prompt did not complete in time.
        """
        properties = {f'{IFACE_COLLECTION}.Label': ('s', label)}
        path, prompt = await self._call(
            'CreateCollection', 'a{sv}s', properties, alias
        )
        result = await self._prompt(prompt)
        if path == NO_OBJECT and result is not None:
            path = result
        return self.collection(path)

    async def search_items(
        self, attributes: dict[str, str]
    ) -> tuple[list[Item], list[Item]]:
        """Search all collections. Returns ``(unlocked, locked)`` items."""
        unlocked, locked = await self._call('SearchItems', 'a{ss}', dict(attributes))
        return (
            [self.item(path) for path in unlocked],
            [self.item(path) for path in locked],
        )

    async def unlock(self, objects: Iterable[Union[DBusProxy, str]]) -> list[str]:
        """Unlock items or collections. Returns the paths now unlocked."""
        return await self._lock_or_unlock('Unlock', objects)

    async def lock(self, objects: Iterable[Union[DBusProxy, str]]) -> list[str]:
        """Lock items or collections. Returns the paths now locked."""
        return await self._lock_or_unlock('Lock', objects)

    async def get_secrets(
        self, items: Iterable[Union[Item, str]], session: Session
    ) -> dict[str, Secret]:
        """Fetch several secrets at once, keyed by item path."""
        (secrets,) = await self._call(
            'GetSecrets', 'aoo', [object_path(item) for item in items], session.path
        )
        return {path: Secret(*secret) for path, secret in dict(secrets).items()}

    async def read_alias(self, name: str) -> Optional[Collection]:
        """Resolve a collection alias such as ``default``; None if unset."""
        (path,) = await self._call('ReadAlias', 's', name)
        if path == NO_OBJECT:
            return None
        return self.collection(path)

    async def set_alias(self, name: str, collection: Optional[Collection]) -> None:
        """Point ``name`` at ``collection``, or remove the alias with None."""
        path = collection.path if collection is not None else NO_OBJECT
        await self._call('SetAlias', 'so', name, path)
