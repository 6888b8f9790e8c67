"""Collection — a named group of items (a keyring)."""
from datetime import datetime

from .base import DBusProxy, timestamp
from .conf import IFACE_COLLECTION, IFACE_ITEM, NO_OBJECT
from .item import Item
from .secret import Secret


class Collection(DBusProxy):
    """Proxy for ``org.freedesktop.Secret.Collection``."""

    interface = IFACE_COLLECTION

    def item(self, path: str) -> Item:
        return Item(self._transport, path, self._config)

    async def items(self) -> list[Item]:
        return [self.item(path) for path in await self._get('Items')]

    async def search_items(self, attributes: dict[str, str]) -> list[Item]:
        """Items whose attributes contain every given key/value pair."""
        (paths,) = await self._call('SearchItems', 'a{ss}', dict(attributes))
        return [self.item(path) for path in paths]

    async def create_item(
        self,
        label: str,
        attributes: dict[str, str],
        secret: Secret,
        replace: bool = False,
    ) -> Item:
        """Store a new item in this collection.

        Args:
            label: Displayable label of the item.
            attributes: Lookup attributes.
            secret: Secret encoded for an open session.
            replace: Replace an item with the same attributes instead of
                failing (the daemon decides what a collision is).

        Returns:
            The created :class:`Item`.
        """
        properties = {
            f'{IFACE_ITEM}.Label': ('s', label),
            f'{IFACE_ITEM}.Attributes': ('a{ss}', dict(attributes)),
        }
        path, prompt = await self._call(
            'CreateItem', 'a{sv}(oayays)b', properties, tuple(secret), replace
        )
        result = await self._prompt(prompt)
        if path == NO_OBJECT and result is not None:
            path = result
        return self.item(path)

    async def delete(self) -> None:
        """Delete the collection, completing a prompt if the daemon asks for one."""
        (prompt,) = await self._call('Delete')
        await self._prompt(prompt)

    async def unlock(self) -> bool:
        """Unlock the collection. Returns True if it ended up unlocked."""
        return await self._lock_or_unlock_self('Unlock')

    async def lock(self) -> bool:
        return await self._lock_or_unlock_self('Lock')

    async def is_locked(self) -> bool:
        return bool(await self._get('Locked'))

    async def get_label(self) -> str:
        return await self._get('Label')

    async def set_label(self, label: str) -> None:
        await self._set('Label', 's', label)

    async def created(self) -> datetime:
        return timestamp(await self._get('Created'))

    async def modified(self) -> datetime:
        return timestamp(await self._get('Modified'))
