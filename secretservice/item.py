"""Item — a single secret with a label and lookup attributes."""
from datetime import datetime

from .base import DBusProxy, timestamp
from .conf import IFACE_ITEM
from .secret import Secret
from .session import Session


class Item(DBusProxy):
    """Proxy for ``org.freedesktop.Secret.Item``."""

    interface = IFACE_ITEM

    async def get_secret(self, session: Session) -> Secret:
        """Fetch the secret, encoded for ``session``.

        Errors reported by the daemon, for instance when the item is
        locked, are raised unchanged.
        """
        (secret,) = await self._call('GetSecret', 'o', session.path)
        return Secret(*secret)

    async def set_secret(self, secret: Secret) -> None:
        await self._call('SetSecret', '(oayays)', tuple(secret))

    async def delete(self) -> None:
        """Delete the item, completing a prompt if the daemon asks for one."""
        (prompt,) = await self._call('Delete')
        await self._prompt(prompt)

    async def unlock(self) -> bool:
        """Unlock the item. Returns True if it ended up unlocked."""
        return await self._lock_or_unlock_self('Unlock')

    async def is_locked(self) -> bool:
        return bool(await self._get('Locked'))

    async def get_label(self) -> str:
        return await self._get('Label')

    async def set_label(self, label: str) -> None:
        await self._set('Label', 's', label)

    async def get_attributes(self) -> dict[str, str]:
        return dict(await self._get('Attributes'))

    async def set_attributes(self, attributes: dict[str, str]) -> None:
        await self._set('Attributes', 'a{ss}', dict(attributes))

    async def created(self) -> datetime:
        return timestamp(await self._get('Created'))

    async def modified(self) -> datetime:
        return timestamp(await self._get('Modified'))
