"""Common plumbing of the Service, Collection and Item proxies."""
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Union

from .conf import IFACE_SERVICE, SERVICE_PATH
from .config import SecretServiceConfig
from .prompt import check_prompt
from .transport import Transport


def object_path(obj: Union["DBusProxy", str]) -> str:
    return obj if isinstance(obj, str) else obj.path


def timestamp(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, timezone.utc)


class DBusProxy:
    """Handle over a remote object.

    Proxies are cheap values: they hold the transport, the object path and
    the configuration, and never cache remote state.
    """

    interface: str = ''

    def __init__(
        self,
        transport: Transport,
        path: str,
        config: Optional[SecretServiceConfig] = None,
    ):
        self._transport = transport
        self._path = path
        self._config = config if config is not None else SecretServiceConfig()

    def __repr__(self) -> str:
        return f'<{type(self).__name__} {self._path}>'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DBusProxy):
            return NotImplemented
        return type(self) is type(other) and self._path == other._path

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._path))

    @property
    def path(self) -> str:
        return self._path

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def config(self) -> SecretServiceConfig:
        return self._config

    async def _call(self, method: str, signature: str = '', *args) -> tuple:
        return await self._transport.call(
            self._path, self.interface, method, signature, args
        )

    async def _get(self, name: str) -> Any:
        return await self._transport.get_property(self._path, self.interface, name)

    async def _set(self, name: str, signature: str, value: Any) -> None:
        await self._transport.set_property(
            self._path, self.interface, name, signature, value
        )

    async def _prompt(self, path: str) -> Optional[Any]:
        return await check_prompt(
            self._transport,
            path,
            timeout=self._config.prompt_timeout,
            window_id=self._config.window_id,
        )

    async def _lock_or_unlock(
        self, method: str, objects: Iterable[Union["DBusProxy", str]]
    ) -> list[str]:
        """Service ``Lock``/``Unlock``: paths handled at once plus the prompt's."""
        done, prompt = await self._transport.call(
            SERVICE_PATH, IFACE_SERVICE, method, 'ao',
            ([object_path(obj) for obj in objects],),
        )
        result = await self._prompt(prompt)
        return list(done) + list(result or [])

    async def _lock_or_unlock_self(self, method: str) -> bool:
        """``Lock``/``Unlock`` of this object alone.

        The daemon answers with canonical paths, so an alias such as
        ``aliases/default`` comes back as the collection it points to.
        Any returned path means the request went through.
        """
        return bool(await self._lock_or_unlock(method, [self._path]))
