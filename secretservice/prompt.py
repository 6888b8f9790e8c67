"""
Prompt — completion protocol for operations that need user interaction.

Operations such as unlocking, deleting or creating a collection may return a
prompt object instead of completing at once. ``/`` means there is nothing to
prompt for; any other path must be driven to completion:

    IDLE → AWAITING → COMPLETED | DISMISSED | TIMED_OUT

The ``Completed`` signal is subscribed to before ``Prompt`` is called and the
subscription is released on every exit path.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from .conf import IFACE_PROMPT, NO_OBJECT, PROMPT_TIMEOUT
from .exceptions import PromptDismissed, PromptTimeout
from .transport import Transport

logger = logging.getLogger("secretservice")


class PromptState(Enum):
    IDLE = 'idle'
    AWAITING = 'awaiting'
    COMPLETED = 'completed'
    DISMISSED = 'dismissed'
    TIMED_OUT = 'timed-out'


class Prompt:
    """A prompt object returned by the daemon.

    A prompt is driven once. The result of a completed prompt is the
    operation's real output (for instance the path of a new collection).
    """

    def __init__(
        self,
        transport: Transport,
        path: str,
        timeout: float = PROMPT_TIMEOUT,
        window_id: str = '',
    ):
        self._transport = transport
        self._path = path
        self._timeout = timeout
        self._window_id = window_id
        self._state = PromptState.IDLE

    def __repr__(self) -> str:
        return f'<Prompt {self._path} [{self._state.value}]>'

    @property
    def path(self) -> str:
        return self._path

    @property
    def state(self) -> PromptState:
        return self._state

    @property
    def timeout(self) -> float:
        return self._timeout

    def _transition(self, state: PromptState) -> None:
        logger.debug(
            "Prompt %s: %s -> %s", self._path, self._state.value, state.value
        )
        self._state = state

    async def prompt(self) -> Any:
        """Show the prompt and wait for it to complete.

        Returns:
            Value of the result variant carried by ``Completed``.

        Raises:
            PromptDismissed: If the prompt was dismissed.
            PromptTimeout: If no completion arrived within the timeout. The
                prompt is dismissed on the daemon before raising.
            RuntimeError: If the prompt was already driven.

        If the ``Prompt`` call itself fails, the error is raised unchanged
        and the prompt goes back to ``IDLE``, so it can be driven again.
        """
        if self._state is not PromptState.IDLE:
            raise RuntimeError(f"Prompt {self._path} is {self._state.value}")
        async with self._transport.signals(
            self._path, IFACE_PROMPT, 'Completed'
        ) as signals:
            self._transition(PromptState.AWAITING)
            try:
                await self._transport.call(
                    self._path, IFACE_PROMPT, 'Prompt', 's', (self._window_id,)
                )
            except Exception:
                # nothing was shown
                self._transition(PromptState.IDLE)
                raise
            try:
                dismissed, result = await asyncio.wait_for(
                    signals.get(), self._timeout
                )
            except asyncio.TimeoutError:
                self._transition(PromptState.TIMED_OUT)
                await self._dismiss_quietly()
                raise PromptTimeout(
                    f"Prompt {self._path} did not complete "
                    f"in {self._timeout} seconds"
                ) from None
        if dismissed:
            self._transition(PromptState.DISMISSED)
            raise PromptDismissed(f"Prompt {self._path} was dismissed")
        self._transition(PromptState.COMPLETED)
        # result is a variant
        return result[1]

    async def dismiss(self) -> None:
        await self._transport.call(self._path, IFACE_PROMPT, 'Dismiss')

    async def _dismiss_quietly(self) -> None:
        try:
            await self.dismiss()
        except Exception as err:
            logger.warning("Could not dismiss prompt %s: %s", self._path, err)


async def check_prompt(
    transport: Transport,
    path: str,
    *,
    timeout: float = PROMPT_TIMEOUT,
    window_id: str = '',
) -> Optional[Any]:
    """Complete the prompt at ``path`` if there is one.

    Returns:
        ``None`` without any call when ``path`` is ``/``, otherwise the
        result of the completed prompt.
    """
    if path == NO_OBJECT:
        return None
    return await Prompt(transport, path, timeout, window_id).prompt()
