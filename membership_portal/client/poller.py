"""Conversation poller - periodic refresh of an open conversation"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Union

from membership_portal.client.facade import PortalApi
from membership_portal.config import settings
from membership_portal.models import MessageResponse, UserResponse

logger = logging.getLogger(__name__)

UpdateCallback = Callable[
    [List[MessageResponse], List[UserResponse]],
    Union[None, Awaitable[None]],
]


class ConversationPoller:
    """Fetch a conversation and the counterpart list on a fixed interval.

    Tie ``start()`` and ``stop()`` to the lifetime of whatever displays the
    conversation; a poll that fails is logged and the next one still runs.
    """

    def __init__(
        self,
        api: PortalApi,
        user_id: str,
        other_user_id: str,
        on_update: UpdateCallback,
        interval: Optional[float] = None,
    ):
        self.api = api
        self.user_id = user_id
        self.other_user_id = other_user_id
        self.on_update = on_update
        self.interval = settings.poll_interval_seconds if interval is None else interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        """Begin polling (no-op when already running)"""
        if self.running:
            return
        self._task = asyncio.create_task(self.run_loop())
        logger.info(f"Polling conversation {self.user_id} <-> {self.other_user_id} every {self.interval}s")

    async def stop(self):
        """Cancel polling and wait for the loop to finish"""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Stopped polling conversation {self.user_id} <-> {self.other_user_id}")

    async def poll_once(self):
        messages = await self.api.get_messages(self.user_id, self.other_user_id)
        conversations = await self.api.get_conversations(self.user_id)
        result = self.on_update(messages, conversations)
        if inspect.isawaitable(result):
            await result

    async def run_loop(self):
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error polling conversation: {e}")

            await asyncio.sleep(self.interval)
