"""
HallClient / AsyncHallClient — main clients for a ship's hall.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Optional, Sequence, Union

import httpx

from hall_client.auth import Auth
from hall_client.errors import ConnectionError
from hall_client.formatting import (
    format_grouped_number,
    format_path_date,
    grams_path,
    inbox_station,
)
from hall_client.models.message import Message
from hall_client.transcoder import Transcoder
from hall_client.transport.channel import ChannelManager, Subscription
from hall_client.transport.http import DEFAULT_BASE_URL, HttpClient

HALL_APP = "hall"
HALL_ACTION_MARK = "hall-action"

MessageCallback = Callable[[str, Optional[list[Message]]], None]
RangeBound = Optional[Union[datetime, int, str]]


class AsyncHallClient:
    """Async hall client (primary)."""

    def __init__(
        self,
        ship: str,
        code: Optional[str] = None,
        url: str = DEFAULT_BASE_URL,
        verbose: bool = False,
        poke_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._ship = ship.lstrip("~")
        self._code = code
        self._poke_timeout = poke_timeout

        self.http = HttpClient(base_url=url, transport=transport)
        self.auth = Auth(self.http)
        self.transcoder = Transcoder(self._ship, verbose=verbose)

        self._channel: Optional[ChannelManager] = None

    @property
    def ship(self) -> str:
        return self._ship

    @property
    def connected(self) -> bool:
        return self._channel is not None

    async def connect(self, code: Optional[str] = None) -> None:
        code = code or self._code
        if not code:
            raise ConnectionError("Login code required. Run `+code` on the ship to get one.")
        await self.auth.login(code)
        self._channel = ChannelManager(self.http, self._ship)

    async def disconnect(self) -> None:
        if self._channel:
            await self._channel.disconnect()
            self._channel = None

    async def close(self) -> None:
        await self.disconnect()
        await self.http.close()

    async def subscribe(
        self,
        callback: MessageCallback,
        start: RangeBound = None,
        end: RangeBound = None,
        wire: Optional[str] = None,
    ) -> Subscription:
        """Subscribe to the inbox grams; ``callback(wire, messages)`` per delivery.

        ``messages`` is None once the feed has quit.
        """
        channel = self._ensure_connected()
        path = grams_path(start, end)

        def _handler(sub_wire: str, data: Any) -> None:
            self.transcoder.on_delivery(sub_wire, data, callback)

        return await channel.subscribe(HALL_APP, path, _handler, wire=wire)

    async def unsubscribe(self, subscription: Subscription) -> None:
        await self._ensure_connected().unsubscribe(subscription)

    async def wait_closed(self) -> None:
        await self._ensure_connected().wait_closed()

    async def send_message(self, text: str, audience: Optional[Sequence[str]] = None) -> bool:
        """Send ``text`` to ``audience`` (default: our own inbox). False if the poke failed."""
        channel = self._ensure_connected()
        payload = self.transcoder.build_send_request(text, audience)
        return await channel.poke(HALL_APP, HALL_ACTION_MARK, payload, timeout=self._poke_timeout)

    def inbox_station(self) -> str:
        return inbox_station(self._ship)

    format_path_date = staticmethod(format_path_date)
    format_grouped_number = staticmethod(format_grouped_number)

    def _ensure_connected(self) -> ChannelManager:
        if self._channel is None:
            raise ConnectionError("Not connected. Call connect() first.")
        return self._channel


class HallClient:
    """Sync wrapper around AsyncHallClient. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncHallClient(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def ship(self) -> str:
        return self._async.ship

    @property
    def connected(self) -> bool:
        return self._async.connected

    def connect(self, **kwargs: Any) -> None:
        self._run(self._async.connect(**kwargs))

    def disconnect(self) -> None:
        self._run(self._async.disconnect())

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()

    def subscribe(self, callback: MessageCallback, **kwargs: Any) -> Subscription:
        return self._run(self._async.subscribe(callback, **kwargs))

    def unsubscribe(self, subscription: Subscription) -> None:
        self._run(self._async.unsubscribe(subscription))

    def wait_closed(self) -> None:
        self._run(self._async.wait_closed())

    def send_message(self, text: str, audience: Optional[Sequence[str]] = None) -> bool:
        return self._run(self._async.send_message(text, audience))

    def inbox_station(self) -> str:
        return self._async.inbox_station()

    format_path_date = staticmethod(format_path_date)
    format_grouped_number = staticmethod(format_grouped_number)

