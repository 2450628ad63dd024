"""
Event channel manager for a ship's HTTP interface.

Actions (poke, subscribe, unsubscribe, ack, delete) are PUT as JSON lists to
``/~/channel/<id>``; responses arrive on the same path as a server-sent event
stream. The channel exists once the first action has been PUT, so the event
stream is opened lazily after that.
"""

import asyncio
import json
import logging
import time
import uuid
from typing import Any, Callable, Optional

from hall_client.errors import HallError, SubscriptionError
from hall_client.transport.http import HttpClient

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Any], None]


class Subscription:
    __slots__ = ("id", "wire", "app", "path", "handler", "terminated")

    def __init__(self, id: int, wire: str, app: str, path: str, handler: EventHandler):
        self.id = id
        self.wire = wire
        self.app = app
        self.path = path
        self.handler = handler
        self.terminated = False

    def __repr__(self) -> str:
        return f"Subscription(id={self.id!r}, wire={self.wire!r}, terminated={self.terminated!r})"


class SSEParser:
    """Assemble ``text/event-stream`` lines into (event id, data) pairs."""

    def __init__(self) -> None:
        self._event_id: Optional[str] = None
        self._data: list[str] = []

    def feed(self, line: str) -> Optional[tuple[Optional[str], str]]:
        if not line:
            if not self._data:
                return None
            event = (self._event_id, "\n".join(self._data))
            self._event_id, self._data = None, []
            return event
        if line.startswith(":"):
            return None
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "id":
            self._event_id = value
        elif field == "data":
            self._data.append(value)
        return None


class ChannelManager:
    def __init__(self, http: HttpClient, ship: str, channel_id: Optional[str] = None):
        self._http = http
        self._ship = ship.lstrip("~")
        self._channel_id = channel_id or f"{int(time.time())}-{uuid.uuid4().hex[:6]}"
        self._next_id = 0
        self._subscriptions: dict[int, Subscription] = {}
        self._pending_pokes: dict[int, asyncio.Future[bool]] = {}
        self._reader: Optional[asyncio.Task[None]] = None
        self._closing = False

    @property
    def path(self) -> str:
        return f"/~/channel/{self._channel_id}"

    @property
    def streaming(self) -> bool:
        return self._reader is not None and not self._reader.done()

    @property
    def subscriptions(self) -> list[Subscription]:
        return list(self._subscriptions.values())

    def _request_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def _send(self, *actions: dict[str, Any]) -> None:
        await self._http.put_json(self.path, list(actions))
        self._ensure_stream()

    def _ensure_stream(self) -> None:
        if self._closing or self.streaming:
            return
        self._reader = asyncio.get_running_loop().create_task(self._read_events())

    async def _read_events(self) -> None:
        parser = SSEParser()
        try:
            async for line in self._http.stream_lines(self.path):
                event = parser.feed(line)
                if event is not None:
                    await self._on_event(*event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Channel stream failed: {e}")
        finally:
            self._close_out()

    def _close_out(self) -> None:
        for fut in self._pending_pokes.values():
            if not fut.done():
                fut.set_result(False)
        self._pending_pokes.clear()
        if self._closing:
            return
        for sub_id in list(self._subscriptions):
            self._quit(sub_id)

    async def _on_event(self, event_id: Optional[str], data: str) -> None:
        if event_id is not None and event_id.isdigit():
            try:
                await self._http.put_json(self.path, [
                    {"id": self._request_id(), "action": "ack", "event-id": int(event_id)},
                ])
            except HallError as e:
                logger.warning(f"Ack failed for event {event_id}: {e}")
        try:
            event = json.loads(data)
        except json.JSONDecodeError:
            logger.warning(f"Dropping non-JSON channel event: {data[:200]}")
            return
        if isinstance(event, dict):
            self.dispatch(event)

    def _deliver(self, sub: Subscription, data: Any) -> None:
        try:
            sub.handler(sub.wire, data)
        except Exception:
            logger.exception(f"Handler for {sub.wire} failed")

    def _quit(self, sub_id: int) -> None:
        sub = self._subscriptions.pop(sub_id, None)
        if sub is None:
            return
        logger.debug(f"got %quit for: {sub.wire}")
        sub.terminated = True
        self._deliver(sub, None)

    def dispatch(self, event: dict[str, Any]) -> None:
        """Route one decoded channel event to its poke or subscription."""
        request_id = event.get("id")
        response = event.get("response")

        if response == "poke":
            fut = self._pending_pokes.pop(request_id, None)  # type: ignore[arg-type]
            if "err" in event:
                logger.error(f"Poke {request_id} rejected: {event['err']}")
            if fut is not None and not fut.done():
                fut.set_result("ok" in event)
        elif response == "subscribe":
            if "err" in event:
                logger.error(f"Subscription {request_id} rejected: {event['err']}")
                self._quit(request_id)  # type: ignore[arg-type]
        elif response == "diff":
            sub = self._subscriptions.get(request_id)  # type: ignore[arg-type]
            if sub is not None:
                self._deliver(sub, event.get("json"))
        elif response == "quit":
            self._quit(request_id)  # type: ignore[arg-type]
        else:
            logger.debug(f"Ignoring channel event {response!r}")

    async def poke(self, app: str, mark: str, data: Any, timeout: float = 10.0) -> bool:
        """Poke ``app`` and wait for its ack. False on nack, timeout or HTTP failure."""
        request_id = self._request_id()
        fut: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self._pending_pokes[request_id] = fut
        try:
            await self._send({
                "id": request_id, "action": "poke",
                "ship": self._ship, "app": app, "mark": mark, "json": data,
            })
            return await asyncio.wait_for(fut, timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"Timeout waiting for ack of poke {request_id} to {app}")
            return False
        except HallError as e:
            logger.error(f"Poke to {app} failed: {e}")
            return False
        finally:
            self._pending_pokes.pop(request_id, None)

    async def subscribe(self, app: str, path: str, handler: EventHandler, wire: Optional[str] = None) -> Subscription:
        request_id = self._request_id()
        sub = Subscription(request_id, wire or path, app, path, handler)
        self._subscriptions[request_id] = sub
        try:
            await self._send({
                "id": request_id, "action": "subscribe",
                "ship": self._ship, "app": app, "path": path,
            })
        except HallError as e:
            self._subscriptions.pop(request_id, None)
            raise SubscriptionError(f"Failed to subscribe to {app}{path}: {e}", details={"path": path, **(e.details or {})})
        return sub

    async def unsubscribe(self, sub: Subscription) -> None:
        self._subscriptions.pop(sub.id, None)
        sub.terminated = True
        await self._send({"id": self._request_id(), "action": "unsubscribe", "subscription": sub.id})

    async def wait_closed(self) -> None:
        """Wait until the event stream ends."""
        if self._reader is not None:
            await asyncio.shield(self._reader)

    async def disconnect(self) -> None:
        self._closing = True
        if self._reader is not None:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        try:
            await self._http.put_json(self.path, [{"id": self._request_id(), "action": "delete"}])
        except HallError as e:
            logger.warning(f"Failed to delete channel {self._channel_id}: {e}")
        self._subscriptions.clear()
