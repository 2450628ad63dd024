"""
Transcoder — ties the decoder and encoder to the subscription and poke
payloads exchanged with the ship.

A ``None`` delivery is the %quit sentinel: the feed is over and the callback
receives ``None`` instead of a message list. Whether to resubscribe is left
to the caller.
"""

import logging
from typing import Any, Callable, Optional, Sequence

from hall_client.decoder import decode_gram
from hall_client.encoder import compose_outbound, encode_text
from hall_client.models.gram import parse_delivery
from hall_client.models.message import Message

logger = logging.getLogger(__name__)

DeliveryCallback = Callable[[str, Optional[list[Message]]], None]


class Transcoder:
    def __init__(self, ship: str, verbose: bool = False):
        self._ship = ship.lstrip("~")
        self._verbose = verbose

    @property
    def ship(self) -> str:
        return self._ship

    def _trace(self, msg: str) -> None:
        if self._verbose:
            logger.debug(msg)

    def decode_delivery(self, data: Any) -> Optional[list[Message]]:
        """Decode every gram of a delivery in order. ``None`` means the feed quit."""
        if data is None:
            return None
        messages: list[Message] = []
        for gram in parse_delivery(data):
            messages.extend(decode_gram(gram))
        return messages

    def on_delivery(self, wire: str, data: Any, callback: DeliveryCallback) -> None:
        self._trace(f"messages {wire} {data!r}")
        if data is None:
            self._trace(f"got %quit for: {wire}")
            callback(wire, None)
            return
        callback(wire, self.decode_delivery(data))

    def build_send_request(self, text: str, audience: Optional[Sequence[str]] = None) -> dict[str, Any]:
        """Build the hall-action payload for ``text``."""
        payload = compose_outbound(encode_text(text), audience, ship=self._ship)
        return payload.to_wire()
