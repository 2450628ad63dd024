"""
urbit-hall-client — hall chat client for Python.

Decodes hall circle grams into flat, display-ready messages and encodes
user input back into hall speeches. HTTP channel client for the ship.
"""

from hall_client.client import HallClient, AsyncHallClient, HALL_APP, HALL_ACTION_MARK
from hall_client.auth import Auth
from hall_client.decoder import decode_gram, decode_speech
from hall_client.encoder import compose_outbound, encode_text, is_url
from hall_client.errors import HallError, HttpError, AuthError, SubscriptionError, ConnectionError
from hall_client.formatting import (
    INBOX_CIRCLE,
    format_grouped_number,
    format_path_date,
    grams_path,
    inbox_station,
    station,
)
from hall_client.models.message import Message, MessageStyle
from hall_client.transcoder import Transcoder

__version__ = "0.1.0"
__all__ = [
    "HallClient",
    "AsyncHallClient",
    "HALL_APP",
    "HALL_ACTION_MARK",
    "INBOX_CIRCLE",
    "Auth",
    "Transcoder",
    "Message",
    "MessageStyle",
    "decode_gram",
    "decode_speech",
    "encode_text",
    "compose_outbound",
    "is_url",
    "format_path_date",
    "format_grouped_number",
    "grams_path",
    "inbox_station",
    "station",
    "HallError",
    "HttpError",
    "AuthError",
    "SubscriptionError",
    "ConnectionError",
]
