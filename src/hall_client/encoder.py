"""
Speech encoder — classify user input and build outbound speeches.

Input rules, first match wins:
- a URL becomes %url
- ``#expr`` becomes %exp
- ``@text`` becomes an action %lin, anything else a plain %lin
"""

import re
from typing import Optional, Sequence

from hall_client.formatting import inbox_station
from hall_client.models.phrase import OutboundPayload
from hall_client.models.speech import ExpSpeech, LinSpeech, Speech, UrlSpeech

URL_PATTERN = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{2,256}\.[a-z]{2,6}\b([-a-zA-Z0-9@:%_+.~#?&/=]*)"
)
EXP_PREFIX = "#"
ACTION_PREFIX = "@"


def is_url(text: str) -> bool:
    return URL_PATTERN.match(text) is not None


def encode_text(text: str) -> list[Speech]:
    """Turn raw input into the speeches to send. May be empty."""
    if is_url(text):
        return [UrlSpeech(url=text)]

    if text.startswith(EXP_PREFIX):
        return [ExpSpeech(exp=text[len(EXP_PREFIX):])]

    pat = False
    if text.startswith(ACTION_PREFIX):
        text = text[len(ACTION_PREFIX):]
        pat = True
    if not text:
        return []
    return [LinSpeech(msg=text, pat=pat)]


def compose_outbound(
    speeches: Sequence[Speech],
    audience: Optional[Sequence[str]] = None,
    ship: Optional[str] = None,
) -> OutboundPayload:
    """Address speeches to ``audience``, defaulting to the ship's own inbox."""
    if audience is None:
        if not ship:
            raise ValueError("audience or ship required")
        audience = [inbox_station(ship)]
    return OutboundPayload(aud=list(audience), ses=list(speeches))
