"""
Speech decoder — unwrap one gram's speech tree into flat messages.

Wrapper speeches (%app, %fat) take the next synthetic serial so that the
messages they produce stay distinguishable from the gram's own; %ire is a
pure pass-through and keeps the serial it was given.
"""

import logging
from typing import Any, Optional, Union

from hall_client.models.gram import Gram
from hall_client.models.message import Message, MessageStyle
from hall_client.models.speech import (
    AppSpeech,
    Attachment,
    ExpSpeech,
    FatSpeech,
    IreSpeech,
    LinSpeech,
    Speech,
    UrlSpeech,
)

logger = logging.getLogger(__name__)

Serial = Optional[int]


def _next_serial(gram: Gram, serial: Serial) -> Optional[int]:
    base = serial if serial is not None else gram.num
    return base + 1 if base is not None else None


def _base_message(gram: Gram, tag: str, serial: Serial) -> Message:
    key: Optional[Union[int, str]] = serial if serial is not None else gram.uid
    return Message(
        key=key,
        date=gram.wen,
        sender=gram.aut,
        audience=list(gram.aud),
        style=MessageStyle.MESSAGE,
        type=tag,
        num=gram.num,
    )


def _filled(message: Message) -> Message:
    if message.text:
        return message
    return message.model_copy(update={"text": " "})


def _tank_lines(tank: list[Any]) -> list[str]:
    lines: list[str] = []
    for item in tank:
        if isinstance(item, list):
            lines.extend(_tank_lines(item))
        else:
            lines.append(str(item))
    return lines


def attachment_text(tac: Optional[Attachment]) -> tuple[Optional[str], Optional[str]]:
    """Pick the displayable text of a %fat attachment: text, then tank, then name.

    Returns ``(attachment, label)``; only the named branch carries a label.
    """
    if tac is None:
        return None, None
    if tac.text:
        return tac.text, None
    if tac.tank:
        return "\n".join(_tank_lines(tac.tank)), None
    if tac.name:
        inner = tac.name.tac
        return (inner.text if inner else None), tac.name.nom
    return None, None


def decode_speech(gram: Gram, speech: Speech, serial: Serial = None) -> list[Message]:
    """Decode ``speech`` (belonging to ``gram``) into one or more messages."""
    message = _base_message(gram, speech.tag, serial)

    if isinstance(speech, LinSpeech):
        style = MessageStyle.ACT if speech.pat else MessageStyle.MESSAGE
        return [_filled(message.model_copy(update={"text": speech.msg, "style": style}))]

    if isinstance(speech, UrlSpeech):
        return [_filled(message.model_copy(update={"text": speech.url, "style": MessageStyle.URL}))]

    if isinstance(speech, ExpSpeech):
        attachment = "\n".join("\n".join(lines) for lines in speech.res or [])
        return [_filled(message.model_copy(update={
            "text": speech.exp,
            "attachment": attachment,
            "style": MessageStyle.CODE,
        }))]

    if isinstance(speech, AppSpeech):
        inner = decode_speech(gram, speech.sep, _next_serial(gram, serial))
        head = inner[0]
        prefixed = f"[{speech.app}]: {head.text}"
        return [_filled(head.model_copy(update={"text": prefixed}))] + inner[1:]

    if isinstance(speech, FatSpeech):
        inner = decode_speech(gram, speech.sep, _next_serial(gram, serial))
        attachment, label = attachment_text(speech.tac)
        head = message.model_copy(update={
            "text": inner[0].text,
            "attachment": attachment,
            "attachment_label": label,
        })
        return [_filled(head)] + inner[1:]

    if isinstance(speech, IreSpeech):
        # TODO surface speech.top so replies can link back to their origin message
        return decode_speech(gram, speech.sep, serial)

    logger.debug(f"Unhandled speech: %{speech.tag}")
    return [_filled(message.model_copy(update={"text": f"Unhandled speech: %{speech.tag}"}))]


def decode_gram(gram: Gram) -> list[Message]:
    return decode_speech(gram, gram.speech)
