"""
Speech models — the recursively tagged payload carried by every gram.

On the wire a speech is a single-key mapping, ``{tag: payload}``. The
wrapper variants (%app, %fat, %ire) each hold a nested speech under ``sep``.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class LinSpeech(BaseModel):
    """%lin — a line of text; ``pat`` marks an action (``/me``) line."""
    tag: ClassVar[str] = "lin"
    msg: Optional[str] = None
    pat: Optional[bool] = None

    def to_wire(self) -> dict[str, Any]:
        return {self.tag: {"msg": self.msg, "pat": bool(self.pat)}}


class UrlSpeech(BaseModel):
    tag: ClassVar[str] = "url"
    url: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        return {self.tag: self.url}


class ExpSpeech(BaseModel):
    """%exp — a hoon expression and its result, one line-list per tank."""
    tag: ClassVar[str] = "exp"
    exp: Optional[str] = None
    res: Optional[list[list[str]]] = None

    def to_wire(self) -> dict[str, Any]:
        return {self.tag: self.model_dump(exclude_none=True)}


class Attachment(BaseModel):
    """%fat attachment (``tac``). Only the text-bearing kinds are modelled."""
    text: Optional[str] = None
    tank: Optional[list[Any]] = None  # lines, or nested line-lists
    name: Optional[NamedAttachment] = None


class NamedAttachment(BaseModel):
    nom: Optional[str] = None
    tac: Optional[Attachment] = None


class AppSpeech(BaseModel):
    tag: ClassVar[str] = "app"
    app: Optional[str] = None
    sep: Speech

    def to_wire(self) -> dict[str, Any]:
        return {self.tag: {"app": self.app, "sep": self.sep.to_wire()}}


class FatSpeech(BaseModel):
    tag: ClassVar[str] = "fat"
    tac: Optional[Attachment] = None
    sep: Speech

    def to_wire(self) -> dict[str, Any]:
        tac = self.tac.model_dump(exclude_none=True) if self.tac else None
        return {self.tag: {"tac": tac, "sep": self.sep.to_wire()}}


class IreSpeech(BaseModel):
    """%ire — a reply; ``top`` is the serial of the message replied to."""
    tag: ClassVar[str] = "ire"
    top: Optional[Any] = None
    sep: Speech

    def to_wire(self) -> dict[str, Any]:
        return {self.tag: {"top": self.top, "sep": self.sep.to_wire()}}


class UnknownSpeech(BaseModel):
    """Any tag we don't decode, or a known tag whose payload didn't validate."""
    tag: str = ""
    payload: Any = None

    def to_wire(self) -> dict[str, Any]:
        return {self.tag: self.payload}


Speech = Union[LinSpeech, UrlSpeech, ExpSpeech, AppSpeech, FatSpeech, IreSpeech, UnknownSpeech]

SPEECH_TYPES: dict[str, type[BaseModel]] = {
    cls.tag: cls for cls in (LinSpeech, UrlSpeech, ExpSpeech, AppSpeech, FatSpeech, IreSpeech)
}
WRAPPER_TAGS = {"app", "fat", "ire"}

Attachment.model_rebuild()
for _cls in (AppSpeech, FatSpeech, IreSpeech):
    _cls.model_rebuild()


def parse_speech(raw: Any) -> Speech:
    """Parse one wire speech into its variant. Never raises.

    Unknown tags and payloads that fail validation both come back as
    ``UnknownSpeech`` holding the original tag and payload.
    """
    if not isinstance(raw, dict) or not raw:
        return UnknownSpeech(payload=raw)

    tag, payload = next(iter(raw.items()))
    variant = SPEECH_TYPES.get(tag)
    if variant is None:
        return UnknownSpeech(tag=str(tag), payload=payload)

    if variant is UrlSpeech:
        body: Any = {"url": payload}
    elif tag in WRAPPER_TAGS and isinstance(payload, dict):
        body = {**payload, "sep": parse_speech(payload.get("sep"))}
        if tag == "fat":
            body["tac"] = parse_attachment(payload.get("tac"))
    else:
        body = payload

    try:
        return variant.model_validate(body)  # type: ignore[return-value]
    except ValidationError as e:
        logger.warning(f"Malformed %{tag} speech ({e.error_count()} errors), decoding as unhandled")
        return UnknownSpeech(tag=tag, payload=payload)


def parse_attachment(raw: Any) -> Optional[Attachment]:
    """Parse a %fat ``tac`` on its own so a bad attachment keeps the wrapped speech."""
    if raw is None:
        return None
    try:
        return Attachment.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Malformed %fat attachment ({e.error_count()} errors), dropping it")
        return None
