"""
Flat, display-ready message records produced by the decoder.
"""

from typing import Any, Optional, Union
from pydantic import BaseModel


class MessageStyle:
    MESSAGE = "message"
    ACT = "messageAct"
    URL = "messageUrl"
    CODE = "messageCode"


class Message(BaseModel):
    key: Optional[Union[int, str]] = None  # gram uid, or a synthetic serial for wrapped speeches
    date: Optional[int] = None
    sender: Optional[str] = None
    audience: list[str] = []
    style: str = MessageStyle.MESSAGE
    type: str = ""  # original speech tag
    num: Optional[int] = None
    text: Optional[str] = None
    attachment: Optional[str] = None
    attachment_label: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
