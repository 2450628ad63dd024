"""
Gram models — inbound circle deliveries.

A delivery holds either a single gram (``circle.gram``) or an ordered batch
(``circle.nes``). Each gram pairs a circle sequence number with the thought
that was posted.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, ValidationInfo, ValidatorFunctionWrapHandler, field_validator

from hall_client.models.speech import Speech, parse_speech

logger = logging.getLogger(__name__)


class Thought(BaseModel):
    uid: Optional[str] = None
    aut: Optional[str] = None
    wen: Optional[int] = None
    aud: list[str] = []
    sep: Any = None

    @field_validator("uid", "aut", "wen", "aud", mode="wrap")
    @classmethod
    def _absent_if_malformed(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.debug(f"Ignoring malformed gram field {info.field_name}: {value!r}")
            return [] if info.field_name == "aud" else None


class Gram(BaseModel):
    num: Optional[int] = None
    gam: Thought

    @field_validator("num", mode="wrap")
    @classmethod
    def _num_absent_if_malformed(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.debug(f"Ignoring malformed gram number: {value!r}")
            return None

    @property
    def uid(self) -> Optional[str]:
        return self.gam.uid

    @property
    def wen(self) -> Optional[int]:
        return self.gam.wen

    @property
    def aut(self) -> Optional[str]:
        return self.gam.aut

    @property
    def aud(self) -> list[str]:
        return self.gam.aud

    @property
    def speech(self) -> Speech:
        return parse_speech(self.gam.sep)


class Circle(BaseModel):
    nes: Optional[list[Any]] = None
    gram: Optional[Any] = None

    def raw_grams(self) -> list[Any]:
        if self.nes:
            return list(self.nes)
        if self.gram:
            return [self.gram]
        return []


class CircleDelivery(BaseModel):
    circle: Optional[Circle] = None


def parse_gram(raw: Any) -> Optional[Gram]:
    """Parse one wire gram. Returns None if it doesn't fit the gram shape."""
    try:
        return Gram.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Skipping malformed gram: {e.error_count()} validation errors")
        return None


def parse_delivery(raw: Any) -> list[Gram]:
    """Pull the grams out of a subscription diff, preserving their order."""
    try:
        delivery = CircleDelivery.model_validate(raw)
    except ValidationError:
        logger.warning("Delivery is not a circle update, ignoring")
        return []
    if delivery.circle is None:
        return []
    grams = (parse_gram(g) for g in delivery.circle.raw_grams())
    return [g for g in grams if g is not None]
