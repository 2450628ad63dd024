"""
Outbound hall-action payload.
"""

from typing import Any

from pydantic import BaseModel

from hall_client.models.speech import Speech


class OutboundPayload(BaseModel):
    aud: list[str]
    ses: list[Speech] = []

    def to_wire(self) -> dict[str, Any]:
        return {
            "phrase": {
                "aud": list(self.aud),
                "ses": [s.to_wire() for s in self.ses],
            }
        }
