"""
Auth module — log in to a ship with its web login code (``+code``).
"""

from hall_client.transport.http import HttpClient
from hall_client.errors import AuthError


class Auth:
    def __init__(self, http: HttpClient):
        self._http = http

    async def login(self, code: str) -> None:
        """Exchange the ship's ``+code`` for a session cookie."""
        try:
            await self._http.post_form("/~/login", {"password": code})
        except Exception as e:
            raise AuthError(f"Failed to log in: {e}")
