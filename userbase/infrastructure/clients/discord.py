"""Discord bot client.

The bot exposes a small REST API; every call carries a short-lived JWT
signed with the shared bot secret.
"""
import logging
import time

import httpx
import jwt

from ... import config

logger = logging.getLogger(__name__)


class DiscordError(Exception):
    """Raised when the Discord bot cannot be reached or answers with an error."""


class DiscordClient:
    """Client for the Discord bot API.

    Examples:
        >>> client = DiscordClient()
        >>> members = client.get_members()
        >>> client.add_role(members[0]["user"]["id"], config.DISCORD_UNVERIFIED_ROLE_ID)
    """

    TOKEN_TTL = 60

    def __init__(
        self,
        base_url: str = config.DISCORD_BOT_URL,
        secret: str = config.DISCORD_BOT_SECRET,
        timeout: float = config.EXTERNAL_TIMEOUT,
        transport: httpx.BaseTransport | None = None
    ):
        self.base_url = base_url
        self.secret = secret
        self.timeout = timeout
        self.transport = transport

    def _auth_headers(self) -> dict:
        token = jwt.encode(
            {"exp": int(time.time()) + self.TOKEN_TTL},
            self.secret,
            algorithm=config.JWT_ALGORITHM
        )
        return {"Authorization": f"Bearer {token}"}

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport
            ) as client:
                response = client.request(method, path, headers=self._auth_headers(), **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPError as e:
            raise DiscordError(f"Discord bot request {method} {path} failed: {e}") from e

    def get_members(self) -> list[dict]:
        """All members of the Discord server.

        Returns:
            List of member dicts, each with ``user`` and ``roles``
        """
        members = self._request("GET", "/discord-members").json()
        logger.debug("Fetched %d discord members", len(members))
        return members

    def add_role(self, discord_id: str, role_id: str) -> dict:
        """Give a role to a Discord member.

        Args:
            discord_id: Discord user ID
            role_id: Discord role ID

        Returns:
            Bot response body
        """
        response = self._request(
            "PUT",
            "/roles/add",
            json={"userid": discord_id, "roleid": role_id}
        )
        return response.json()
