"""Identity service client - asks the service to verify a user's profile."""
import logging

import httpx

from ... import config

logger = logging.getLogger(__name__)


class IdentityClient:

    def __init__(
        self,
        url: str = config.IDENTITY_SERVICE_URL,
        timeout: float = config.EXTERNAL_TIMEOUT,
        transport: httpx.BaseTransport | None = None
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def request_verification(self, user_id: str) -> bool:
        """Post a verification request for a user.

        Runs in the background after the response is sent, so failures are
        logged and reported through the return value only.

        Returns:
            True if the service accepted the request
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json={"userId": user_id})
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception(
                "Identity verification request failed",
                extra={"context": {"user_id": user_id, "url": self.url}}
            )
            return False

        logger.info("Identity verification requested", extra={"context": {"user_id": user_id}})
        return True
