"""
Remote authentication client.
Signs the user in against the notes service and stores the session token.
"""

import logging
from typing import AsyncGenerator, Optional
import httpx

from notesync.models.resource import Error, Loading, Resource, Success
from notesync.models.user import TokenResponse, UserLogin
from notesync.session.storage import UserSessionStorage

logger = logging.getLogger(__name__)


def error_detail(response: httpx.Response) -> Optional[str]:
    """Pull a human-readable message out of an error response, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        detail = data.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return None


class AuthClient:
    """
    Client for the service's /api/auth endpoints.

    On a successful login the access token becomes the process-wide
    session identity via UserSessionStorage.
    """

    def __init__(
        self,
        base_url: str,
        session_storage: UserSessionStorage,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._session_storage = session_storage
        self._timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        """Build request headers."""
        return {"Content-Type": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self._timeout, transport=self._transport
        )

    async def sign_in(self, email: str, password: str) -> AsyncGenerator[Resource, None]:
        """
        Log in with email and password.

        Yields:
            Loading, then Success(TokenResponse) or Error(message). The
            message is None when the service gave no usable detail.
        """
        yield Loading()

        payload = UserLogin(email=email, password=password)
        try:
            async with self._client() as client:
                response = await client.post(
                    "/api/auth/login",
                    headers=self._get_headers(),
                    json=payload.model_dump(),
                )
                response.raise_for_status()
                token = TokenResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.warning(f"Login rejected ({e.response.status_code})")
            yield Error(error_detail(e.response))
            return
        except httpx.HTTPError as e:
            logger.warning(f"Login request failed: {e}")
            yield Error(None)
            return
        except ValueError as e:
            # Covers undecodable JSON and pydantic validation errors
            logger.error(f"Unexpected login response: {e}")
            yield Error(None)
            return

        self._session_storage.save_user_session_id(token.access_token)
        logger.info(f"Signed in as {email}")
        yield Success(token)
