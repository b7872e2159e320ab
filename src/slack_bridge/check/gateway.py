"""Async access to the three Slack capabilities the check pipeline consumes.

- one page of channel history newer than a watermark (newest first)
- user ID → display name
- authenticated download of a private file URL
"""

from __future__ import annotations

import asyncio
import logging

import aiohttp
import httpx
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from slack_bridge.exceptions import SlackFetchError

logger = logging.getLogger(__name__)


class SlackGateway:
    """Thin async wrapper over ``AsyncWebClient`` and ``httpx.AsyncClient``.

    Args:
        token: Bot token used for both the Web API and file downloads.
        client: Pre-built AsyncWebClient (tests, custom transports).
        http: Pre-built httpx.AsyncClient for downloads.
    """

    def __init__(
        self,
        token: str,
        client: AsyncWebClient | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.token = token
        self._client = client or AsyncWebClient(token=token)
        self._http = http
        self._owns_http = http is None

    async def history_page(self, channel_id: str, oldest: str, limit: int) -> dict:
        """Fetch one page of messages strictly newer than ``oldest``.

        Returns a dict with ``messages`` (newest first) and ``has_more``.
        """
        try:
            response = await self._client.conversations_history(
                channel=channel_id,
                oldest=oldest,
                inclusive=False,
                limit=limit,
            )
        except SlackApiError as e:
            raise SlackFetchError(
                f"conversations.history failed for {channel_id}: {e.response.get('error', e)}"
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SlackFetchError(f"conversations.history failed for {channel_id}: {e}") from e

        return {
            "messages": list(response.get("messages") or []),
            "has_more": bool(response.get("has_more")),
        }

    async def user_name(self, user_id: str) -> str:
        """Resolve a user ID to real name, then handle, then the ID itself."""
        try:
            response = await self._client.users_info(user=user_id)
        except SlackApiError as e:
            raise SlackFetchError(
                f"users.info failed for {user_id}: {e.response.get('error', e)}"
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SlackFetchError(f"users.info failed for {user_id}: {e}") from e

        user = response.get("user") or {}
        return user.get("real_name") or user.get("name") or user_id

    async def fetch_bytes(self, url: str) -> httpx.Response:
        """GET a private file URL with the bot token. Transport errors propagate."""
        if self._http is None:
            self._http = httpx.AsyncClient(follow_redirects=True)
        return await self._http.get(url, headers={"Authorization": f"Bearer {self.token}"})

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None
