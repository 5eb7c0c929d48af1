import logging
from typing import Any

import httpx

from domain.errors import ApiError


logger = logging.getLogger(__name__)

BASE_URL = "https://slack.com/api/"
TIMEOUT = 60


def slack_client_factory(token: str, timeout: float = TIMEOUT) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=BASE_URL,
        headers={"Authorization": f"Bearer {token}"},
        timeout=timeout,
    )


def slack_data(resp: httpx.Response, method: str) -> dict[str, Any]:
    """JSON body of a Slack Web API call that went through."""
    if not resp.is_success:
        raise ApiError(f"Slack {method} failed with status {resp.status_code}")
    try:
        data = resp.json()
    except ValueError as exc:
        raise ApiError(f"Slack {method} returned no JSON: {resp.text}") from exc
    if not isinstance(data, dict):
        raise ApiError(f"Unexpected response from Slack {method}: {data}")
    if not data.get("ok"):
        raise ApiError(f"Slack {method} error: {data.get('error', data)}")
    return data


class Notifier:
    """Posts to one channel, either via the Web API or an incoming webhook."""

    def __init__(
        self,
        *,
        api: httpx.AsyncClient,
        http: httpx.AsyncClient,
        channel_id: str,
        webhook_url: str | None = None,
    ) -> None:
        self._api = api
        self._http = http
        self.channel_id = channel_id
        self.webhook_url = webhook_url

    async def post_message(self, text: str, *, thread_ts: str | None = None) -> str:
        """Returns the new message's timestamp."""
        payload = {"channel": self.channel_id, "text": text}
        if thread_ts is not None:
            payload["thread_ts"] = thread_ts

        try:
            resp = await self._api.post("chat.postMessage", json=payload)
        except httpx.HTTPError as exc:
            raise ApiError(f"Slack chat.postMessage failed: {exc}") from exc
        data = slack_data(resp, "chat.postMessage")
        logger.debug("Send response: %s", data)

        ts = data.get("ts")
        if not ts or not isinstance(ts, str):
            raise ApiError(f"Slack chat.postMessage returned no ts. {data}")
        return ts

    async def post_webhook(self, text: str) -> None:
        if not self.webhook_url:
            raise ApiError("No webhook URL configured.")
        try:
            resp = await self._http.post(self.webhook_url, json={"text": text})
        except httpx.HTTPError as exc:
            raise ApiError(f"Slack webhook failed: {exc}") from exc
        if not resp.is_success:
            raise ApiError(
                f"Slack webhook failed with status: {resp.status_code} "
                f"{resp.reason_phrase}"
            )
