import base64
import binascii
import logging
from typing import Any

import httpx

from domain.errors import ApiError
from domain.prompts import DESCRIBE_PROMPT


logger = logging.getLogger(__name__)

BASE_URL = "https://api.openai.com/v1/"
DEFAULT_MODEL = "gpt-4.1"
IMAGE_MODEL = "dall-e-3"
IMAGE_SIZE = "1024x1024"
TIMEOUT = 60


def openai_client_factory(token: str, timeout: float = TIMEOUT) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=BASE_URL,
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        },
        timeout=timeout,
    )


class ChatMsg:
    def __init__(self, *, role: str, content: str) -> None:
        self.role = role
        self.content = content

    def __repr__(self) -> str:
        return f"<ChatMsg(role={self.role})>"

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


async def _post_json(
    client: httpx.AsyncClient, url: str, payload: dict[str, Any]
) -> dict[str, Any]:
    try:
        resp = await client.post(url, json=payload)
    except httpx.HTTPError as exc:
        raise ApiError(f"Request to {url} failed: {exc}") from exc

    try:
        data = resp.json()
    except ValueError as exc:
        raise ApiError(f"{url} returned {resp.status_code} and no JSON.") from exc

    if not isinstance(data, dict):
        raise ApiError(f"Unexpected response from {url}: {data}")
    if data.get("error"):
        error = data["error"]
        message = error.get("message", error) if isinstance(error, dict) else error
        raise ApiError(f"OpenAI error from {url}: {message}")
    if not resp.is_success:
        raise ApiError(f"{url} returned {resp.status_code}: {data}")
    return data


class CompletionClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        model: str = DEFAULT_MODEL,
    ) -> None:
        self._client = client
        self.model = model

    async def complete(self, messages: list[ChatMsg], *, model: str | None = None) -> str:
        """Content of the first choice."""
        payload = {
            "model": self.model if model is None else model,
            "messages": [m.to_dict() for m in messages],
        }
        logger.debug("Chat completion request: %s", payload)
        data = await _post_json(self._client, "chat/completions", payload)

        choices = data.get("choices") or []
        if not isinstance(choices, list) or not choices:
            raise ApiError(f"No choices in completion response. {data}")
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise ApiError(f"First choice has no content. {data}")
        return content.strip()

    async def describe_dish(self, dish: str) -> str:
        msg = ChatMsg(role="user", content=DESCRIBE_PROMPT.format(dish=dish))
        return await self.complete([msg])


class ImageClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        model: str = IMAGE_MODEL,
        size: str = IMAGE_SIZE,
    ) -> None:
        self._client = client
        self.model = model
        self.size = size

    async def generate(self, prompt: str) -> bytes:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "n": 1,
            "size": self.size,
            "response_format": "b64_json",
        }
        data = await _post_json(self._client, "images/generations", payload)

        images = data.get("data") or []
        first = images[0] if isinstance(images, list) and images else None
        encoded = first.get("b64_json") if isinstance(first, dict) else None
        if not encoded or not isinstance(encoded, str):
            raise ApiError("No image returned.")
        try:
            return base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            raise ApiError(f"Could not decode image: {exc}") from exc
