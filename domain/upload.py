"""Slack's external upload flow.

1. ``files.getUploadURLExternal`` hands out a presigned URL and a file id.
2. The bytes are PUT to that URL.
3. ``files.completeUploadExternal`` shares the file into a channel/thread.

Each phase fails with its own ``ApiError`` subclass.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from domain.errors import (
    ApiError,
    TransientNetworkError,
    UploadFinalizeError,
    UploadSlotError,
    UploadTransferError,
)
from domain.slack import slack_data


logger = logging.getLogger(__name__)

ATTEMPTS = 3
BACKOFF = 0.5


class UploadSession:
    def __init__(self, *, upload_url: str, file_id: str) -> None:
        self.upload_url = upload_url
        self.file_id = file_id

    def __repr__(self) -> str:
        return f"<UploadSession(file_id={self.file_id})>"


class AssetUploader:
    def __init__(
        self,
        *,
        api: httpx.AsyncClient,
        http: httpx.AsyncClient,
        attempts: int = ATTEMPTS,
        backoff: float = BACKOFF,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._api = api
        self._http = http
        self.attempts = attempts
        self.backoff = backoff
        self._sleep = sleep

    async def request_slot(self, filename: str, length: int) -> UploadSession:
        try:
            resp = await self._api.post(
                "files.getUploadURLExternal",
                data={"filename": filename, "length": str(length)},
            )
            data = slack_data(resp, "files.getUploadURLExternal")
        except httpx.HTTPError as exc:
            raise UploadSlotError(f"files.getUploadURLExternal failed: {exc}") from exc
        except ApiError as exc:
            raise UploadSlotError(str(exc)) from exc

        upload_url = data.get("upload_url")
        file_id = data.get("file_id")
        if not (upload_url and isinstance(upload_url, str)) or not (
            file_id and isinstance(file_id, str)
        ):
            raise UploadSlotError("Missing upload_url or file_id from Slack.")
        logger.debug("Got upload url: %s", upload_url)
        return UploadSession(upload_url=upload_url, file_id=file_id)

    async def _put(self, session: UploadSession, content: bytes) -> None:
        try:
            resp = await self._http.put(
                session.upload_url,
                content=content,
                headers={
                    "Content-Type": "application/octet-stream",
                    "Content-Length": str(len(content)),
                },
            )
        except httpx.HTTPError as exc:
            raise TransientNetworkError(f"Upload PUT failed: {exc}") from exc
        if not resp.is_success:
            raise TransientNetworkError(
                f"Upload PUT failed: {resp.status_code} {resp.reason_phrase}"
            )

    async def transfer(self, session: UploadSession, content: bytes) -> None:
        """PUT with linear backoff, at most ``attempts`` tries."""
        for attempt in range(1, self.attempts + 1):
            try:
                await self._put(session, content)
                return
            except TransientNetworkError as exc:
                if attempt == self.attempts:
                    raise UploadTransferError(
                        f"Upload failed after {attempt} attempts: {exc}"
                    ) from exc
                delay = self.backoff * attempt
                logger.warning(
                    "Upload attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    self.attempts,
                    exc,
                    delay,
                )
                await self._sleep(delay)

    async def finalize(
        self,
        session: UploadSession,
        *,
        title: str,
        channel_id: str,
        thread_ts: str | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "files": [{"id": session.file_id, "title": title}],
            "channel_id": channel_id,
        }
        if thread_ts is not None:
            payload["thread_ts"] = thread_ts
        logger.debug("Completing upload: %s", payload)

        try:
            resp = await self._api.post("files.completeUploadExternal", json=payload)
            data = slack_data(resp, "files.completeUploadExternal")
        except httpx.HTTPError as exc:
            raise UploadFinalizeError(
                f"files.completeUploadExternal failed: {exc}"
            ) from exc
        except ApiError as exc:
            raise UploadFinalizeError(str(exc)) from exc

        files = data.get("files") or []
        first = files[0] if isinstance(files, list) and files else None
        file_id = first.get("id") if isinstance(first, dict) else None
        if not file_id or not isinstance(file_id, str):
            raise UploadFinalizeError("Upload completed but no file id returned.")
        return file_id

    async def upload(
        self,
        content: bytes,
        *,
        filename: str,
        channel_id: str,
        thread_ts: str | None = None,
        title: str | None = None,
    ) -> str:
        """Run all three phases and return the shared file's id."""
        if not content:
            raise ApiError("No data provided.")
        session = await self.request_slot(filename, len(content))
        await self.transfer(session, content)
        return await self.finalize(
            session,
            title=filename if title is None else title,
            channel_id=channel_id,
            thread_ts=thread_ts,
        )
