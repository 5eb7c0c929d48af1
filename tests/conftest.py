import base64
import json
from typing import Any

import httpx
import pytest

from domain.aopenai import BASE_URL as OPENAI_URL
from domain.aopenai import CompletionClient, ImageClient
from domain.menu import MenuFetcher
from domain.pipeline import LunchPipeline
from domain.slack import BASE_URL as SLACK_URL
from domain.slack import Notifier
from domain.upload import AssetUploader


MENU_URL = "https://kantine.example/speiseplan"
WEBHOOK_URL = "https://hooks.slack.example/services/T0/B0/XXX"
UPLOAD_URL = "https://files.slack.example/upload/v1/abc"
IMAGE = b"\x89PNG lunch"
MENU_HTML = (
    '<div class="block"><div class="divider">'
    "Mittwoch, 19. Juli – Mittag: Spätzle Dessert: Eis – "
    "Donnerstag, 20. Juli – Mittag: Bò Kho Dessert: Obst"
    "</div></div>"
)


class FakeServices:
    """Every service the pipeline talks to, behind one MockTransport."""

    def __init__(self, *, fail: str | None = None) -> None:
        self.fail = fail
        self.calls: list[str] = []
        self.bodies: dict[str, list[Any]] = {}
        self._ts = 0

    def _record(self, name: str, body: Any = None) -> None:
        self.calls.append(name)
        self.bodies.setdefault(name, []).append(body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == MENU_URL:
            self._record("menu")
            return httpx.Response(200, text=MENU_HTML)
        if url == UPLOAD_URL:
            self._record("PUT")
            return httpx.Response(200)
        if url == WEBHOOK_URL:
            self._record("webhook", json.loads(request.content))
            return httpx.Response(200, text="ok")

        name = request.url.path.rsplit("/", 1)[-1]
        body = json.loads(request.content) if name != "files.getUploadURLExternal" else None
        self._record(name, body)
        if name == self.fail:
            return httpx.Response(500, json={"error": {"message": "boom"}})
        if name == "completions":
            return httpx.Response(
                200,
                json={"choices": [{"message": {"role": "assistant", "content": "Ein Eintopf."}}]},
            )
        if name == "generations":
            return httpx.Response(
                200, json={"data": [{"b64_json": base64.b64encode(IMAGE).decode()}]}
            )
        if name == "chat.postMessage":
            self._ts += 1
            return httpx.Response(200, json={"ok": True, "ts": f"{self._ts}.0"})
        if name == "files.getUploadURLExternal":
            return httpx.Response(
                200, json={"ok": True, "upload_url": UPLOAD_URL, "file_id": "F1"}
            )
        if name == "files.completeUploadExternal":
            return httpx.Response(200, json={"ok": True, "files": [{"id": "F1"}]})
        return httpx.Response(404)


@pytest.fixture
def services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def make_pipeline():
    def make(services: FakeServices, **flags: Any) -> LunchPipeline:
        transport = httpx.MockTransport(services)
        http = httpx.AsyncClient(transport=transport)
        openai_http = httpx.AsyncClient(base_url=OPENAI_URL, transport=transport)
        slack_api = httpx.AsyncClient(base_url=SLACK_URL, transport=transport)

        async def no_sleep(delay: float) -> None:
            pass

        return LunchPipeline(
            menu=MenuFetcher(MENU_URL, client=http),
            llm=CompletionClient(openai_http),
            images=ImageClient(openai_http),
            notifier=Notifier(
                api=slack_api, http=http, channel_id="C123", webhook_url=WEBHOOK_URL
            ),
            uploader=AssetUploader(api=slack_api, http=http, sleep=no_sleep),
            **flags,
        )

    return make
