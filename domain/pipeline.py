"""Fetch, describe, post, draw, upload. In that order, stopping at the first
error. Whatever was posted before the error stays posted."""

import contextlib
import datetime as dt
import logging
from typing import AsyncIterator

import httpx

from config import Config
from domain.aopenai import CompletionClient, ImageClient, openai_client_factory
from domain.menu import MenuFetcher
from domain.prompts import IMAGE_PROMPT
from domain.slack import Notifier, slack_client_factory
from domain.upload import AssetUploader


logger = logging.getLogger(__name__)


class PipelineResult:
    def __init__(
        self,
        *,
        lunch: str,
        description: str | None = None,
        ts: str | None = None,
        file_id: str | None = None,
    ) -> None:
        self.lunch = lunch
        self.description = description
        self.ts = ts
        self.file_id = file_id

    def __repr__(self) -> str:
        return f"<PipelineResult(lunch={self.lunch}, ts={self.ts}, file_id={self.file_id})>"


class LunchPipeline:
    def __init__(
        self,
        *,
        menu: MenuFetcher,
        llm: CompletionClient,
        images: ImageClient,
        notifier: Notifier,
        uploader: AssetUploader,
        describe: bool = True,
        generate_image: bool = True,
        thread_replies: bool = True,
        use_webhook: bool = False,
        image_filename: str = "todays-lunch.png",
        image_title: str = "Today’s lunch image",
    ) -> None:
        self.menu = menu
        self.llm = llm
        self.images = images
        self.notifier = notifier
        self.uploader = uploader
        self.describe = describe
        self.generate_image = generate_image
        self.thread_replies = thread_replies
        self.use_webhook = use_webhook
        self.image_filename = image_filename
        self.image_title = image_title

    async def post_text(self, lunch: str, description: str | None) -> str | None:
        """Post the menu (and description). Returns the ts to thread under, if any."""
        if self.use_webhook:
            await self.notifier.post_webhook(_join(lunch, description))
            return None

        if not self.thread_replies:
            await self.notifier.post_message(_join(lunch, description))
            return None

        ts = await self.notifier.post_message(lunch)
        if description:
            await self.notifier.post_message(description, thread_ts=ts)
        return ts

    async def run(self, date: dt.date | None = None) -> PipelineResult:
        lunch = await self.menu.fetch(date)
        result = PipelineResult(lunch=lunch)

        if self.describe:
            logger.info("Describing %s", lunch)
            result.description = await self.llm.describe_dish(lunch)

        logger.info("Posting menu")
        result.ts = await self.post_text(lunch, result.description)

        if self.generate_image:
            logger.info("Generating image")
            image = await self.images.generate(IMAGE_PROMPT.format(dish=lunch))
            result.file_id = await self.uploader.upload(
                image,
                filename=self.image_filename,
                title=self.image_title,
                channel_id=self.notifier.channel_id,
                thread_ts=result.ts,
            )
            logger.info("Uploaded image %s", result.file_id)

        return result


def _join(lunch: str, description: str | None) -> str:
    return lunch if not description else f"{lunch}\n\n{description}"


@contextlib.asynccontextmanager
async def build_pipeline(config: Config) -> AsyncIterator[LunchPipeline]:
    async with (
        httpx.AsyncClient(timeout=config.http_timeout) as http,
        openai_client_factory(config.openai_token, config.http_timeout) as openai_http,
        slack_client_factory(config.slack_token, config.http_timeout) as slack_api,
    ):
        yield LunchPipeline(
            menu=MenuFetcher(
                config.menu_url,
                client=http,
                selector=config.menu_selector,
                timeout=config.menu_timeout,
            ),
            llm=CompletionClient(openai_http, model=config.core_model),
            images=ImageClient(
                openai_http, model=config.image_model, size=config.image_size
            ),
            notifier=Notifier(
                api=slack_api,
                http=http,
                channel_id=config.slack_channel_id,
                webhook_url=config.slack_webhook_url,
            ),
            uploader=AssetUploader(
                api=slack_api,
                http=http,
                attempts=config.upload_attempts,
                backoff=config.upload_backoff,
            ),
            describe=config.describe,
            generate_image=config.generate_image,
            thread_replies=config.thread_replies,
            use_webhook=config.use_webhook,
            image_filename=config.image_filename,
            image_title=config.image_title,
        )
