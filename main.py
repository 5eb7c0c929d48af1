"""Post today's lunch to Slack.

    python main.py            # today
    python main.py 2023-07-20 # some other day
"""

import argparse
import asyncio
import datetime as dt
import logging
import sys

from rich.logging import RichHandler

from config import Config, Env, load_config
from domain.dates import parse_date
from domain.errors import ApiError, ConfigError, NotFoundError
from domain.pipeline import build_pipeline


logger = logging.getLogger("lunchbot")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Post today's lunch to Slack.")
    parser.add_argument(
        "date",
        nargs="?",
        type=parse_date,
        help="day to look up instead of today (YYYY-MM-DD or DD.MM.YYYY)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


async def run(config: Config, date: dt.date | None = None) -> int:
    try:
        async with build_pipeline(config) as pipeline:
            result = await pipeline.run(date)
    except NotFoundError as exc:
        logger.info("Today there seems to be no lunch: %s", exc)
        return 0
    except ApiError:
        logger.exception("Failed to send lunch to Slack")
        return 1

    logger.info("Today lunch: %s", result.lunch)
    logger.info("Successfully sent menu to Slack.")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)
    try:
        config = load_config()
    except ConfigError as exc:
        logger.error(str(exc))
        return 1

    if config.env == Env.local:
        logging.getLogger().setLevel(logging.DEBUG)

    return asyncio.run(run(config, args.date))


if __name__ == "__main__":
    sys.exit(main())
