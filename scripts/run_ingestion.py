"""
Script to run one ingestion or summary pass from the command line
"""

import argparse
import asyncio
import json
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_session_factory
from core.logging import setup_logging
from ingestion.client import ContentApiClient
from ingestion.enrichment.link_titles import LinkTitleFetcher
from ingestion.enrichment.summaries import OpenAISummarizer, SummaryGenerator
from ingestion.loaders.article_repository import ArticleRepository
from ingestion.runner import IngestionRunner
from schemas.ingestion import IngestionRequest

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an AWS news ingestion pass")
    parser.add_argument("--source", choices=["news", "blog", "summaries"], default="news")
    parser.add_argument("--start-date", help="Window start (ISO-8601)")
    parser.add_argument("--end-date", help="Window end (ISO-8601), requires --start-date")
    parser.add_argument("--days-back", type=int, help="Window length in days when no start date is given")
    parser.add_argument("--batch-size", type=int, help="Articles per summary pass")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> dict:
    engine, session_factory = create_session_factory()

    try:
        async with session_factory() as session:
            if args.source == "summaries":
                generator = SummaryGenerator(ArticleRepository(session), OpenAISummarizer())
                return await generator.run(args.batch_size)

            request = IngestionRequest(
                start_date=args.start_date,
                end_date=args.end_date,
                days_back=args.days_back
            )

            async with ContentApiClient() as client:
                if args.source == "blog":
                    result = await IngestionRunner(session, client).run_blog(request)
                else:
                    async with LinkTitleFetcher() as titles:
                        result = await IngestionRunner(session, client, title_fetcher=titles).run_news(request)
            return result.to_payload()
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    if args.source == "summaries" and not settings.OPENAI_API_KEY:
        logger.error("OPENAI_API_KEY is required for --source summaries")
        return 2

    try:
        payload = asyncio.run(run(args))
    except Exception as e:
        logger.error(f"Ingestion pipeline error: {str(e)}")
        return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
