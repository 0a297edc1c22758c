"""
Generate short neutral summaries for stored announcements
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from openai import AsyncOpenAI
from core.config import settings
from core.exceptions import SummaryGenerationError
from ingestion.loaders.article_repository import ArticleRepository
from models.base import ArticleSource
import logging

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """You are a technical writer creating neutral, third-person summaries of AWS announcements.

Title: {title}

Content:
{content}

Write a concise 50-75 word summary in third person that:
- Describes what was announced (avoid "In this post" or "we introduce")
- Explains key technical capabilities and benefits
- States who would benefit or what problems it solves
- Uses objective, professional language without first-person pronouns

Start directly with the announcement or feature name.

Summary:"""


def truncate_content(content: str, max_chars: Optional[int] = None) -> str:
    max_chars = max_chars or settings.SUMMARY_MAX_CHARS
    if len(content) > max_chars:
        return content[:max_chars] + "..."
    return content


def build_summary_prompt(title: str, content: str, max_chars: Optional[int] = None) -> str:
    return SUMMARY_PROMPT.format(title=title, content=truncate_content(content, max_chars))


class Summarizer(ABC):
    """Turns a prompt into summary text"""

    @abstractmethod
    async def summarize(self, prompt: str) -> str:
        """
        Returns:
            Non-empty summary text

        Raises:
            SummaryGenerationError: If no usable summary was produced
        """
        pass


class OpenAISummarizer(Summarizer):
    """Chat-completions backed summarizer"""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ):
        self.client = client or AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = model or settings.SUMMARY_MODEL
        self.max_tokens = max_tokens or settings.SUMMARY_MAX_TOKENS
        self.temperature = temperature if temperature is not None else settings.SUMMARY_TEMPERATURE

    async def summarize(self, prompt: str) -> str:
        try:
            result = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            raise SummaryGenerationError(
                "Summary request failed",
                context={"model": self.model},
                original_exception=e
            )

        content = ""
        if result.choices:
            content = result.choices[0].message.content or ""
        summary = content.strip()
        if not summary:
            raise SummaryGenerationError("Empty summary received", context={"model": self.model})
        return summary


class SummaryGenerator:
    """
    Fill in ai_summary for a batch of announcements.

    Each article is summarized and saved on its own; a failure is
    logged and counted without stopping the batch.
    """

    def __init__(self, repository: ArticleRepository, summarizer: Summarizer):
        self.repository = repository
        self.summarizer = summarizer

    async def run(self, batch_size: Optional[int] = None) -> Dict[str, Any]:
        batch_size = batch_size or settings.SUMMARY_BATCH_SIZE

        articles = await self.repository.find_articles_needing_summary(
            source=ArticleSource.AWS_NEWS.value,
            min_description_length=settings.SUMMARY_MIN_DESCRIPTION_LENGTH,
            limit=batch_size
        )
        logger.info(f"Found {len(articles)} articles needing summaries")

        if not articles:
            return {
                "statusCode": 200,
                "message": "No articles need summaries",
                "processed": 0,
            }

        processed = 0
        errors = 0

        for article in articles:
            try:
                summary = await self.summarizer.summarize(
                    build_summary_prompt(article.title, article.description)
                )
                await self.repository.save_summary(article.article_id, summary)
                await self.repository.commit()
                processed += 1
                logger.debug(f"Generated summary for article {article.article_id}")
            except Exception as e:
                await self.repository.rollback()
                errors += 1
                logger.error(f"Error generating summary for {article.article_id}: {e}")

        return {
            "statusCode": 200,
            "processed": processed,
            "errors": errors,
            "remaining": len(articles) - processed,
        }
