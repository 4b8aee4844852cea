"""Mega-batch classifier.

One request per run for the whole batch, whatever its size. The provider
is pluggable (anything with complete(system, user) -> str); the default
talks to any OpenAI-compatible endpoint through langchain's ChatOpenAI,
which covers Groq as well as a LiteLLM proxy.
"""
import logging
from typing import Any, Protocol

from langchain_openai import ChatOpenAI

from radar.models import SignalItem
from radar_agent.prompts import (
    NEWS_CATEGORIES,
    NEWS_SYSTEM_PROMPT,
    NEWS_USER_TEMPLATE,
    REVIEW_CATEGORIES,
    REVIEW_SYSTEM_PROMPT,
    REVIEW_USER_TEMPLATE,
    format_categories,
)
from radar_agent.tools import ClassificationResult, parse_classification_response

logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    def complete(self, system_prompt: str, user_prompt: str) -> str: ...


# ── Model (OpenAI-compatible chat endpoint) ─────────────────────────────────
class ChatCompletionProvider:
    def __init__(self, model: str, api_key: str, base_url: str | None = None,
                 temperature: float = 0.3, max_tokens: int = 4096, timeout: float | None = None):
        self.model_name = model
        self._model = ChatOpenAI(
            model=model,
            api_key=api_key,
            base_url=base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        response = self._model.invoke(messages)
        content = response.content
        return content if isinstance(content, str) else str(content)


def make_provider(config, temperature: float | None = None) -> ChatCompletionProvider:
    return ChatCompletionProvider(
        model=config.llm_model,
        api_key=config.llm_api_key,
        base_url=config.llm_base_url,
        temperature=config.news_temperature if temperature is None else temperature,
        max_tokens=config.max_tokens,
        timeout=config.llm_timeout,
    )


# ── Format helpers ────────────────────────────────────────────────────────────
def format_news_batch(items: list[SignalItem]) -> str:
    return "\n".join(f"{i}. [{item.source_label}] {item.title}" for i, item in enumerate(items, start=1))


def format_review_batch(reviews: list[dict]) -> str:
    return "\n".join(
        f'Review #{i}: "{r.get("comment", "")}" (Rating: {r.get("rating", "-")}/5)'
        for i, r in enumerate(reviews, start=1)
    )


def build_news_prompt(items: list[SignalItem], score_threshold: int = 7) -> str:
    return NEWS_USER_TEMPLATE.format(
        categories=format_categories(NEWS_CATEGORIES),
        n_items=len(items),
        news_list=format_news_batch(items),
        threshold=score_threshold,
    )


def build_review_prompt(reviews: list[dict]) -> str:
    return REVIEW_USER_TEMPLATE.format(
        n_items=len(reviews),
        categories=format_categories(REVIEW_CATEGORIES),
        review_list=format_review_batch(reviews),
    )


# ── Single-shot call ──────────────────────────────────────────────────────────
def run_mega_batch(provider: CompletionProvider, system_prompt: str, user_prompt: str) -> ClassificationResult:
    """Send one request and parse it. Never raises."""
    try:
        text = provider.complete(system_prompt, user_prompt)
    except Exception as e:
        logger.error("[Classifier] LLM call failed: %s", e)
        return ClassificationResult.failed(str(e))
    return parse_classification_response((text or "").strip())


def classify_batch(items: list[SignalItem], provider: CompletionProvider,
                   score_threshold: int = 7) -> ClassificationResult:
    """Classify the whole news batch in one request."""
    if not items:
        return parse_classification_response("[]")
    return run_mega_batch(provider, NEWS_SYSTEM_PROMPT, build_news_prompt(items, score_threshold))


def classify_reviews(reviews: list[dict[str, Any]], provider: CompletionProvider) -> ClassificationResult:
    if not reviews:
        return parse_classification_response("[]")
    logger.info("Sending mega-batch of %d reviews to %s...",
                len(reviews), getattr(provider, "model_name", "classifier"))
    return run_mega_batch(provider, REVIEW_SYSTEM_PROMPT, build_review_prompt(reviews))
