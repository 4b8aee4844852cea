"""Radar classification agent.

Single-shot mega-batch classification over a pluggable chat provider.
"""
from radar_agent.agent import (
    ChatCompletionProvider,
    CompletionProvider,
    classify_batch,
    classify_reviews,
    make_provider,
)
from radar_agent.tools import ClassificationResult, ResultStatus, parse_classification_response

__all__ = [
    "ChatCompletionProvider",
    "CompletionProvider",
    "ClassificationResult",
    "ResultStatus",
    "classify_batch",
    "classify_reviews",
    "make_provider",
    "parse_classification_response",
]
