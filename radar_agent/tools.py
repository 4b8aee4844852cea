"""Classifier output parsing.

The model's reply is untrusted free text. It is turned into a tagged
ClassificationResult right here and never raises past this module.
"""
import json
import logging
import math
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel

from radar.models import ClassificationRecord

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class ResultStatus(str, Enum):
    OK = "ok"
    UNPARSEABLE = "unparseable"
    FAILED = "failed"           # request never produced text


class ClassificationResult(BaseModel):
    status: ResultStatus
    records: list[ClassificationRecord] = []
    error: str = ""
    raw_text: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.OK

    @classmethod
    def failed(cls, error: str) -> "ClassificationResult":
        return cls(status=ResultStatus.FAILED, error=error)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def _to_int(value: Any) -> int:
    # 0 is never a valid 1-based index, so reconciliation treats it as out of range
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return int(number) if math.isfinite(number) else 0


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_classification_response(text: str) -> ClassificationResult:
    """Parse a model reply into records.

    Returns:
        status=ok          -> JSON array; non-object / category-less entries skipped
        status=unparseable -> not JSON, or JSON that is not an array
    """
    clean = strip_code_fences(text) or "[]"
    try:
        data = json.loads(clean)
    except (ValueError, RecursionError) as e:
        logger.error("[Classifier] JSON parse error: %s", e)
        return ClassificationResult(status=ResultStatus.UNPARSEABLE, error=str(e), raw_text=text or "")

    if not isinstance(data, list):
        logger.error("[Classifier] Expected a JSON array, got %s", type(data).__name__)
        return ClassificationResult(
            status=ResultStatus.UNPARSEABLE,
            error=f"expected array, got {type(data).__name__}",
            raw_text=text or "",
        )

    records: list[ClassificationRecord] = []
    skipped = 0
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("category"):
            skipped += 1
            continue
        records.append(ClassificationRecord(
            index=_to_int(entry.get("index")),
            category=_to_text(entry["category"]),
            score=_to_float(entry.get("score")),
            reason=_to_text(entry.get("reason")),
            recommendation=_to_text(entry.get("recommendation")),
            title=_to_text(entry.get("title")),
        ))
    if skipped:
        logger.warning("[Classifier] Skipped %d malformed entries", skipped)

    return ClassificationResult(status=ResultStatus.OK, records=records, raw_text=text or "")
