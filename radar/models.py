from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FeedSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint: str
    label: str


class RawItem(BaseModel):
    title: str
    link: str = ""
    source_label: str                   # feed label, used for bypass + prompt
    publisher: str = ""                 # <source> tag when the feed carries one
    published_at: Optional[datetime] = None


class SignalItem(RawItem):
    is_priority_signal: bool = False


class ClassificationRecord(BaseModel):
    index: int                          # 1-based position in the batch sent
    category: str
    score: float = 0.0
    reason: str = ""
    recommendation: str = ""
    title: str = ""                     # echoed by the model, not trusted


class IntelligenceItem(BaseModel):
    source_type: str
    title: str
    summary: str
    sentiment_score: float
    is_viral: bool
    source_url: str = ""

    def to_row(self) -> dict:
        return self.model_dump()


class PersistResult(BaseModel):
    ok: bool
    saved: int = 0
    rows: list[dict] = []
    message: str = ""
    error: str = ""


class RunStatus(str, Enum):
    NO_ITEMS = "no_items"
    NO_HIGH_IMPACT = "no_high_impact"
    DONE = "done"
    FAILED = "failed"


class RunReport(BaseModel):
    status: RunStatus
    fetched: int = 0
    unique: int = 0
    signals: int = 0
    priority: int = 0
    noise: int = 0
    batch: int = 0
    classified: int = 0
    saved: int = 0
    classifier_error: str = ""
    classifier_seconds: float = 0.0
    categories: dict[str, int] = {}
    persist_error: str = ""

    @property
    def exit_code(self) -> int:
        return 1 if self.status is RunStatus.FAILED else 0
