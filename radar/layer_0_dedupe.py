"""Layer 0: Exact-title deduplication.
First occurrence wins; order is preserved. Titles are already trimmed by
the parser, so the key is the exact (case-sensitive) title string.
"""
from radar.models import RawItem


def layer_0_dedupe(items: list[RawItem]) -> list[RawItem]:
    seen: set[str] = set()
    unique: list[RawItem] = []
    for item in items:
        if item.title in seen:
            continue
        seen.add(item.title)
        unique.append(item)
    return unique
