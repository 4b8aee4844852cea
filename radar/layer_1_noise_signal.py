"""Layer 1: Noise vs Signal protocol (pre-AI filter).

Stage A - noise rejection: a lower-cased title containing any noise keyword
          goes to `noise`, unless the item's feed label is on the bypass list
          (competitor feeds are never treated as noise).
Stage B - priority tagging: every survivor becomes a SignalItem, flagged
          is_priority_signal when the title contains a signal keyword.
          Tagging never removes an item.
"""
from radar.models import RawItem, SignalItem


def _contains_any(text: str, keywords: list[str]) -> bool:
    return any(kw.lower() in text for kw in keywords)


def layer_1_noise_signal(
    items: list[RawItem],
    noise_keywords: list[str],
    signal_keywords: list[str],
    bypass_labels: list[str] = (),
) -> tuple[list[SignalItem], list[RawItem]]:
    """Partition items into (signals, noise). Every input lands in exactly one."""
    bypass = set(bypass_labels)
    signals: list[SignalItem] = []
    noise: list[RawItem] = []

    for item in items:
        title_lower = item.title.lower()

        if item.source_label not in bypass and _contains_any(title_lower, noise_keywords):
            noise.append(item)
            continue

        signals.append(SignalItem(
            **item.model_dump(),
            is_priority_signal=_contains_any(title_lower, signal_keywords),
        ))

    return signals, noise
