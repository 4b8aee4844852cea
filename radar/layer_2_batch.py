"""Layer 2: Batch cap.
Priority signals first (stable, so arrival order holds within each group),
then truncate to the batch size. Overflow is dropped for this run.
"""
from radar.models import SignalItem


def layer_2_batch(signals: list[SignalItem], batch_size: int = 100) -> tuple[list[SignalItem], list[SignalItem]]:
    """Returns (batch, overflow)."""
    ordered = sorted(signals, key=lambda s: not s.is_priority_signal)
    return ordered[:batch_size], ordered[batch_size:]
