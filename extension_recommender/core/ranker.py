# extension_recommender/core/ranker.py
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

import numpy as np

from .signals import PREVIOUSLY_INSTALLED, SignalSet

DEFAULT_CONFIDENCE_PASS = 0.6


@dataclass(frozen=True)
class SessionResult:
    """A recommended extension and the model's confidence in it"""

    extension_id: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'extension_id': self.extension_id,
            'confidence': self.confidence,
        }


def rank_results(
    scores: np.ndarray,
    extension_ids: Mapping[str, int],
    signals: SignalSet,
    confidence_pass: float = DEFAULT_CONFIDENCE_PASS
) -> List[SessionResult]:
    """
    Filter and order model scores

    Args:
        scores: One confidence per candidate row
        extension_ids: Extension id -> row index, in row order
        signals: Normalized caller signals
        confidence_pass: Minimum confidence to keep an extension

    Returns:
        Results sorted by descending confidence; equal confidences keep
        row order
    """
    installed = signals.get(PREVIOUSLY_INSTALLED, frozenset())

    results: List[SessionResult] = []
    for extension_id, index in extension_ids.items():
        confidence = float(scores[index])
        # Written so that NaN never passes
        if not confidence >= confidence_pass:
            continue
        if extension_id.lower() in installed:
            continue
        results.append(SessionResult(extension_id=extension_id, confidence=confidence))

    # list.sort is stable
    results.sort(key=lambda r: r.confidence, reverse=True)
    return results
