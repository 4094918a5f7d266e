"""Similarity scoring between source column names and target field names.

The score is a fixed blend of normalized Levenshtein similarity and the
Jaccard index of character bigrams, computed on normalized names.
"""

from rapidfuzz.distance import Levenshtein

from ....constants import ScoreWeights
from .normalizer import normalize_field_name

EDIT_WEIGHT = ScoreWeights.EDIT_DISTANCE
BIGRAM_WEIGHT = ScoreWeights.BIGRAM


def edit_similarity(left: str, right: str) -> float:
    max_len = max(len(left), len(right))
    if max_len == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(left, right) / max_len


def bigrams(text: str) -> set[str]:
    return {text[i : i + 2] for i in range(len(text) - 1)}


def bigram_similarity(left: str, right: str) -> float:
    if len(left) < 2 and len(right) < 2:
        return 1.0 if left == right else 0.0
    left_set = bigrams(left)
    right_set = bigrams(right)
    union = left_set | right_set
    if not union:
        return 0.0
    return len(left_set & right_set) / len(union)


def similarity(left: str, right: str) -> float:
    """Score in [0, 1]; identical normalized names always score exactly 1.0.

    Otherwise the score is exactly::

        0.6 * (1 - levenshtein(a, b) / max(len(a), len(b)))
        + 0.4 * |bigrams(a) & bigrams(b)| / |bigrams(a) | bigrams(b)|

    with no further tuning. ``"고객명"`` against ``"고객 이름"`` therefore
    scores 0.4 and stays below the default similarity threshold.
    """
    a = normalize_field_name(left)
    b = normalize_field_name(right)
    if a == b:
        return 1.0
    return EDIT_WEIGHT * edit_similarity(a, b) + BIGRAM_WEIGHT * bigram_similarity(
        a, b
    )
