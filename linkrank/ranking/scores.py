"""Post-processing of PageRank scores: ordering and normalization."""

from collections.abc import Hashable, Mapping

from linkrank.exceptions import InvalidParameterError


def rank_nodes(
    scores: Mapping[Hashable, float],
    top_k: int | None = None,
) -> list[tuple[Hashable, float]]:
    """Order nodes by score, highest first.

    Ties keep the order in which nodes appear in ``scores``.

    Args:
        scores: Dict mapping node -> score
        top_k: Keep only this many entries (all if None)

    Returns:
        List of (node, score) pairs
    """
    if top_k is not None and top_k < 0:
        raise InvalidParameterError(f"top_k must be >= 0, got {top_k}")

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    if top_k is not None:
        ranked = ranked[:top_k]
    return ranked


def normalize_scores(
    scores: Mapping[Hashable, float],
    min_score: float = 0.0,
    max_score: float = 1.0,
) -> dict[Hashable, float]:
    """Normalize scores to a target range.

    Args:
        scores: Raw PageRank scores
        min_score: Minimum output score
        max_score: Maximum output score

    Returns:
        Dict mapping node -> normalized score in [min_score, max_score]
    """
    if not scores:
        return {}

    raw_min, raw_max = min(scores.values()), max(scores.values())
    raw_range = raw_max - raw_min

    # All scores equal - return midpoint
    if raw_range == 0:
        mid = (min_score + max_score) / 2
        return {node: mid for node in scores}

    target_range = max_score - min_score
    return {
        node: min_score + ((score - raw_min) / raw_range) * target_range
        for node, score in scores.items()
    }


def normalize_to_unit_sum(scores: Mapping[Hashable, float]) -> dict[Hashable, float]:
    """Scale scores so they sum to 1. A zero total is returned unchanged."""
    total = sum(scores.values())
    if total == 0:
        return dict(scores)
    return {node: score / total for node, score in scores.items()}
