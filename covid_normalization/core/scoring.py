"""Cross-entity min-max normalization."""

from typing import Dict, List, Mapping
import structlog

from covid_normalization.models.series_data import NormalizedScore

logger = structlog.get_logger(__name__)

# Score assigned when every entity shares the same raw value.
NEUTRAL_SCORE = 0.5


def normalize_across_entities(raw_by_entity: Mapping[str, Mapping[str, float]],
                              metric_directions: Mapping[str, bool]) -> List[NormalizedScore]:
    """
    Rescale each metric to [0, 1] across the supplied entities.

    The range is the min/max observed across ``raw_by_entity`` on this call.
    Metrics where lower is better are inverted so that 1 is always the best
    value. A metric with no spread scores 0.5 for every entity.

    Args:
        raw_by_entity: entity_id -> metric_key -> sanitized raw value
        metric_directions: metric_key -> higher_is_better

    Returns:
        One NormalizedScore per (entity, metric), entities in input order and
        metrics in ``metric_directions`` order

    Raises:
        KeyError: If an entity lacks one of the metrics. Callers substitute 0
            before calling.
    """
    if not raw_by_entity:
        return []

    ranges: Dict[str, tuple] = {}
    for metric_key in metric_directions:
        values = []
        for entity_id, metrics in raw_by_entity.items():
            if metric_key not in metrics:
                raise KeyError(f"Entity {entity_id!r} is missing metric {metric_key!r}")
            values.append(metrics[metric_key])
        ranges[metric_key] = (min(values), max(values))

    scores: List[NormalizedScore] = []
    for entity_id, metrics in raw_by_entity.items():
        for metric_key, higher_is_better in metric_directions.items():
            min_val, max_val = ranges[metric_key]

            if max_val == min_val:
                value = NEUTRAL_SCORE
            else:
                value = (metrics[metric_key] - min_val) / (max_val - min_val)
                if not higher_is_better:
                    value = 1 - value

            scores.append(NormalizedScore(entity_id=entity_id, metric_key=metric_key, value=value))

    logger.debug("Normalized metrics across entities",
                 entities=len(raw_by_entity),
                 metrics=len(metric_directions))

    return scores
