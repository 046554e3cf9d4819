"""Flow graph construction (entity -> outcome) for the sankey chart."""

from typing import Dict, Iterable, List
import structlog

from covid_normalization.models.series_data import EntityTotals, FlowGraph, FlowLink

logger = structlog.get_logger(__name__)

DEATHS_NODE = "Deaths"
NON_FATAL_NODE = "Non-Fatal Cases"
OUTCOME_NODES = (DEATHS_NODE, NON_FATAL_NODE)


def build_flow_graph(entities: Iterable[EntityTotals]) -> FlowGraph:
    """
    Build a two-layer flow graph from per-entity totals.

    Each entity with confirmed > 0 becomes a source node linked to
    'Deaths' (when deceased > 0) and 'Non-Fatal Cases' (when
    confirmed - deceased > 0). Deaths are capped at confirmed, so the
    outgoing link values of an entity never exceed its confirmed total.
    Entities with confirmed <= 0, and entities whose id is an outcome node
    name, are left out.

    Args:
        entities: Per-entity confirmed/deceased totals

    Returns:
        FlowGraph; empty when no entity qualifies
    """
    entity_nodes: List[str] = []
    links: List[FlowLink] = []
    seen: Dict[str, bool] = {}

    for entity in entities:
        if entity.confirmed <= 0:
            logger.debug("Skipping entity without confirmed cases", entity=entity.entity_id)
            continue

        if entity.entity_id in OUTCOME_NODES:
            logger.warning("Entity id collides with an outcome node, skipping",
                           entity=entity.entity_id)
            continue

        if entity.entity_id in seen:
            logger.warning("Duplicate entity in flow graph input, keeping first",
                           entity=entity.entity_id)
            continue
        seen[entity.entity_id] = True
        entity_nodes.append(entity.entity_id)

        deaths = min(max(0.0, entity.deceased), entity.confirmed)
        non_fatal = max(0.0, entity.confirmed - deaths)

        if deaths > 0:
            links.append(FlowLink(source=entity.entity_id, target=DEATHS_NODE, value=deaths))
        if non_fatal > 0:
            links.append(FlowLink(source=entity.entity_id, target=NON_FATAL_NODE, value=non_fatal))

    if not entity_nodes:
        return FlowGraph()

    nodes = tuple(entity_nodes) + OUTCOME_NODES
    return FlowGraph(nodes=nodes, links=tuple(links))
