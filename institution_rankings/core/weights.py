"""Area selection: weight vectors and selection helpers."""

import logging
from typing import Dict, Iterable, Set, Tuple

from .taxonomy import AreaTaxonomy

logger = logging.getLogger(__name__)


class WeightSelector:
    """Turns a set of selected area codes into per-area weights."""

    def __init__(self, taxonomy: AreaTaxonomy):
        self.taxonomy = taxonomy

    def compute_weights(self, selected: Iterable[str]) -> Tuple[Dict[str, int], int]:
        """Return (weights, number of selected root areas).

        Children never count towards the number of areas, even when
        selected on their own.
        """
        selected = set(selected)
        unknown = selected.difference(self.taxonomy.areas)
        if unknown:
            logger.debug(f"Ignoring unknown area codes: {sorted(unknown)}")

        weights = {}
        num_areas = 0
        for area in self.taxonomy.areas:
            weights[area] = 1 if area in selected else 0
            if weights[area] == 1 and self.taxonomy.is_root(area):
                num_areas += 1

        return weights, num_areas


def default_selection(taxonomy: AreaTaxonomy) -> Set[str]:
    """Everything on except next-tier venues."""
    return {area for area in taxonomy.areas if not taxonomy.is_next_tier(area)}


def select_group(taxonomy: AreaTaxonomy,
                 selected: Iterable[str],
                 group: str,
                 value: bool = True) -> Set[str]:
    """Turn a group of root areas, and their top-tier venues, on or off."""
    result = set(selected)
    for root in taxonomy.group(group):
        venues = taxonomy.children(root)
        if value:
            result.add(root)
            result.update(v for v in venues if not taxonomy.is_next_tier(v))
            result.difference_update(v for v in venues if taxonomy.is_next_tier(v))
        else:
            result.discard(root)
            result.difference_update(venues)
    return result


def is_subsetted(taxonomy: AreaTaxonomy, root: str, selected: Iterable[str]) -> bool:
    """True if only part of a root's venues is selected.

    That is, some but not all top-tier venues, or any next-tier venue.
    """
    selected = set(selected)
    above = [v for v in taxonomy.children(root) if not taxonomy.is_next_tier(v)]
    below = [v for v in taxonomy.children(root) if taxonomy.is_next_tier(v)]
    checked_above = sum(1 for v in above if v in selected)
    checked_below = sum(1 for v in below if v in selected)
    return (0 < checked_above < len(above)) or checked_below > 0
