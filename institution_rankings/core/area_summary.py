"""Summaries of the research areas an author or department is known for."""

import logging
import math
from typing import Dict, List, Mapping, Optional, Tuple
import numpy as np

from .models import AreaChartSlice, YearRange, round_score
from .taxonomy import AreaTaxonomy

logger = logging.getLogger(__name__)


class AreaSummarizer:
    """Reduces per-venue publication counts to a few dominant areas.

    An area is kept when its total is within `num_stddevs` (sample standard
    deviation, rounded up) of the largest area total, makes up at least
    `pub_threshold` of all publications, and exceeds `min_pub_threshold`.
    At most `top_n` areas are returned, largest first; equal totals keep
    taxonomy order.

    Results are memoized per (name, year range), since the underlying
    counts are filtered by year.
    """

    def __init__(self,
                 taxonomy: AreaTaxonomy,
                 pub_threshold: float = 0.2,
                 num_stddevs: float = 1.0,
                 top_n: int = 3,
                 min_pub_threshold: float = 1.0):
        self.taxonomy = taxonomy
        self.pub_threshold = pub_threshold
        self.num_stddevs = num_stddevs
        self.top_n = top_n
        self.min_pub_threshold = min_pub_threshold
        self._cache: Dict[Tuple[str, Optional[YearRange]], Tuple[str, ...]] = {}

    def summarize(self,
                  name: str,
                  author_areas: Mapping[str, Mapping[str, float]],
                  year_range: Optional[YearRange] = None) -> List[str]:
        """Return the display labels of the dominant areas for `name`.

        Args:
            name: Author or department name
            author_areas: name -> venue code -> publication count, already
                filtered to `year_range`
            year_range: Year range the counts were built for (cache key)
        """
        key = (name, year_range)
        if key in self._cache:
            return list(self._cache[key])

        totals = self._label_totals(author_areas.get(name))
        labels = self._dominant_labels(totals)
        self._cache[key] = tuple(labels)
        return labels

    def area_string(self,
                    name: str,
                    author_areas: Mapping[str, Mapping[str, float]],
                    year_range: Optional[YearRange] = None) -> str:
        return ",".join(self.summarize(name, author_areas, year_range))

    def clear_cache(self) -> None:
        logger.debug(f"Clearing {len(self._cache)} cached area summaries")
        self._cache.clear()

    def _label_totals(self, areas: Optional[Mapping[str, float]]) -> Dict[str, float]:
        """Fold top-tier venue counts into display-label totals."""
        totals: Dict[str, float] = {}
        if not areas:
            return totals

        for code in self.taxonomy.top_tier_areas:
            value = areas.get(code, 0.0)
            if value > 0:
                label = self.taxonomy.label(self.taxonomy.root_of(code))
                totals[label] = totals.get(label, 0.0) + value
        return totals

    def _dominant_labels(self, totals: Dict[str, float]) -> List[str]:
        if not totals:
            return []

        values = list(totals.values())
        total = sum(values)
        max_value = max(values)
        spread = 0.0
        if len(values) > 1:
            spread = math.ceil(self.num_stddevs * float(np.std(values, ddof=1)))

        kept = [
            label for label, value in totals.items()
            if value >= max_value - spread
            and value / total >= self.pub_threshold
            and value > self.min_pub_threshold
        ]
        kept.sort(key=lambda label: -totals[label])
        return kept[:self.top_n]

    def chart_data(self,
                   name: str,
                   author_areas: Mapping[str, Mapping[str, float]]) -> List[AreaChartSlice]:
        """Per-root-area totals for a profile chart, in area group order."""
        areas = author_areas.get(name)
        if areas is None:
            return []

        roots = [root for group in self.taxonomy.groups.values() for root in group]
        if not roots:
            roots = self.taxonomy.root_areas
        datadict = {root: 0.0 for root in roots}

        for code in self.taxonomy.top_tier_areas:
            value = round_score(areas.get(code, 0.0), 1)
            root = self.taxonomy.root_of(code)
            if value > 0 and root in datadict:
                datadict[root] += value

        return [AreaChartSlice(label=self.taxonomy.label(root), value=round_score(value, 1))
                for root, value in datadict.items()]
