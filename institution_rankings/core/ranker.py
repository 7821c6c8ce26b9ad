"""Tie-aware ranking of scored departments."""

import logging
from typing import List, Mapping, Optional, Tuple
import numpy as np
from scipy import stats

from .models import RankingEntry, RankingPolicy, RankingResult, RankingStatus, round_score

logger = logging.getLogger(__name__)


def last_name(name: str) -> str:
    """Last whitespace-delimited token of a name."""
    parts = name.split()
    return parts[-1] if parts else ""


def name_sort_key(name: str) -> Tuple[str, str]:
    return last_name(name), name


class DepartmentRanker:
    """Sorts departments by score and assigns ranks."""

    def __init__(self, policy: RankingPolicy = RankingPolicy.COMPETITION, precision: int = 1):
        self.policy = policy
        self.precision = precision

    def rank(self,
             scores: Mapping[str, float],
             dept_counts: Mapping[str, int],
             num_areas: int,
             min_to_show: int,
             year_range: Optional[Tuple[int, int]] = None,
             region: str = "world") -> RankingResult:
        """Rank departments, showing at least `min_to_show` unless scores run out.

        A tied group is never split at the cut-off, and departments scoring
        0 are never shown.
        """
        if num_areas <= 0:
            logger.info("No areas selected")
            return RankingResult.nothing_selected(year_range, region)

        rounded = {dept: round_score(score, self.precision) for dept, score in scores.items()}
        ordered = self.sort_departments(rounded)
        ranks = self.assign_ranks([rounded[dept] for dept in ordered])

        entries: List[RankingEntry] = []
        previous: Optional[float] = None
        for index, dept in enumerate(ordered):
            value = rounded[dept]
            if index >= min_to_show and value != previous:
                break
            if value == 0.0:
                break
            entries.append(RankingEntry(
                rank=ranks[index],
                dept=dept,
                score=value,
                faculty_count=dept_counts.get(dept, 0),
            ))
            previous = value

        logger.info(f"Ranked {len(entries)} of {len(ordered)} departments")
        return RankingResult(
            status=RankingStatus.RANKED,
            entries=entries,
            num_areas=num_areas,
            year_range=year_range,
            region=region,
        )

    @staticmethod
    def sort_departments(rounded: Mapping[str, float]) -> List[str]:
        """Descending score; equal scores by last word of the name."""
        return sorted(rounded, key=lambda dept: (-rounded[dept], name_sort_key(dept)))

    def assign_ranks(self, sorted_scores: List[float]) -> List[int]:
        """Rank numbers for scores already sorted in descending order."""
        if not sorted_scores:
            return []
        method = "dense" if self.policy is RankingPolicy.DENSE else "min"
        ranks = stats.rankdata(-np.asarray(sorted_scores, dtype=float), method=method)
        return [int(r) for r in ranks]
