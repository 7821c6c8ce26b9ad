"""Department scoring: smoothed geometric mean over selected areas."""

import logging
from typing import Dict, List, Mapping
import numpy as np
from scipy import stats

from .models import Accumulators
from .taxonomy import AreaTaxonomy

logger = logging.getLogger(__name__)


class DepartmentScorer:
    """Scores departments by their adjusted counts across selected areas."""

    def __init__(self, taxonomy: AreaTaxonomy):
        """Initialize scorer.

        Args:
            taxonomy: Area taxonomy; only its root areas enter the score
        """
        self.taxonomy = taxonomy

    def compute_scores(self,
                       accumulators: Accumulators,
                       weights: Mapping[str, int],
                       num_areas: int) -> Dict[str, float]:
        """Calculate the score of every department with a non-empty roster.

        Formula: (prod over selected roots of (adjusted_count + 1)) ** (1 / num_areas)

        Unselected root areas are left out of the product entirely.
        """
        if num_areas <= 0:
            raise ValueError(f"At least one area must be selected, got {num_areas}")

        selected_roots = self.selected_roots(weights)
        if len(selected_roots) != num_areas:
            raise ValueError(f"Area count {num_areas} does not match "
                             f"{len(selected_roots)} selected root areas")

        scores = {}
        for dept, names in accumulators.dept_names.items():
            if not names:
                scores[dept] = 0.0
                continue
            factors = [
                accumulators.area_dept_adjusted_count.get((area, dept), 0.0) + 1.0
                for area in selected_roots
            ]
            scores[dept] = float(stats.gmean(factors))

        logger.info(f"Scored {len(scores)} departments over {num_areas} areas")
        return scores

    def selected_roots(self, weights: Mapping[str, int]) -> List[str]:
        return [area for area in self.taxonomy.root_areas if weights.get(area, 0) != 0]

    def get_score_statistics(self, scores: Mapping[str, float]) -> Dict[str, float]:
        """Calculate descriptive statistics of department scores."""
        if not scores:
            return {}

        values = list(scores.values())
        return {
            'count': len(values),
            'mean': float(np.mean(values)),
            'median': float(np.median(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
            'q25': float(np.percentile(values, 25)),
            'q75': float(np.percentile(values, 75)),
        }
