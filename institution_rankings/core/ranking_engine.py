"""Main orchestrator for the Institution Rankings system."""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence
import pandas as pd

from .models import (
    Accumulators, AreaChartSlice, FacultyEntry, PublicationRecord,
    RankingConfig, RankingEntry, RankingPolicy, RankingResult, YearRange
)
from .taxonomy import AreaTaxonomy
from .regions import RegionTable
from .weights import WeightSelector
from .aggregator import Aggregator
from .scoring import DepartmentScorer
from .ranker import DepartmentRanker, name_sort_key
from .area_summary import AreaSummarizer

logger = logging.getLogger(__name__)


class InstitutionRankings:
    """Ranks departments by publications in the selected research areas."""

    def __init__(self,
                 records: Sequence[PublicationRecord],
                 region_table: Optional[RegionTable] = None,
                 taxonomy: Optional[AreaTaxonomy] = None,
                 config: Optional[RankingConfig] = None):
        """Initialize with loaded records and configuration."""
        self.records: List[PublicationRecord] = list(records)
        self.region_table = region_table or RegionTable()
        self.taxonomy = taxonomy or AreaTaxonomy.default()
        self.config = config or RankingConfig()

        # Parse ranking policy from string
        policy_map = {
            'competition': RankingPolicy.COMPETITION,
            'dense': RankingPolicy.DENSE,
        }
        ranking_policy = policy_map.get(self.config.ranking_policy, RankingPolicy.COMPETITION)

        # Initialize components
        self.selector = WeightSelector(self.taxonomy)
        self.aggregator = Aggregator(self.taxonomy, self.region_table)
        self.scorer = DepartmentScorer(self.taxonomy)
        self.ranker = DepartmentRanker(ranking_policy, self.config.score_precision)
        self.summarizer = AreaSummarizer(
            self.taxonomy,
            pub_threshold=self.config.pub_threshold,
            num_stddevs=self.config.num_stddevs,
            top_n=self.config.top_n_areas,
            min_pub_threshold=self.config.min_pub_threshold,
        )

        self.min_to_show = self.config.min_to_show

        # Results of the last pass
        self.accumulators: Optional[Accumulators] = None
        self.scores: Dict[str, float] = {}
        self.last_result: Optional[RankingResult] = None
        self.year_range: Optional[YearRange] = None
        self._area_counts_year: Optional[YearRange] = None
        self._area_counts: Dict[str, Dict[str, float]] = {}

        logger.info(f"Loaded {len(self.records)} publication records, "
                    f"{len(self.region_table)} non-US institutions")

    def rank(self,
             year_range: YearRange,
             region: str,
             selected_areas: Iterable[str]) -> RankingResult:
        """Run one complete ranking pass."""
        start = time.perf_counter()
        year_range = (int(year_range[0]), int(year_range[1]))
        self.year_range = year_range

        if not self.region_table.is_known_filter(region):
            logger.warning(f"Unknown region filter {region!r}; not restricting by region")

        weights, num_areas = self.selector.compute_weights(selected_areas)
        if num_areas == 0:
            logger.info("Nothing selected; skipping ranking pass")
            self.accumulators = None
            self.scores = {}
            self.last_result = RankingResult.nothing_selected(year_range, region)
            return self.last_result

        accumulators = self.aggregator.aggregate(self.records, year_range, region, weights,
                                                 author_areas=self._area_counts_for(year_range))

        scores = self.scorer.compute_scores(accumulators, weights, num_areas)
        logger.debug(f"Score statistics: {self.scorer.get_score_statistics(scores)}")

        result = self.ranker.rank(scores, accumulators.dept_counts, num_areas,
                                  self.min_to_show, year_range, region)
        for entry in result.entries:
            entry.country_abbrv = self.region_table.abbrv(entry.dept)
            entry.faculty = self._build_faculty(entry.dept, accumulators, year_range)

        self.accumulators = accumulators
        self.scores = scores
        self.last_result = result

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(f"Rank took {elapsed:.1f} milliseconds "
                    f"({len(result.entries)} departments shown)")
        return result

    def _build_faculty(self,
                       dept: str,
                       accumulators: Accumulators,
                       year_range: YearRange) -> List[FacultyEntry]:
        """Faculty of a department, most publications first."""
        names = accumulators.dept_names.get(dept, [])
        ordered = sorted(names, key=lambda name: (-accumulators.faculty_count[name],
                                                  name_sort_key(name)))
        return [
            FacultyEntry(
                name=name,
                count=accumulators.faculty_count[name],
                adjusted_count=accumulators.faculty_adjusted_count[name],
                areas=self.area_string(name, year_range),
            )
            for name in ordered
        ]

    def _area_counts_for(self, year_range: YearRange) -> Dict[str, Dict[str, float]]:
        """Profile counts for `year_range`, recounted only when the range changes."""
        if self._area_counts_year != year_range:
            # Summaries for the previous range are never looked up again.
            self.summarizer.clear_cache()
            self._area_counts_year = year_range
            self._area_counts = self.aggregator.count_author_areas(self.records, year_range)
        return self._area_counts

    def _resolve_year_range(self, year_range: Optional[YearRange]) -> YearRange:
        if year_range is not None:
            return (int(year_range[0]), int(year_range[1]))
        if self.year_range is not None:
            return self.year_range
        years = [record.year for record in self.records]
        if not years:
            return (0, 0)
        return (min(years), max(years))

    def summarize_areas(self, name: str, year_range: Optional[YearRange] = None) -> List[str]:
        """Dominant area labels for an author or department.

        Defaults to the year range of the last ranking pass.
        """
        year_range = self._resolve_year_range(year_range)
        return self.summarizer.summarize(name, self._area_counts_for(year_range), year_range)

    def area_string(self, name: str, year_range: Optional[YearRange] = None) -> str:
        return ",".join(self.summarize_areas(name, year_range))

    def area_chart(self, name: str, year_range: Optional[YearRange] = None) -> List[AreaChartSlice]:
        year_range = self._resolve_year_range(year_range)
        return self.summarizer.chart_data(name, self._area_counts_for(year_range))

    def expand_minimum(self) -> bool:
        """Show (many) more departments on the next pass.

        Returns:
            True if the minimum changed and the caller should rank again
        """
        if self.min_to_show >= self.config.expanded_min_to_show:
            return False
        self.min_to_show = self.config.expanded_min_to_show
        return True

    def get_top_departments(self, n: int = 10) -> List[RankingEntry]:
        """Get top N departments of the last pass."""
        if not self.last_result:
            return []
        return self.last_result.entries[:n]

    def get_department_details(self, dept: str) -> Optional[Dict[str, Any]]:
        """Get detailed information for a ranked department."""
        if not self.last_result or not self.accumulators:
            return None

        entry = next((e for e in self.last_result.entries if e.dept == dept), None)
        if entry is None:
            return None

        area_counts = {
            area: self.accumulators.area_dept_adjusted_count[(area, d)]
            for (area, d) in self.accumulators.area_dept_adjusted_count
            if d == dept
        }
        return {
            'ranking': entry,
            'raw_score': self.scores.get(dept, 0.0),
            'area_adjusted_counts': area_counts,
            'areas': self.summarize_areas(dept),
        }

    def get_region_distribution(self) -> Dict[str, int]:
        """Number of shown departments per country abbreviation."""
        if not self.last_result:
            return {}

        counts: Dict[str, int] = {}
        for entry in self.last_result.entries:
            counts[entry.country_abbrv] = counts.get(entry.country_abbrv, 0) + 1
        return dict(sorted(counts.items(), key=lambda x: x[1], reverse=True))

    def export_results(self, output_path: str, format: str = 'csv') -> None:
        """Export the last ranking to file.

        Args:
            output_path: Path to output file
            format: Export format ('csv', 'json', 'excel', 'parquet')
        """
        if not self.last_result or self.last_result.is_nothing_selected:
            raise ValueError("No rankings available. Run rank() with at least one area selected.")

        df = self.rankings_to_dataframe()
        output_path = Path(output_path)

        if format.lower() == 'csv':
            df.to_csv(output_path, index=False)
        elif format.lower() == 'json':
            df.to_json(output_path, orient='records', indent=2, force_ascii=False)
        elif format.lower() == 'excel':
            df.to_excel(output_path, index=False)
        elif format.lower() == 'parquet':
            df.to_parquet(output_path, index=False)
        else:
            raise ValueError(f"Unsupported format: {format}")

        logger.info(f"Results exported to {output_path} (format: {format})")

    def rankings_to_dataframe(self) -> pd.DataFrame:
        """Convert the last ranking to a pandas DataFrame."""
        columns = ['rank', 'institution', 'country', 'count', 'faculty', 'areas']
        if not self.last_result:
            return pd.DataFrame(columns=columns)

        data = []
        for entry in self.last_result.entries:
            data.append({
                'rank': entry.rank,
                'institution': entry.dept,
                'country': entry.country_abbrv,
                'count': entry.score,
                'faculty': entry.faculty_count,
                'areas': self.area_string(entry.dept),
            })

        return pd.DataFrame(data, columns=columns)
