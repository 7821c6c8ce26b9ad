"""Aggregation of publication records into per-department totals."""

import logging
import math
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .models import Accumulators, PublicationRecord, YearRange
from .regions import RegionTable
from .taxonomy import AreaTaxonomy

logger = logging.getLogger(__name__)


def parse_count(value) -> Tuple[float, bool]:
    """Parse a count field. Returns (value, ok); unparsable or negative values are 0."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0, False
    if not math.isfinite(parsed) or parsed < 0:
        return 0.0, False
    return parsed, True


class Aggregator:
    """Scans publication records and accumulates filtered totals."""

    def __init__(self, taxonomy: AreaTaxonomy, region_table: Optional[RegionTable] = None):
        self.taxonomy = taxonomy
        self.region_table = region_table or RegionTable()

    def aggregate(self,
                  records: Iterable[PublicationRecord],
                  year_range: YearRange,
                  region: str,
                  weights: Mapping[str, int],
                  author_areas: Optional[Dict[str, Dict[str, float]]] = None) -> Accumulators:
        """Build fresh accumulators for one ranking pass.

        `author_areas` may pass in profile counts already built for
        `year_range`; otherwise they are counted here.
        """
        records = list(records)
        acc = Accumulators()
        start_year, end_year = year_range
        visited = set()

        for record in records:
            dept = record.dept
            if not dept:
                continue
            area = record.area
            if self.taxonomy.is_next_tier(area):
                continue
            if record.year < start_year or record.year > end_year:
                continue
            if weights.get(area, 0) == 0:
                continue
            if not self.region_table.in_region(dept, region):
                continue

            count = self._parse(record.count, record, acc)
            adjusted_count = self._parse(record.adjusted_count, record, acc)

            # Child venues accumulate into their parent area.
            area_dept = (self.taxonomy.root_of(area), dept)
            acc.area_dept_adjusted_count[area_dept] = (
                acc.area_dept_adjusted_count.get(area_dept, 0.0) + adjusted_count
            )

            name = record.name
            if name not in visited:
                visited.add(name)
                acc.faculty_count[name] = 0.0
                acc.faculty_adjusted_count[name] = 0.0
                acc.dept_names.setdefault(dept, []).append(name)
                acc.dept_counts[dept] = acc.dept_counts.get(dept, 0) + 1

            acc.faculty_count[name] += count
            acc.faculty_adjusted_count[name] += adjusted_count

        if author_areas is None:
            author_areas = self.count_author_areas(records, year_range)
        acc.author_areas = author_areas

        if acc.malformed_counts:
            logger.warning(f"Treated {acc.malformed_counts} unparsable or negative "
                           f"count fields as 0")
        logger.info(f"Aggregated {len(acc.faculty_count)} faculty in "
                    f"{len(acc.dept_names)} departments")
        return acc

    def count_author_areas(self,
                           records: Iterable[PublicationRecord],
                           year_range: YearRange) -> Dict[str, Dict[str, float]]:
        """Per-venue raw counts for every author and department.

        Filtered by year only, so profiles look the same whichever areas
        and region are selected.
        """
        start_year, end_year = year_range
        author_areas: Dict[str, Dict[str, float]] = {}

        for record in records:
            if record.year < start_year or record.year > end_year:
                continue
            count, ok = parse_count(record.count)
            if not ok:
                logger.debug(f"Unparsable count {record.count!r} for {record.name!r}")

            keys = [record.name]
            if record.dept and record.dept != record.name:
                keys.append(record.dept)
            for key in keys:
                areas = author_areas.setdefault(key, {})
                areas[record.area] = areas.get(record.area, 0.0) + count

        return author_areas

    @staticmethod
    def _parse(value: str, record: PublicationRecord, acc: Accumulators) -> float:
        parsed, ok = parse_count(value)
        if not ok:
            acc.malformed_counts += 1
            logger.debug(f"Unparsable count {value!r} for {record.name!r} "
                         f"({record.dept}, {record.area}, {record.year})")
        return parsed
