"""Data models for the Institution Rankings system."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from enum import Enum

logger = logging.getLogger(__name__)

YearRange = Tuple[int, int]  # (from_year, to_year), inclusive


class RankingPolicy(Enum):
    """How tied departments share rank numbers."""
    COMPETITION = "competition"  # 10, 10, 8 -> 1, 1, 3
    DENSE = "dense"              # 10, 10, 8 -> 1, 1, 2


class RankingStatus(Enum):
    """Outcome of a ranking pass."""
    RANKED = "ranked"
    NOTHING_SELECTED = "nothing_selected"


@dataclass(frozen=True)
class AreaRecord:
    """Area or venue code with its display title."""
    code: str
    title: str


@dataclass(frozen=True)
class PublicationRecord:
    """One (author, department, venue, year) publication count."""
    name: str
    dept: str
    area: str
    year: int
    count: str = "0"           # raw count, parsed as float
    adjusted_count: str = "0"  # count divided by number of co-authors

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PublicationRecord":
        """Build a record from a CSV-style row.

        Expected keys: name, dept, area, year, count, adjustedcount.
        """
        year = row.get("year")
        try:
            year = int(year)
        except (TypeError, ValueError):
            logger.debug(f"Unparsable year {year!r} for {row.get('name')!r}")
            year = 0

        return cls(
            name=str(row.get("name") or "").strip(),
            dept=str(row.get("dept") or "").strip(),
            area=str(row.get("area") or "").strip(),
            year=year,
            count=str(row.get("count", "0")),
            adjusted_count=str(row.get("adjustedcount", row.get("adjusted_count", "0"))),
        )


@dataclass
class RankingConfig:
    """Configuration for a ranking engine."""
    min_to_show: int = 30             # enough rows to enable scrolling
    expanded_min_to_show: int = 5000  # after the user scrolls to the bottom
    ranking_policy: str = "competition"  # "competition", "dense"
    score_precision: int = 1
    # Area summary heuristic
    pub_threshold: float = 0.2
    num_stddevs: float = 1.0
    top_n_areas: int = 3
    min_pub_threshold: float = 1.0

    def __post_init__(self):
        if self.min_to_show < 0 or self.expanded_min_to_show < 0:
            raise ValueError("Display minimums must be non-negative")
        if self.ranking_policy not in {p.value for p in RankingPolicy}:
            raise ValueError(f"Unknown ranking policy: {self.ranking_policy}")
        if self.top_n_areas < 1:
            raise ValueError(f"top_n_areas must be at least 1, got {self.top_n_areas}")


@dataclass
class Accumulators:
    """Per-request totals built by one aggregation pass."""
    dept_names: Dict[str, List[str]] = field(default_factory=dict)  # dept -> roster, first-seen order
    dept_counts: Dict[str, int] = field(default_factory=dict)       # dept -> number of faculty
    faculty_count: Dict[str, float] = field(default_factory=dict)   # author -> raw count
    faculty_adjusted_count: Dict[str, float] = field(default_factory=dict)
    area_dept_adjusted_count: Dict[Tuple[str, str], float] = field(default_factory=dict)  # (root, dept)
    author_areas: Dict[str, Dict[str, float]] = field(default_factory=dict)  # name or dept -> venue -> count
    malformed_counts: int = 0


@dataclass
class FacultyEntry:
    """Faculty member listed under a ranked department."""
    name: str
    count: float = 0.0
    adjusted_count: float = 0.0
    areas: str = ""


@dataclass
class RankingEntry:
    """One row of the department ranking."""
    rank: int
    dept: str
    score: float
    faculty_count: int
    country_abbrv: str = "us"
    faculty: List[FacultyEntry] = field(default_factory=list)


@dataclass
class RankingResult:
    """Ranking output, or the signal that no area is selected."""
    status: RankingStatus
    entries: List[RankingEntry] = field(default_factory=list)
    num_areas: int = 0
    year_range: Optional[YearRange] = None
    region: str = "world"

    @classmethod
    def nothing_selected(cls, year_range: Optional[YearRange] = None,
                         region: str = "world") -> "RankingResult":
        return cls(status=RankingStatus.NOTHING_SELECTED, year_range=year_range, region=region)

    @property
    def is_nothing_selected(self) -> bool:
        return self.status is RankingStatus.NOTHING_SELECTED


@dataclass(frozen=True)
class AreaChartSlice:
    """Per-area bar of an author or department profile."""
    label: str
    value: float


def round_score(value: float, precision: int = 1) -> float:
    """Round half up to `precision` decimals (Python's round() is half-even)."""
    scale = 10 ** precision
    return math.floor(value * scale + 0.5) / scale
