"""Institution rankings by publication activity across research areas.

This package ranks departments by how much their faculty publish at the
top venues of each selected research area, within a year range and a
geographic region.

Main components:
- Area taxonomy of root areas, their venues, and demoted (next-tier) venues
- Region, year and area filtering of publication records
- Smoothed geometric-mean department scores
- Competition or dense rankings with tie-aware display cut-off
- Per-author and per-department summaries of dominant areas
"""

from .core import (
    InstitutionRankings, AreaTaxonomy, RegionTable, PublicationRecord,
    RankingConfig, RankingResult
)

__all__ = [
    "InstitutionRankings",
    "AreaTaxonomy",
    "RegionTable",
    "PublicationRecord",
    "RankingConfig",
    "RankingResult",
]

__version__ = "1.0.0"
