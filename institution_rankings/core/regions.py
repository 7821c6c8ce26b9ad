"""Geographic region filtering for departments."""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

# Regions that require an explicit entry in the region table.
LISTED_REGIONS = frozenset({"europe", "canada", "southamerica", "asia", "africa", "australasia"})

REGIONS = ["us", "europe", "canada", "northamerica", "southamerica",
           "australasia", "asia", "africa", "world"]


class RegionTable:
    """Department -> (region, country abbreviation) lookup.

    Departments missing from the table are US departments.
    """

    def __init__(self,
                 regions: Optional[Mapping[str, str]] = None,
                 country_abbrv: Optional[Mapping[str, str]] = None):
        self.regions: Dict[str, str] = dict(regions or {})
        self.country_abbrv: Dict[str, str] = dict(country_abbrv or {})

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "RegionTable":
        """Build from CSV-style rows with institution, region, countryabbrv keys."""
        regions = {}
        country_abbrv = {}
        for row in rows:
            institution = str(row.get("institution") or "").strip()
            if not institution:
                continue
            regions[institution] = str(row.get("region") or "").strip()
            country_abbrv[institution] = str(row.get("countryabbrv") or "").strip()

        logger.info(f"Loaded region info for {len(regions)} institutions")
        return cls(regions, country_abbrv)

    def __contains__(self, dept: str) -> bool:
        return dept in self.regions

    def __len__(self) -> int:
        return len(self.regions)

    def abbrv(self, dept: str) -> str:
        """Country abbreviation used for flags; "us" when unlisted."""
        return self.country_abbrv.get(dept, "us")

    @staticmethod
    def is_known_filter(region: str) -> bool:
        return region in REGIONS or is_country_code(region)

    def in_region(self, dept: str, region: str) -> bool:
        """Return True if `dept` passes the `region` filter."""
        if region == "world":
            return True
        if region == "us":
            return dept not in self.regions
        if region == "northamerica":
            return dept not in self.regions or self.regions[dept] == "canada"
        if region in LISTED_REGIONS:
            return self.regions.get(dept) == region
        if is_country_code(region):
            return self.country_abbrv.get(dept) == region
        # Unrecognized filter: no restriction.
        return True


def is_country_code(region: str) -> bool:
    return len(region) == 2 and region.isalpha()
