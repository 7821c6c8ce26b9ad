"""Core components for the Institution Rankings system."""

from .models import (
    AreaRecord, PublicationRecord, RankingConfig, Accumulators,
    FacultyEntry, RankingEntry, RankingResult, RankingPolicy, RankingStatus,
    AreaChartSlice, round_score
)
from .taxonomy import AreaTaxonomy
from .regions import RegionTable
from .weights import WeightSelector, default_selection, select_group, is_subsetted
from .aggregator import Aggregator
from .scoring import DepartmentScorer
from .ranker import DepartmentRanker
from .area_summary import AreaSummarizer
from .input_parser import InputParser
from .ranking_engine import InstitutionRankings

__all__ = [
    # Models
    "AreaRecord", "PublicationRecord", "RankingConfig", "Accumulators",
    "FacultyEntry", "RankingEntry", "RankingResult", "RankingPolicy",
    "RankingStatus", "AreaChartSlice", "round_score",

    # Core components
    "AreaTaxonomy", "RegionTable", "WeightSelector", "default_selection",
    "select_group", "is_subsetted", "Aggregator", "DepartmentScorer",
    "DepartmentRanker", "AreaSummarizer", "InputParser", "InstitutionRankings"
]
