"""Research area taxonomy: root areas, their venues, and display titles."""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import AreaRecord

logger = logging.getLogger(__name__)


# Venue -> root area.
PARENT_MAP: Dict[str, str] = {
    'aaai': 'ai', 'ijcai': 'ai',
    'cvpr': 'vision', 'eccv': 'vision', 'iccv': 'vision',
    'icml': 'mlmining', 'kdd': 'mlmining', 'nips': 'mlmining',
    'acl': 'nlp', 'emnlp': 'nlp', 'naacl': 'nlp',
    'sigir': 'ir', 'www': 'ir',
    'asplos': 'arch', 'isca': 'arch', 'micro': 'arch', 'hpca': 'arch',
    'ccs': 'sec', 'oakland': 'sec', 'usenixsec': 'sec', 'ndss': 'sec', 'pets': 'sec',
    'vldb': 'mod', 'sigmod': 'mod', 'icde': 'mod', 'pods': 'mod',
    'dac': 'da', 'iccad': 'da',
    'emsoft': 'bed', 'rtas': 'bed', 'rtss': 'bed',
    'sc': 'hpc', 'hpdc': 'hpc', 'ics': 'hpc',
    'mobicom': 'mobile', 'mobisys': 'mobile', 'sensys': 'mobile',
    'imc': 'metrics', 'sigmetrics': 'metrics',
    'osdi': 'ops', 'sosp': 'ops', 'eurosys': 'ops', 'fast': 'ops', 'usenixatc': 'ops',
    'popl': 'plan', 'pldi': 'plan', 'oopsla': 'plan', 'icfp': 'plan',
    'fse': 'soft', 'icse': 'soft', 'ase': 'soft', 'issta': 'soft',
    'nsdi': 'comm', 'sigcomm': 'comm',
    'siggraph': 'graph', 'siggraph-asia': 'graph',
    'focs': 'act', 'soda': 'act', 'stoc': 'act',
    'crypto': 'crypt', 'eurocrypt': 'crypt',
    'cav': 'log', 'lics': 'log',
    'ismb': 'bio', 'recomb': 'bio',
    'ec': 'ecom', 'wine': 'ecom',
    'chiconf': 'chi', 'ubicomp': 'chi', 'uist': 'chi',
    'icra': 'robotics', 'iros': 'robotics', 'rss': 'robotics',
    'vis': 'visualization', 'vr': 'visualization',
}

# Venues demoted from the default ranking.
NEXT_TIER: FrozenSet[str] = frozenset({
    'ase', 'issta', 'icde', 'pods', 'hpca', 'ndss', 'pets',
    'eurosys', 'fast', 'usenixatc', 'icfp', 'oopsla',
})

# (code, title) in display order.
AREA_TITLES: List[Tuple[str, str]] = [
    ("ai", "AI"), ("aaai", "AI"), ("ijcai", "AI"),
    ("vision", "Vision"), ("cvpr", "Vision"), ("eccv", "Vision"), ("iccv", "Vision"),
    ("mlmining", "ML"), ("icml", "ML"), ("kdd", "ML"), ("nips", "ML"),
    ("nlp", "NLP"), ("acl", "NLP"), ("emnlp", "NLP"), ("naacl", "NLP"),
    ("ir", "Web+IR"), ("sigir", "Web+IR"), ("www", "Web+IR"),
    ("arch", "Arch"), ("asplos", "Arch"), ("isca", "Arch"), ("micro", "Arch"), ("hpca", "Arch"),
    ("comm", "Networks"), ("sigcomm", "Networks"), ("nsdi", "Networks"),
    ("sec", "Security"), ("ccs", "Security"), ("oakland", "Security"), ("usenixsec", "Security"),
    ("ndss", "Security"), ("pets", "Security"),
    ("mod", "DB"), ("sigmod", "DB"), ("vldb", "DB"), ("icde", "DB"), ("pods", "DB"),
    ("hpc", "HPC"), ("sc", "HPC"), ("hpdc", "HPC"), ("ics", "HPC"),
    ("mobile", "Mobile"), ("mobicom", "Mobile"), ("mobisys", "Mobile"), ("sensys", "Mobile"),
    ("metrics", "Metrics"), ("imc", "Metrics"), ("sigmetrics", "Metrics"),
    ("ops", "OS"), ("sosp", "OS"), ("osdi", "OS"), ("fast", "OS"), ("usenixatc", "OS"), ("eurosys", "OS"),
    ("pldi", "PL"), ("popl", "PL"), ("icfp", "PL"), ("oopsla", "PL"), ("plan", "PL"),
    ("soft", "SE"), ("fse", "SE"), ("icse", "SE"), ("ase", "SE"), ("issta", "SE"),
    ("act", "Theory"), ("focs", "Theory"), ("soda", "Theory"), ("stoc", "Theory"),
    ("crypt", "Crypto"), ("crypto", "Crypto"), ("eurocrypt", "Crypto"),
    ("log", "Logic"), ("cav", "Logic"), ("lics", "Logic"),
    ("graph", "Graphics"), ("siggraph", "Graphics"), ("siggraph-asia", "Graphics"),
    ("chi", "HCI"), ("chiconf", "HCI"), ("ubicomp", "HCI"), ("uist", "HCI"),
    ("robotics", "Robotics"), ("icra", "Robotics"), ("iros", "Robotics"), ("rss", "Robotics"),
    ("bio", "Comp. Bio"), ("ismb", "Comp. Bio"), ("recomb", "Comp. Bio"),
    ("da", "EDA"), ("dac", "EDA"), ("iccad", "EDA"),
    ("bed", "Embedded"), ("emsoft", "Embedded"), ("rtas", "Embedded"), ("rtss", "Embedded"),
    ("visualization", "Visualization"), ("vis", "Visualization"), ("vr", "Visualization"),
    ("ecom", "ECom"), ("ec", "ECom"), ("wine", "ECom"),
]

AREA_GROUPS: Dict[str, List[str]] = {
    "ai": ["ai", "vision", "mlmining", "nlp", "ir"],
    "systems": ["arch", "comm", "sec", "mod", "hpc", "mobile", "metrics", "ops", "plan", "soft", "da", "bed"],
    "theory": ["act", "crypt", "log"],
    "interdisciplinary": ["graph", "chi", "robotics", "bio", "visualization", "ecom"],
}


@dataclass(frozen=True, eq=False)
class AreaTaxonomy:
    """Immutable area taxonomy shared by every ranking stage.

    Built once at startup; all lookups are read-only views.
    """
    areas: Tuple[str, ...]
    titles: Mapping[str, str]
    parent_map: Mapping[str, str]
    next_tier: FrozenSet[str]
    groups: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    child_map: Mapping[str, Tuple[str, ...]] = field(init=False)

    def __post_init__(self):
        for child, parent in self.parent_map.items():
            if parent in self.parent_map:
                raise ValueError(f"Venue {child!r} has non-root parent {parent!r}")
        unknown = set(self.next_tier) - set(self.parent_map)
        if unknown:
            raise ValueError(f"Next-tier areas must be child venues: {sorted(unknown)}")

        children: Dict[str, List[str]] = {}
        for child in self.areas:
            parent = self.parent_map.get(child)
            if parent is not None:
                children.setdefault(parent, []).append(child)
        object.__setattr__(self, "child_map",
                           MappingProxyType({p: tuple(c) for p, c in children.items()}))

    @classmethod
    def from_records(cls,
                     records: Iterable[AreaRecord],
                     parent_map: Mapping[str, str],
                     next_tier: Iterable[str] = (),
                     groups: Optional[Mapping[str, Sequence[str]]] = None) -> "AreaTaxonomy":
        """Build a taxonomy from a flat list of area records."""
        areas: List[str] = []
        titles: Dict[str, str] = {}
        for record in records:
            if record.code not in titles:
                areas.append(record.code)
            titles[record.code] = record.title

        taxonomy = cls(
            areas=tuple(areas),
            titles=MappingProxyType(titles),
            parent_map=MappingProxyType(dict(parent_map)),
            next_tier=frozenset(next_tier),
            groups=MappingProxyType({k: tuple(v) for k, v in (groups or {}).items()}),
        )
        logger.debug(f"Built taxonomy with {len(taxonomy.areas)} areas, "
                     f"{len(taxonomy.root_areas)} roots")
        return taxonomy

    @classmethod
    def default(cls) -> "AreaTaxonomy":
        """Computer science taxonomy used by the rankings site."""
        return cls.from_records(
            (AreaRecord(code, title) for code, title in AREA_TITLES),
            PARENT_MAP, NEXT_TIER, AREA_GROUPS,
        )

    @property
    def root_areas(self) -> List[str]:
        return [area for area in self.areas if area not in self.parent_map]

    @property
    def top_tier_areas(self) -> List[str]:
        return [area for area in self.areas if area not in self.next_tier]

    def is_root(self, code: str) -> bool:
        return code in self.titles and code not in self.parent_map

    def is_next_tier(self, code: str) -> bool:
        return code in self.next_tier

    def parent(self, code: str) -> Optional[str]:
        return self.parent_map.get(code)

    def root_of(self, code: str) -> str:
        """Root area a venue rolls up to (roots map to themselves)."""
        return self.parent_map.get(code, code)

    def children(self, root: str) -> Tuple[str, ...]:
        return self.child_map.get(root, ())

    def label(self, code: str) -> str:
        return self.titles.get(code, code)

    def group(self, name: str) -> Tuple[str, ...]:
        try:
            return self.groups[name]
        except KeyError:
            raise ValueError(f"Unknown area group: {name}") from None

    def __contains__(self, code: str) -> bool:
        return code in self.titles
