"""Input parsing for already-loaded author and region rows."""

import re
import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .models import PublicationRecord
from .regions import RegionTable

logger = logging.getLogger(__name__)


class InputParser:
    """Turns CSV-style rows into publication records and region tables."""

    # Names followed by a bracketed note, e.g. "Jane Doe [SWS]".
    NAME_NOTE_PATTERN = re.compile(r'(.*)\s+\[(.*)\]')

    def __init__(self):
        self.notes: Dict[str, str] = {}

    def parse_records(self, rows: Iterable[Mapping[str, Any]]) -> List[PublicationRecord]:
        """Parse author publication rows, dropping rows without an author."""
        records = []
        dropped = 0
        for row in rows:
            record = PublicationRecord.from_row(row)
            if not record.name:
                dropped += 1
                continue
            name, note = self.split_note(record.name)
            if note:
                self.notes[name] = note
                record = PublicationRecord(name=name, dept=record.dept, area=record.area,
                                           year=record.year, count=record.count,
                                           adjusted_count=record.adjusted_count)
            records.append(record)

        if dropped:
            logger.warning(f"Dropped {dropped} rows without an author name")
        logger.info(f"Parsed {len(records)} publication records")
        return records

    def parse_regions(self, rows: Iterable[Mapping[str, Any]]) -> RegionTable:
        return RegionTable.from_rows(rows)

    def split_note(self, name: str) -> Tuple[str, str]:
        """Split "Name [NOTE]" into ("Name", "NOTE")."""
        match = self.NAME_NOTE_PATTERN.match(name.strip())
        if match:
            return match.group(1).strip(), match.group(2)
        return name.strip(), ""
