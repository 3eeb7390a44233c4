"""CSV log of tags processed by the writer."""

import csv
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, List, Set


@dataclass
class CSVRecord:
    """Single written-tag record."""
    uid: str
    url: str
    status: str = "success"  # success, failed
    message: str = ""


FIELDNAMES = [f.name for f in fields(CSVRecord)]


class CSVHandler:
    """Append-only CSV log of written tags."""

    def __init__(self, csv_path: str):
        self.csv_path = Path(csv_path)

    def read_records(self) -> List[Dict[str, str]]:
        """Read records from CSV file."""
        if not self.csv_path.exists():
            return []
        with open(self.csv_path, 'r', newline='') as f:
            return list(csv.DictReader(f))

    def processed_uids(self) -> Set[str]:
        """UIDs already written successfully."""
        return {
            row['uid'].strip().upper()
            for row in self.read_records()
            if row.get('status') == 'success'
        }

    def write_record(self, record: CSVRecord) -> None:
        """Append a single record, writing the header for a new file."""
        file_exists = self.csv_path.exists()
        if self.csv_path.parent:
            self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.csv_path, 'a', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
            if not file_exists:
                writer.writeheader()
            writer.writerow(asdict(record))
        logging.debug(f"Recorded {record.status} for {record.uid} in {self.csv_path}")
