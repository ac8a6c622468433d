# ========================
# ev_insights/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Reads the raw EV population CSV and parses it line by line into typed
vehicle records.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Any, Optional

from .cleaning import RecordCleaner
from .constants import CSV_DELIMITER, CSV_QUOTECHAR
from .records import VehicleRecord

logger = logging.getLogger(__name__)


class CSVReader:
    """
    Supplies the complete raw text of a dataset file.
    """

    def __init__(self, file_path):
        """
        Initialize the CSV reader.

        Args:
            file_path (str): Path to the CSV file to read
        """
        self.file_path = file_path
        logger.info(f"Initialized CSVReader for file: {file_path}")

    def read_text(self) -> str:
        """
        Read the whole file as UTF-8 text.

        Returns:
            str: The raw CSV text, header row included.
        """
        try:
            with open(self.file_path, 'r', encoding='utf-8-sig', newline='') as f:
                text = f.read()
            logger.info(f"Read {len(text):,} characters from {self.file_path}")
            return text
        except FileNotFoundError:
            logger.error(f"File '{self.file_path}' was not found")
            raise
        except Exception as e:
            logger.error(f"Error reading CSV file: {e}")
            raise

    @property
    def size_bytes(self) -> int:
        path = Path(self.file_path)
        return path.stat().st_size if path.exists() else 0


def split_fields(line: str) -> List[str]:
    """
    Split one physical line into stripped field values.

    Every double quote toggles the in-quotes state and is not kept, so commas
    anywhere inside a quoted stretch are data, even mid-field. Inside quotes a
    doubled quote stands for one literal quote. A quote is never continued
    onto the next line.
    """
    values = []
    current = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == CSV_QUOTECHAR:
            if in_quotes and i + 1 < length and line[i + 1] == CSV_QUOTECHAR:
                current.append(char)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == CSV_DELIMITER and not in_quotes:
            values.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    values.append(''.join(current).strip())
    return values


class VehicleCSVParser:
    """
    Parses raw CSV text into VehicleRecords.

    The first line is a header and is skipped without being checked. Every
    following non-blank physical line is one record attempt; invalid rows are
    dropped silently and only show up in get_statistics().
    """

    def __init__(self, cleaner: Optional[RecordCleaner] = None):
        self.cleaner = cleaner or RecordCleaner()
        self.header: List[str] = []
        self.lines_read = 0
        self.blank_lines = 0

    def iter_records(self, text: Optional[str]) -> Iterator[VehicleRecord]:
        """
        Yield valid records in input order.

        Args:
            text (str): Raw CSV text; None or empty yields nothing.
        """
        if not text:
            return

        lines = text.split('\n')
        self.header = split_fields(lines[0].rstrip('\r'))

        for line in lines[1:]:
            self.lines_read += 1
            if not line.strip():
                self.blank_lines += 1
                continue

            record = self.cleaner.clean_row(split_fields(line.rstrip('\r')))
            if record is not None:
                yield record

    def parse(self, text: Optional[str]) -> List[VehicleRecord]:
        """
        Parse the complete text into a list of records.

        Args:
            text (str): Raw CSV text

        Returns:
            list[VehicleRecord]: Valid records in input order
        """
        records = list(self.iter_records(text))
        logger.info(
            f"Parsed {len(records):,} vehicles from {self.lines_read:,} data lines "
            f"({self.cleaner.records_dropped:,} dropped, {self.blank_lines:,} blank)"
        )
        return records

    def get_statistics(self) -> Dict[str, Any]:
        """Get parsing statistics, including dropped-row diagnostics."""
        stats = self.cleaner.get_statistics()
        stats.update({
            'lines_read': self.lines_read,
            'blank_lines': self.blank_lines,
        })
        return stats


def parse_csv_data(text: Optional[str]) -> List[VehicleRecord]:
    """Parse raw EV population CSV text into vehicle records."""
    return VehicleCSVParser().parse(text)
