"""
Popularity data reader over yearly name-frequency files.

Each ``yob{year}.txt`` file holds ``name,sex,count`` rows.

Sandi Metz Principles:
- Single Responsibility: Read and rank candidate names
- Deterministic: Same files, same candidates
- Small methods: Reading, merging and lookup kept apart
"""

import csv
from datetime import date
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from namefinder.config import config
from namefinder.exceptions import DataSourceError, ValidationError
from namefinder.models.analysis import Gender
from namefinder.models.candidate import BabyNameCandidate, NamePopularity
from namefinder.utils.logger import get_logger

logger = get_logger(__name__)


class PopularityReader:
    """
    Ranks names by birth counts per gender and year.

    Ranks are 1-based positions by descending count within one gender;
    ties keep file order.
    """

    def __init__(
        self,
        data_dir: Optional[str | Path] = None,
        current_year: Optional[int] = None,
    ):
        """
        Initialize reader.

        Args:
            data_dir: Directory holding the yearly files (defaults to configuration)
            current_year: Calendar year used to bound ranges (defaults to today)
        """
        self._data_dir = Path(data_dir or config.names_data_dir)
        self._current_year = current_year or date.today().year

    @property
    def latest_year(self) -> int:
        """Most recent year data can exist for."""
        return self._current_year - 1

    def year_file(self, year: int) -> Path:
        """Path of one year's data file."""
        return self._data_dir / f"yob{year}.txt"

    def has_year(self, year: int) -> bool:
        """Check whether a year's file exists."""
        return self.year_file(year).is_file()

    def read_year(
        self, year: int, gender: Gender, limit: Optional[int] = None
    ) -> List[BabyNameCandidate]:
        """
        Ranked names of one gender for one year.

        Args:
            year: Data year
            gender: Gender
            limit: Maximum names to return

        Returns:
            Candidates ranked by count

        Raises:
            DataSourceError: If the year's file does not exist
        """
        if not self.has_year(year):
            raise DataSourceError(f"Baby names data file for year {year} not found")

        gender = Gender(gender)
        rows = [
            (name, count)
            for name, row_gender, count in self._rows(year)
            if row_gender == gender
        ]
        rows.sort(key=lambda row: row[1], reverse=True)
        candidates = [
            BabyNameCandidate(name=name, gender=gender, count=count, rank=index, year=year)
            for index, (name, count) in enumerate(rows, start=1)
        ]
        return candidates[:limit] if limit is not None else candidates

    def get_candidates(
        self,
        gender: Gender,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[BabyNameCandidate]:
        """
        Merge several years into one ranked list.

        Counts are summed across years and the year is the most recent one
        the name appears in. Missing year files are skipped.

        Args:
            gender: Gender
            start_year: First year (clamped to the earliest data year)
            end_year: Last year (clamped to last year)
            limit: Maximum names to return

        Returns:
            Candidates ranked by total count

        Raises:
            ValidationError: If the range is empty after clamping
        """
        gender = Gender(gender)
        start, end = self.clamp_range(start_year, end_year)

        totals: Dict[str, Tuple[int, int]] = {}
        years_read = 0
        for year in range(start, end + 1):
            if not self.has_year(year):
                logger.debug("Year file missing, skipping", year=year)
                continue
            years_read += 1
            for name, row_gender, count in self._rows(year):
                if row_gender != gender:
                    continue
                total, _ = totals.get(name, (0, year))
                totals[name] = (total + count, year)

        ranked = sorted(totals.items(), key=lambda item: item[1][0], reverse=True)
        candidates = [
            BabyNameCandidate(name=name, gender=gender, count=total, rank=index, year=last_year)
            for index, (name, (total, last_year)) in enumerate(ranked, start=1)
        ]
        logger.info(
            "Candidates loaded",
            gender=gender.value,
            start_year=start,
            end_year=end,
            years_read=years_read,
            names=len(candidates),
        )
        return candidates[:limit] if limit is not None else candidates

    def clamp_range(
        self, start_year: Optional[int], end_year: Optional[int]
    ) -> Tuple[int, int]:
        """
        Clamp a year range to the years data can exist for.

        Raises:
            ValidationError: If start is after end
        """
        start = max(config.earliest_data_year, start_year or config.default_start_year)
        end = min(self.latest_year, end_year or config.default_end_year)
        if start > end:
            raise ValidationError(f"Invalid year range: {start}-{end}")
        return (start, end)

    def find_popularity(
        self,
        name: str,
        gender: Gender,
        year: Optional[int] = None,
        lookback: int = 5,
    ) -> NamePopularity:
        """
        Most recent ranking of a name.

        Searches backwards from ``year`` (or last year) through
        ``lookback`` earlier years.

        Args:
            name: Name to look up (case-insensitive)
            gender: Gender
            year: Year to start from
            lookback: Earlier years to try

        Returns:
            Ranked record if found, otherwise an unranked record
        """
        gender = Gender(gender)
        newest = min(self.latest_year, year or self.latest_year)
        wanted = name.strip().lower()

        for candidate_year in range(newest, newest - lookback - 1, -1):
            if not self.has_year(candidate_year):
                continue
            for candidate in self.read_year(candidate_year, gender):
                if candidate.name.lower() == wanted:
                    return NamePopularity(
                        name=candidate.name,
                        gender=gender,
                        year=candidate_year,
                        rank=candidate.rank,
                        count=candidate.count,
                    )

        return NamePopularity(name=name.strip(), gender=gender, year=newest, rank=None, count=0)

    def _rows(self, year: int) -> Iterator[Tuple[str, Gender, int]]:
        """
        Parsed rows of one year's file.

        Malformed rows are skipped.
        """
        with self.year_file(year).open(newline="", encoding="utf-8") as handle:
            for row in csv.reader(handle):
                if len(row) < 3:
                    continue
                try:
                    yield (row[0].strip(), Gender.from_code(row[1]), int(row[2]))
                except ValueError:
                    logger.debug("Skipping malformed row", year=year, row=row)
