"""
Zip archive CSV reading infrastructure for ListingHub.

This module reads CSV members out of a zip archive using pandas as the
parsing engine. Every cell is kept as a string so that identifiers such as
``"007"`` survive untouched; empty cells become ``None``. Parsing is
lenient: no row is rejected for having too many or too few fields.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)


class ArchiveReadError(Exception):
    """Raised when the archive or one of its CSV members cannot be read."""

    def __init__(self, message: str, member: Optional[str] = None):
        self.member = member
        super().__init__(message)


class ArchiveReader:
    """
    CSV-in-zip reader with consistent error handling.

    The reader opens the archive once per call, so a single instance can be
    reused for every member of the same file.
    """

    def __init__(self, archive_path: str, encoding: str = "utf-8-sig"):
        """
        Initialize archive reader.

        Args:
            archive_path: Path to the zip archive
            encoding: Text encoding of the CSV members (BOM tolerant by default)
        """
        self.archive_path = archive_path
        self.encoding = encoding

    def read_rows(self, member: str) -> List[Dict[str, Any]]:
        """
        Read one CSV member and return its rows as dictionaries.

        Args:
            member: Name of the CSV file inside the archive

        Returns:
            List of dictionaries keyed by header name

        Raises:
            ArchiveReadError: If the archive is missing or corrupt, the member
                is absent, or the CSV cannot be parsed
        """
        archive = Path(self.archive_path)
        if not archive.exists():
            raise ArchiveReadError(f"Archive not found: {self.archive_path}")

        try:
            with zipfile.ZipFile(archive) as zf:
                if member not in zf.namelist():
                    raise ArchiveReadError(
                        f"CSV file {member} not found in zip archive {self.archive_path}",
                        member=member,
                    )
                with zf.open(member) as handle:
                    text = handle.read().decode(self.encoding)
            df = self._parse_csv(text, member)
        except ArchiveReadError:
            raise
        except zipfile.BadZipFile as e:
            raise ArchiveReadError(
                f"Failed to open archive {self.archive_path}: corrupted or invalid format"
            ) from e
        except pd.errors.EmptyDataError:
            logger.warning(f"CSV member contains no data: {member}")
            return []
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise ArchiveReadError(
                f"Failed to parse {member} from {self.archive_path}: {e}",
                member=member,
            ) from e

        logger.info(f"Read {len(df)} rows from {member}")
        return self._dataframe_to_rows(df)

    def list_members(self) -> List[str]:
        """Return the member names stored in the archive."""
        try:
            with zipfile.ZipFile(self.archive_path) as zf:
                return zf.namelist()
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveReadError(
                f"Cannot list members of {self.archive_path}: {e}"
            ) from e

    def _parse_csv(self, text: str, member: str) -> pd.DataFrame:
        """
        Parse CSV text leniently.

        Rows with more fields than the header (an unquoted comma inside a
        value, or a trailing delimiter) are cut to the header width instead
        of being rejected; short rows are padded with unset cells.
        """
        width = len(pd.read_csv(io.StringIO(text), nrows=0).columns)
        long_rows = 0

        def _truncate(fields: List[str]) -> List[str]:
            nonlocal long_rows
            long_rows += 1
            return fields[:width]

        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            index_col=False,
            engine="python",
            on_bad_lines=_truncate,
        )
        if long_rows:
            logger.warning(
                f"Truncated {long_rows} row(s) with extra fields in {member}"
            )
        return df

    def _dataframe_to_rows(self, df: pd.DataFrame) -> List[Dict[str, Any]]:
        """Convert the string-typed DataFrame to row dicts with clean headers."""
        df.columns = [str(col).strip() for col in df.columns]

        rows: List[Dict[str, Any]] = []
        for row in df.to_dict(orient="records"):
            rows.append(
                {
                    key: (None if pd.isna(value) or value == "" else value)
                    for key, value in row.items()
                }
            )
        return rows


def read_archive_rows(archive_path: str, member: str) -> List[Dict[str, Any]]:
    """
    Convenience function for reading one CSV member with default settings.

    Args:
        archive_path: Path to the zip archive
        member: CSV member name

    Returns:
        List of dictionaries representing the CSV rows
    """
    return ArchiveReader(archive_path).read_rows(member)
