"""Ingest nonconformity lists from uploaded Excel workbooks.

The upload is decoded once into a :class:`SheetGrid`; the caller inspects
its columns, builds a :class:`FieldMapping` and commits the session into a
store. Nothing touches the store until the mapping names a description
column and every row has been transformed.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import pandas as pd

from actiontrack.domains.nonconformity.store import NonConformityStore, content_key
from actiontrack.domains.nonconformity.transform import FieldMapping, transform_rows
from actiontrack.utils.io import read_excel_grid
from actiontrack.utils.transforms import cell_text
from actiontrack.utils.types import SheetRow

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    pass


@dataclass(frozen=True)
class SheetGrid:
    columns: list[str]
    rows: list[SheetRow]

    @classmethod
    def from_frame(cls, raw: pd.DataFrame) -> "SheetGrid":
        """Split a header-less grid into header names and keyed data rows."""
        if raw.empty:
            return cls(columns=[], rows=[])

        header = [cell_text(value) for value in raw.iloc[0].tolist()]
        keep = [(pos, name) for pos, name in enumerate(header) if name]

        rows = []
        for values in raw.iloc[1:].itertuples(index=False, name=None):
            rows.append({
                name: ("" if pd.isna(values[pos]) else values[pos])
                for pos, name in keep
            })

        return cls(columns=[name for _, name in keep], rows=rows)


@dataclass(frozen=True)
class ImportResult:
    total_rows: int
    imported: int
    dropped: int = 0
    duplicates: int = 0
    blocked: bool = False


def read_spreadsheet(payload: bytes, filename: str | Path | None = None) -> SheetGrid:
    """Decode an .xlsx/.xlsm/.xls payload; raises :class:`ParseError` on failure."""
    try:
        raw = read_excel_grid(payload, filename)
    except Exception as exc:
        logger.error(f"Could not read spreadsheet {filename or '<upload>'}: {exc}")
        raise ParseError(f"Not a readable spreadsheet: {exc}") from exc

    grid = SheetGrid.from_frame(raw)
    logger.info(f"Loaded {len(grid.rows)} rows with columns {grid.columns}")
    return grid


class ImportSession:
    """One upload waiting for its field mapping."""

    def __init__(self, grid: SheetGrid):
        self.grid = grid

    @classmethod
    def from_bytes(cls, payload: bytes, filename: str | Path | None = None) -> "ImportSession":
        return cls(read_spreadsheet(payload, filename))

    @property
    def columns(self) -> list[str]:
        return self.grid.columns

    def can_import(self, mapping: FieldMapping) -> bool:
        return bool(self.grid.rows) and mapping.is_ready

    def commit(
        self,
        store: NonConformityStore,
        mapping: FieldMapping,
        now: datetime | None = None,
        skip_duplicates: bool = False,
    ) -> ImportResult:
        """Transform every row and append the survivors to ``store``.

        Returns a blocked result, without raising, while the description
        column is unmapped. With ``skip_duplicates`` a row whose content key
        is already in the store (or earlier in the same file) is left out.
        """
        total = len(self.grid.rows)
        if not mapping.is_ready:
            logger.warning("Import blocked: no column mapped to description")
            return ImportResult(total_rows=total, imported=0, blocked=True)

        missing = mapping.missing_columns(self.columns)
        if missing:
            logger.warning(f"Mapped columns not in sheet, treated as empty: {missing}")

        records = transform_rows(self.grid.rows, mapping, now)
        dropped = total - len(records)

        duplicates = 0
        if skip_duplicates:
            seen = store.content_keys()
            unique = []
            for record in records:
                key = content_key(record)
                if key in seen:
                    duplicates += 1
                    continue
                seen.add(key)
                unique.append(record)
            records = unique
            if duplicates:
                logger.info(f"Skipped {duplicates} rows already present")

        imported = store.commit_import(records)
        logger.info(f"Imported {imported} of {total} rows ({dropped} dropped)")
        return ImportResult(
            total_rows=total,
            imported=imported,
            dropped=dropped,
            duplicates=duplicates,
        )


def import_spreadsheet(
    payload: bytes,
    mapping: FieldMapping,
    store: NonConformityStore,
    filename: str | Path | None = None,
    now: datetime | None = None,
    skip_duplicates: bool = False,
) -> ImportResult:
    """Parse, transform and commit an upload in one call."""
    session = ImportSession.from_bytes(payload, filename)
    return session.commit(store, mapping, now=now, skip_duplicates=skip_duplicates)
