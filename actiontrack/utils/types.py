"""Shared type definitions for the tracker."""

from dataclasses import dataclass
from datetime import date, datetime

import pandas as pd


type RecordID = str
type DateLike = str | date | datetime | pd.Timestamp
type CellValue = str | int | float | bool | datetime | pd.Timestamp | None
type SheetRow = dict[str, CellValue]
type ValidationOutcome = dict[str, bool | str | list[str]]


@dataclass(frozen=True)
class LabelCount:
    """One slice of a distribution: a label, its count and an optional color."""

    label: str
    value: int
    color: str | None = None


@dataclass(frozen=True)
class ResolutionStats:
    group: str
    min: int
    average: int
    max: int
