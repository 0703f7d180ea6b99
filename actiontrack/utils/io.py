"""File I/O utilities for reading spreadsheets and writing record exports."""

import io
from pathlib import Path

import pandas as pd
from rich.console import Console

type FilePath = str | Path

console = Console()


def excel_engine(filename: FilePath | None) -> str | None:
    """Pick the pandas Excel engine from the file extension.

    ``None`` lets pandas sniff the payload when no filename is known.
    """
    if filename is None:
        return None

    match Path(filename).suffix.lower():
        case ".xlsx" | ".xlsm":
            return "openpyxl"
        case ".xls":
            return "xlrd"
        case ext:
            raise ValueError(f"Unsupported Excel format: {ext or '<none>'}")


def read_excel_grid(payload: bytes, filename: FilePath | None = None) -> pd.DataFrame:
    """Decode the first sheet of a workbook into a raw, header-less grid.

    Every cell is kept as an object so that text, numbers and dates reach
    the caller untouched.
    """
    engine = excel_engine(filename)
    return pd.read_excel(
        io.BytesIO(payload),
        sheet_name=0,
        header=None,
        dtype=object,
        engine=engine,
    )


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> None:
    """Write a DataFrame to the specified format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            df.to_csv(path, index=False)
        case "parquet":
            df.to_parquet(path, index=False)
        case "excel":
            df.to_excel(path, index=False)
        case "json":
            df.to_json(path, orient="records", indent=2, force_ascii=False)
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    console.print(f"  Wrote {len(df)} rows to {path}")
