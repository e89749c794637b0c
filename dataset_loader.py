"""
dataset_loader.py

Read one trivia question file into a pandas.DataFrame of text cells.
- .csv files name the correct option in a `Correct` column (A..D)
- .xlsx files may instead mark the correct response cell in bold; the bold
  option's index lands in CORRECT_INDEX_COLUMN ("" when no cell is bold)

Row-level checks (ids, empty choices, missing answers) live in dataset.py.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

import pandas as pd
from openpyxl import load_workbook


class DatasetLoadError(Exception):
    """Raised when a question file cannot be read."""


class DatasetValidationError(Exception):
    """Raised when a question file is readable but malformed."""


OPTION_LABELS: Tuple[str, ...] = ("A", "B", "C", "D")
RESPONSE_COLUMNS: Tuple[str, ...] = tuple(f"Response_{label}" for label in OPTION_LABELS)
REQUIRED_COLUMNS: Tuple[str, ...] = ("Question_ID", "Stem", *RESPONSE_COLUMNS, "Answer_Token")
CORRECT_LABEL_COLUMN = "Correct"
CORRECT_INDEX_COLUMN = "__correct_index"
SUPPORTED_EXTENSIONS: Tuple[str, ...] = (".csv", ".xlsx")


def _read_frame(path: Path) -> pd.DataFrame:
    ext = path.suffix.lower()
    try:
        if ext == ".csv":
            # utf-8-sig drops the BOM spreadsheet exports put before the first header
            return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        return pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False)
    except Exception as e:
        raise DatasetLoadError(f"Failed to read {path.name}: {e!r}") from e


def _bold_options_by_question(path: Path) -> Dict[str, int]:
    """Question_ID -> index of its single bold response cell (first sheet)."""
    workbook = load_workbook(path, data_only=True)
    try:
        sheet = workbook.active
        header = next(sheet.iter_rows(min_row=1, max_row=1))
        col_of = {str(c.value).strip(): i for i, c in enumerate(header) if c.value is not None}

        bold: Dict[str, int] = {}
        for row in sheet.iter_rows(min_row=2):
            qid = row[col_of["Question_ID"]].value
            qid = "" if qid is None else str(qid).strip()
            if not qid:
                continue
            marked = [i for i, col in enumerate(RESPONSE_COLUMNS) if row[col_of[col]].font.bold]
            if len(marked) > 1:
                raise DatasetValidationError(
                    f"{path.name}: multiple bold responses for Question_ID={qid}: "
                    f"{[OPTION_LABELS[i] for i in marked]}"
                )
            if marked:
                bold[qid] = marked[0]
        return bold
    finally:
        workbook.close()


def read_question_table(path: str | Path) -> pd.DataFrame:
    """
    Load a question file and check its header.

    Raises DatasetLoadError for missing, unreadable or unsupported files and
    DatasetValidationError for missing columns or ambiguous bold answers.
    """
    p = Path(path)
    if not p.is_file():
        raise DatasetLoadError(f"Not a file: {p!s}")
    ext = p.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise DatasetLoadError(f"Unsupported file extension {ext!r}. Use .csv or .xlsx.")

    df = _read_frame(p)
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DatasetValidationError(f"{p.name}: missing required column(s): {', '.join(missing)}")

    if ext == ".xlsx":
        bold = _bold_options_by_question(p)
        df[CORRECT_INDEX_COLUMN] = df["Question_ID"].map(lambda q: bold.get(str(q).strip(), ""))
    elif CORRECT_LABEL_COLUMN not in df.columns:
        raise DatasetValidationError(f"{p.name}: CSV question files need a '{CORRECT_LABEL_COLUMN}' column")

    return df
