"""
Question bank (tiny):
- Loads every question file in a directory once, one question set per file.
- Exposes title lookup; the sets are read-only after loading.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dataset_loader import (
    read_question_table,
    DatasetLoadError,
    DatasetValidationError,
    CORRECT_INDEX_COLUMN,
    CORRECT_LABEL_COLUMN,
    OPTION_LABELS,
    RESPONSE_COLUMNS,
    SUPPORTED_EXTENSIONS,
)

log = logging.getLogger("trivia.dataset")


class UnknownTitleError(LookupError):
    """Raised when no question set is registered under a title."""

    def __init__(self, title: str, known: List[str]) -> None:
        super().__init__(f"No question set named {title!r}")
        self.title = title
        self.known = known


@dataclass(frozen=True)
class QuestionRecord:
    item_id: str
    prompt: str
    choices: Tuple[str, ...]
    correct_index: int
    # Carried through to clients untouched; nothing verifies it.
    answer_token: str


@dataclass(frozen=True)
class QuestionSet:
    title: str
    items: Tuple[QuestionRecord, ...]

    @property
    def count(self) -> int:
        return len(self.items)


def normalize_title(title: str) -> str:
    return title.strip().casefold()


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _correct_index_from_label(label: str, item_id: str) -> int:
    key = label.strip().upper()
    if key not in OPTION_LABELS:
        raise DatasetValidationError(
            f"Correct label {label!r} for Question_ID={item_id} is not one of {list(OPTION_LABELS)}"
        )
    return OPTION_LABELS.index(key)


def read_question_file(path: Path) -> QuestionSet:
    """Parse one .csv/.xlsx file into a QuestionSet titled after the file stem."""
    df = read_question_table(path)
    has_label_column = CORRECT_LABEL_COLUMN in df.columns
    has_bold_column = CORRECT_INDEX_COLUMN in df.columns

    items: List[QuestionRecord] = []
    seen: set[str] = set()
    for _, row in df.iterrows():
        item_id = _text(row.get("Question_ID"))
        if not item_id:
            raise DatasetValidationError(f"{path.name}: missing Question_ID for row: {row.to_dict()}")
        if item_id in seen:
            raise DatasetValidationError(f"{path.name}: duplicate Question_ID={item_id}")
        seen.add(item_id)

        choices = tuple(_text(row.get(col)) for col in RESPONSE_COLUMNS)
        if not all(choices):
            raise DatasetValidationError(f"{path.name}: empty response for Question_ID={item_id}")

        # An explicit Correct label wins over bold formatting.
        label = _text(row.get(CORRECT_LABEL_COLUMN)) if has_label_column else ""
        if label:
            correct_index = _correct_index_from_label(label, item_id)
        elif has_bold_column and _text(row.get(CORRECT_INDEX_COLUMN)):
            correct_index = int(row.get(CORRECT_INDEX_COLUMN))
        else:
            raise DatasetValidationError(f"{path.name}: no correct response for Question_ID={item_id}")

        items.append(QuestionRecord(
            item_id=item_id,
            prompt=_text(row.get("Stem")),
            choices=choices,
            correct_index=correct_index,
            answer_token=_text(row.get("Answer_Token")),
        ))

    return QuestionSet(title=normalize_title(path.stem), items=tuple(items))


class QuestionBank:
    def __init__(self, directory: Path) -> None:
        self._dir = Path(directory)
        self._sets: Optional[Dict[str, QuestionSet]] = None

    def load(self) -> "QuestionBank":
        """Read every question file in the directory. Safe to call more than once."""
        if self._sets is not None:
            return self
        if not self._dir.is_dir():
            raise DatasetLoadError(f"Question directory not found: {self._dir!s}")

        sets: Dict[str, QuestionSet] = {}
        for path in sorted(self._dir.iterdir()):
            if path.suffix.lower() not in SUPPORTED_EXTENSIONS or path.name.startswith("~$"):
                continue
            qs = read_question_file(path)
            if qs.title in sets:
                raise DatasetValidationError(f"Duplicate question set title {qs.title!r} ({path.name})")
            sets[qs.title] = qs
            log.info("Loaded question set %r (%d questions) from %s", qs.title, qs.count, path.name)

        if not sets:
            log.warning("No question files found in %s", self._dir)
        self._sets = sets
        return self

    # ---- Public helpers --------------------------------------------------
    def titles(self) -> List[str]:
        self.load()
        return list(self._sets)

    def get_question_set(self, title: str) -> QuestionSet:
        self.load()
        qs = self._sets.get(normalize_title(title))
        if qs is None:
            raise UnknownTitleError(title, self.titles())
        return qs
