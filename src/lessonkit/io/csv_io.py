"""Reading and writing the lessons' sample CSV layout (name, age, city)."""

import codecs
import csv
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from attrs import asdict, frozen

from lessonkit.errors import CsvFormatError
from lessonkit.io.files import translate_os_errors

logger = logging.getLogger(__name__)

EXPECTED_HEADER = ("name", "age", "city")


@frozen
class Person:
    name: str
    age: int
    city: str

    @classmethod
    def from_row(cls, row: dict[str, str], row_number: int) -> "Person":
        name = (row.get("name") or "").strip()
        city = (row.get("city") or "").strip()
        raw_age = (row.get("age") or "").strip()
        if not name:
            raise CsvFormatError("name is empty", row=row_number)
        try:
            age = int(raw_age)
        except ValueError:
            raise CsvFormatError(f"age {raw_age!r} is not a whole number", row=row_number) from None
        if age < 0:
            raise CsvFormatError(f"age {age} is negative", row=row_number)
        return cls(name=name, age=age, city=city)

    def as_row(self) -> dict[str, str | int]:
        return asdict(self)


def _reading_encoding(encoding: str) -> str:
    # Spreadsheet exports often start with a byte order mark
    if codecs.lookup(encoding).name == "utf-8":
        return "utf-8-sig"
    return encoding


def read_rows(
    path: Path | str, encoding: str = "utf-8", delimiter: str = ","
) -> Iterator[dict[str, str]]:
    """Yield each data row of a CSV file as a dict keyed by the header."""
    path = Path(path)
    encoding = _reading_encoding(encoding)
    with translate_os_errors(path), open(path, encoding=encoding, newline="") as f:
        yield from csv.DictReader(f, delimiter=delimiter)


def check_header(fieldnames: Iterable[str] | None) -> None:
    present = {name.strip() for name in fieldnames or ()}
    missing = [column for column in EXPECTED_HEADER if column not in present]
    if missing:
        raise CsvFormatError(f"missing column(s): {', '.join(missing)}")


def read_people(
    path: Path | str,
    encoding: str = "utf-8",
    delimiter: str = ",",
    skip_invalid: bool = False,
    skipped: list[CsvFormatError] | None = None,
) -> Iterator[Person]:
    """Yield a `Person` for every row of a name/age/city CSV file.

    Extra columns are ignored.

    Args:
        path: CSV file with header row
        encoding: File encoding
        delimiter: Field delimiter
        skip_invalid: Log and skip invalid rows instead of raising
        skipped: If given, receives the error for every skipped row

    Raises:
        CsvFormatError: If columns are missing, or a row is invalid and
            `skip_invalid` is False.
    """
    path = Path(path)
    encoding = _reading_encoding(encoding)
    with translate_os_errors(path), open(path, encoding=encoding, newline="") as f:
        reader = csv.DictReader(f, delimiter=delimiter)
        check_header(reader.fieldnames)
        for row_number, row in enumerate(reader, 1):
            row = {key.strip(): value for key, value in row.items() if key is not None}
            try:
                yield Person.from_row(row, row_number)
            except CsvFormatError as e:
                if not skip_invalid:
                    raise
                logger.warning(f"Skipping invalid row in {path}: {e}")
                if skipped is not None:
                    skipped.append(e)


def write_people(
    path: Path | str, people: Iterable[Person], encoding: str = "utf-8", delimiter: str = ","
) -> int:
    """Write people to a CSV file with header; return the number of rows."""
    path = Path(path)
    count = 0
    with translate_os_errors(path), open(path, "w", encoding=encoding, newline="") as f:
        writer = csv.DictWriter(f, fieldnames=EXPECTED_HEADER, delimiter=delimiter)
        writer.writeheader()
        for person in people:
            writer.writerow(person.as_row())
            count += 1
    logger.debug(f"Wrote {count} rows to {path}")
    return count
