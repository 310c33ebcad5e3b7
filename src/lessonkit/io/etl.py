"""A small Extract, Transform, Load pipeline over the people CSV layout.

Extract reads people from a CSV file, transform cleans and filters them,
load writes them as CSV or JSON.
"""

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from lessonkit.errors import CsvFormatError, LessonKitError
from lessonkit.io.csv_io import Person, read_people, write_people
from lessonkit.io.files import translate_os_errors

logger = logging.getLogger(__name__)

OutputFormat = Literal["csv", "json"]


@dataclass
class EtlResult:
    """Counts from one ETL run."""

    read: int
    written: int
    skipped: int

    @property
    def filtered(self) -> int:
        return self.read - self.written

    def __str__(self) -> str:
        return (
            f"Read {self.read} row(s), wrote {self.written}, "
            f"filtered {self.filtered}, skipped {self.skipped} invalid"
        )


def extract(
    path: Path | str,
    skip_invalid: bool = False,
    skipped: list[CsvFormatError] | None = None,
    encoding: str = "utf-8",
    delimiter: str = ",",
) -> Iterator[Person]:
    return read_people(
        path, encoding=encoding, delimiter=delimiter, skip_invalid=skip_invalid, skipped=skipped
    )


def _clean(text: str) -> str:
    return " ".join(text.split()).title()


def transform(
    people: Iterable[Person],
    min_age: int | None = None,
    city: str | None = None,
    normalize: bool = True,
) -> Iterator[Person]:
    """Normalize names and cities, then filter by minimum age and city."""
    wanted_city = city.strip().casefold() if city else None
    for person in people:
        if normalize:
            person = Person(name=_clean(person.name), age=person.age, city=_clean(person.city))
        if min_age is not None and person.age < min_age:
            continue
        if wanted_city is not None and person.city.strip().casefold() != wanted_city:
            continue
        yield person


def load(
    people: Iterable[Person],
    path: Path | str,
    fmt: OutputFormat = "csv",
    encoding: str = "utf-8",
    delimiter: str = ",",
) -> int:
    """Write people to `path`; return the number written."""
    path = Path(path)
    if fmt == "csv":
        return write_people(path, people, encoding=encoding, delimiter=delimiter)
    if fmt == "json":
        rows = [person.as_row() for person in people]
        with translate_os_errors(path), open(path, "w", encoding=encoding) as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
            f.write("\n")
        return len(rows)
    raise LessonKitError(f"Unknown output format: {fmt}")


def run_etl(
    source: Path | str,
    target: Path | str,
    fmt: OutputFormat = "csv",
    min_age: int | None = None,
    city: str | None = None,
    normalize: bool = True,
    skip_invalid: bool = False,
    encoding: str = "utf-8",
    delimiter: str = ",",
) -> EtlResult:
    """Run extract, transform and load from `source` to `target`."""
    if Path(source).resolve() == Path(target).resolve():
        raise LessonKitError("Source and target must be different files")

    skipped: list[CsvFormatError] = []
    # The target is opened only after every source row has been read
    people = list(
        extract(
            source,
            skip_invalid=skip_invalid,
            skipped=skipped,
            encoding=encoding,
            delimiter=delimiter,
        )
    )
    kept = list(transform(people, min_age=min_age, city=city, normalize=normalize))
    written = load(kept, target, fmt=fmt, encoding=encoding, delimiter=delimiter)

    result = EtlResult(read=len(people), written=written, skipped=len(skipped))
    logger.info(f"ETL {source} -> {target}: {result}")
    return result
