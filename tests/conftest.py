"""Pytest configuration and fixtures.

Every test runs in its own temporary working directory with all
LESSONKIT_ environment variables removed, so project configuration files
and the user's environment cannot leak into results. The CLI log file is
redirected into the temporary directory.
"""

import logging
import os
import textwrap
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from rich.logging import RichHandler

SAMPLE_LESSON = textwrap.dedent(
    """\
    # File and CSV Input/Output

    Programs move data in and out: that is I/O. See the [project repository](https://github.com/example/io-project) and the video at https://videos.example.com/io-lesson.

    ## Reading a file

    ```python
    with open("data.txt") as f:
        for line in f:
            print(line)
    ```

    ## Writing a file

    ```python
    with open("out.txt", "w") as f:
        f.write("Hello\\n")
    ```

    ## Command-line arguments

    ```python
    import sys

    filename = sys.argv[1]
    ```

    ## Reading CSV files

    ```python
    import csv

    with open("people.csv") as f:
        for row in csv.DictReader(f):
            print(row["name"], row["age"], row["city"])
    ```

    See also [the ETL section](#extract-transform-load) and [sample data](people.csv).

    ## Extract, Transform, Load

    ETL pipelines read, clean and store data.

    ## Error handling

    Coming soon: what to do when the file name is missing.

    ## Quiz

    **Question:** What does `sys.argv[1]` contain?

    - A) The script name
    - B) The first argument after the script name
    - C) The number of arguments

    **Answer:** B
    """
)

BROKEN_LESSON = textwrap.dedent(
    """\
    ## Reading files

    #### Details

    ```python
    with open("data.txt") as f
        print(f.read())
    ```

    **Question:** Which mode opens a file for writing?

    - A) "r"
    - B) "w"

    **Answer:** C

    Question: What closes the file automatically?

    - A) The with block
    - B) Nothing

    Answer: B) The with block

    Q: Which module reads CSV files?

    - A) json
    - A) csv
    """
)

PEOPLE_CSV = "name,age,city\nAlice,30,Berlin\nbob ,17, munich\nCarla,45,Berlin\n"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run each test in a clean directory without lessonkit settings."""
    for var in list(os.environ):
        if var.startswith("LESSONKIT_"):
            monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "lessonkit.cli.commands.shared.get_log_file_path", lambda: tmp_path / "lessonkit.log"
    )
    monkeypatch.setattr(
        "lessonkit.infrastructure.config.find_config_files",
        lambda: {"system": None, "user": None, "project": None},
    )

    root_logger = logging.getLogger()
    saved_level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if isinstance(handler, (RotatingFileHandler, RichHandler)):
            handler.close()
            root_logger.removeHandler(handler)
    root_logger.setLevel(saved_level)
    logging.getLogger("lessonkit").setLevel(logging.NOTSET)


@pytest.fixture
def lesson_dir(tmp_path) -> Path:
    directory = tmp_path / "lessons"
    directory.mkdir()
    (directory / "people.csv").write_text(PEOPLE_CSV, encoding="utf-8")
    return directory


@pytest.fixture
def sample_lesson_path(lesson_dir) -> Path:
    path = lesson_dir / "lesson.md"
    path.write_text(SAMPLE_LESSON, encoding="utf-8")
    return path


@pytest.fixture
def broken_lesson_path(lesson_dir) -> Path:
    path = lesson_dir / "broken.md"
    path.write_text(BROKEN_LESSON, encoding="utf-8")
    return path


@pytest.fixture
def people_csv(tmp_path) -> Path:
    path = tmp_path / "people.csv"
    path.write_text(PEOPLE_CSV, encoding="utf-8")
    return path
