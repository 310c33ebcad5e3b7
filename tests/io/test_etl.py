"""Tests for the ETL pipeline."""

import json

import pytest

from lessonkit.errors import CsvFormatError, LessonKitError
from lessonkit.io.csv_io import Person
from lessonkit.io.etl import EtlResult, load, run_etl, transform


class TestTransform:
    def test_normalizes_names_and_cities(self):
        people = [Person("  bob   smith ", 17, " munich")]

        assert list(transform(people)) == [Person("Bob Smith", 17, "Munich")]

    def test_without_normalization(self):
        people = [Person("bob", 17, " munich")]

        assert list(transform(people, normalize=False)) == people

    def test_filters(self):
        people = [
            Person("Alice", 30, "Berlin"),
            Person("Bob", 17, "Munich"),
            Person("Carla", 45, "berlin"),
        ]

        adults = list(transform(people, min_age=18))
        in_berlin = list(transform(people, city=" BERLIN "))

        assert [p.name for p in adults] == ["Alice", "Carla"]
        assert [p.name for p in in_berlin] == ["Alice", "Carla"]


class TestLoad:
    def test_json(self, tmp_path):
        path = tmp_path / "people.json"

        count = load([Person("Alice", 30, "Berlin")], path, fmt="json")

        assert count == 1
        text = path.read_text(encoding="utf-8")
        assert text.endswith("]\n")
        assert json.loads(text) == [{"name": "Alice", "age": 30, "city": "Berlin"}]

    def test_unknown_format(self, tmp_path):
        with pytest.raises(LessonKitError, match="Unknown output format"):
            load([], tmp_path / "out.xml", fmt="xml")


class TestRunEtl:
    def test_csv_to_csv(self, people_csv, tmp_path):
        target = tmp_path / "adults.csv"

        result = run_etl(people_csv, target, min_age=18)

        assert result == EtlResult(read=3, written=2, skipped=0)
        assert result.filtered == 1
        assert target.read_text(encoding="utf-8").splitlines() == [
            "name,age,city",
            "Alice,30,Berlin",
            "Carla,45,Berlin",
        ]

    def test_delimiter_is_used_for_the_target(self, tmp_path):
        source = tmp_path / "source.csv"
        source.write_text("name;age;city\nEve;33;Paris\n", encoding="utf-8")
        target = tmp_path / "target.csv"

        run_etl(source, target, delimiter=";")

        assert target.read_text(encoding="utf-8").splitlines() == ["name;age;city", "Eve;33;Paris"]

    def test_csv_to_json_with_city_filter(self, people_csv, tmp_path):
        target = tmp_path / "munich.json"

        result = run_etl(people_csv, target, fmt="json", city="Munich")

        assert result.written == 1
        assert json.loads(target.read_text(encoding="utf-8")) == [
            {"name": "Bob", "age": 17, "city": "Munich"}
        ]

    def test_skip_invalid(self, tmp_path):
        source = tmp_path / "source.csv"
        source.write_text("name,age,city\nAlice,30,Berlin\nBob,?,Munich\n", encoding="utf-8")

        result = run_etl(source, tmp_path / "out.csv", skip_invalid=True)

        assert result == EtlResult(read=1, written=1, skipped=1)
        assert str(result) == "Read 1 row(s), wrote 1, filtered 0, skipped 1 invalid"

    def test_invalid_row_leaves_no_target(self, tmp_path):
        source = tmp_path / "source.csv"
        source.write_text("name,age,city\nBob,?,Munich\n", encoding="utf-8")
        target = tmp_path / "out.csv"

        with pytest.raises(CsvFormatError):
            run_etl(source, target)

        assert not target.exists()

    def test_source_and_target_must_differ(self, people_csv):
        with pytest.raises(LessonKitError, match="different files"):
            run_etl(people_csv, people_csv)

        assert people_csv.read_text(encoding="utf-8").startswith("name,age,city\n")
