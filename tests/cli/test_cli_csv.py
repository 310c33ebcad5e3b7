"""Tests for the csv command group."""

import json

from click.testing import CliRunner

from lessonkit.cli.main import cli


class TestCsvShow:
    def test_table(self, people_csv):
        result = CliRunner().invoke(cli, ["csv", "show", str(people_csv)])

        assert result.exit_code == 0
        for name in ("Alice", "bob", "Carla"):
            assert name in result.output
        assert "3 row(s)" in result.output

    def test_invalid_row_fails(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("name,age,city\nAlice,30,Berlin\nBob,old,Munich\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["csv", "show", str(path)])

        assert result.exit_code == 1
        assert "row 2: age 'old' is not a whole number" in result.output

    def test_skip_invalid(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("name,age,city\nAlice,30,Berlin\nBob,old,Munich\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["csv", "show", "--skip-invalid", str(path)])

        assert result.exit_code == 0
        assert "1 row(s)" in result.output
        assert "Skipped 1 invalid row(s)" in result.output

    def test_delimiter_from_configuration(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LESSONKIT_CSV__DELIMITER", ";")
        path = tmp_path / "semicolon.csv"
        path.write_text("name;age;city\nEve;33;Paris\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["csv", "show", str(path)])

        assert result.exit_code == 0
        assert "Eve" in result.output

    def test_missing_header_column(self, tmp_path):
        path = tmp_path / "partial.csv"
        path.write_text("name,city\nAlice,Berlin\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["csv", "show", str(path)])

        assert result.exit_code == 1
        assert "missing column(s): age" in result.output


class TestCsvEtl:
    def test_filter_adults(self, people_csv, tmp_path):
        target = tmp_path / "adults.csv"

        result = CliRunner().invoke(
            cli, ["csv", "etl", str(people_csv), str(target), "--min-age", "18"]
        )

        assert result.exit_code == 0
        assert "Read 3 row(s), wrote 2, filtered 1, skipped 0 invalid" in result.output
        assert f"Written: {target}" in result.output
        assert target.read_text(encoding="utf-8").count("\n") == 3

    def test_json_with_city(self, people_csv, tmp_path):
        target = tmp_path / "berlin.json"

        result = CliRunner().invoke(
            cli,
            ["csv", "etl", str(people_csv), str(target), "--format", "json", "--city", "berlin"],
        )

        assert result.exit_code == 0
        names = [row["name"] for row in json.loads(target.read_text(encoding="utf-8"))]
        assert names == ["Alice", "Carla"]

    def test_no_normalize(self, people_csv, tmp_path):
        target = tmp_path / "raw.json"

        CliRunner().invoke(
            cli, ["csv", "etl", str(people_csv), str(target), "--format", "json", "--no-normalize"]
        )

        rows = json.loads(target.read_text(encoding="utf-8"))
        assert rows[1] == {"name": "bob", "age": 17, "city": "munich"}

    def test_delimiter_from_configuration(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LESSONKIT_CSV__DELIMITER", ";")
        source = tmp_path / "semicolon.csv"
        source.write_text("name;age;city\nEve;33;Paris\n", encoding="utf-8")
        target = tmp_path / "out.csv"

        result = CliRunner().invoke(cli, ["csv", "etl", str(source), str(target)])

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8").splitlines()[0] == "name;age;city"

    def test_same_source_and_target(self, people_csv):
        result = CliRunner().invoke(cli, ["csv", "etl", str(people_csv), str(people_csv)])

        assert result.exit_code == 1
        assert "different files" in result.output

    def test_negative_min_age_is_rejected(self, people_csv, tmp_path):
        result = CliRunner().invoke(
            cli, ["csv", "etl", str(people_csv), str(tmp_path / "o.csv"), "--min-age", "-1"]
        )

        assert result.exit_code == 2
