"""Unit tests for FileWriter."""

import pytest

from modsynth.core.models import GeneratedCode
from modsynth.output import FileWriter, OutputError


def code(name: str, text: str = "enum X {}\n") -> GeneratedCode:
    return GeneratedCode(source_code=text, file_name=name)


def test_write_creates_directory(tmp_path) -> None:
    target = tmp_path / "out" / "nested"
    path = FileWriter().write(code("Padding.swift"), target)
    assert path == target / "Padding.swift"
    assert path.read_text(encoding="utf-8") == "enum X {}\n"


def test_write_all(tmp_path) -> None:
    result = FileWriter().write_all([code("A.swift"), code("B.swift")], tmp_path)
    assert result.success
    assert result.files_written == 2
    assert sorted(p.name for p in tmp_path.iterdir()) == ["A.swift", "B.swift"]


def test_write_all_records_failures(tmp_path) -> None:
    (tmp_path / "Blocked.swift").mkdir()
    result = FileWriter().write_all([code("Blocked.swift"), code("Ok.swift")], tmp_path)
    assert not result.success
    assert result.files_written == 1
    assert "Blocked.swift" in result.errors[0]


def test_file_in_place_of_directory(tmp_path) -> None:
    blocker = tmp_path / "out"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(OutputError, match="not a directory"):
        FileWriter().write_all([code("A.swift")], blocker)


def test_clean(tmp_path) -> None:
    (tmp_path / "Old.swift").write_text("", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "x.swift").write_text("", encoding="utf-8")
    assert FileWriter().clean(tmp_path) == 2
    assert list(tmp_path.iterdir()) == []


def test_clean_missing_directory(tmp_path) -> None:
    assert FileWriter().clean(tmp_path / "missing") == 0
