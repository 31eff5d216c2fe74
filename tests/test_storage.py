import json
import os
from pathlib import Path

import pytest

from studyposts.storage import load_courses, save_courses

SAMPLE = [
    {
        "id": "2",
        "title": "Chemistry",
        "description": "Organic",
        "posts": [{"id": "2.1", "title": "Benzene", "imageUrl": "data:image/png;base64,AAAA", "description": "Ring"}],
    },
    {"id": "1", "title": "Biologia — cellule", "description": "", "posts": []},
]


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    assert load_courses(str(tmp_path / "absent.json")) == []


def test_corrupt_file_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text("[{not json", encoding="utf-8")
    assert load_courses(str(path)) == []


def test_non_array_document_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"courses": []}), encoding="utf-8")
    assert load_courses(str(path)) == []


@pytest.mark.parametrize(
    "document",
    [
        [1, None],
        [{"id": "c1", "title": "x", "posts": None}],
        [{"id": "c1", "title": "x", "posts": [1, "post"]}],
    ],
)
def test_array_of_malformed_courses_loads_empty(tmp_path: Path, document: list) -> None:
    path = tmp_path / "db.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    assert load_courses(str(path)) == []


def test_course_without_posts_key_still_loads(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text(json.dumps([{"id": "c1", "title": "x"}]), encoding="utf-8")
    assert load_courses(str(path)) == [{"id": "c1", "title": "x"}]


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "db.json"
    assert save_courses(str(path), SAMPLE) is True
    assert load_courses(str(path)) == SAMPLE
    # Non-ASCII text is kept readable in the document
    assert "Biologia — cellule" in path.read_text(encoding="utf-8")


def test_save_of_load_leaves_document_unchanged(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    save_courses(str(path), SAMPLE)
    before = path.read_bytes()

    save_courses(str(path), load_courses(str(path)))

    assert path.read_bytes() == before


def test_save_failure_returns_false_and_cleans_up(tmp_path: Path) -> None:
    target = tmp_path / "db.json"
    target.mkdir()

    assert save_courses(str(target), SAMPLE) is False
    assert [name for name in os.listdir(tmp_path) if name.startswith(".db-")] == []


def test_unserializable_data_keeps_previous_document(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    save_courses(str(path), SAMPLE)

    assert save_courses(str(path), [{"id": "x", "posts": object()}]) is False
    assert load_courses(str(path)) == SAMPLE
