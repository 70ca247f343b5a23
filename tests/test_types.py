"""Tests for note records and identities."""

import pytest

from zettel.errors import ConflictError, NoteNotFoundError, ValidationError, log_exception
from zettel.types import Note, new_note_id


class TestNote:
    def test_dict_round_trip(self):
        note = Note(id="n_1", addresses=("1", "2a"), content="body")
        assert Note.from_dict(note.to_dict()) == note

    def test_missing_content_is_empty(self):
        assert Note.from_dict({"id": "n_1", "ids": ["1"]}).content == ""

    def test_malformed(self):
        with pytest.raises(ValueError):
            Note.from_dict({"id": 5, "ids": ["1"]})

    def test_str(self):
        assert str(Note("n_1", ("1", "2"), "First\nSecond")) == "1 2: First"


class TestNewNoteId:
    def test_format(self):
        note_id = new_note_id()
        assert note_id.startswith("n_")
        assert note_id[2:].isalnum()
        assert note_id == note_id.lower()

    def test_distinct(self):
        assert len({new_note_id() for _ in range(200)}) == 200


class TestErrors:
    def test_messages(self):
        assert str(ConflictError("2a", "n_1")) == '"2a" is already taken'
        assert "a1" in str(ValidationError("a1"))
        assert str(NoteNotFoundError("n_x")) == "Note not found: n_x"

    def test_not_found_is_key_error(self):
        with pytest.raises(KeyError):
            raise NoteNotFoundError("n_x")

    def test_log_exception(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ZETTEL_STORE_PATH", str(tmp_path))
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            path = log_exception(e, context="test")
        text = path.read_text()
        assert "RuntimeError: boom" in text
        assert "test" in text

    def test_log_exception_into_given_store(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ZETTEL_STORE_PATH", str(tmp_path / "elsewhere"))
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            path = log_exception(e, store_path=tmp_path)
        assert path == tmp_path / "zettel-errors.log"
        assert "RuntimeError: boom" in path.read_text()
