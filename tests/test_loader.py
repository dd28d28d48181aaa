"""Tests for building packages from JSON descriptions."""

import json

import pytest

from anki_pack import ArchiveReader, load_package
from anki_pack.builtin import BASIC_MODEL


def _write(tmp_path, data, name="deck.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadPackage:
    def test_builtin_model(self, tmp_path):
        path = _write(
            tmp_path,
            {"decks": [{"name": "Spanish", "notes": [{"fields": ["Hola", "Hello"], "tags": ["greeting"]}]}]},
        )
        pkg = load_package(path)
        assert [m.model_id for m in pkg.models] == [BASIC_MODEL.model_id]
        note = pkg.decks[0].notes[0]
        assert note.fields == ["Hola", "Hello"]
        assert note.tags == ["greeting"]
        assert note.model_id == BASIC_MODEL.model_id

    def test_custom_model_and_css_file(self, tmp_path):
        (tmp_path / "card.css").write_text(".card { color: red; }", encoding="utf-8")
        path = _write(
            tmp_path,
            {
                "models": [
                    {
                        "name": "Vocab",
                        "id": 1700000000000,
                        "fields": ["Word", {"name": "Meaning", "rtl": True}],
                        "templates": [
                            {"name": "Forward", "qfmt": "{{Word}}", "afmt": "{{Meaning}}"},
                            {"name": "Reverse", "qfmt": "{{Meaning}}", "afmt": "{{Word}}"},
                        ],
                        "css_file": "card.css",
                    }
                ],
                "decks": [
                    {
                        "name": "Vocab",
                        "id": 42,
                        "model": "Vocab",
                        "tags": ["vocab"],
                        "notes": [{"fields": {"Word": "perro"}, "guid": "12345"}],
                    }
                ],
            },
        )
        pkg = load_package(path)
        model = pkg.models[0]
        assert model.model_id == 1700000000000
        assert model.css == ".card { color: red; }"
        assert model.fields[1].rtl is True

        deck = pkg.decks[0]
        assert deck.deck_id == 42
        assert deck.notes[0].fields == ["perro", ""]
        assert deck.notes[0].guid == 12345
        assert deck.notes[0].tags == ["vocab"]
        assert deck.get_card_count() == 2

    def test_csv_rows(self, tmp_path):
        (tmp_path / "vocab.csv").write_text("Back,Front\nHello,Hola\nBye,Adios\n", encoding="utf-8")
        path = _write(tmp_path, {"decks": [{"name": "d", "csv": "vocab.csv", "tags": ["csv"]}]})
        deck = load_package(path).decks[0]
        assert [n.fields for n in deck.notes] == [["Hola", "Hello"], ["Adios", "Bye"]]
        assert deck.notes[0].tags == ["csv"]

    def test_media(self, tmp_path):
        (tmp_path / "a.mp3").write_bytes(b"ID3")
        path = _write(tmp_path, {"decks": [], "media": ["a.mp3"]})
        pkg = load_package(path)
        with ArchiveReader(pkg.write_to_buffer()) as reader:
            assert reader.get_media_mapping() == {"0": "a.mp3"}

    def test_unknown_model(self, tmp_path):
        path = _write(tmp_path, {"decks": [{"name": "d", "model": "Nope"}]})
        with pytest.raises(ValueError, match="Nope"):
            load_package(path)

    def test_unknown_field(self, tmp_path):
        path = _write(tmp_path, {"decks": [{"name": "d", "notes": [{"fields": {"Side": "x"}}]}]})
        with pytest.raises(ValueError, match="Side"):
            load_package(path)

    def test_unknown_model_type(self, tmp_path):
        path = _write(
            tmp_path,
            {"models": [{"name": "m", "fields": ["a"], "templates": [{"name": "t", "qfmt": "", "afmt": ""}], "type": "fancy"}]},
        )
        with pytest.raises(ValueError, match="fancy"):
            load_package(path)

    def test_not_an_object(self, tmp_path):
        path = _write(tmp_path, [1, 2])
        with pytest.raises(ValueError):
            load_package(path)
