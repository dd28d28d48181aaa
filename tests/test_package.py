"""Tests for building .apkg archives, read back through zipfile and ArchiveReader."""

import io
import json
import os
import sqlite3
import tempfile
import zipfile

import pytest

from anki_pack import ArchiveReader, Deck, DeckConfig, MediaFile, Note, NoteConfig, Package, PackageConfig
from anki_pack import package as package_module


def _entries(data: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


class TestPackageRegistration:
    def test_empty(self):
        pkg = Package()
        assert (pkg.decks, pkg.models, pkg.media) == ([], [], [])

    def test_media_from_config(self):
        media = [MediaFile(name="image.jpg", data=b"fake")]
        assert Package(PackageConfig(media=media)).media == media

    def test_add(self, basic_model):
        pkg = Package()
        deck = Deck(DeckConfig(name="d"))
        pkg.add_deck(deck)
        pkg.add_model(basic_model)
        pkg.add_media(MediaFile(name="a", data=b"1"))
        pkg.add_media_files([MediaFile(name="b", data=b"2"), MediaFile(name="c", data=b"3")])
        assert pkg.decks[0] is deck
        assert pkg.models[0] is basic_model
        assert [m.name for m in pkg.media] == ["a", "b", "c"]

    def test_add_media_file(self, tmp_path):
        path = tmp_path / "hello.mp3"
        path.write_bytes(b"ID3")
        pkg = Package()
        assert pkg.add_media_file(path) == "hello.mp3"
        assert pkg.add_media_file(path, "renamed.mp3") == "renamed.mp3"
        assert pkg.media[0] == MediaFile(name="hello.mp3", data=b"ID3")

    def test_add_missing_media_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Package().add_media_file(tmp_path / "missing.mp3")


class TestArchive:
    def test_entries(self, spanish_package):
        entries = _entries(spanish_package.write_to_buffer())
        assert set(entries) == {"collection.anki2", "media"}
        assert json.loads(entries["media"]) == {}

    def test_media(self, spanish_package):
        spanish_package.add_media(MediaFile(name="a.mp3", data=b"audio-bytes"))
        entries = _entries(spanish_package.write_to_buffer())
        assert entries["0"] == b"audio-bytes"
        assert json.loads(entries["media"]) == {"0": "a.mp3"}

    def test_deflated(self, spanish_package):
        with zipfile.ZipFile(io.BytesIO(spanish_package.write_to_buffer())) as zf:
            assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())

    def test_write_to_file(self, spanish_package, tmp_path):
        output = tmp_path / "out.apkg"
        spanish_package.write_to_file(output)
        assert zipfile.is_zipfile(output)

    def test_stats_recorded(self, spanish_package):
        spanish_package.write_to_buffer()
        stats = spanish_package.last_write_stats
        assert (stats.notes_written, stats.cards_written) == (1, 1)
        assert stats.ok


class TestRoundTrip:
    def test_spanish_scenario(self, spanish_package):
        with ArchiveReader(spanish_package.write_to_buffer()) as reader:
            notes = reader.get_notes()
            cards = reader.get_cards()
            assert len(notes) == 1
            assert notes[0]["sfld"] == "Hola"
            assert notes[0]["flds"] == "Hola\x1fHello"
            assert len(cards) == 1
            assert cards[0]["ord"] == 0

    def test_two_templates(self, reversed_model, make_note):
        deck = Deck(DeckConfig(name="d"))
        deck.add_note(make_note(["a", "b"], reversed_model), reversed_model)
        pkg = Package(decks=[deck], models=[reversed_model])
        with ArchiveReader(pkg.write_to_buffer()) as reader:
            assert len(reader.get_notes()) == 1
            assert [c["ord"] for c in reader.get_cards()] == [0, 1]

    def test_counts_across_decks(self, basic_model, reversed_model, make_note):
        layout = [(3, basic_model), (2, reversed_model), (4, reversed_model)]
        decks = []
        for i, (count, model) in enumerate(layout):
            deck = Deck(DeckConfig(name=f"deck {i}"))
            deck.add_notes([make_note([f"{i}-{n}", ""], model) for n in range(count)], model)
            decks.append(deck)
        pkg = Package(decks=decks, models=[basic_model, reversed_model])

        with ArchiveReader(pkg.write_to_buffer()) as reader:
            assert len(reader.get_notes()) == 3 + 2 + 4
            assert len(reader.get_cards()) == 3 * 1 + 2 * 2 + 4 * 2
            assert reader.check_consistency().ok

    def test_bulk_notes_with_generated_guids(self, basic_model):
        deck = Deck(DeckConfig(name="bulk"))
        for i in range(60_000):
            note = Note(NoteConfig(fields=[f"w{i}", "x"], model_id=basic_model.model_id))
            deck.add_note(note, basic_model)
        pkg = Package(decks=[deck], models=[basic_model])

        with ArchiveReader(pkg.write_to_buffer()) as reader:
            assert len(reader.get_notes()) == 60_000
            assert len(reader.get_cards()) == 60_000
        assert pkg.last_write_stats.duplicate_guids == []
        assert pkg.last_write_stats.notes_written == 60_000

    def test_no_decks(self):
        with ArchiveReader(Package().write_to_buffer()) as reader:
            decks = reader.get_decks()
            assert decks["1"]["name"] == "Default"
            assert reader.get_notes() == []

    def test_database_opens(self, spanish_package, tmp_path):
        db_path = tmp_path / "collection.anki2"
        db_path.write_bytes(_entries(spanish_package.write_to_buffer())["collection.anki2"])
        conn = sqlite3.connect(db_path)
        try:
            assert conn.execute("PRAGMA integrity_check").fetchone()[0] == "ok"
        finally:
            conn.close()


class TestTemporaryDatabase:
    def test_removed_after_build(self, spanish_package, monkeypatch):
        created = []
        original = tempfile.mkstemp

        def tracking_mkstemp(*args, **kwargs):
            fd, path = original(*args, **kwargs)
            created.append(path)
            return fd, path

        monkeypatch.setattr(package_module.tempfile, "mkstemp", tracking_mkstemp)
        spanish_package.write_to_buffer()
        assert len(created) == 1
        assert not os.path.exists(created[0])

    def test_removed_on_failure(self, spanish_package, monkeypatch):
        paths = []

        def failing_write(conn, decks, models):
            paths.append(conn.execute("PRAGMA database_list").fetchone()[2])
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(package_module, "write_collection", failing_write)
        with pytest.raises(sqlite3.OperationalError, match="disk I/O error"):
            spanish_package.write_to_buffer()
        assert paths and not os.path.exists(paths[0])
        assert spanish_package.last_write_stats is None


class TestCreate:
    def test_create(self, tmp_path):
        audio = tmp_path / "hello.mp3"
        audio.write_bytes(b"ID3")
        output = tmp_path / "vocab.apkg"

        Package.create(
            output,
            "My Vocab",
            fields=["audio", "word", "meaning"],
            cards=[
                {"audio": "[sound:hello.mp3]", "word": "hello", "meaning": "greeting"},
                {"word": "goodbye"},
            ],
            media_files=[str(audio)],
            question_format="{{audio}}",
        )

        with ArchiveReader(output) as reader:
            models = list(reader.get_models().values())
            assert models[0]["tmpls"][0]["qfmt"] == "{{audio}}"
            assert models[0]["tmpls"][0]["afmt"] == "{{FrontSide}}\n<hr id=answer>\n{{word}}\n{{meaning}}"
            notes = reader.get_notes()
            assert [reader.get_note_fields(n) for n in notes] == [
                ["[sound:hello.mp3]", "hello", "greeting"],
                ["", "goodbye", ""],
            ]
            assert [n["sfld"] for n in notes] == ["[sound:hello.mp3]", ""]
            assert models[0]["sortf"] == 0
            assert reader.get_media_mapping() == {"0": "hello.mp3"}
            assert reader.read_media("hello.mp3") == b"ID3"

    def test_sort_field_is_not_configurable(self, tmp_path):
        with pytest.raises(TypeError):
            Package.create(tmp_path / "x.apkg", "d", fields=["a"], cards=[], sort_field_index=1)
