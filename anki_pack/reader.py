"""
Read back .apkg archives written by :class:`anki_pack.package.Package`.

Used to verify an export after the fact: the database writer skips cards
whose note could not be resolved instead of failing, so a finished archive
can be short of cards without any error having been raised.
"""

import io
import json
import os
import shutil
import sqlite3
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

from anki_pack.defaults import DB_FILENAME, MEDIA_FILENAME
from anki_pack.utils import split_fields


@dataclass
class ConsistencyReport:
    """
    Problems found by :meth:`ArchiveReader.check_consistency`.

    :param notes_without_cards: Note ids with no card rows.
    :param orphan_cards: Card ids whose ``nid`` has no note row.
    :param unknown_decks: Card ids whose ``did`` is not in ``col.decks``.
    :param bad_ordinals: Card ids whose ``ord`` is not below the template
        count of the note's model (standard models only).
    :param missing_media: Media index keys with no archive entry.
    """

    note_count: int = 0
    card_count: int = 0
    notes_without_cards: list[int] = field(default_factory=list)
    orphan_cards: list[int] = field(default_factory=list)
    unknown_decks: list[int] = field(default_factory=list)
    bad_ordinals: list[int] = field(default_factory=list)
    missing_media: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (
            self.notes_without_cards
            or self.orphan_cards
            or self.unknown_decks
            or self.bad_ordinals
            or self.missing_media
        )


class ArchiveReader:
    """
    Read-only view of an .apkg archive.

    Use as a context manager; the archive is extracted to a temporary
    directory that is removed on exit::

        with ArchiveReader("deck.apkg") as reader:
            report = reader.check_consistency()

    :param source: Path to an .apkg file, or the archive bytes.
    """

    def __init__(self, source: str | Path | bytes) -> None:
        self.source = source
        self.temp_dir: str | None = None
        self.conn: sqlite3.Connection | None = None

    def __enter__(self) -> "ArchiveReader":
        self.temp_dir = tempfile.mkdtemp()
        try:
            archive = (
                io.BytesIO(self.source)
                if isinstance(self.source, (bytes, bytearray))
                else self.source
            )
            with zipfile.ZipFile(archive, "r") as zip_ref:
                zip_ref.extractall(self.temp_dir)

            db_path = os.path.join(self.temp_dir, DB_FILENAME)
            if not os.path.exists(db_path):
                raise FileNotFoundError(f"Archive has no {DB_FILENAME}")

            self.conn = sqlite3.connect(db_path)
            self.conn.row_factory = sqlite3.Row
        except BaseException:
            shutil.rmtree(self.temp_dir)
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None
        if self.temp_dir:
            shutil.rmtree(self.temp_dir)
            self.temp_dir = None

    def get_collection(self) -> sqlite3.Row:
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM col")
        return cursor.fetchone()

    def _col_json(self, column: str) -> dict:
        cursor = self.conn.cursor()
        cursor.execute(f"SELECT {column} FROM col")
        return json.loads(cursor.fetchone()[0])

    def get_conf(self) -> dict:
        return self._col_json("conf")

    def get_decks(self) -> dict[str, dict]:
        """
        :returns: Dict mapping deck ID (string) to the deck record.
        """
        return self._col_json("decks")

    def get_models(self) -> dict[str, dict]:
        """
        :returns: Dict mapping model ID (string) to the note type, with
            ``'flds'`` and ``'tmpls'`` lists.
        """
        return self._col_json("models")

    def get_deck_options(self) -> dict[str, dict]:
        return self._col_json("dconf")

    def get_notes(self) -> list[sqlite3.Row]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM notes ORDER BY id")
        return cursor.fetchall()

    def get_cards(self) -> list[sqlite3.Row]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM cards ORDER BY id")
        return cursor.fetchall()

    def get_note_fields(self, note: sqlite3.Row) -> list[str]:
        return split_fields(note["flds"])

    def get_media_mapping(self) -> dict[str, str]:
        """
        Get mapping of file IDs to filenames from the media manifest.

        :returns: Dict like ``{"0": "audio.mp3"}``; empty if there is no manifest.
        """
        media_path = os.path.join(self.temp_dir, MEDIA_FILENAME)
        if not os.path.exists(media_path):
            return {}
        with open(media_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def read_media(self, filename: str) -> bytes:
        """
        Return the bytes of a media file by its original filename.

        :raises KeyError: If the filename is not in the media manifest.
        """
        for file_id, name in self.get_media_mapping().items():
            if name == filename:
                with open(os.path.join(self.temp_dir, file_id), "rb") as f:
                    return f.read()
        raise KeyError(filename)

    def check_consistency(self) -> ConsistencyReport:
        """Cross-check notes, cards, decks, models and media."""
        notes = self.get_notes()
        cards = self.get_cards()
        decks = self.get_decks()
        models = self.get_models()

        report = ConsistencyReport(note_count=len(notes), card_count=len(cards))
        note_models = {note["id"]: str(note["mid"]) for note in notes}
        noted = {card["nid"] for card in cards}

        report.notes_without_cards = [nid for nid in note_models if nid not in noted]

        for card in cards:
            if card["nid"] not in note_models:
                report.orphan_cards.append(card["id"])
                continue
            if str(card["did"]) not in decks:
                report.unknown_decks.append(card["id"])
            model = models.get(note_models[card["nid"]])
            # cloze ordinals follow cloze numbers, not templates
            if model and model.get("type", 0) == 0 and card["ord"] >= len(model["tmpls"]):
                report.bad_ordinals.append(card["id"])

        for file_id in self.get_media_mapping():
            if not os.path.exists(os.path.join(self.temp_dir, file_id)):
                report.missing_media.append(file_id)

        return report
