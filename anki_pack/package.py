#!/usr/bin/env python3
"""
Build Anki package (.apkg) files.

APKG Layout
-----------
An .apkg file is a ZIP archive containing:

- ``collection.anki2``: SQLite database (legacy schema, see :mod:`anki_pack.database`)
- ``media``: JSON object mapping media index strings to filenames,
  e.g. ``{"0": "audio.mp3", "1": "image.png"}``
- ``0``, ``1``, ``2``, ...: raw media files named by their index

The database is written to a temporary file, read back and deleted; the
temporary file is removed on every exit path.
"""

import io
import json
import logging
import os
import sqlite3
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path

from anki_pack.config import DeckConfig, MediaFile, ModelConfig, NoteConfig, PackageConfig
from anki_pack.database import WriteStats, write_collection
from anki_pack.deck import Deck
from anki_pack.defaults import DB_FILENAME, MEDIA_FILENAME, ZIP_COMPRESSLEVEL
from anki_pack.model import Model
from anki_pack.note import Note

logger = logging.getLogger(__name__)


@contextmanager
def temporary_database():
    """Yield a path to an empty temporary file, deleting it on exit."""
    fd, path = tempfile.mkstemp(prefix="anki_pack_", suffix=".anki2")
    os.close(fd)
    logger.debug("Temporary database at %s", path)
    try:
        yield path
    finally:
        if os.path.exists(path):
            os.remove(path)


def build_database(decks: list[Deck], models: list[Model]) -> tuple[bytes, WriteStats]:
    """
    Write the collection database and return its bytes.

    :returns: Tuple of (database bytes, write statistics).
    """
    with temporary_database() as db_path:
        conn = sqlite3.connect(db_path)
        try:
            stats = write_collection(conn, decks, models)
        finally:
            # must be closed before the file is read back
            conn.close()

        with open(db_path, "rb") as f:
            data = f.read()

    return data, stats


def build_media_manifest(media: list[MediaFile]) -> dict[str, str]:
    return {str(index): media_file.name for index, media_file in enumerate(media)}


def build_archive(db_data: bytes, media: list[MediaFile]) -> bytes:
    """Zip the database, media files and media manifest into .apkg bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(
        buffer, "w", zipfile.ZIP_DEFLATED, compresslevel=ZIP_COMPRESSLEVEL
    ) as zip_ref:
        zip_ref.writestr(DB_FILENAME, db_data)
        for index, media_file in enumerate(media):
            zip_ref.writestr(str(index), media_file.data)
        zip_ref.writestr(
            MEDIA_FILENAME,
            json.dumps(build_media_manifest(media), ensure_ascii=False),
        )
    return buffer.getvalue()


class Package:
    """
    Root aggregate of decks, note types and media to export.

    Decks and models are held by reference; a package is built once and
    then serialized::

        pkg = Package()
        pkg.add_model(model)
        pkg.add_deck(deck)
        pkg.write_to_file("deck.apkg")

    For a single deck built from dict rows, use :meth:`create`.
    """

    def __init__(
        self,
        config: PackageConfig | None = None,
        decks: list[Deck] | None = None,
        models: list[Model] | None = None,
    ) -> None:
        self.decks: list[Deck] = list(decks or [])
        self.models: list[Model] = list(models or [])
        self.media: list[MediaFile] = list(config.media) if config else []
        self.last_write_stats: WriteStats | None = None

    def add_deck(self, deck: Deck) -> None:
        self.decks.append(deck)

    def add_model(self, model: Model) -> None:
        self.models.append(model)

    def add_media(self, media_file: MediaFile) -> None:
        self.media.append(media_file)

    def add_media_files(self, media_files: list[MediaFile]) -> None:
        self.media.extend(media_files)

    def add_media_file(self, file_path: str | Path, filename: str | None = None) -> str:
        """
        Read a media file (audio/image) from disk into the package.

        :param file_path: Path to the file to add.
        :param filename: Filename to use in the package (defaults to basename).
        :returns: The filename that can be used in card fields (e.g. ``"audio.mp3"``).
        :raises FileNotFoundError: If file_path doesn't exist.
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        if filename is None:
            filename = os.path.basename(file_path)

        with open(file_path, "rb") as f:
            self.add_media(MediaFile(name=filename, data=f.read()))
        return filename

    def write_to_buffer(self) -> bytes:
        """
        Build the .apkg archive in memory.

        Write statistics are kept on :attr:`last_write_stats`.

        :raises sqlite3.Error: If the database could not be written. No
            archive is produced in that case.
        """
        db_data, stats = build_database(self.decks, self.models)
        self.last_write_stats = stats
        archive = build_archive(db_data, self.media)
        logger.debug("Built archive of %d bytes with %d media files", len(archive), len(self.media))
        return archive

    def write_to_file(self, output_path: str | Path) -> None:
        Path(output_path).write_bytes(self.write_to_buffer())

    @staticmethod
    def create(
        output_path: str | Path,
        deck_name: str,
        fields: list[str],
        cards: list[dict[str, str]],
        media_files: list[str] | None = None,
        model_name: str = "Basic",
        question_format: str | None = None,
        answer_format: str | None = None,
        css: str | None = None,
    ) -> "Package":
        """
        Create a single-deck APKG file from dict rows.

        :param output_path: Path where the .apkg file will be created.
        :param deck_name: Display name of the deck in Anki.
        :param fields: Ordered list of field names for the note model. The first
            field is used as the question by default.
        :param cards: List of card data dictionaries. Each dict should have keys
            matching the field names. Missing keys default to empty string.
            Audio references use Anki's ``[sound:filename.mp3]`` format.
        :param media_files: Paths to media files (audio, images) to include.
        :param model_name: Name of the note type/model shown in Anki.
        :param question_format: Template for the question (front) side.
            Defaults to showing the first field.
        :param answer_format: Template for the answer (back) side.
            Defaults to ``{{FrontSide}}<hr id=answer>`` followed by remaining fields.
        :param css: Card styling; the default stylesheet when omitted.
        :returns: The written package.

        :Example:

        >>> Package.create(
        ...     "vocab.apkg",
        ...     "My Vocab",
        ...     fields=["audio", "word", "meaning"],
        ...     cards=[
        ...         {"audio": "[sound:hello.mp3]", "word": "hello", "meaning": "greeting"},
        ...     ],
        ...     media_files=["audio/hello.mp3"],
        ...     question_format="{{audio}}",
        ... )
        """
        if question_format is None:
            question_format = "{{" + fields[0] + "}}"

        if answer_format is None:
            parts = ["{{FrontSide}}", "<hr id=answer>"]
            for field in fields[1:]:
                parts.append("{{" + field + "}}")
            answer_format = "\n".join(parts)

        model = Model(
            ModelConfig(
                name=model_name,
                fields=[{"name": f} for f in fields],
                templates=[
                    {
                        "name": "Card 1",
                        "qfmt": question_format,
                        "afmt": answer_format,
                    }
                ],
                css=css,
            )
        )

        deck = Deck(DeckConfig(name=deck_name))
        for card in cards:
            note = Note(
                NoteConfig(
                    fields=[card.get(f, "") for f in fields],
                    model_id=model.model_id,
                )
            )
            deck.add_note(note, model)

        package = Package(decks=[deck], models=[model])
        for media_path in media_files or []:
            package.add_media_file(media_path)
        package.write_to_file(output_path)
        return package
