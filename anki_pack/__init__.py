"""
Anki Pack - build Anki flashcard packages (.apkg) from decks, note types and notes.

Core classes:
    Model   - Note type: fields, templates, styling
    Note    - One note's field values and tags
    Deck    - Notes plus the cards derived from them
    Package - Decks, models and media; writes the .apkg

Modules:
    collection - Collection record (col row) assembly
    database   - SQLite schema and row insertion
    reader     - Read back and check built archives
    loader     - Build a package from a JSON description
    builtin    - Predefined note types
    cli        - Command-line interface
"""

from anki_pack.card import Card
from anki_pack.config import (
    MODEL_CLOZE,
    MODEL_STANDARD,
    DeckConfig,
    Field,
    MediaFile,
    ModelConfig,
    NoteConfig,
    PackageConfig,
    Template,
)
from anki_pack.database import WriteStats
from anki_pack.deck import Deck
from anki_pack.loader import load_package
from anki_pack.model import Model
from anki_pack.note import Note
from anki_pack.package import Package
from anki_pack.reader import ArchiveReader, ConsistencyReport
from anki_pack.utils import (
    checksum,
    format_tags,
    generate_deck_id,
    generate_guid,
    generate_model_id,
    generate_unique_guid,
    join_fields,
)

__all__ = [
    "Card",
    "Deck",
    "Model",
    "Note",
    "Package",
    "Field",
    "Template",
    "ModelConfig",
    "NoteConfig",
    "DeckConfig",
    "MediaFile",
    "PackageConfig",
    "MODEL_STANDARD",
    "MODEL_CLOZE",
    "WriteStats",
    "ArchiveReader",
    "ConsistencyReport",
    "load_package",
    "checksum",
    "format_tags",
    "join_fields",
    "generate_guid",
    "generate_unique_guid",
    "generate_deck_id",
    "generate_model_id",
]
