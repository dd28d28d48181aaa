"""
Write decks, notes and cards into a legacy (anki2) collection database.

Schema
------
- ``col``: one row; decks/models/deck options as JSON (see :mod:`anki_pack.collection`)
- ``notes``: one row per note; ``flds`` is the fields joined by 0x1F
- ``cards``: one row per card; ``nid`` is the note's storage id
- ``revlog``, ``graves``: created empty

Note storage ids are assigned here, not on the :class:`~anki_pack.note.Note`.
Notes are inserted first and a GUID -> storage id map is built; cards are
then resolved through that map. A card whose note GUID is missing from the
map is logged and skipped rather than failing the whole build, so callers
should inspect :class:`WriteStats` (or run
:meth:`anki_pack.reader.ArchiveReader.check_consistency`) after writing.
"""

import itertools
import logging
import sqlite3
from dataclasses import dataclass, field

from anki_pack.collection import CollectionRecord, build_collection
from anki_pack.deck import Deck
from anki_pack.defaults import COLLECTION_VERSION
from anki_pack.model import Model
from anki_pack.utils import anki_time, anki_time_ms

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE col (
    id INTEGER PRIMARY KEY,
    crt INTEGER NOT NULL,
    mod INTEGER NOT NULL,
    scm INTEGER NOT NULL,
    ver INTEGER NOT NULL,
    dty INTEGER NOT NULL,
    usn INTEGER NOT NULL,
    ls INTEGER NOT NULL,
    conf TEXT NOT NULL,
    models TEXT NOT NULL,
    decks TEXT NOT NULL,
    dconf TEXT NOT NULL,
    tags TEXT NOT NULL
);

CREATE TABLE notes (
    id INTEGER PRIMARY KEY,
    guid TEXT NOT NULL,
    mid INTEGER NOT NULL,
    mod INTEGER NOT NULL,
    usn INTEGER NOT NULL,
    tags TEXT NOT NULL,
    flds TEXT NOT NULL,
    sfld TEXT NOT NULL,
    csum INTEGER NOT NULL,
    flags INTEGER NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE cards (
    id INTEGER PRIMARY KEY,
    nid INTEGER NOT NULL,
    did INTEGER NOT NULL,
    ord INTEGER NOT NULL,
    mod INTEGER NOT NULL,
    usn INTEGER NOT NULL,
    type INTEGER NOT NULL,
    queue INTEGER NOT NULL,
    due INTEGER NOT NULL,
    ivl INTEGER NOT NULL,
    factor INTEGER NOT NULL,
    reps INTEGER NOT NULL,
    lapses INTEGER NOT NULL,
    left INTEGER NOT NULL,
    odue INTEGER NOT NULL,
    odid INTEGER NOT NULL,
    flags INTEGER NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE revlog (
    id INTEGER PRIMARY KEY,
    cid INTEGER NOT NULL,
    usn INTEGER NOT NULL,
    ease INTEGER NOT NULL,
    ivl INTEGER NOT NULL,
    lastIvl INTEGER NOT NULL,
    factor INTEGER NOT NULL,
    time INTEGER NOT NULL,
    type INTEGER NOT NULL
);

CREATE TABLE graves (
    usn INTEGER NOT NULL,
    oid INTEGER NOT NULL,
    type INTEGER NOT NULL
);

CREATE INDEX ix_notes_usn ON notes (usn);
CREATE INDEX ix_cards_usn ON cards (usn);
CREATE INDEX ix_cards_nid ON cards (nid);
CREATE INDEX ix_cards_sched ON cards (did, queue, due);
CREATE INDEX ix_revlog_usn ON revlog (usn);
CREATE INDEX ix_revlog_cid ON revlog (cid);
"""


class DueSequence:
    """
    Package-wide new-card position counter.

    The position stored in ``cards.due`` comes from here, not from the
    per-deck position computed by :meth:`Deck.add_note`.
    """

    def __init__(self, start: int = 1) -> None:
        self.value = start

    def next(self) -> int:
        value = self.value
        self.value += 1
        return value


@dataclass
class WriteStats:
    """
    Counts from one :func:`write_collection` call.

    :param skipped_guids: Note GUIDs whose cards were skipped because the
        note had no storage id.
    :param duplicate_guids: Note GUIDs seen more than once; only the first
        note row was written.
    """

    notes_written: int = 0
    cards_written: int = 0
    skipped_guids: list[str] = field(default_factory=list)
    duplicate_guids: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.skipped_guids


def create_tables(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA)


def insert_collection(conn: sqlite3.Connection, record: CollectionRecord) -> None:
    conn.execute(
        """
        INSERT INTO col (id, crt, mod, scm, ver, dty, usn, ls, conf, models, decks, dconf, tags)
        VALUES (1, ?, ?, ?, ?, 0, 0, 0, ?, ?, ?, ?, '{}')
        """,
        (
            record.crt,
            record.mod,
            record.scm,
            COLLECTION_VERSION,
            record.conf,
            record.models,
            record.decks,
            record.dconf,
        ),
    )


def insert_notes(
    conn: sqlite3.Connection, decks: list[Deck], stats: WriteStats
) -> dict[str, int]:
    """
    Insert every note of every deck.

    :returns: Map of serialized note GUID to the storage id it was given.
    """
    note_ids = itertools.count(anki_time_ms())
    id_map: dict[str, int] = {}
    now = anki_time()

    for deck in decks:
        for note in deck.notes:
            guid = str(note.guid)
            if guid in id_map:
                logger.warning("Skipping duplicate note GUID %s in deck %r", guid, deck.name)
                stats.duplicate_guids.append(guid)
                continue

            note_id = next(note_ids)
            conn.execute(
                """
                INSERT INTO notes (id, guid, mid, mod, usn, tags, flds, sfld, csum, flags, data)
                VALUES (?, ?, ?, ?, -1, ?, ?, ?, ?, 0, '')
                """,
                (
                    note_id,
                    guid,
                    note.model_id,
                    now,
                    note.formatted_tags,
                    note.joined_fields,
                    note.sort_field,
                    note.checksum(),
                ),
            )
            id_map[guid] = note_id
            stats.notes_written += 1

    return id_map


def insert_cards(
    conn: sqlite3.Connection,
    decks: list[Deck],
    id_map: dict[str, int],
    due: DueSequence,
    stats: WriteStats,
) -> None:
    """
    Insert every derived card, resolving ``nid`` through ``id_map``.

    Card ids count up from 1 and ``due`` is taken from ``due``; whatever the
    :class:`~anki_pack.card.Card` object carries for those is ignored.
    """
    card_ids = itertools.count(1)

    for deck in decks:
        for card in deck.cards:
            guid = str(card.note_guid)
            note_id = id_map.get(guid)
            if note_id is None:
                if guid not in stats.skipped_guids:
                    logger.warning("Could not find storage id for note GUID %s; skipping its cards", guid)
                    stats.skipped_guids.append(guid)
                continue

            conn.execute(
                """
                INSERT INTO cards (id, nid, did, ord, mod, usn, type, queue, due,
                                   ivl, factor, reps, lapses, left, odue, odid, flags, data)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    next(card_ids),
                    note_id,
                    card.deck_id,
                    card.ord,
                    card.mod,
                    card.usn,
                    card.type,
                    card.queue,
                    due.next(),
                    card.ivl,
                    card.factor,
                    card.reps,
                    card.lapses,
                    card.left,
                    card.odue,
                    card.odid,
                    card.flags,
                    card.data,
                ),
            )
            stats.cards_written += 1


def write_collection(
    conn: sqlite3.Connection, decks: list[Deck], models: list[Model]
) -> WriteStats:
    """
    Create the schema and write the collection, notes and cards.

    :param conn: Open connection to an empty database.
    :param decks: Decks to write, in order.
    :param models: Note types to register in ``col.models``.
    :returns: Counts of written rows and any skipped note GUIDs.
    """
    stats = WriteStats()
    create_tables(conn)
    insert_collection(conn, build_collection(decks, models))
    id_map = insert_notes(conn, decks, stats)
    insert_cards(conn, decks, id_map, DueSequence(), stats)
    conn.commit()

    logger.debug(
        "Wrote %d notes and %d cards (%d GUIDs skipped)",
        stats.notes_written,
        stats.cards_written,
        len(stats.skipped_guids),
    )
    return stats
