"""
Cards: one renderable instance of a note under one template.
"""

from dataclasses import dataclass, field

from anki_pack.utils import anki_time

CARD_TYPE_NEW = 0
QUEUE_NEW = 0


@dataclass
class Card:
    """
    A card in its initial, never-reviewed state.

    Cards are derived by :meth:`anki_pack.deck.Deck.add_note`; they link to
    their note through ``note_guid``, which the database writer resolves to
    the note's storage id.

    :param note_guid: GUID of the owning note.
    :param deck_id: Deck the card belongs to.
    :param ord: Template ordinal.
    :param due: New-card position assigned by the deck. The database writer
        replaces this with a package-wide position.
    """

    note_guid: int
    deck_id: int
    ord: int = 0
    due: int = 1
    mod: int = field(default_factory=anki_time)
    usn: int = -1
    type: int = CARD_TYPE_NEW
    queue: int = QUEUE_NEW
    ivl: int = 0
    factor: int = 0
    reps: int = 0
    lapses: int = 0
    left: int = 0
    odue: int = 0
    odid: int = 0
    flags: int = 0
    data: str = ""
