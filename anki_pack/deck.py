"""
Decks: named collections of notes and the cards derived from them.
"""

from anki_pack.card import Card
from anki_pack.config import DeckConfig
from anki_pack.defaults import DECK_DEFAULTS, thaw
from anki_pack.model import Model
from anki_pack.note import Note
from anki_pack.utils import anki_time, generate_deck_id


def deck_record(deck_id: int, name: str, description: str = "") -> dict:
    """Build a ``col.decks`` entry from the deck defaults table."""
    record = {"id": deck_id, "name": name, "desc": description, "mod": anki_time()}
    record.update(thaw(DECK_DEFAULTS))
    return record


class Deck:
    """
    A deck of notes.

    Adding a note derives one card per template of the given model, or a
    single ordinal-0 card when no model is given.

    :Example:

    >>> deck = Deck(DeckConfig(name="Spanish"))
    >>> deck.add_note(Note(NoteConfig(fields=["Hola", "Hello"], model_id=model.model_id)), model)
    """

    def __init__(self, config: DeckConfig) -> None:
        self.deck_id: int = config.deck_id if config.deck_id is not None else generate_deck_id()
        self.name = config.name
        self.description = config.description
        self.notes: list[Note] = []
        self.cards: list[Card] = []

    def add_note(self, note: Note, model: Model | None = None) -> None:
        self.notes.append(note)

        due_position = len(self.cards) + 1
        template_count = len(model.templates) if model is not None else 1
        for ordinal in range(template_count):
            self.cards.append(
                Card(
                    note_guid=note.guid,
                    deck_id=self.deck_id,
                    ord=ordinal,
                    due=due_position + ordinal,
                )
            )

    def add_notes(self, notes: list[Note], model: Model | None = None) -> None:
        for note in notes:
            self.add_note(note, model)

    def get_note_count(self) -> int:
        return len(self.notes)

    def get_card_count(self) -> int:
        return len(self.cards)

    def to_dict(self) -> dict:
        return deck_record(self.deck_id, self.name, self.description)

    def __repr__(self) -> str:
        return f"Deck(id={self.deck_id}, name={self.name!r}, notes={len(self.notes)})"
