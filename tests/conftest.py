"""
Shared pytest fixtures for all tests.
"""

import pytest

from anki_pack import Deck, DeckConfig, Model, ModelConfig, Note, NoteConfig, Package


@pytest.fixture
def basic_model():
    """One-template Front/Back note type."""
    return Model(
        ModelConfig(
            model_id=123456,
            name="Basic",
            fields=[{"name": "Front"}, {"name": "Back"}],
            templates=[{"name": "Card 1", "qfmt": "{{Front}}", "afmt": "{{Back}}"}],
        )
    )


@pytest.fixture
def reversed_model():
    """Two-template note type (forward and reverse cards)."""
    return Model(
        ModelConfig(
            model_id=654321,
            name="Basic (and reversed card)",
            fields=[{"name": "Front"}, {"name": "Back"}],
            templates=[
                {"name": "Card 1", "qfmt": "{{Front}}", "afmt": "{{Back}}"},
                {"name": "Card 2", "qfmt": "{{Back}}", "afmt": "{{Front}}"},
            ],
        )
    )


@pytest.fixture
def make_note():
    """Factory for notes with the given fields."""

    def _make(fields, model=None, **kwargs):
        model_id = model.model_id if model is not None else 0
        return Note(NoteConfig(fields=list(fields), model_id=model_id, **kwargs))

    return _make


@pytest.fixture
def spanish_package(basic_model, make_note):
    """One deck, one note under a one-template model."""
    deck = Deck(DeckConfig(name="Spanish", deck_id=2000000001))
    deck.add_note(make_note(["Hola", "Hello"], basic_model), basic_model)
    return Package(decks=[deck], models=[basic_model])
