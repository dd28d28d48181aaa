"""
Assemble the single ``col`` row describing the whole collection.

Legacy (anki2) collections keep decks, note types and deck options as JSON
blobs in the ``col`` table rather than in tables of their own:

- ``conf``: collection settings (current deck, active decks, ...)
- ``models``: model id -> note type
- ``decks``: deck id -> deck
- ``dconf``: deck-options group id -> scheduling options
"""

import json
from dataclasses import dataclass

from anki_pack.deck import Deck, deck_record
from anki_pack.defaults import (
    COLLECTION_CONF_DEFAULTS,
    DECK_CONF,
    DEFAULT_DECK_CONF_ID,
    DEFAULT_DECK_ID,
    DEFAULT_DECK_NAME,
    DEFAULT_MODEL_ID,
    thaw,
)
from anki_pack.model import Model
from anki_pack.utils import anki_time


@dataclass
class CollectionRecord:
    """Values for the ``col`` row. JSON columns are already serialized."""

    crt: int
    mod: int
    scm: int
    conf: str
    models: str
    decks: str
    dconf: str


def build_decks(decks: list[Deck]) -> dict[str, dict]:
    """Deck id -> deck record, with a fallback "Default" deck when empty."""
    records = {str(deck.deck_id): deck.to_dict() for deck in decks}
    if not records:
        records[str(DEFAULT_DECK_ID)] = deck_record(DEFAULT_DECK_ID, DEFAULT_DECK_NAME)
    return records


def build_models(models: list[Model]) -> dict[str, dict]:
    return {str(model.model_id): model.to_dict() for model in models}


def build_conf(deck_ids: list[int], model_ids: list[int]) -> dict:
    conf = thaw(COLLECTION_CONF_DEFAULTS)
    conf["activeDecks"] = list(deck_ids)
    conf["curDeck"] = deck_ids[0] if deck_ids else DEFAULT_DECK_ID
    conf["curModel"] = str(model_ids[0] if model_ids else DEFAULT_MODEL_ID)
    return conf


def build_dconf() -> dict[str, dict]:
    return {str(DEFAULT_DECK_CONF_ID): thaw(DECK_CONF)}


def build_collection(decks: list[Deck], models: list[Model]) -> CollectionRecord:
    """
    Build the ``col`` row for the given decks and models.

    :param decks: Registered decks, in registration order.
    :param models: Registered models, in registration order.
    :returns: A :class:`CollectionRecord` with the four JSON columns serialized.
    """
    now = anki_time()
    deck_records = build_decks(decks)
    model_records = build_models(models)
    conf = build_conf(
        [int(did) for did in deck_records],
        [model.model_id for model in models],
    )
    return CollectionRecord(
        crt=now,
        mod=now,
        scm=now,
        conf=json.dumps(conf),
        models=json.dumps(model_records),
        decks=json.dumps(deck_records),
        dconf=json.dumps(build_dconf()),
    )
