"""Tests for the collection (col row) assembly."""

import json

from anki_pack import Deck, DeckConfig
from anki_pack.collection import build_collection
from anki_pack.defaults import DECK_CONF, DEFAULT_MODEL_ID, thaw


class TestBuildCollection:
    def test_json_columns(self, basic_model):
        deck = Deck(DeckConfig(name="Spanish", deck_id=77))
        record = build_collection([deck], [basic_model])

        models = json.loads(record.models)
        decks = json.loads(record.decks)
        conf = json.loads(record.conf)
        dconf = json.loads(record.dconf)

        assert list(models) == [str(basic_model.model_id)]
        assert models[str(basic_model.model_id)]["name"] == "Basic"
        assert list(decks) == ["77"]
        assert conf["activeDecks"] == [77]
        assert conf["curDeck"] == 77
        assert conf["curModel"] == str(basic_model.model_id)
        assert conf["collapseTime"] == 1200
        assert conf["sortType"] == "noteFld"
        assert list(dconf) == ["1"]
        assert dconf["1"]["new"]["perDay"] == 20
        assert dconf["1"]["rev"]["maxIvl"] == 36500

    def test_fallback_deck(self):
        record = build_collection([], [])
        decks = json.loads(record.decks)
        conf = json.loads(record.conf)
        assert list(decks) == ["1"]
        assert decks["1"]["name"] == "Default"
        assert decks["1"]["conf"] == 1
        assert conf["activeDecks"] == [1]
        assert conf["curDeck"] == 1
        assert conf["curModel"] == str(DEFAULT_MODEL_ID)

    def test_several_decks(self):
        decks = [Deck(DeckConfig(name=n, deck_id=i)) for i, n in ((10, "a"), (20, "b"))]
        conf = json.loads(build_collection(decks, []).conf)
        assert conf["activeDecks"] == [10, 20]
        assert conf["curDeck"] == 10

    def test_defaults_not_shared(self):
        conf = thaw(DECK_CONF)
        conf["new"]["delays"].append(99)
        assert DECK_CONF["new"]["delays"] == (1, 10)
        assert thaw(DECK_CONF)["new"]["delays"] == [1, 10]
