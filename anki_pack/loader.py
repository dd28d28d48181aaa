"""
Build a :class:`~anki_pack.package.Package` from a JSON description file.

Description format::

    {
        "models": [
            {
                "name": "Vocab",
                "id": 1700000000000,
                "fields": ["Word", "Meaning"],
                "templates": [{"name": "Card 1", "qfmt": "{{Word}}", "afmt": "{{Meaning}}"}],
                "css_file": "card.css",
                "type": "standard"
            }
        ],
        "decks": [
            {
                "name": "Spanish",
                "model": "Vocab",
                "tags": ["spanish"],
                "notes": [{"fields": ["Hola", "Hello"], "tags": ["greeting"]}],
                "csv": "vocab.csv"
            }
        ],
        "media": ["audio/hola.mp3"]
    }

``model`` may name one of the builtin note types (see
:mod:`anki_pack.builtin`). Note ``fields`` may be a list in field order or
a dict keyed by field name. CSV rows are matched to fields by header name;
missing columns become empty fields. Relative paths are resolved against
the description file's directory.
"""

import csv
import json
from pathlib import Path

from anki_pack.builtin import BUILTIN_MODELS
from anki_pack.config import MODEL_CLOZE, MODEL_STANDARD, DeckConfig, ModelConfig, NoteConfig
from anki_pack.deck import Deck
from anki_pack.model import Model
from anki_pack.note import Note
from anki_pack.package import Package

MODEL_TYPES = {"standard": MODEL_STANDARD, "cloze": MODEL_CLOZE}


def _field_entry(entry: str | dict) -> dict:
    return {"name": entry} if isinstance(entry, str) else entry


def parse_model(data: dict, base_dir: Path) -> Model:
    """
    :raises ValueError: If the model type is unknown.
    """
    kind = data.get("type", "standard")
    if kind not in MODEL_TYPES:
        raise ValueError(f"Unknown model type {kind!r} for model {data.get('name')!r}")

    css = data.get("css")
    if css is None and data.get("css_file"):
        css = (base_dir / data["css_file"]).read_text(encoding="utf-8")

    return Model(
        ModelConfig(
            name=data["name"],
            model_id=data.get("id"),
            fields=[_field_entry(f) for f in data["fields"]],
            templates=data["templates"],
            css=css,
            latex_pre=data.get("latex_pre"),
            latex_post=data.get("latex_post"),
            type=MODEL_TYPES[kind],
            tags=data.get("tags", []),
        )
    )


def _note_fields(values: list[str] | dict[str, str], model: Model) -> list[str]:
    if isinstance(values, dict):
        unknown = set(values) - set(model.field_names)
        if unknown:
            raise ValueError(
                f"Unknown fields for model {model.name!r}: {', '.join(sorted(unknown))}"
            )
        return [values.get(name, "") for name in model.field_names]
    return [str(v) for v in values]


def read_csv_rows(csv_path: Path, model: Model) -> list[list[str]]:
    """Read CSV rows as field lists in the model's field order."""
    rows = []
    with open(csv_path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            rows.append([row.get(name) or "" for name in model.field_names])
    return rows


def parse_deck(data: dict, models: dict[str, Model], base_dir: Path) -> Deck:
    """
    :raises ValueError: If the deck references an unknown model.
    """
    model_name = data.get("model", "Basic")
    model = models.get(model_name)
    if model is None:
        raise ValueError(f"Deck {data.get('name')!r} references unknown model {model_name!r}")

    deck = Deck(
        DeckConfig(
            name=data["name"],
            deck_id=data.get("id"),
            description=data.get("description", ""),
        )
    )
    deck_tags = data.get("tags", [])

    for entry in data.get("notes", []):
        note = Note(
            NoteConfig(
                fields=_note_fields(entry["fields"], model),
                model_id=model.model_id,
                tags=deck_tags + entry.get("tags", []),
                guid=entry.get("guid"),
            )
        )
        deck.add_note(note, model)

    if data.get("csv"):
        for fields in read_csv_rows(base_dir / data["csv"], model):
            deck.add_note(
                Note(NoteConfig(fields=fields, model_id=model.model_id, tags=list(deck_tags))),
                model,
            )

    return deck


def parse_package(data: dict, base_dir: Path) -> Package:
    """
    Build a package from an already-parsed description.

    Only models that some deck uses are registered.
    """
    if not isinstance(data, dict):
        raise ValueError("Package description must be a JSON object")

    models = dict(BUILTIN_MODELS)
    for model_data in data.get("models", []):
        model = parse_model(model_data, base_dir)
        models[model.name] = model

    package = Package()
    used: dict[int, Model] = {}
    for deck_data in data.get("decks", []):
        deck = parse_deck(deck_data, models, base_dir)
        package.add_deck(deck)
        model = models[deck_data.get("model", "Basic")]
        used.setdefault(model.model_id, model)

    for model in used.values():
        package.add_model(model)

    for media_path in data.get("media", []):
        package.add_media_file(base_dir / media_path)

    return package


def load_package(description_path: str | Path) -> Package:
    """
    Load a JSON package description.

    :raises ValueError: If the description is malformed or references
        unknown models.
    :raises FileNotFoundError: If a referenced CSV or media file is missing.
    """
    description_path = Path(description_path)
    with open(description_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_package(data, description_path.parent)
