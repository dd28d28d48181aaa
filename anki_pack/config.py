"""
Configuration records for models, notes, decks and packages.

Field and template entries may also be written as plain dicts with the same
keys, e.g. ``{"name": "Front"}``; see :func:`coerce_fields` and
:func:`coerce_templates`.
"""

from dataclasses import dataclass, field, fields

MODEL_STANDARD = 0
MODEL_CLOZE = 1


@dataclass
class Field:
    """A note-type field. ``None`` values are resolved from defaults."""

    name: str
    font: str | None = None
    size: int | None = None
    sticky: bool | None = None
    rtl: bool | None = None
    ord: int | None = None


@dataclass
class Template:
    """
    A card template.

    :param qfmt: Question format.
    :param afmt: Answer format.
    :param bqfmt: Browser question format.
    :param bafmt: Browser answer format.
    :param did: Deck override for cards generated from this template.
    :param bfont: Browser font.
    :param bsize: Browser font size.
    """

    name: str
    qfmt: str
    afmt: str
    bqfmt: str | None = None
    bafmt: str | None = None
    did: int | None = None
    bfont: str | None = None
    bsize: int | None = None
    ord: int | None = None


@dataclass
class ModelConfig:
    name: str
    fields: list[Field | dict]
    templates: list[Template | dict]
    model_id: int | None = None
    css: str | None = None
    latex_pre: str | None = None
    latex_post: str | None = None
    type: int = MODEL_STANDARD
    tags: list[str] = field(default_factory=list)


@dataclass
class NoteConfig:
    fields: list[str]
    model_id: int = 0
    tags: list[str] = field(default_factory=list)
    guid: int | str | None = None
    sort_field_index: int = 0


@dataclass
class DeckConfig:
    name: str
    deck_id: int | None = None
    description: str = ""


@dataclass
class MediaFile:
    name: str
    data: bytes


@dataclass
class PackageConfig:
    media: list[MediaFile] = field(default_factory=list)


def _coerce(cls, entries: list) -> list:
    known = {f.name for f in fields(cls)}
    result = []
    for entry in entries:
        if isinstance(entry, cls):
            result.append(entry)
            continue
        unknown = set(entry) - known
        if unknown:
            raise ValueError(
                f"Unknown {cls.__name__.lower()} keys: {', '.join(sorted(unknown))}"
            )
        result.append(cls(**entry))
    return result


def coerce_fields(entries: list[Field | dict]) -> list[Field]:
    return _coerce(Field, entries)


def coerce_templates(entries: list[Template | dict]) -> list[Template]:
    return _coerce(Template, entries)
