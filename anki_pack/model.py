"""
Note types ("models" in the collection schema).

A model describes the fields of a family of notes and the templates that
turn each note into cards. :meth:`Model.to_dict` produces the entry stored
under the model's id in ``col.models``.
"""

from anki_pack.config import (
    MODEL_CLOZE,
    Field,
    ModelConfig,
    Template,
    coerce_fields,
    coerce_templates,
)
from anki_pack.defaults import (
    DEFAULT_CSS,
    DEFAULT_DECK_ID,
    DEFAULT_LATEX_POST,
    DEFAULT_LATEX_PRE,
    FIELD_DEFAULTS,
    TEMPLATE_DEFAULTS,
)
from anki_pack.utils import anki_time, generate_model_id


def _resolve(value, default):
    return default if value is None else value


class Model:
    """
    A note type with resolved field and template defaults.

    :param config: Model configuration record.
    :raises ValueError: If the model has no fields or no templates.

    :Example:

    >>> model = Model(ModelConfig(
    ...     name="Vocab",
    ...     fields=[{"name": "Word"}, {"name": "Meaning"}],
    ...     templates=[{"name": "Card 1", "qfmt": "{{Word}}", "afmt": "{{Meaning}}"}],
    ... ))
    """

    def __init__(self, config: ModelConfig) -> None:
        fields = coerce_fields(config.fields)
        templates = coerce_templates(config.templates)
        if not fields:
            raise ValueError(f"Model {config.name!r} needs at least one field")
        if not templates:
            raise ValueError(f"Model {config.name!r} needs at least one template")

        self.model_id: int = (
            config.model_id if config.model_id is not None else generate_model_id()
        )
        self.name = config.name
        self.fields = self._process_fields(fields)
        self.templates = self._process_templates(templates)
        self.css = _resolve(config.css, DEFAULT_CSS)
        self.latex_pre = _resolve(config.latex_pre, DEFAULT_LATEX_PRE)
        self.latex_post = _resolve(config.latex_post, DEFAULT_LATEX_POST)
        self.type = config.type
        self.tags = list(config.tags)

    @staticmethod
    def _process_fields(fields: list[Field]) -> list[Field]:
        processed = []
        for index, f in enumerate(fields):
            processed.append(
                Field(
                    name=f.name,
                    font=_resolve(f.font, FIELD_DEFAULTS["font"]),
                    size=_resolve(f.size, FIELD_DEFAULTS["size"]),
                    sticky=_resolve(f.sticky, FIELD_DEFAULTS["sticky"]),
                    rtl=_resolve(f.rtl, FIELD_DEFAULTS["rtl"]),
                    ord=_resolve(f.ord, index),
                )
            )
        ords = [f.ord for f in processed]
        if len(set(ords)) != len(ords):
            raise ValueError(f"Duplicate field ordinals: {ords}")
        return processed

    @staticmethod
    def _process_templates(templates: list[Template]) -> list[Template]:
        processed = []
        for index, t in enumerate(templates):
            processed.append(
                Template(
                    name=t.name,
                    qfmt=t.qfmt,
                    afmt=t.afmt,
                    bqfmt=_resolve(t.bqfmt, TEMPLATE_DEFAULTS["bqfmt"]),
                    bafmt=_resolve(t.bafmt, TEMPLATE_DEFAULTS["bafmt"]),
                    did=_resolve(t.did, TEMPLATE_DEFAULTS["did"]),
                    bfont=_resolve(t.bfont, TEMPLATE_DEFAULTS["bfont"]),
                    bsize=_resolve(t.bsize, TEMPLATE_DEFAULTS["bsize"]),
                    ord=_resolve(t.ord, index),
                )
            )
        return processed

    @property
    def is_cloze(self) -> bool:
        return self.type == MODEL_CLOZE

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def to_dict(self) -> dict:
        """
        Build the ``col.models`` entry for this model.

        .. note::
            ``req`` is fixed to "any of field 0"; Anki recomputes template
            requirements itself after import.
        """
        return {
            "css": self.css,
            "did": DEFAULT_DECK_ID,
            "flds": [
                {
                    "font": f.font,
                    "media": [],
                    "name": f.name,
                    "ord": f.ord,
                    "rtl": f.rtl,
                    "size": f.size,
                    "sticky": f.sticky,
                }
                for f in self.fields
            ],
            "id": self.model_id,
            "latexPost": self.latex_post,
            "latexPre": self.latex_pre,
            "mod": anki_time(),
            "name": self.name,
            "req": [[0, "any", [0]]],
            "sortf": 0,
            "tags": list(self.tags),
            "tmpls": [
                {
                    "afmt": t.afmt,
                    "bafmt": t.bafmt,
                    "bfont": t.bfont,
                    "bqfmt": t.bqfmt,
                    "bsize": t.bsize,
                    "did": t.did,
                    "name": t.name,
                    "ord": t.ord,
                    "qfmt": t.qfmt,
                }
                for t in self.templates
            ],
            "type": self.type,
            "usn": -1,
            "vers": [],
        }

    def __repr__(self) -> str:
        return f"Model(id={self.model_id}, name={self.name!r})"
