"""
Predefined note types matching the ones that ship with Anki.

Model ids are fixed so that notes built against them merge with existing
notes of the same type on re-import.
"""

from anki_pack.config import MODEL_CLOZE, ModelConfig
from anki_pack.defaults import DEFAULT_MODEL_ID
from anki_pack.model import Model

FRONT_BACK = [{"name": "Front"}, {"name": "Back"}]

BASIC_MODEL = Model(
    ModelConfig(
        model_id=DEFAULT_MODEL_ID,
        name="Basic",
        fields=FRONT_BACK,
        templates=[
            {
                "name": "Card 1",
                "qfmt": "{{Front}}",
                "afmt": '{{FrontSide}}<hr id="answer">{{Back}}',
            },
        ],
    )
)

BASIC_AND_REVERSED_CARD_MODEL = Model(
    ModelConfig(
        model_id=1607392320,
        name="Basic (and reversed card)",
        fields=FRONT_BACK,
        templates=[
            {
                "name": "Card 1",
                "qfmt": "{{Front}}",
                "afmt": '{{FrontSide}}<hr id="answer">{{Back}}',
            },
            {
                "name": "Card 2",
                "qfmt": "{{Back}}",
                "afmt": '{{FrontSide}}<hr id="answer">{{Front}}',
            },
        ],
    )
)

BASIC_OPTIONAL_REVERSED_CARD_MODEL = Model(
    ModelConfig(
        model_id=1607392321,
        name="Basic (optional reversed card)",
        fields=FRONT_BACK + [{"name": "Add Reverse"}],
        templates=[
            {
                "name": "Card 1",
                "qfmt": "{{Front}}",
                "afmt": '{{FrontSide}}<hr id="answer">{{Back}}',
            },
            {
                "name": "Card 2",
                "qfmt": "{{#Add Reverse}}{{Back}}{{/Add Reverse}}",
                "afmt": '{{FrontSide}}<hr id="answer">{{Front}}',
            },
        ],
    )
)

BASIC_TYPE_IN_THE_ANSWER_MODEL = Model(
    ModelConfig(
        model_id=1607392322,
        name="Basic (type in the answer)",
        fields=FRONT_BACK,
        templates=[
            {
                "name": "Card 1",
                "qfmt": "{{Front}}<br>{{type:Back}}",
                "afmt": '{{Front}}<hr id="answer">{{Back}}',
            },
        ],
    )
)

CLOZE_MODEL = Model(
    ModelConfig(
        model_id=1607392323,
        name="Cloze",
        fields=[{"name": "Text"}, {"name": "Back Extra"}],
        templates=[
            {
                "name": "Cloze",
                "qfmt": "{{cloze:Text}}",
                "afmt": "{{cloze:Text}}<br>{{Back Extra}}",
            },
        ],
        type=MODEL_CLOZE,
    )
)

IMAGE_OCCLUSION_MODEL = Model(
    ModelConfig(
        model_id=1607392324,
        name="Image Occlusion",
        fields=[
            {"name": "Image"},
            {"name": "Question"},
            {"name": "Answer"},
            {"name": "Remarks"},
        ],
        templates=[
            {
                "name": "Card 1",
                "qfmt": "{{Image}}<br>{{Question}}",
                "afmt": '{{Image}}<hr id="answer">{{Answer}}<br>{{Remarks}}',
            },
        ],
    )
)

BUILTIN_MODELS: dict[str, Model] = {
    model.name: model
    for model in (
        BASIC_MODEL,
        BASIC_AND_REVERSED_CARD_MODEL,
        BASIC_OPTIONAL_REVERSED_CARD_MODEL,
        BASIC_TYPE_IN_THE_ANSWER_MODEL,
        CLOZE_MODEL,
        IMAGE_OCCLUSION_MODEL,
    )
}
