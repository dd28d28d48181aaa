"""
Default values consulted when building models, decks and the collection.

All tables are read-only; callers copy what they need.
"""

from types import MappingProxyType

FIELD_DEFAULTS = MappingProxyType(
    {
        "font": "Arial",
        "size": 20,
        "sticky": False,
        "rtl": False,
    }
)

TEMPLATE_DEFAULTS = MappingProxyType(
    {
        "bqfmt": "",
        "bafmt": "",
        "did": None,
        "bfont": "",
        "bsize": 0,
    }
)

DEFAULT_CSS = """.card {
  font-family: arial;
  font-size: 20px;
  text-align: center;
  color: black;
  background-color: white;
}"""

DEFAULT_LATEX_PRE = r"""\documentclass[12pt]{article}
\special{papersize=3in,5in}
\usepackage[utf8]{inputenc}
\usepackage{amssymb,amsmath}
\pagestyle{empty}
\setlength{\parindent}{0in}
\begin{document}"""

DEFAULT_LATEX_POST = r"\end{document}"

# Fallback deck written when a package registers no decks
DEFAULT_DECK_ID = 1
DEFAULT_DECK_NAME = "Default"

# Basic (builtin) note type; used as curModel when no models are registered
DEFAULT_MODEL_ID = 1607392319

DEFAULT_DECK_CONF_ID = 1

DECK_DEFAULTS = MappingProxyType(
    {
        "usn": -1,
        "collapsed": False,
        "newToday": (0, 0),
        "revToday": (0, 0),
        "lrnToday": (0, 0),
        "timeToday": (0, 0),
        "dyn": 0,
        "extendNew": 10,
        "extendRev": 50,
        "conf": DEFAULT_DECK_CONF_ID,
    }
)

DECK_CONF = MappingProxyType(
    {
        "id": DEFAULT_DECK_CONF_ID,
        "name": "Default",
        "new": MappingProxyType(
            {
                "bury": True,
                "delays": (1, 10),
                "initialFactor": 2500,
                "ints": (1, 4, 7),
                "order": 1,
                "perDay": 20,
                "separate": True,
            }
        ),
        "lapse": MappingProxyType(
            {
                "delays": (10,),
                "leechAction": 0,
                "leechFails": 8,
                "minInt": 1,
                "mult": 0,
            }
        ),
        "rev": MappingProxyType(
            {
                "bury": True,
                "ease4": 1.3,
                "fuzz": 0.05,
                "ivlFct": 1,
                "maxIvl": 36500,
                "minSpace": 1,
                "perDay": 100,
            }
        ),
        "timer": 0,
        "maxTaken": 60,
        "usn": 0,
        "mod": 0,
        "autoplay": True,
        "replayq": True,
    }
)

COLLECTION_CONF_DEFAULTS = MappingProxyType(
    {
        "nextPos": 1,
        "estTimes": True,
        "sortType": "noteFld",
        "timeLim": 0,
        "sortBackwards": False,
        "addToCur": True,
        "newBury": True,
        "newSpread": 0,
        "dueCounts": True,
        "collapseTime": 1200,
    }
)

COLLECTION_VERSION = 11

DB_FILENAME = "collection.anki2"
MEDIA_FILENAME = "media"
ZIP_COMPRESSLEVEL = 6


def thaw(value):
    """Deep-copy a defaults table into plain dicts and lists for JSON output."""
    if isinstance(value, (dict, MappingProxyType)):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return value
