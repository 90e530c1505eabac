"""Pytest configuration and fixtures."""

import os

import pytest

from specstream.catalog import (
    Catalog,
    array_of,
    define_catalog,
    enum,
    number,
    object_of,
    string,
)
from specstream.core import Settings


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["SPECSTREAM_LOG_LEVEL"] = "DEBUG"
    os.environ["SPECSTREAM_JSON_LOGS"] = "false"


# ============================================================================
# Catalogs
# ============================================================================

def build_greeting_catalog() -> Catalog:
    return define_catalog({"Greeting": {"props": {"text": string()}}})


def build_adventure_catalog() -> Catalog:
    """Text adventure scene components."""
    return define_catalog(
        {
            "Scene": {
                "props": {
                    "location": string(),
                    "mood": enum(
                        "neutral", "tense", "mysterious", "triumphant", "dark", "peaceful",
                        nullable=True,
                    ),
                    "tags": array_of(enum("quest", "combat", "rest"), required=False),
                },
                "slots": ["default"],
                "description": "Root container for a game scene.",
            },
            "Narrative": {
                "props": {"text": string()},
                "description": "Story narration paragraph.",
            },
            "DialogBox": {
                "props": {
                    "speaker": string(),
                    "text": string(),
                    "mood": enum(
                        "friendly", "hostile", "mysterious", "scared", "neutral", nullable=True
                    ),
                },
                "description": "Speech from an NPC or voice.",
            },
            "ChoiceList": {
                "props": {
                    "prompt": string(nullable=True),
                    "choices": array_of(
                        object_of(
                            {
                                "id": string(),
                                "text": string(),
                                "risk": enum("safe", "moderate", "dangerous", nullable=True),
                            }
                        )
                    ),
                },
                "description": "Player choice options.",
            },
            "StatusBar": {
                "props": {
                    "health": number(),
                    "maxHealth": number(),
                    "gold": number(nullable=True),
                    "location": string(nullable=True),
                },
                "description": "Player stats display.",
            },
            "Badge": {
                "props": {
                    "text": string(),
                    "variant": enum(
                        "default", "danger", "success", "warning", "info", nullable=True
                    ),
                },
            },
            "Divider": {"props": {}, "description": "Visual scene break divider."},
            "Stack": {
                "props": {
                    "direction": enum("horizontal", "vertical", nullable=True),
                    "gap": enum("sm", "md", "lg", nullable=True),
                },
                "slots": ["default"],
                "description": "Layout container for arranging child elements.",
            },
        }
    )


ADVENTURE_DOCUMENT = """{
  "root": "scene",
  "elements": {
    "scene": {
      "type": "Scene",
      "props": {"location": "Dark Forest", "mood": "mysterious"},
      "children": ["intro", "status", "row", "choices"]
    },
    "intro": {
      "type": "Narrative",
      "props": {"text": "You step into the forest. The trees whisper \\u00e9\\ud83c\\udf32."}
    },
    "status": {
      "type": "StatusBar",
      "props": {"health": 8, "maxHealth": 10, "gold": 12.5, "location": null}
    },
    "row": {
      "type": "Stack",
      "props": {"direction": "horizontal", "gap": "sm"},
      "children": ["badge", "divider"]
    },
    "badge": {"type": "Badge", "props": {"text": "Poisoned ☠ à", "variant": "danger"}},
    "divider": {"type": "Divider", "props": {}},
    "choices": {
      "type": "ChoiceList",
      "props": {
        "prompt": "What do you do?",
        "choices": [
          {"id": "a", "text": "Go deeper", "risk": "dangerous"},
          {"id": "b", "text": "Turn back", "risk": "safe"}
        ]
      }
    }
  }
}"""


# Model output with prose around the object, values outside their enums and
# array entries that only fail once complete
NOISY_DOCUMENT = """Sure! Here is the scene:
```json
{"root": "scene", "elements": {
  "scene": {
    "type": "Scene",
    "props": {"location": "Cave of \\"Echoes\\"", "mood": "mysteriously", "tags": ["quest", "combative", "rest"]},
    "children": ["badge", "choices", "ghost"]
  },
  "badge": {"type": "Badge", "props": {"text": "Cursed", "variant": "dangerous"}},
  "choices": {
    "type": "ChoiceList",
    "props": {
      "prompt": null,
      "choices": [
        {"id": "a", "text": "Run", "risk": "safer"},
        {"id": "b", "text": "Fight", "risk": "dangerous"},
        {"id": "c"}
      ]
    }
  }
}}
```
Let me know if you want changes."""


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return Settings()


@pytest.fixture
def greeting_catalog():
    """Single-component catalog."""
    return build_greeting_catalog()


@pytest.fixture
def adventure_catalog():
    """Text adventure catalog."""
    return build_adventure_catalog()


@pytest.fixture
def adventure_document():
    """A complete, catalog-conforming adventure scene."""
    return ADVENTURE_DOCUMENT


@pytest.fixture
def noisy_document():
    """A document with invalid values and surrounding prose."""
    return NOISY_DOCUMENT


@pytest.fixture(params=["clean", "noisy"])
def scene_document(request):
    """Each scene document in turn."""
    return {"clean": ADVENTURE_DOCUMENT, "noisy": NOISY_DOCUMENT}[request.param]
