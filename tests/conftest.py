import copy
from pathlib import Path

import pytest
import yaml

from schemaorg_validator.config import ConfigManager
from schemaorg_validator.ontology import Ontology
from schemaorg_validator.validation import SchemaValidator

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SUBCLASS_MAP = {
    "CreativeWork": "Thing",
    "HowTo": "CreativeWork",
    "Recipe": "HowTo",
    "Intangible": "Thing",
    "ListItem": "Intangible",
    "HowToStep": "ListItem",
    "HowToItem": "ListItem",
    "HowToTool": "HowToItem",
    "HowToSupply": "HowToItem",
    "Quantity": "Intangible",
    "Duration": "Quantity",
    "Person": "Thing",
    "Organization": "Thing",
    "URL": "Text",
    "Integer": "Number",
}

TYPE_MAP = {
    "Thing": {
        "name": ["Text"],
        "url": ["URL"],
        "description": ["Text"],
    },
    "CreativeWork": {
        "author": ["Person", "Organization"],
        "isFamilyFriendly": ["Boolean"],
    },
    "HowTo": {
        "totalTime": ["Duration"],
        "tool": ["HowToTool", "Text"],
        "supply": ["HowToSupply", "Text"],
        "step": ["HowToStep", "CreativeWork", "Text"],
    },
    "Recipe": {
        "cookTime": ["Duration"],
        "recipeYield": ["Text"],
    },
    "ListItem": {
        "position": ["Integer", "Text"],
    },
    "HowToItem": {
        "requiredQuantity": ["Number", "Text"],
    },
    "Person": {
        "email": ["Text"],
    },
}

TEA_HOWTO = {
    "@context": "https://schema.org/",
    "@type": "HowTo",
    "name": "Make Tea",
    "totalTime": "PT5M",
    "tool": {
        "@type": "HowToTool",
        "name": "Kettle"
    },
    "step": [
        {
            "@type": "HowToStep",
            "name": "Boil water"
        }
    ]
}


@pytest.fixture
def ontology() -> Ontology:
    """Synthetic ontology shaped like the HowTo corner of Schema.org."""
    return Ontology(TYPE_MAP, SUBCLASS_MAP)


@pytest.fixture
def validator(ontology) -> SchemaValidator:
    return SchemaValidator(ontology)


@pytest.fixture
def tea_howto():
    return copy.deepcopy(TEA_HOWTO)


@pytest.fixture
def vocabulary_path() -> Path:
    """Miniature Schema.org JSON-LD release."""
    return FIXTURES_DIR / "mini_schemaorg.jsonld"


@pytest.fixture
def config_data(tmp_path, vocabulary_path):
    return {
        "ontology": {
            "schema_url": "https://schema.org/version/latest/schemaorg-current-https.jsonld",
            "schema_path": str(vocabulary_path),
            "type_map_path": str(tmp_path / "data" / "typeMap.json"),
            "subclass_map_path": str(tmp_path / "data" / "subclassMap.json"),
            "auto_build": True,
        },
        "validation": {
            "unknown_type_policy": "strip",
        },
        "server": {
            "host": "localhost",
            "port": 8010,
        },
        "logging": {
            "level": "INFO",
            "log_dir": str(tmp_path / "logs"),
        },
    }


@pytest.fixture
def config(config_data) -> ConfigManager:
    return ConfigManager.from_dict(config_data)


@pytest.fixture
def config_file(tmp_path, config_data) -> Path:
    path = tmp_path / "config.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_data, f)
    return path
