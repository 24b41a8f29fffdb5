from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from schemaorg_validator.config import ConfigManager
from schemaorg_validator.errors import OntologyError
from schemaorg_validator.ontology import download_vocabulary, ensure_tables, ensure_vocabulary
from schemaorg_validator.validation import SchemaValidator

GET = "schemaorg_validator.ontology.schema_downloader.requests.get"


def test_download_writes_file(tmp_path):
    output = tmp_path / "ontology" / "schema.jsonld"
    response = MagicMock()
    response.content = b'{"@graph": []}'

    with patch(GET, return_value=response) as get:
        assert download_vocabulary("https://example.com/schema.jsonld", str(output))

    get.assert_called_once_with("https://example.com/schema.jsonld", timeout=30)
    response.raise_for_status.assert_called_once()
    assert output.read_bytes() == b'{"@graph": []}'


def test_download_skips_existing_file(tmp_path):
    output = tmp_path / "schema.jsonld"
    output.write_text("{}", encoding="utf-8")

    with patch(GET) as get:
        assert download_vocabulary("https://example.com/schema.jsonld", str(output))

    get.assert_not_called()


def test_download_failure_returns_false(tmp_path):
    output = tmp_path / "schema.jsonld"

    with patch(GET, side_effect=requests.exceptions.ConnectionError("offline")):
        assert not download_vocabulary("https://example.com/schema.jsonld", str(output))

    assert not output.exists()


def test_http_error_returns_false(tmp_path):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")

    with patch(GET, return_value=response):
        assert not download_vocabulary("https://example.com/missing", str(tmp_path / "schema.jsonld"))


def test_ensure_vocabulary_uses_existing_file(config, vocabulary_path):
    with patch(GET) as get:
        assert ensure_vocabulary(config) == str(vocabulary_path)

    get.assert_not_called()


def test_ensure_vocabulary_without_path():
    config = ConfigManager.from_dict({"ontology": {"schema_path": None}})

    assert ensure_vocabulary(config) is None


def test_ensure_tables_builds_missing_tables(config, config_data):
    ontology = ensure_tables(config)

    assert ontology.ancestors_of("HowTo") == ("CreativeWork", "Thing")
    assert Path(config_data["ontology"]["type_map_path"]).exists()
    reloaded = ensure_tables(config)
    assert dict(reloaded.allowed_properties("HowTo")) == dict(ontology.allowed_properties("HowTo"))


def test_ensure_tables_without_auto_build(config_data):
    config_data["ontology"]["auto_build"] = False
    config = ConfigManager.from_dict(config_data)

    with pytest.raises(OntologyError):
        ensure_tables(config)


def test_ensure_tables_when_download_fails(tmp_path, config_data):
    config_data["ontology"]["schema_path"] = str(tmp_path / "absent.jsonld")
    config = ConfigManager.from_dict(config_data)

    with patch(GET, side_effect=requests.exceptions.Timeout("slow")):
        with pytest.raises(OntologyError):
            ensure_tables(config)


def test_validator_from_config(config_data, tea_howto):
    config_data["validation"]["unknown_type_policy"] = "passthrough"
    validator = SchemaValidator.from_config(ConfigManager.from_dict(config_data))

    assert validator.unknown_type_policy == "passthrough"
    assert validator.validate(tea_howto) == []
