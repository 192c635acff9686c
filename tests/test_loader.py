"""Tests for loading model documents and configuration from files."""

import json

import pytest
import yaml

from concerto_core.config import Config, RegistryConfig
from concerto_core.errors import (
    DuplicateNamespaceError,
    ModelParseError,
    NamespaceNotDefinedError,
    UnversionedNamespaceError,
)
from concerto_core.model import DeclarationKind, ModelLoader, ModelRegistry, load_models


PERSON_DOC = {
    "namespace": "person@1.0.0",
    "declarations": [
        {
            "name": "Person",
            "kind": "participant",
            "identified_by": "email",
            "fields": [{"name": "email", "type": "String"}],
        }
    ],
}


class TestModelLoader:
    def test_load_yaml_file(self, semver_dir):
        loader = ModelLoader()
        (model_file,) = loader.load_file(semver_dir / "person.yaml")
        assert model_file.key == "person@1.0.0"
        assert model_file.origin == str(semver_dir / "person.yaml")

        decl = model_file.get_declaration("Person")
        assert decl.kind == DeclarationKind.PARTICIPANT
        assert decl.identified_by == "email"
        assert decl.field_names == ("email",)

    def test_load_json_file(self, tmp_path):
        path = tmp_path / "person.json"
        path.write_text(json.dumps(PERSON_DOC))
        (model_file,) = ModelLoader().load_file(path)
        assert model_file.key == "person@1.0.0"

    def test_multiple_documents_in_one_file(self, tmp_path):
        path = tmp_path / "models.yaml"
        path.write_text(yaml.safe_dump([PERSON_DOC, {"namespace": "test"}]))
        files = ModelLoader().load_file(path)
        assert [f.key for f in files] == ["person@1.0.0", "test"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ModelLoader().load_file(path) == []

    def test_load_directory_out_of_dependency_order(self, semver_dir):
        # employee.yaml sorts before person.yaml
        loader = ModelLoader()
        files = loader.load_directory(semver_dir)
        assert [f.key for f in files] == ["employee@2.0.0", "person@1.0.0"]
        loader.registry.validate()

    def test_load_path(self, semver_dir):
        loader = ModelLoader()
        loader.load_path(semver_dir / "person.yaml")
        assert "person@1.0.0" in loader.registry

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ModelLoader().load_file(tmp_path / "nope.yaml")

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            ModelLoader().load_directory(tmp_path / "nope")

    def test_unknown_document_key(self):
        with pytest.raises(ModelParseError, match="Invalid model document"):
            ModelLoader().load_dict({"namespace": "test", "version": "1.0.0"})

    def test_unknown_declaration_kind(self):
        doc = {"namespace": "test", "declarations": [{"name": "A", "kind": "enum"}]}
        with pytest.raises(ModelParseError):
            ModelLoader().load_dict(doc)

    def test_bad_namespace(self):
        with pytest.raises(ModelParseError):
            ModelLoader().load_dict({"namespace": "test@latest"})

    def test_bad_import(self):
        with pytest.raises(ModelParseError):
            ModelLoader().load_dict({"namespace": "test", "imports": ["{} from concerto@1.0.0"]})

    def test_not_a_mapping(self):
        with pytest.raises(ModelParseError):
            ModelLoader().parse_dict(["namespace", "test"])

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("namespace: [unclosed")
        with pytest.raises(ModelParseError):
            ModelLoader().load_file(path)

    def test_failed_file_commits_nothing(self, tmp_path):
        path = tmp_path / "models.yaml"
        path.write_text(yaml.safe_dump([PERSON_DOC, PERSON_DOC]))
        loader = ModelLoader()
        with pytest.raises(DuplicateNamespaceError):
            loader.load_file(path)
        assert len(loader.registry) == 0


class TestLoadModels:
    def test_from_dict(self):
        registry = load_models(PERSON_DOC)
        assert registry.get_type("person@1.0.0.Person").name == "Person"

    def test_from_mixed_sources(self, semver_dir):
        registry = load_models([semver_dir / "employee.yaml", PERSON_DOC])
        assert registry.get_namespaces() == ["employee@2.0.0", "person@1.0.0"]

    def test_validation_reports_missing_import(self, semver_dir):
        with pytest.raises(NamespaceNotDefinedError):
            load_models(semver_dir / "employee.yaml")

    def test_validation_can_be_skipped(self, semver_dir):
        registry = load_models(semver_dir / "employee.yaml", validate=False)
        assert "employee@2.0.0" in registry

    def test_into_existing_registry(self, semver_dir):
        registry = ModelRegistry()
        assert load_models(semver_dir, registry) is registry
        assert len(registry) == 2

    def test_strict_policy(self):
        with pytest.raises(UnversionedNamespaceError):
            load_models({"namespace": "test"}, config=RegistryConfig(versioned_namespaces_strict=True))

    def test_config_paths(self, semver_dir):
        config = Config.from_dict({
            "registry": {"versioned_namespaces_strict": True},
            "loader": {"paths": [str(semver_dir)]},
        })
        registry = load_models(config=config)
        assert registry.strict
        assert registry.get_namespaces() == ["employee@2.0.0", "person@1.0.0"]


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert not config.registry.versioned_namespaces_strict
        assert config.registry.system_models
        assert config.loader.paths == []
        assert config.loader.validate

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "registry": {"versioned_namespaces_strict": True},
            "loader": {"paths": ["models"], "validate": False},
        }))
        config = Config.from_yaml(str(path))
        assert config.registry.versioned_namespaces_strict
        assert config.loader.paths == ["models"]
        assert not config.loader.validate

    def test_from_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"registry": {"system_models": False}}))
        config = Config.from_json(str(path))
        assert not config.registry.system_models

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config.from_yaml(str(path)) == Config()
