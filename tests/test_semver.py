"""Semantic versioning scenarios: lenient and strict registries end to end."""

import pytest

from concerto_core.errors import (
    NamespaceNotDefinedError,
    UnversionedImportError,
    UnversionedNamespaceError,
)
from concerto_core.instance import Factory, Serializer
from concerto_core.model import Declaration, Field, ModelLoader, ModelRegistry, ParsedModel


@pytest.fixture
def person_doc(semver_dir):
    return semver_dir / "person.yaml"


@pytest.fixture
def employee_doc(semver_dir):
    return semver_dir / "employee.yaml"


class TestLenientNamespaces:
    """versioned_namespaces_strict=False"""

    def test_versioned_namespaces(self, person_doc, employee_doc):
        loader = ModelLoader(ModelRegistry())
        loader.load_file(person_doc)
        loader.load_file(employee_doc)
        assert loader.registry.get_model_file("person@1.0.0") is not None
        assert loader.registry.get_model_file("employee@2.0.0") is not None

    def test_serialize_versioned_declarations(self, person_doc):
        registry = ModelRegistry()
        ModelLoader(registry).load_file(person_doc)
        factory = Factory(registry)
        serializer = Serializer(factory, registry)

        person = factory.new_concept("person@1.0.0", "Person", "john.doe@example.com")
        json_data = serializer.to_json(person)
        assert json_data == {
            "$class": "person@1.0.0.Person",
            "email": "john.doe@example.com",
        }
        person2 = serializer.from_json(json_data)
        assert person2.email == person.email

    def test_unversioned_namespaces(self):
        registry = ModelRegistry()
        registry.add_model(ParsedModel.create("test"), "test.cto")
        assert registry.get_model_file("test") is not None

    def test_serialize_unversioned_declarations(self):
        registry = ModelRegistry()
        registry.add_model(ParsedModel.create(
            "test",
            declarations=[Declaration(name="Person", identified_by="email", fields=(Field("email"),))],
        ), "test.cto")
        factory = Factory(registry)
        serializer = Serializer(factory, registry)

        person = factory.new_concept("test", "Person", "john.doe@example.com")
        json_data = serializer.to_json(person)
        assert json_data == {
            "$class": "test.Person",
            "email": "john.doe@example.com",
        }
        person2 = serializer.from_json(json_data)
        assert person2.email == person.email

    def test_versioned_system_imports(self):
        registry = ModelRegistry()
        registry.add_model(ParsedModel.create(
            "test@1.0.0", imports=["import {Event} from concerto@1.0.0"],
        ), "test.cto")
        registry.validate()


class TestStrictNamespaces:
    """versioned_namespaces_strict=True"""

    def test_versioned_namespaces(self, person_doc, employee_doc):
        registry = ModelRegistry(versioned_namespaces_strict=True)
        loader = ModelLoader(registry)
        loader.load_file(person_doc)
        loader.load_file(employee_doc)
        assert registry.get_model_file("person@1.0.0") is not None
        assert registry.get_model_file("employee@2.0.0") is not None
        assert registry.get_type("employee@2.0.0.Employee") is not None

    def test_no_unversioned_namespaces(self):
        registry = ModelRegistry(versioned_namespaces_strict=True)
        with pytest.raises(UnversionedNamespaceError, match="Cannot add an unversioned namespace"):
            registry.add_model(ParsedModel.create("test"), "test.cto")

    def test_no_unversioned_imports(self):
        registry = ModelRegistry(versioned_namespaces_strict=True)
        with pytest.raises(UnversionedImportError, match="Cannot use an unversioned import"):
            registry.add_model(
                ParsedModel.create("test@1.0.0", imports=["import concerto.Event"]),
                "test.cto",
            )

    def test_no_unversioned_deserialization(self, person_doc, employee_doc):
        registry = ModelRegistry(versioned_namespaces_strict=True)
        loader = ModelLoader(registry)
        loader.load_file(person_doc)
        loader.load_file(employee_doc)
        serializer = Serializer(Factory(registry), registry)
        with pytest.raises(NamespaceNotDefinedError, match="Namespace is not defined"):
            serializer.from_json({
                "$class": "test.Person",
                "email": "john.doe@example.com",
            })
