"""Tests for lazy import resolution."""

import pytest

from concerto_core.errors import NamespaceNotDefinedError, TypeNotFoundError, UnversionedImportError
from concerto_core.model import Declaration, Field, Import, ModelFile, ParsedModel
from concerto_core.namespace import NamespaceKey


@pytest.fixture
def hr_model() -> ParsedModel:
    """Imports person by type and the system namespace by wildcard."""
    return ParsedModel.create(
        "hr@1.0.0",
        imports=["{Person} from person@1.0.0", "concerto@1.0.0.*"],
        declarations=[Declaration(name="Manager", fields=(Field("name"),))],
    )


class TestResolve:
    def test_registration_does_not_resolve(self, registry, hr_model):
        # person@1.0.0 is not registered yet
        registry.add_model(hr_model)
        assert registry.import_resolver.cached_count() == 0

    def test_failure_is_not_cached(self, registry, hr_model, person_model):
        model_file = registry.add_model(hr_model)
        imp = model_file.imports[0]
        with pytest.raises(NamespaceNotDefinedError):
            registry.import_resolver.resolve(model_file, imp)

        registry.add_model(person_model)
        assert registry.import_resolver.resolve(model_file, imp) == NamespaceKey("person", "1.0.0")

    def test_success_is_cached(self, registry, hr_model, person_model):
        registry.add_model(person_model)
        model_file = registry.add_model(hr_model)
        registry.import_resolver.resolve_all(model_file)
        assert registry.import_resolver.cached_count() == 2

        registry.import_resolver.resolve_all(model_file)
        assert registry.import_resolver.cached_count() == 2

    def test_delete_invalidates_cache(self, registry, hr_model, person_model):
        registry.add_model(person_model)
        model_file = registry.add_model(hr_model)
        registry.import_resolver.resolve_all(model_file)

        registry.delete_model_file("person@1.0.0")
        assert registry.import_resolver.cached_count() == 1
        with pytest.raises(NamespaceNotDefinedError):
            registry.import_resolver.resolve(model_file, model_file.imports[0])

    def test_missing_imported_type(self, registry):
        model_file = registry.add_model(
            ParsedModel.create("test@1.0.0", imports=["{Nothing} from concerto@1.0.0"])
        )
        with pytest.raises(TypeNotFoundError):
            registry.import_resolver.resolve_all(model_file)

    def test_lenient_unversioned_uses_bare_name_only(self, registry, person_model):
        registry.add_model(person_model)
        model_file = registry.add_model(ParsedModel.create("test", imports=["person.Person"]))
        with pytest.raises(NamespaceNotDefinedError):
            registry.import_resolver.resolve_all(model_file)

    def test_lenient_unversioned_resolves_bare_key(self, registry):
        model_file = registry.add_model(ParsedModel.create("test", imports=["concerto.Event"]))
        assert registry.import_resolver.resolve_all(model_file) == [NamespaceKey("concerto")]

    def test_strict_refuses_unversioned_at_resolution(self, strict_registry):
        # Built directly: add_model would already refuse it
        model_file = ModelFile(
            namespace=NamespaceKey("test", "1.0.0"),
            imports=(Import("concerto", None, "Event"),),
        )
        with pytest.raises(UnversionedImportError):
            strict_registry.import_resolver.resolve(model_file, model_file.imports[0])


class TestResolveTypeName:
    def test_local_declaration_first(self, registry, hr_model, person_model):
        registry.add_model(person_model)
        model_file = registry.add_model(hr_model)
        resolver = registry.import_resolver
        assert resolver.resolve_type_name(model_file, "Manager") == "hr@1.0.0.Manager"

    def test_single_type_import(self, registry, hr_model, person_model):
        registry.add_model(person_model)
        model_file = registry.add_model(hr_model)
        assert registry.import_resolver.resolve_type_name(model_file, "Person") == "person@1.0.0.Person"

    def test_wildcard_import(self, registry, hr_model, person_model):
        registry.add_model(person_model)
        model_file = registry.add_model(hr_model)
        assert registry.import_resolver.resolve_type_name(model_file, "Event") == "concerto@1.0.0.Event"

    def test_not_in_scope(self, registry, hr_model, person_model):
        registry.add_model(person_model)
        model_file = registry.add_model(hr_model)
        assert registry.import_resolver.resolve_type_name(model_file, "Nobody") is None
