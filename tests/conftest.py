"""Shared fixtures for registry, factory and serializer tests."""

from pathlib import Path

import pytest

from concerto_core.instance import Factory, Serializer
from concerto_core.model import Declaration, DeclarationKind, Field, ModelRegistry, ParsedModel


DATA_DIR = Path(__file__).parent / "data"


# =============================================================================
# Model Fixtures
# =============================================================================

@pytest.fixture
def semver_dir() -> Path:
    """Directory holding the person/employee model documents."""
    return DATA_DIR / "semver"


@pytest.fixture
def person_model() -> ParsedModel:
    """person@1.0.0 with an identified Person."""
    return ParsedModel.create(
        "person@1.0.0",
        declarations=[
            Declaration(
                name="Person",
                kind=DeclarationKind.PARTICIPANT,
                identified_by="email",
                fields=(Field("email"),),
            ),
        ],
    )


@pytest.fixture
def employee_model() -> ParsedModel:
    """employee@2.0.0 extending the imported Person."""
    return ParsedModel.create(
        "employee@2.0.0",
        imports=["{Person} from person@1.0.0"],
        declarations=[
            Declaration(
                name="Employee",
                kind=DeclarationKind.PARTICIPANT,
                super_type="Person",
                fields=(Field("department"),),
            ),
        ],
    )


@pytest.fixture
def bare_model() -> ParsedModel:
    """Unversioned 'test' namespace: concept Person identified by email."""
    return ParsedModel.create(
        "test",
        declarations=[
            Declaration(name="Person", identified_by="email", fields=(Field("email"),)),
        ],
    )


# =============================================================================
# Registry Fixtures
# =============================================================================

@pytest.fixture
def registry() -> ModelRegistry:
    """Lenient registry (versioned namespaces not strict)."""
    return ModelRegistry()


@pytest.fixture
def strict_registry() -> ModelRegistry:
    """Registry that forbids unversioned namespaces and imports."""
    return ModelRegistry(versioned_namespaces_strict=True)


@pytest.fixture
def factory(registry) -> Factory:
    return Factory(registry)


@pytest.fixture
def serializer(factory, registry) -> Serializer:
    return Serializer(factory, registry)
