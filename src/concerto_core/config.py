"""Configuration for the model registry."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegistryConfig:
    """
    Registry policy, fixed when the registry is constructed.

    versioned_namespaces_strict is the single switch governing namespace
    registration, import resolution and type resolution.
    """
    versioned_namespaces_strict: bool = False

    # Register the built-in concerto@1.0.0 system namespace
    system_models: bool = True


@dataclass
class LoaderConfig:
    """Model document loading configuration."""
    # Files or directories of YAML/JSON model documents
    paths: list[str] = field(default_factory=list)

    # Resolve every import and supertype after loading
    validate: bool = True


@dataclass
class Config:
    """Main configuration container."""
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            registry=RegistryConfig(**data.get("registry", {})),
            loader=LoaderConfig(**data.get("loader", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)
