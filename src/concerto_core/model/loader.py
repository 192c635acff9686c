"""Model loader - registers parsed-model documents from YAML/JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..config import Config, RegistryConfig
from ..errors import ModelParseError
from .api_models import ModelDocument
from .registry import ModelRegistry
from .types import ModelFile, ParsedModel


logger = logging.getLogger(__name__)


class ModelLoader:
    """
    Loads parsed-model documents into a registry.

    A file holds one document or a list of documents:
    ```yaml
    namespace: employee@2.0.0
    imports:
      - "{Person} from person@1.0.0"
    declarations:
      - name: Employee
        kind: participant
        extends: Person
        fields:
          - name: department
            type: String
    ```

    Registration goes through ModelRegistry.add_models, so every document in
    a call is committed or none is. Files may arrive in any dependency order.
    """

    def __init__(self, registry: ModelRegistry | None = None):
        self.registry = registry if registry is not None else ModelRegistry()

    def parse_dict(self, data: dict[str, Any]) -> ParsedModel:
        """Validate one document and convert it to a ParsedModel."""
        if not isinstance(data, dict):
            raise ModelParseError(f"Model document must be a mapping, got {type(data).__name__}")
        try:
            document = ModelDocument.model_validate(data)
        except ValidationError as e:
            raise ModelParseError(f"Invalid model document: {e}") from e
        return document.to_parsed_model()

    def read_file(self, path: str | Path) -> list[ParsedModel]:
        """Read and validate every document in a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Model file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                if path.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise ModelParseError(f"Cannot read model file {path}: {e}") from e

        if data is None:
            return []
        documents = data if isinstance(data, list) else [data]
        return [self.parse_dict(doc) for doc in documents]

    def load_dict(self, data: dict[str, Any], origin: Any = None) -> ModelFile:
        """Register a single document."""
        return self.registry.add_model(self.parse_dict(data), origin)

    def load_file(self, path: str | Path) -> list[ModelFile]:
        """Register every document in a file."""
        path = Path(path)
        parsed = self.read_file(path)
        model_files = self.registry.add_models((p, str(path)) for p in parsed)
        logger.debug(f"Loaded {len(model_files)} namespaces from {path}")
        return model_files

    def load_directory(self, directory: str | Path) -> list[ModelFile]:
        """
        Register all YAML/JSON model files in a directory.

        Files are read in alphabetical order and registered as one batch.
        """
        directory = Path(directory)

        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        files = model_paths(directory)

        batch: list[tuple[ParsedModel, str]] = []
        for file_path in files:
            logger.debug(f"Reading model file: {file_path}")
            batch.extend((p, str(file_path)) for p in self.read_file(file_path))

        model_files = self.registry.add_models(batch)
        logger.info(f"Loaded {len(model_files)} namespaces from {directory}")
        return model_files

    def load_path(self, path: str | Path) -> list[ModelFile]:
        """Register a file or a directory."""
        path = Path(path)
        if path.is_dir():
            return self.load_directory(path)
        return self.load_file(path)


def model_paths(path: str | Path) -> list[Path]:
    """List model files under a path: the file itself, or a directory's YAML/JSON files."""
    path = Path(path)
    if not path.is_dir():
        return [path]
    return sorted(path.glob("*.yaml")) + sorted(path.glob("*.yml")) + sorted(path.glob("*.json"))


def load_models(
    source: str | Path | dict | list | None = None,
    registry: ModelRegistry | None = None,
    *,
    config: Config | RegistryConfig | None = None,
    validate: bool | None = None,
) -> ModelRegistry:
    """
    Convenience function to build a registry from model documents.

    Args:
        source: File path, directory path, a document dict, or a list of any
            of those. Defaults to config.loader.paths when a Config is given.
        registry: Registry to populate; a new one is created if omitted
        config: Policy for a newly created registry, and loader settings
        validate: Resolve every import and supertype once loading finishes
            (defaults to config.loader.validate, else True)

    Returns:
        The populated ModelRegistry
    """
    full_config = config if isinstance(config, Config) else None
    if registry is None:
        registry_config = full_config.registry if full_config else config
        registry = ModelRegistry(registry_config)
    if validate is None:
        validate = full_config.loader.validate if full_config else True
    if source is None:
        source = list(full_config.loader.paths) if full_config else []

    loader = ModelLoader(registry)
    sources = source if isinstance(source, list) else [source]

    batch: list[tuple[ParsedModel, Any]] = []
    for item in sources:
        if isinstance(item, dict):
            batch.append((loader.parse_dict(item), None))
            continue
        for file_path in model_paths(item):
            batch.extend((p, str(file_path)) for p in loader.read_file(file_path))

    model_files = registry.add_models(batch)
    logger.info(f"Loaded {len(model_files)} namespaces")

    if validate:
        registry.validate()
    return registry
