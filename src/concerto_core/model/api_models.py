"""
Pydantic schemas for parsed-model documents.

A model document is the serialized output of the external model parser:
one namespace with its imports and declarations, stored as YAML or JSON.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..namespace.parser import parse_namespace
from .types import Declaration, DeclarationKind, Field as ModelField, Import, ParsedModel


class FieldDocument(BaseModel):
    """A declared field."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {"name": "email", "type": "String"},
        },
    )

    name: str = Field(..., description="Field name")
    type: str = Field("String", description="Primitive or declaration type name")
    array: bool = Field(False, description="Field holds a list of values")
    optional: bool = Field(False, description="Field may be absent")

    def to_field(self) -> ModelField:
        return ModelField(
            name=self.name,
            type_name=self.type,
            is_array=self.array,
            is_optional=self.optional,
        )


class DeclarationDocument(BaseModel):
    """A field-bearing declaration."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Person",
                "kind": "participant",
                "identified_by": "email",
                "fields": [{"name": "email", "type": "String"}],
            }
        },
    )

    name: str = Field(..., description="Declaration name")
    kind: DeclarationKind = Field(DeclarationKind.CONCEPT, description="Declaration kind")
    abstract: bool = Field(False, description="Cannot be instantiated")
    extends: str | None = Field(None, description="Supertype, short or fully-qualified")
    identified_by: str | None = Field(None, description="Identifying field name")
    field_list: list[FieldDocument] = Field(default_factory=list, alias="fields")

    def to_declaration(self) -> Declaration:
        return Declaration(
            name=self.name,
            kind=self.kind,
            fields=tuple(f.to_field() for f in self.field_list),
            identified_by=self.identified_by,
            super_type=self.extends,
            is_abstract=self.abstract,
        )


class ModelDocument(BaseModel):
    """One parsed model file."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "namespace": "employee@2.0.0",
                "imports": ["{Person} from person@1.0.0"],
                "declarations": [
                    {
                        "name": "Employee",
                        "extends": "Person",
                        "fields": [{"name": "department", "type": "String"}],
                    }
                ],
            }
        },
    )

    namespace: str = Field(..., description="Namespace, optionally name@semver")
    imports: list[str] = Field(default_factory=list, description="Import statements")
    declarations: list[DeclarationDocument] = Field(default_factory=list)

    def to_parsed_model(self) -> ParsedModel:
        """
        Convert to a ParsedModel.

        Raises:
            ModelParseError: The namespace or an import statement is malformed
        """
        key = parse_namespace(self.namespace)
        imports: list[Import] = []
        for statement in self.imports:
            imports.extend(Import.parse(statement))
        return ParsedModel(
            namespace_name=key.name,
            namespace_version=key.version,
            imports=tuple(imports),
            declarations=tuple(d.to_declaration() for d in self.declarations),
        )
