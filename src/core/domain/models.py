"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación y documentación autocontenida (Field) sin acoplar el Core
  a librerías de I/O.
- Normaliza pistas heterogéneas (pantallas, árbol de Flex, API) en una sola
  estructura.

Nota:
- `ElementReference.element_id` no se valida aquí: cada punto de entrada
  (builder, resolvers, navegadores) aplica su propio manejo de entrada
  inválida antes de cualquier otra cosa.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.errors import InvalidElementIdError
from core.domain.intents import FolderType, JobType, MatchReason, SchemaIntent


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def require_element_id(value: object) -> str:
    """Devuelve el id recortado o lanza `InvalidElementIdError`."""

    if isinstance(value, ElementReference):
        value = value.element_id
    if not isinstance(value, str) or not value.strip():
        raise InvalidElementIdError(value)
    return value.strip()


class ElementReference(BaseModel):
    """Referencia a un elemento de Flex más la evidencia local disponible."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    element_id: str = Field(
        ...,
        alias="elementId",
        description="Id opaco del elemento en Flex (único campo obligatorio).",
    )
    domain_id: str | None = Field(
        default=None,
        alias="domainId",
        description="Categoría gruesa (p.ej. devuelta por un listado de árbol).",
    )
    definition_id: str | None = Field(
        default=None,
        alias="definitionId",
        description="Id de plantilla estable asignado por Flex.",
    )
    schema_id: str | None = Field(
        default=None,
        alias="schemaId",
        description="Identificador libre de esquema; se normaliza antes de buscarlo.",
    )
    view_hint: str | None = Field(
        default=None,
        alias="viewHint",
        description="Intent explícito o el centinela 'auto'.",
    )
    document_number: str | None = Field(default=None, alias="documentNumber")
    display_name: str | None = Field(default=None, alias="displayName")

    @field_validator(
        "domain_id",
        "definition_id",
        "schema_id",
        "view_hint",
        "document_number",
        "display_name",
        mode="before",
    )
    @classmethod
    def _strip_optional(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @classmethod
    def coerce(cls, value: "ElementReference | str | None") -> "ElementReference":
        """Acepta un id suelto o una referencia ya construida.

        Lanza `InvalidElementIdError` si no hay nada utilizable como id.
        """

        if isinstance(value, ElementReference):
            return value
        if isinstance(value, str):
            return cls(element_id=value)
        raise InvalidElementIdError(value)

    @classmethod
    def from_node(cls, node: Any) -> "ElementReference":
        """Construye la referencia desde un nodo del árbol de Flex.

        El id primario se elige entre `node_id`, `element_id` y
        `metadata["elementId"]`; las pistas que falten se toman de `metadata`.
        """

        metadata = node.metadata if isinstance(getattr(node, "metadata", None), dict) else {}

        def pick(*candidates: Any) -> str | None:
            for candidate in candidates:
                value = _blank_to_none(candidate)
                if isinstance(value, str):
                    return value
            return None

        element_id = pick(node.node_id, node.element_id, metadata.get("elementId"))
        if element_id is None:
            raise InvalidElementIdError(None)

        return cls(
            element_id=element_id,
            domain_id=pick(node.domain_id, metadata.get("domainId")),
            definition_id=pick(node.definition_id, metadata.get("definitionId")),
            schema_id=pick(node.schema_id, metadata.get("schemaId")),
            view_hint=pick(node.view_hint, metadata.get("viewHint")),
            document_number=pick(node.document_number),
            display_name=pick(node.display_name),
        )


class ResolutionContext(BaseModel):
    """Contexto que aporta la pantalla que pide el enlace. Inmutable."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    job_type: JobType | None = Field(default=None, alias="jobType")
    folder_type: FolderType | None = Field(default=None, alias="folderType")
    fallback_definition_id: str | None = Field(
        default=None,
        alias="fallbackDefinitionId",
        description="definitionId a usar si la referencia no trae uno.",
    )
    fallback_domain_id: str | None = Field(
        default=None,
        alias="fallbackDomainId",
        description="domainId a usar si la referencia no trae uno.",
    )
    view_hint: str | None = Field(
        default=None,
        alias="viewHint",
        description="Intent forzado por la pantalla, o 'auto'.",
    )

    @field_validator("fallback_definition_id", "fallback_domain_id", "view_hint", mode="before")
    @classmethod
    def _strip_optional(cls, value: Any) -> Any:
        return _blank_to_none(value)


class SchemaMetadata(BaseModel):
    """Campos de clasificación devueltos por el lookup de elementos de Flex."""

    domain_id: str | None = None
    definition_id: str | None = None
    view_hint: str | None = None
    schema_id: str | None = None
    document_number: str | None = None
    display_name: str | None = None
    missing_fields: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Campos que no venían o no se pudieron decodificar.",
    )


class LinkHints(BaseModel):
    """Evidencia combinada que consume el clasificador."""

    model_config = ConfigDict(frozen=True)

    view_hint: str | None = None
    schema_id: str | None = None
    definition_id: str | None = None
    domain_id: str | None = None
    job_type: JobType | None = None
    folder_type: FolderType | None = None

    @classmethod
    def from_sources(
        cls,
        ref: ElementReference | None = None,
        context: ResolutionContext | None = None,
    ) -> "LinkHints":
        """Combina referencia y contexto; la referencia gana sobre los fallbacks."""

        context = context or ResolutionContext()
        return cls(
            view_hint=(ref.view_hint if ref else None) or context.view_hint,
            schema_id=ref.schema_id if ref else None,
            definition_id=(ref.definition_id if ref else None) or context.fallback_definition_id,
            domain_id=(ref.domain_id if ref else None) or context.fallback_domain_id,
            job_type=context.job_type,
            folder_type=context.folder_type,
        )

    def merged_with(self, metadata: SchemaMetadata | None) -> "LinkHints":
        """Completa solo los campos desconocidos; nunca pisa pistas locales."""

        if metadata is None:
            return self
        return self.model_copy(
            update={
                "view_hint": self.view_hint or metadata.view_hint,
                "schema_id": self.schema_id or metadata.schema_id,
                "definition_id": self.definition_id or metadata.definition_id,
                "domain_id": self.domain_id or metadata.domain_id,
            }
        )


@dataclass(frozen=True)
class Classification:
    intent: SchemaIntent | None
    reason: MatchReason

    @property
    def resolved(self) -> bool:
        return self.intent is not None

    @property
    def is_strong(self) -> bool:
        return self.intent is not None and self.reason.is_strong
