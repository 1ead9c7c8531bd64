"""Registros estáticos de identificadores de Flex.

Por qué tablas estáticas:
- Flex asigna un id estable por tipo de plantilla (definitionId). Esos ids son
  la verdad de base para saber qué esquema de URL abre cada elemento.
- Cuando solo conocemos una categoría gruesa (domainId/schemaId, p.ej. de un
  listado de árbol) usamos un segundo registro, insensible a mayúsculas y
  separadores.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Callable

from core.domain.intents import SchemaIntent


class FlexDefinitionIds:
    """Ids de plantilla (definitionId) conocidos en Flex."""

    PRESUPUESTO = "9bfb850c-b117-11df-b8d5-00e08175e43e"
    PRESUPUESTO_DRY_HIRE = "fb8b82c9-41d6-4b8f-99b6-4ab8276d06aa"
    HOJA_GASTOS = "566d32e0-1a1e-11e0-a472-00e08175e43e"
    ORDEN_COMPRA = "ff1a5a50-3f1d-11df-b8d5-00e08175e43e"
    ORDEN_SUBALQUILER = "7e2ae0d0-b0bc-11df-b8d5-00e08175e43e"
    ORDEN_TRABAJO = "f6e70edc-f42d-11e0-a8de-00e08175e43e"
    CREW_CALL = "253878cc-af31-11df-b8d5-00e08175e43e"
    PULL_SHEET = "a220432c-af33-11df-b8d5-00e08175e43e"
    MAIN_FOLDER = "e281e71c-2c42-49cd-9834-0eb68135e9ac"
    SUB_FOLDER = "358f312c-b051-11df-b8d5-00e08175e43e"


FINANCIAL_DOCUMENT_IDS: frozenset[str] = frozenset(
    {
        FlexDefinitionIds.PRESUPUESTO,
        FlexDefinitionIds.PRESUPUESTO_DRY_HIRE,
        FlexDefinitionIds.HOJA_GASTOS,
        FlexDefinitionIds.ORDEN_COMPRA,
        FlexDefinitionIds.ORDEN_SUBALQUILER,
        FlexDefinitionIds.ORDEN_TRABAJO,
    }
)
# La hoja de gastos también es documento financiero; como el registro
# financiero se consulta antes, por definitionId abre como fin-doc.
EXPENSE_SHEET_IDS: frozenset[str] = frozenset({FlexDefinitionIds.HOJA_GASTOS})
CONTACT_LIST_IDS: frozenset[str] = frozenset({FlexDefinitionIds.CREW_CALL})
EQUIPMENT_LIST_IDS: frozenset[str] = frozenset({FlexDefinitionIds.PULL_SHEET})
SIMPLE_ELEMENT_IDS: frozenset[str] = frozenset(
    {FlexDefinitionIds.MAIN_FOLDER, FlexDefinitionIds.SUB_FOLDER}
)

# Orden explícito de consulta por definitionId.
DEFINITION_REGISTRIES: tuple[tuple[SchemaIntent, frozenset[str]], ...] = (
    (SchemaIntent.FIN_DOC, FINANCIAL_DOCUMENT_IDS),
    (SchemaIntent.EXPENSE_SHEET, EXPENSE_SHEET_IDS),
    (SchemaIntent.CONTACT_LIST, CONTACT_LIST_IDS),
    (SchemaIntent.EQUIPMENT_LIST, EQUIPMENT_LIST_IDS),
    (SchemaIntent.SIMPLE_ELEMENT, SIMPLE_ELEMENT_IDS),
)

_CATEGORY_ALIASES: dict[str, SchemaIntent] = {
    "simple-element": SchemaIntent.SIMPLE_ELEMENT,
    "folder": SchemaIntent.SIMPLE_ELEMENT,
    "dryhire-folder": SchemaIntent.SIMPLE_ELEMENT,
    "tourdate-folder": SchemaIntent.SIMPLE_ELEMENT,
    "department-folder": SchemaIntent.SIMPLE_ELEMENT,
    "fin-doc": SchemaIntent.FIN_DOC,
    "financial-document": SchemaIntent.FIN_DOC,
    "financial-doc": SchemaIntent.FIN_DOC,
    "presupuesto": SchemaIntent.FIN_DOC,
    "expense-sheet": SchemaIntent.EXPENSE_SHEET,
    "expense": SchemaIntent.EXPENSE_SHEET,
    "contact-list": SchemaIntent.CONTACT_LIST,
    "crew-call": SchemaIntent.CONTACT_LIST,
    "equipment-list": SchemaIntent.EQUIPMENT_LIST,
    "equipment": SchemaIntent.EQUIPMENT_LIST,
    "remote-file-list": SchemaIntent.REMOTE_FILE_LIST,
    "remote-files": SchemaIntent.REMOTE_FILE_LIST,
}

CATEGORY_REGISTRY = MappingProxyType(_CATEGORY_ALIASES)

# Valor genérico de "elemento de proyecto simple": señal débil.
WEAK_SIMPLE_DOMAIN = "simple-project-element"

# Allow-lists de domainId, en el orden en que se consultan.
DOMAIN_ALLOW_LISTS: tuple[tuple[SchemaIntent, frozenset[str]], ...] = (
    (SchemaIntent.CONTACT_LIST, frozenset({"contact-list", "crew-call", "contact-list-element"})),
    (SchemaIntent.EXPENSE_SHEET, frozenset({"expense-sheet", "expense", "expense-list", "expense-report"})),
    (SchemaIntent.REMOTE_FILE_LIST, frozenset({"remote-file-list", "remote-files", "file-list", "file-library"})),
    (SchemaIntent.EQUIPMENT_LIST, frozenset({"equipment-list", "equipment", "equipment-schedule", "equipment-log"})),
    (
        SchemaIntent.FIN_DOC,
        frozenset({"fin-doc", "financial-document", "financial-doc", "presupuesto", "dryhire-fin-doc"}),
    ),
    (
        SchemaIntent.SIMPLE_ELEMENT,
        frozenset({"project-folder", "department-folder", "job-folder", "tour-folder", "folder", "simple-element"}),
    ),
)

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS_RE = re.compile(r"[\s_\-]+")


def normalize_category(value: str | None) -> str | None:
    """Normaliza camelCase/snake_case/espacios a lower-kebab-case.

    `"finDoc"`, `"FIN_DOC"` y `"fin doc"` producen `"fin-doc"`. Texto vacío o
    solo espacios devuelve `None`.
    """

    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped:
        return None
    kebab = _CAMEL_BOUNDARY_RE.sub(r"\1-\2", stripped)
    kebab = _SEPARATORS_RE.sub("-", kebab).strip("-").lower()
    return kebab or None


def normalize_definition_id(value: str | None) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip().lower()
    return stripped or None


def lookup_category(value: str | None) -> SchemaIntent | None:
    """Busca una categoría gruesa (schemaId/viewHint) en el registro."""

    key = normalize_category(value)
    if key is None:
        return None
    return CATEGORY_REGISTRY.get(key)


def lookup_definition(definition_id: str | None) -> SchemaIntent | None:
    key = normalize_definition_id(definition_id)
    if key is None:
        return None
    for intent, registry in DEFINITION_REGISTRIES:
        if key in registry:
            return intent
    return None


def lookup_domain(domain_id: str | None) -> SchemaIntent | None:
    """Allow-list por domainId. No incluye el dominio simple débil."""

    key = normalize_category(domain_id)
    if key is None:
        return None
    for intent, allowed in DOMAIN_ALLOW_LISTS:
        if key in allowed:
            return intent
    return None


def is_financial_document(definition_id: str | None) -> bool:
    return normalize_definition_id(definition_id) in FINANCIAL_DOCUMENT_IDS


def is_expense_sheet(definition_id: str | None) -> bool:
    return normalize_definition_id(definition_id) in EXPENSE_SHEET_IDS


def is_contact_list(definition_id: str | None) -> bool:
    return normalize_definition_id(definition_id) in CONTACT_LIST_IDS


def is_equipment_list(definition_id: str | None) -> bool:
    return normalize_definition_id(definition_id) in EQUIPMENT_LIST_IDS


def is_simple_folder(definition_id: str | None) -> bool:
    return normalize_definition_id(definition_id) in SIMPLE_ELEMENT_IDS


def is_simple_project_element(domain_id: str | None) -> bool:
    return normalize_category(domain_id) == WEAK_SIMPLE_DOMAIN


# Filtros por tipo de documento para listados (CLI `--definition-type`).
DEFINITION_TYPE_FILTERS: MappingProxyType[str, Callable[[str | None], bool]] = MappingProxyType(
    {
        "financial": is_financial_document,
        "expense": is_expense_sheet,
        "crew-call": is_contact_list,
        "pull-sheet": is_equipment_list,
        "folder": is_simple_folder,
    }
)
