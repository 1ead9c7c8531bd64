"""Configuración de flexlink.

Por qué un único módulo:
- Las URLs de Flex, el endpoint de secretos y los timeouts se leen de
  variables `FLEXLINK_*` (pydantic-settings); Core, adaptadores y CLI comparten
  el mismo contrato.
- `doctor setup` persiste los valores en un `.env` por usuario, que se lee
  después del `.env` del proyecto.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "flexlink"

DEFAULT_UI_BASE_URL = "https://sectorpro.flexrentalsolutions.com/f5/ui/?desktop"
DEFAULT_API_BASE_URL = "https://sectorpro.flexrentalsolutions.com/f5/api"


def get_user_config_dir() -> Path:
    """Carpeta de configuración del usuario según la plataforma."""

    home = Path.home()
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or home) / APP_NAME
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    return Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config") / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Fusiona `values` con el `.env` de usuario y lo reescribe ordenado.

    Las claves con valor `None` se ignoran; el resto pisa lo existente.
    """

    target = env_path or get_user_env_file()
    target.parent.mkdir(parents=True, exist_ok=True)

    merged = {k: v for k, v in dotenv_values(target).items() if v is not None} if target.exists() else {}
    merged.update({k: v for k, v in values.items() if v is not None})

    body = [f"# {APP_NAME} user config (.env)"]
    body.extend(f"{key}={merged[key]}" for key in sorted(merged))
    target.write_text("\n".join(body) + "\n", encoding="utf-8")
    return target


class AppSettings(BaseSettings):
    """Variables `FLEXLINK_*` validadas al arrancar.

    Prioridad: argumentos explícitos, entorno y después los `.env` (el de
    usuario pisa al del proyecto).
    """

    model_config = SettingsConfigDict(
        env_prefix="FLEXLINK_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    ui_base_url: str = Field(
        default=DEFAULT_UI_BASE_URL,
        min_length=8,
        description="URL base de la UI de Flex sobre la que se montan los deep-links.",
    )
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        min_length=8,
        description="URL base de la API REST de Flex (lookup de elementos).",
    )

    secret_endpoint_url: str | None = Field(
        default=None,
        description="Endpoint que resuelve secretos (devuelve el token de Flex).",
    )
    secret_name: str = Field(
        default="X_AUTH_TOKEN",
        min_length=1,
        description="Nombre del secreto que contiene el token de Flex.",
    )
    secret_api_key: str | None = Field(
        default=None,
        description="API key del backend que expone el endpoint de secretos.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="flexlink/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones HTTP.",
    )
