"""Configuration loading for hubshift.

Credentials are resolved in three layers, each overriding the previous one:

1. The JSON config file written by ``hubshift configure``
   (``~/.amplience/dc-cli-config.json`` or ``HUBSHIFT_CONFIG_PATH``)
2. Environment variables ``HUBSHIFT_CLIENT_ID``, ``HUBSHIFT_CLIENT_SECRET``
   and ``HUBSHIFT_HUB_ID``
3. Explicit command line options
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from hubshift.core.errors import ConfigurationError

__all__ = [
    "ConfigurationParameters",
    "destination_configuration",
    "load_configuration",
    "resolve_config_path",
    "save_configuration",
]

_ENV_OVERRIDES: dict[str, str] = {
    "client_id": "HUBSHIFT_CLIENT_ID",
    "client_secret": "HUBSHIFT_CLIENT_SECRET",
    "hub_id": "HUBSHIFT_HUB_ID",
}


class ConfigurationParameters(BaseModel):
    """Account credentials and the active hub.

    Attributes:
        client_id: OAuth client ID
        client_secret: OAuth client secret
        hub_id: Hub the commands operate on
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    client_id: str
    client_secret: str
    hub_id: str

    def __repr__(self) -> str:
        return (
            f"ConfigurationParameters(client_id={self.client_id!r}, "
            f"client_secret=***, hub_id={self.hub_id!r})"
        )


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Resolve the on-disk location of the config file."""

    chosen: str | Path | None = path
    env_path = os.getenv("HUBSHIFT_CONFIG_PATH")
    if chosen is None and env_path:
        chosen = env_path
    if chosen is None:
        chosen = Path.home() / ".amplience" / "dc-cli-config.json"
    return Path(chosen).expanduser()


def load_configuration(
    path: str | Path | None = None, **overrides: str | None
) -> ConfigurationParameters:
    """Build configuration from file, environment and explicit overrides.

    Args:
        path: Optional config file path
        **overrides: ``client_id``, ``client_secret`` or ``hub_id`` values;
            ``None`` values are ignored

    Returns:
        Validated ConfigurationParameters

    Raises:
        ConfigurationError: If the file is unreadable or a value is missing
    """
    values: dict[str, Any] = {}

    config_path = resolve_config_path(path)
    if config_path.exists():
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot read config file {config_path}: {exc}"
            ) from exc
        if isinstance(raw, dict):
            for field_name, field in ConfigurationParameters.model_fields.items():
                alias = field.alias or field_name
                if alias in raw:
                    values[field_name] = raw[alias]
                elif field_name in raw:
                    values[field_name] = raw[field_name]

    for field_name, env_var in _ENV_OVERRIDES.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[field_name] = env_value

    for field_name, value in overrides.items():
        if value is not None:
            values[field_name] = value

    try:
        return ConfigurationParameters(**values)
    except ValidationError as exc:
        field_names = {
            field.alias or name: name
            for name, field in ConfigurationParameters.model_fields.items()
        }
        missing = sorted(
            field_names.get(str(error["loc"][0]), str(error["loc"][0]))
            for error in exc.errors()
            if error["loc"]
        )
        raise ConfigurationError(
            "Missing or invalid configuration: "
            + ", ".join(missing)
            + ". Run 'hubshift configure' or set HUBSHIFT_* variables."
        ) from exc


def destination_configuration(
    source: ConfigurationParameters,
    *,
    hub_id: str | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
) -> ConfigurationParameters:
    """Destination account settings, defaulting each value to the source's."""

    return ConfigurationParameters(
        client_id=client_id or source.client_id,
        client_secret=client_secret or source.client_secret,
        hub_id=hub_id or source.hub_id,
    )


def save_configuration(
    params: ConfigurationParameters, path: str | Path | None = None
) -> Path:
    """Write configuration to disk in the camelCase file format."""

    config_path = resolve_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        json.dumps(params.model_dump(by_alias=True), indent=2), encoding="utf-8"
    )
    return config_path
