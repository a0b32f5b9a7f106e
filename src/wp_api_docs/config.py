"""Configuration loading for the generator."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from wp_api_docs.errors import CollaboratorUnavailable

DEFAULT_BASE_URL = "http://localhost"
BASE_URL_ENV = "WP_API_DOCS_BASE_URL"


class GeneratorConfig(BaseModel):
    """Settings shared by the CLI and the converter."""

    base_url: str = DEFAULT_BASE_URL  # used when the collection has no baseUrl variable
    api_version: str = "1.0.0"  # info.version of generated OpenAPI documents
    indent: int = 4


def load_config(config_path: Path | None = None) -> GeneratorConfig:
    """Load configuration from an optional YAML file, then apply environment overrides."""
    data: dict = {}
    if config_path is not None:
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise CollaboratorUnavailable(f"Cannot read config {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise CollaboratorUnavailable(f"Config {config_path} must be a mapping")

    env_base_url = os.getenv(BASE_URL_ENV)
    if env_base_url:
        data["base_url"] = env_base_url

    try:
        return GeneratorConfig(**data)
    except ValidationError as e:
        raise CollaboratorUnavailable(f"Invalid config {config_path}: {e}") from e
