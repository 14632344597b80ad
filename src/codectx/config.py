"""Configuration management for codectx workspaces."""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from codectx.errors import DataError

INDEX_SCHEMA_VERSION = "1.0.0"
DEFAULT_PROMPT_VERSION = "2.1"

DEFAULT_INCLUDE_EXTENSIONS = [".ts", ".tsx", ".js", ".jsx", ".go", ".py"]

DEFAULT_EXCLUDE_PATTERNS = [
    "node_modules",
    "vendor",
    "dist",
    "build",
    ".next",
    "coverage",
    ".ctx",
    ".git",
    "*.test.*",
    "*.spec.*",
    "__tests__",
    "test",
]


class ScanConfig(BaseModel):
    """Which files are tracked and how their skeletons are versioned."""
    include_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE_EXTENSIONS))
    exclude_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    skeleton_prompt_version: str = DEFAULT_PROMPT_VERSION
    root_path: str = "."

    @field_validator("include_extensions")
    @classmethod
    def normalize_extensions(cls, value: List[str]) -> List[str]:
        """Lowercase extensions and give each a leading dot; drop blanks."""
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            normalized.append(ext)
        return normalized

    @field_validator("exclude_patterns")
    @classmethod
    def strip_patterns(cls, value: List[str]) -> List[str]:
        return [p.strip() for p in value if p.strip()]


def default_config() -> ScanConfig:
    return ScanConfig()


def load_config(config_path: Path) -> ScanConfig:
    """Load and validate a workspace configuration file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated ScanConfig instance

    Raises:
        DataError: If the file is missing, unreadable or invalid
    """
    if not config_path.exists():
        raise DataError(
            f"Config file not found: {config_path}. Run 'ctx rebuild --confirm' to restore"
        )

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise DataError(f"Cannot read config {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise DataError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DataError(f"Invalid config {config_path}: expected a mapping")

    try:
        return ScanConfig(**data)
    except ValidationError as e:
        raise DataError(f"Invalid config {config_path}: {e}") from e


def save_config(config: ScanConfig, config_path: Path):
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save YAML file
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        yaml.dump(config.model_dump(mode='json'), f, default_flow_style=False)
