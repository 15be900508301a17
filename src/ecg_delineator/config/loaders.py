"""Configuration file loaders for JSON and TOML formats."""

import json
import tomllib
from pathlib import Path

from .models import Settings


class ConfigLoader:
    """Utility class for loading Settings from configuration files.

    Supports JSON and TOML formats. Keys may use either the snake_case field
    names or their camelCase aliases.

    Examples:
        settings = ConfigLoader.from_json("delineation.json")
        settings = ConfigLoader.from_toml("delineation.toml")
        settings = ConfigLoader.from_file("delineation.toml")
    """

    @staticmethod
    def from_json(path: str | Path) -> Settings:
        """Load settings from a JSON file.

        Raises:
            FileNotFoundError: If file does not exist
            json.JSONDecodeError: If file is not valid JSON
            pydantic.ValidationError: If config doesn't match schema
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return Settings.model_validate(data)

    @staticmethod
    def from_toml(path: str | Path) -> Settings:
        """Load settings from a TOML file.

        Raises:
            FileNotFoundError: If file does not exist
            tomllib.TOMLDecodeError: If file is not valid TOML
            pydantic.ValidationError: If config doesn't match schema
        """
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)
        return Settings.model_validate(data)

    @staticmethod
    def from_file(path: str | Path) -> Settings:
        """Load settings from a file, auto-detecting format by extension.

        Args:
            path: Path to configuration file (.json or .toml)

        Raises:
            ValueError: If file extension is not .json or .toml
        """
        path = Path(path)

        if path.suffix == ".json":
            return ConfigLoader.from_json(path)
        elif path.suffix == ".toml":
            return ConfigLoader.from_toml(path)
        else:
            raise ValueError(
                f"Unsupported config file format: {path.suffix}. "
                "Only .json and .toml are supported."
            )
