"""
Translator configuration.

Settings are read from the ``[tool.swiftkotlin]`` table of a TOML file, either
given explicitly or found by searching upwards for ``pyproject.toml``, and can be
overridden by keyword arguments (typically coming from the CLI).
"""

import enum
import tomllib
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from swiftkotlin.errors import ConfigError

TOOL_SECTION = "swiftkotlin"


class UnsupportedPolicy(str, enum.Enum):
    """What to do with Swift constructs that have no Kotlin counterpart."""

    PASS_THROUGH = "pass-through"
    REWRITE = "rewrite"
    REJECT = "reject"


class TranslatorConfig(BaseModel):
    """
    Immutable configuration shared by the formatter and the translator façade.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    indent_width: int = Field(2, ge=1, description="Spaces per indentation level.")
    unsupported_constructs: UnsupportedPolicy = Field(
        UnsupportedPolicy.PASS_THROUGH,
        description="Handling of forced unwraps, optional chaining, try operators, key paths and selectors.",
    )
    dictionary_literal_style: Literal["constructor", "bracket"] = Field(
        "constructor",
        description="'constructor' renders mapOf(k to v); 'bracket' keeps [k: v] for non-empty literals.",
    )

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        search_path: Optional[Path] = None,
        **overrides: Any,
    ) -> "TranslatorConfig":
        """
        Builds a configuration from TOML settings and explicit overrides.

        Args:
            path (Optional[Path]): A TOML file holding a ``[tool.swiftkotlin]`` table.
            search_path (Optional[Path]): Directory to start searching for ``pyproject.toml``
                when no explicit path is given. Defaults to the working directory.
            **overrides: Field values that take precedence over the file; None values are ignored.

        Returns:
            TranslatorConfig: The resolved configuration.

        Raises:
            ConfigError: If the file cannot be read or the values are invalid.
        """
        if path is not None:
            settings = _read_tool_section(Path(path))
        else:
            settings, _ = _find_tool_section(search_path or Path.cwd())

        settings = {key.replace("-", "_"): value for key, value in settings.items()}
        settings.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls.model_validate(settings)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def _read_tool_section(toml_path: Path) -> Dict[str, Any]:
    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {toml_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Malformed configuration file {toml_path}: {e}") from e
    return data.get("tool", {}).get(TOOL_SECTION, {})


def _find_tool_section(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
    """
    Searches `start_path` and its parents for the nearest 'pyproject.toml'.

    Returns:
        Tuple[Dict, Optional[Path]]: The tool section (empty when absent) and the file it came from.
    """
    current = start_path.resolve()
    for parent in [current, *current.parents]:
        toml_path = parent / "pyproject.toml"
        if toml_path.is_file():
            return _read_tool_section(toml_path), toml_path
    return {}, None
