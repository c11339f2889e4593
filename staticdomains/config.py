"""Rewrite configuration for staticdomains.

Holds the extension table (which file types are moved to static domains and
which subdomain each one gets) and the number of numbered static domains
used for round-robin assignment. Configuration can be built in code or
loaded from a YAML file.

Key components:
- RewriteConfig: Mutable, shareable configuration with chainable mutators.
- InvalidConfigurationError: Raised for unusable configuration values.
- load_config: Builds a RewriteConfig from a YAML file.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import yaml

DEFAULT_FILE_TYPES: dict[str, str | None] = {
    "jpg": "media",
    "gif": "media",
    "png": "media",
    "ico": "media",
    "flv": "media",
    "css": "css",
    "js": "js",
    "swf": "media",
}

DEFAULT_CONFIG = {
    "max_static_domains": 4,
    "file_types": DEFAULT_FILE_TYPES,
}

CONFIG_FILENAME = "staticdomains.yaml"


class InvalidConfigurationError(ValueError):
    """Error raised when a configuration value cannot be used.

    Attributes:
        key: Name of the offending setting.
        value: The rejected value.
    """

    def __init__(self, key: str, value: Any, message: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid {key} {value!r}: {message}")


def normalize_extension(extension: str) -> str:
    """Return the lookup key for a file extension.

    Keys are lowercased and URL-decoded, so ``JPG`` and ``%6Apg`` both
    become ``jpg``.
    """
    return unquote(str(extension)).lower()


def _as_list(file_types: str | Iterable[str]) -> list[str]:
    if isinstance(file_types, str):
        return [file_types]
    return list(file_types)


def _validate_max(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidConfigurationError(
            "max_static_domains", value, "expected a positive integer"
        )
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(
            "max_static_domains", value, "expected a positive integer"
        ) from None
    if number <= 0:
        raise InvalidConfigurationError(
            "max_static_domains", value, "must be at least 1"
        )
    return number


class RewriteConfig:
    """Extension table and static domain count.

    A file type maps either to a fixed subdomain label (``"media"`` sends
    ``logo.png`` to ``media.example.com``) or to ``None``, which spreads
    matching files over the numbered domains ``1`` to ``max_static_domains``.

    The configuration holds no per-document state and can be shared between
    sessions. Mutators return the instance so calls can be chained.

    Attributes:
        max_static_domains: Number of numbered static domains.
    """

    def __init__(
        self,
        file_types: Mapping[str, str | None] | None = None,
        max_static_domains: int = 4,
    ):
        """Initialize the configuration.

        Args:
            file_types: Extension table; defaults to DEFAULT_FILE_TYPES.
            max_static_domains: Number of numbered static domains.

        Raises:
            InvalidConfigurationError: If max_static_domains is not a positive integer.
        """
        self._file_types: dict[str, str | None] = {}
        self.max_static_domains = _validate_max(max_static_domains)
        self.set_file_types(DEFAULT_FILE_TYPES if file_types is None else file_types)

    @property
    def file_types(self) -> dict[str, str | None]:
        """Copy of the extension table."""
        return dict(self._file_types)

    @property
    def extensions(self) -> list[str]:
        """Extensions that are rewritten."""
        return list(self._file_types)

    def add_file_type(
        self, file_types: str | Iterable[str], domain: str | None = None
    ) -> RewriteConfig:
        """Add one or more file types to rewrite.

        Args:
            file_types: A single extension or an iterable of extensions.
            domain: Subdomain label for these types, or None for round-robin.

        Returns:
            This configuration.

        Examples:
            >>> config = RewriteConfig().add_file_type(["woff", "woff2"], "fonts")
            >>> config.domain_for("WOFF")
            'fonts'
        """
        for file_type in _as_list(file_types):
            self._file_types[normalize_extension(file_type)] = domain or None
        return self

    def remove_file_type(self, file_types: str | Iterable[str]) -> RewriteConfig:
        """Stop rewriting one or more file types.

        Unknown extensions are ignored.
        """
        for file_type in _as_list(file_types):
            self._file_types.pop(normalize_extension(file_type), None)
        return self

    def set_file_types(self, file_types: Mapping[str, str | None]) -> RewriteConfig:
        """Replace the whole extension table."""
        self._file_types = {}
        for file_type, domain in file_types.items():
            self.add_file_type(file_type, domain)
        return self

    def set_max_static_domains(self, value: int) -> RewriteConfig:
        """Set the number of numbered static domains.

        Raises:
            InvalidConfigurationError: If value is not a positive integer.
        """
        self.max_static_domains = _validate_max(value)
        return self

    def domain_for(self, extension: str) -> str | None:
        """Return the fixed label for an extension, or None for round-robin."""
        return self._file_types.get(normalize_extension(extension))

    def __contains__(self, extension: object) -> bool:
        return (
            isinstance(extension, str)
            and normalize_extension(extension) in self._file_types
        )

    def __repr__(self) -> str:
        return (
            f"RewriteConfig(file_types={self._file_types!r}, "
            f"max_static_domains={self.max_static_domains})"
        )


def _mapping_section(loaded: dict[str, Any], key: str) -> dict[str, Any]:
    section = loaded.get(key) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(key, section, "expected a mapping")
    return section


def _list_section(loaded: dict[str, Any], key: str) -> list[str]:
    section = loaded.get(key) or []
    if isinstance(section, str):
        return [section]
    if not isinstance(section, list):
        raise InvalidConfigurationError(key, section, "expected a list")
    return [str(item) for item in section]


def load_config(config_path: Path) -> RewriteConfig:
    """Load rewrite configuration from a YAML file.

    Recognized keys are ``max_static_domains``, ``file_types`` (replaces the
    default table), ``add_file_types`` (merged into the table) and
    ``remove_file_types``. A missing file yields the defaults.

    Args:
        config_path: Path to the YAML file.

    Returns:
        The loaded configuration.

    Raises:
        InvalidConfigurationError: If the file content has the wrong shape.
    """
    settings: dict[str, Any] = dict(DEFAULT_CONFIG)
    loaded: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                payload = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise InvalidConfigurationError(
                    "config", str(config_path), f"not valid YAML ({exc})"
                ) from exc
        if not isinstance(payload, dict):
            raise InvalidConfigurationError(
                "config", str(config_path), "expected a mapping at the top level"
            )
        loaded = payload
        if "max_static_domains" in loaded:
            settings["max_static_domains"] = loaded["max_static_domains"]
        if "file_types" in loaded:
            settings["file_types"] = _mapping_section(loaded, "file_types")

    config = RewriteConfig(
        file_types=settings["file_types"],
        max_static_domains=settings["max_static_domains"],
    )
    for file_type, domain in _mapping_section(loaded, "add_file_types").items():
        config.add_file_type(file_type, domain)
    config.remove_file_type(_list_section(loaded, "remove_file_types"))
    return config
