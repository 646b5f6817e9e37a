"""YAML configuration loading and validation.

An optional configuration file supplies defaults for the export options so
they don't have to be repeated on every invocation. Command-line options
always take precedence.

Configuration file structure (every key is optional):
    url: "https://example.atlassian.net"
    output_dir: "./docs/confluence"
    format: "markdown"            # or "asciidoc" / "adoc" / "md"
    images_dir: "images"
    download_images: true
    download_attachments: false
    children: true
    max_depth: 2
    overwrite: false
    save_raw: false
    preserve_anchors: false
    compact_tables: false
    rate_limit: 10
    timeout: 30
"""

import logging
import os
from dataclasses import asdict
from typing import Any, Dict, Optional

import yaml

from confluence_export.content_converter.output_format import OutputFormat
from .errors import ConfigError, FilesystemError
from .models import ExportConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".confluence-export.yaml"


class ConfigLoader:
    """Handles loading, validation and saving of the export configuration."""

    BOOLEAN_FIELDS = {
        'download_images',
        'download_attachments',
        'children',
        'overwrite',
        'save_raw',
        'preserve_anchors',
        'compact_tables',
    }

    STRING_FIELDS = {'output_dir', 'images_dir'}

    OPTIONAL_STRING_FIELDS = {'url'}

    POSITIVE_INT_FIELDS = {'rate_limit', 'timeout'}

    # Default values for optional fields
    DEFAULTS = asdict(ExportConfig())

    @classmethod
    def load(cls, config_path: str) -> ExportConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            ExportConfig with file values applied over the defaults

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(
                config_path,
                'read',
                'Configuration file not found'
            )
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            raise ConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        logger.info(f"Loaded configuration from {config_path}")
        return cls._parse_config(config_dict)

    @classmethod
    def load_optional(cls, config_path: Optional[str] = None) -> ExportConfig:
        """Load an explicit config file, or the default file when present.

        Without an explicit path, a missing default file yields the built-in
        defaults.

        Raises:
            FilesystemError: If an explicit file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        if config_path:
            return cls.load(config_path)
        if os.path.isfile(DEFAULT_CONFIG_FILE):
            return cls.load(DEFAULT_CONFIG_FILE)
        return ExportConfig()

    @classmethod
    def save(cls, config_path: str, config: ExportConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            FilesystemError: If file cannot be written
        """
        config_dict = asdict(config)
        config_dict['format'] = config.format.value
        if config_dict.get('url') is None:
            del config_dict['url']

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        try:
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(config_path, 'write', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'write', str(e))

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> ExportConfig:
        """Validate a configuration dictionary and build an ExportConfig.

        Raises:
            ConfigError: If a field is unknown or has an invalid value
        """
        unknown = set(config_dict) - set(cls.DEFAULTS)
        if unknown:
            raise ConfigError(f"Unknown fields: {', '.join(sorted(unknown))}")

        values = dict(cls.DEFAULTS)

        for field_name, value in config_dict.items():
            if field_name in cls.BOOLEAN_FIELDS:
                if not isinstance(value, bool):
                    raise ConfigError(
                        f"must be a boolean, got {type(value).__name__}",
                        config_field=field_name
                    )
            elif field_name in cls.STRING_FIELDS:
                if not isinstance(value, str) or not value.strip():
                    raise ConfigError(
                        f"must be a non-empty string, got {value!r}",
                        config_field=field_name
                    )
            elif field_name in cls.OPTIONAL_STRING_FIELDS:
                if value is not None and not isinstance(value, str):
                    raise ConfigError(
                        f"must be a string, got {type(value).__name__}",
                        config_field=field_name
                    )
            elif field_name in cls.POSITIVE_INT_FIELDS:
                if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                    raise ConfigError(
                        f"must be a positive integer, got {value!r}",
                        config_field=field_name
                    )
            elif field_name == 'max_depth':
                if value is not None and (
                    isinstance(value, bool) or not isinstance(value, int) or value < 0
                ):
                    raise ConfigError(
                        f"must be a non-negative integer, got {value!r}",
                        config_field=field_name
                    )
            elif field_name == 'format':
                try:
                    value = OutputFormat.from_name(str(value))
                except ValueError as e:
                    raise ConfigError(str(e), config_field=field_name)

            values[field_name] = value

        return ExportConfig(**values)
