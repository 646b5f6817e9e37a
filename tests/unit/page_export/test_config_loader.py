"""Unit tests for page_export.config_loader module."""

import pytest

from confluence_export.content_converter.output_format import OutputFormat
from confluence_export.page_export.config_loader import ConfigLoader
from confluence_export.page_export.errors import ConfigError, FilesystemError
from confluence_export.page_export.models import ExportConfig


def write_config(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestLoad:
    """Test cases for ConfigLoader.load method."""

    def test_values_override_defaults(self, tmp_path):
        """Configured values replace defaults, others stay."""
        config_path = write_config(tmp_path / "config.yaml", (
            "url: https://example.atlassian.net\n"
            "output_dir: ./docs\n"
            "format: adoc\n"
            "children: true\n"
            "max_depth: 2\n"
            "rate_limit: 5\n"
        ))

        config = ConfigLoader.load(config_path)

        assert config.url == "https://example.atlassian.net"
        assert config.output_dir == "./docs"
        assert config.format is OutputFormat.ASCIIDOC
        assert config.children is True
        assert config.max_depth == 2
        assert config.rate_limit == 5
        assert config.timeout == 30
        assert config.download_images is True

    def test_missing_file(self, tmp_path):
        """A missing file is a filesystem error."""
        with pytest.raises(FilesystemError, match="Configuration file not found"):
            ConfigLoader.load(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML is rejected."""
        config_path = write_config(tmp_path / "bad.yaml", "format: [markdown\n")

        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            ConfigLoader.load(config_path)

    def test_empty_file(self, tmp_path):
        """An empty file is rejected."""
        with pytest.raises(ConfigError, match="empty"):
            ConfigLoader.load(write_config(tmp_path / "empty.yaml", ""))

    def test_not_a_dictionary(self, tmp_path):
        """The document must be a mapping."""
        with pytest.raises(ConfigError, match="got list"):
            ConfigLoader.load(write_config(tmp_path / "list.yaml", "- a\n- b\n"))

    def test_unknown_field(self, tmp_path):
        """Unknown keys are reported."""
        config_path = write_config(tmp_path / "config.yaml", "colour: blue\nformat: md\n")

        with pytest.raises(ConfigError, match="Unknown fields: colour"):
            ConfigLoader.load(config_path)

    @pytest.mark.parametrize("line, field", [
        ("children: yes-please", "children"),
        ("output_dir: ''", "output_dir"),
        ("rate_limit: 0", "rate_limit"),
        ("timeout: true", "timeout"),
        ("max_depth: -1", "max_depth"),
        ("format: html", "format"),
        ("url: 42", "url"),
    ])
    def test_invalid_values(self, tmp_path, line, field):
        """Fields are type checked."""
        config_path = write_config(tmp_path / "config.yaml", line + "\n")

        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(config_path)

        assert exc_info.value.config_field == field


class TestLoadOptional:
    """Test cases for ConfigLoader.load_optional method."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Without any file the defaults apply."""
        monkeypatch.chdir(tmp_path)

        assert ConfigLoader.load_optional() == ExportConfig()

    def test_default_file_is_read(self, tmp_path, monkeypatch):
        """The default file in the working directory is used when present."""
        monkeypatch.chdir(tmp_path)
        write_config(tmp_path / ".confluence-export.yaml", "overwrite: true\n")

        assert ConfigLoader.load_optional().overwrite is True

    def test_explicit_missing_file_raises(self, tmp_path):
        """An explicit path must exist."""
        with pytest.raises(FilesystemError):
            ConfigLoader.load_optional(str(tmp_path / "nope.yaml"))


class TestSave:
    """Test cases for ConfigLoader.save method."""

    def test_saved_config_loads_back(self, tmp_path):
        """A saved configuration is read back unchanged."""
        config = ExportConfig(format=OutputFormat.ASCIIDOC, children=True, max_depth=3)
        config_path = str(tmp_path / "nested" / "config.yaml")

        ConfigLoader.save(config_path, config)

        assert ConfigLoader.load(config_path) == config
