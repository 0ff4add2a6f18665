"""Comprehensive tests for configuration system."""

import json

import pytest

from text_resource_xml.shared.config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ReaderConfig,
    WriterConfig,
    XmlStreamConfig,
)


class TestReaderConfig:
    """Test suite for ReaderConfig."""

    def test_default_configuration(self):
        """Test default reader configuration values."""
        config = ReaderConfig()

        assert config.chunk_size == 8192
        assert config.require_string_close_tag is False
        assert config.resolve_entities is False
        assert config.huge_tree is False

    def test_reader_config_validation_failures(self):
        """Test reader configuration validation failures."""
        with pytest.raises(ValueError, match="chunk_size must be > 0"):
            ReaderConfig(chunk_size=0)

        with pytest.raises(ValueError, match="chunk_size must be > 0"):
            ReaderConfig(chunk_size=-1)


class TestWriterConfig:
    """Test suite for WriterConfig."""

    def test_default_configuration(self):
        """Test default writer configuration values."""
        config = WriterConfig()

        assert config.encoding == "UTF-8"
        assert config.auto_formatting is True
        assert config.indent == 4
        assert config.write_declaration is True

    def test_writer_config_validation_failures(self):
        """Test writer configuration validation failures."""
        with pytest.raises(ValueError, match="encoding cannot be empty"):
            WriterConfig(encoding="")

        with pytest.raises(ValueError, match="unknown encoding: no-such-codec"):
            WriterConfig(encoding="no-such-codec")

        with pytest.raises(ValueError, match="indent must be >= 0"):
            WriterConfig(indent=-2)

    def test_other_encodings_accepted(self):
        assert WriterConfig(encoding="UTF-16").encoding == "UTF-16"
        assert WriterConfig(encoding="iso-8859-1", indent=0).indent == 0


class TestGlobalConfig:
    """Test suite for GlobalConfig."""

    def test_default_configuration(self):
        assert GlobalConfig().logging_level == "WARNING"

    def test_invalid_logging_level(self):
        with pytest.raises(ValueError, match="logging_level must be one of"):
            GlobalConfig(logging_level="LOUD")


class TestXmlStreamConfig:
    """Test suite for the aggregate configuration."""

    def test_default_configuration(self):
        config = XmlStreamConfig()

        assert config.reader == ReaderConfig()
        assert config.writer == WriterConfig()
        assert config.global_ == GlobalConfig()
        assert config.name is None

    def test_immutable(self):
        config = XmlStreamConfig()
        with pytest.raises(AttributeError):
            config.name = "changed"  # type: ignore[misc]

    def test_override_component_fields(self):
        """Test overriding nested fields with component__field notation."""
        config = XmlStreamConfig()
        modified = config.override(
            reader__require_string_close_tag=True,
            writer__indent=2,
            name="custom",
        )

        assert modified.reader.require_string_close_tag is True
        assert modified.writer.indent == 2
        assert modified.name == "custom"
        # Original untouched
        assert config.reader.require_string_close_tag is False
        assert config.writer.indent == 4

    def test_override_unknown_component(self):
        with pytest.raises(ConfigValidationError, match="Unknown configuration component") as exc_info:
            XmlStreamConfig().override(parser__chunk_size=1)
        assert exc_info.value.field_name == "parser__chunk_size"
        assert "reader" in exc_info.value.suggestions

    def test_override_unknown_field(self):
        with pytest.raises(ConfigValidationError):
            XmlStreamConfig().override(reader__no_such_field=1)

    def test_override_invalid_value(self):
        with pytest.raises(ConfigValidationError, match="chunk_size must be > 0"):
            XmlStreamConfig().override(reader__chunk_size=0)

    def test_validation_error_is_config_error(self):
        assert issubclass(ConfigValidationError, ConfigError)

    def test_dict_round_trip(self):
        """Test conversion to and from a dictionary."""
        config = XmlStreamConfig().override(writer__encoding="UTF-16", name="round")
        data = config.to_dict()

        assert data["writer"]["encoding"] == "UTF-16"
        assert data["reader"]["chunk_size"] == 8192
        assert data["global_"]["logging_level"] == "WARNING"
        assert data["name"] == "round"
        assert XmlStreamConfig.from_dict(data) == config

    def test_json_round_trip(self):
        config = XmlStreamConfig.strict()
        restored = XmlStreamConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["reader"]["require_string_close_tag"] is True

    def test_from_dict_partial(self):
        """Test that missing keys keep their defaults and unknown keys are ignored."""
        config = XmlStreamConfig.from_dict({"writer": {"indent": 1}, "unused": True})

        assert config.writer.indent == 1
        assert config.writer.encoding == "UTF-8"
        assert config.reader == ReaderConfig()

    def test_from_dict_invalid(self):
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            XmlStreamConfig.from_dict(["not", "a", "dict"])  # type: ignore[arg-type]

        with pytest.raises(ConfigValidationError, match="reader must be a mapping"):
            XmlStreamConfig.from_dict({"reader": 5})

        with pytest.raises(ConfigValidationError, match="indent must be >= 0"):
            XmlStreamConfig.from_dict({"writer": {"indent": -1}})

    def test_from_json_invalid(self):
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            XmlStreamConfig.from_json("{not json")

    def test_presets(self):
        strict = XmlStreamConfig.strict()
        compact = XmlStreamConfig.compact()

        assert strict.name == "strict"
        assert strict.reader.require_string_close_tag is True
        assert compact.name == "compact"
        assert compact.writer.auto_formatting is False
