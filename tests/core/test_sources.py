"""Tests for configuration sources."""

from __future__ import annotations

import json

import pytest

from arborlog.core.sources import load_configuration
from arborlog.errors import ConfigurationError

XML_CONFIG = """\
<configuration xmlns="http://logging.apache.org/log4php/" threshold="ALL">
    <appender name="default" class="echo" threshold="info">
        <layout class="pattern">
            <param name="conversionPattern" value="%d %p %m%n" />
        </layout>
        <filter class="stringmatch">
            <param name="stringToMatch" value="foo" />
            <param name="acceptOnMatch" value="false" />
        </filter>
        <filter class="denyall" />
    </appender>
    <appender name="file" class="file">
        <param name="file" value="app.log" />
        <param name="append" value="false" />
    </appender>
    <logger name="myLogger" additivity="false">
        <level value="warn" />
        <appender_ref ref="default" />
        <appender-ref ref="file" />
    </logger>
    <root>
        <level value="DEBUG" />
        <appender_ref ref="default" />
    </root>
    <renderer renderedClass="Fruit" renderingClass="default" />
</configuration>
"""

TOML_CONFIG = """\
threshold = "warn"

[rootLogger]
level = "info"
appenders = ["default"]

[appenders.default]
class = "echo"

[appenders.default.layout]
class = "pattern"
params = { conversionPattern = "%m%n" }

[loggers."app.db"]
level = "debug"
additivity = false
"""


class TestMappings:
    def test_mapping_passes_through(self):
        config = {"rootLogger": {"level": "info"}}
        assert load_configuration(config) == config

    def test_empty_mapping_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid configuration: empty configuration."):
            load_configuration({})

    def test_unsupported_type(self):
        with pytest.raises(ConfigurationError):
            load_configuration(12345)


class TestFiles:
    def test_missing_file(self):
        with pytest.raises(ConfigurationError) as info:
            load_configuration("you/will/never/find/me.conf")
        assert info.value.message == "File [you/will/never/find/me.conf] does not exist."
        assert info.value.source == "you/will/never/find/me.conf"

    def test_unsupported_extension(self, write_config):
        path = write_config("config.yml", "rootLogger: {}\n")
        with pytest.raises(ConfigurationError, match="Unsupported configuration file extension: yml"):
            load_configuration(path)

    def test_toml(self, write_config):
        config = load_configuration(write_config("log.toml", TOML_CONFIG))
        assert config["threshold"] == "warn"
        assert config["rootLogger"] == {"level": "info", "appenders": ["default"]}
        assert config["appenders"]["default"]["layout"]["params"] == {"conversionPattern": "%m%n"}
        assert config["loggers"]["app.db"] == {"level": "debug", "additivity": False}

    def test_json(self, write_config):
        tree = {"rootLogger": {"level": "error", "appenders": ["a"]}, "appenders": {"a": {"class": "null"}}}
        assert load_configuration(write_config("log.json", json.dumps(tree))) == tree

    def test_json_not_a_mapping(self, write_config):
        with pytest.raises(ConfigurationError, match="not a mapping"):
            load_configuration(write_config("log.json", "[1, 2]"))

    def test_empty_toml(self, write_config):
        with pytest.raises(ConfigurationError, match="empty configuration"):
            load_configuration(write_config("log.toml", ""))

    @pytest.mark.parametrize(
        "name,content",
        [("bad.json", "{not json"), ("bad.toml", "= nope"), ("bad.xml", "<configuration><appender>")],
    )
    def test_parse_errors(self, write_config, name, content):
        with pytest.raises(ConfigurationError, match="Error loading configuration file"):
            load_configuration(write_config(name, content))


class TestXml:
    def test_structure(self, write_config):
        config = load_configuration(write_config("log.xml", XML_CONFIG))

        assert config["threshold"] == "ALL"
        assert config["rootLogger"] == {"level": "DEBUG", "appenders": ["default"]}
        assert config["loggers"]["myLogger"] == {
            "level": "warn",
            "appenders": ["default", "file"],
            "additivity": "false",
        }
        assert config["appenders"]["default"] == {
            "class": "echo",
            "threshold": "info",
            "layout": {"class": "pattern", "params": {"conversionPattern": "%d %p %m%n"}},
            "filters": [
                {"class": "stringmatch", "params": {"stringToMatch": "foo", "acceptOnMatch": "false"}},
                {"class": "denyall"},
            ],
        }
        assert config["appenders"]["file"] == {
            "class": "file",
            "params": {"file": "app.log", "append": "false"},
        }
        assert config["renderers"] == [{"renderedClass": "Fruit", "renderingClass": "default"}]

    def test_duplicate_logger(self, write_config, collector):
        content = (
            "<configuration>"
            "<logger name='foo'><level value='info'/></logger>"
            "<logger name='foo'><level value='warn'/></logger>"
            "</configuration>"
        )
        config = load_configuration(write_config("dup.xml", content), collector)
        assert collector.messages == ["Duplicate logger definition [foo]. Overwriting."]
        assert config["loggers"]["foo"] == {"level": "warn"}

    def test_empty_document(self, write_config):
        with pytest.raises(ConfigurationError, match="empty configuration"):
            load_configuration(write_config("empty.xml", "<configuration />"))
