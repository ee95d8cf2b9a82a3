# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for Config: dot-notation access, env overrides, files, and binding."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from pydantic import BaseModel, Field

from hopfly.config.properties import WebProperties
from hopfly.core.config import Config, config_properties
from hopfly.kernel.exceptions import ConfigurationException


class TestConfigGet:
    def test_get_nested_value(self):
        config = Config({"hopfly": {"web": {"logger-name": "app.web"}}})
        assert config.get("hopfly.web.logger-name") == "app.web"

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "fallback") == "fallback"

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOPFLY_WEB_LOGGER_NAME", "from-env")
        config = Config({"hopfly": {"web": {"logger-name": "from-file"}}})
        assert config.get("hopfly.web.logger-name") == "from-env"

    def test_placeholder_from_config(self):
        config = Config({"app": {"name": "orders", "logger": "${app.name}.web"}})
        assert config.get("app.logger") == "orders.web"

    def test_placeholder_default(self):
        config = Config({"app": {"logger": "${HOPFLY_TEST_UNSET_VAR:fallback}"}})
        assert config.get("app.logger") == "fallback"

    def test_unresolvable_placeholder_raises(self):
        config = Config({"app": {"logger": "${does.not.exist}"}})
        with pytest.raises(ConfigurationException):
            config.get("app.logger")

    def test_circular_placeholder_raises(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ConfigurationException):
            config.get("a")

    def test_get_section(self):
        config = Config({"hopfly": {"logging": {"level": {"root": "DEBUG"}}}})
        assert config.get_section("hopfly.logging.level") == {"root": "DEBUG"}
        assert config.get_section("hopfly.missing") == {}


class TestConfigFiles:
    def test_defaults_are_bundled(self):
        config = Config.defaults()
        assert config.get("hopfly.logging.format") == "console"
        assert config.get("hopfly.web.request-logging") is True

    def test_load_yaml_file(self, tmp_path: Path):
        path = tmp_path / "app.yaml"
        path.write_text("hopfly:\n  web:\n    error-details: true\n")
        config = Config.from_file(path)
        assert config.get("hopfly.web.error-details") is True
        # Defaults are merged underneath
        assert config.get("hopfly.logging.format") == "console"
        assert str(path) in config.loaded_sources

    def test_load_toml_file_without_defaults(self, tmp_path: Path):
        path = tmp_path / "app.toml"
        path.write_text('[hopfly.web]\nlogger-name = "toml.web"\n')
        config = Config.from_file(path, load_defaults=False)
        assert config.get("hopfly.web.logger-name") == "toml.web"
        assert config.get("hopfly.logging.format") is None

    def test_profile_overlay_wins(self, tmp_path: Path):
        (tmp_path / "app.yaml").write_text("hopfly:\n  web:\n    logger-name: base\n")
        (tmp_path / "app-dev.yaml").write_text("hopfly:\n  web:\n    logger-name: dev\n")
        config = Config.from_file(tmp_path / "app.yaml", active_profiles=["dev"])
        assert config.get("hopfly.web.logger-name") == "dev"

    def test_missing_file_keeps_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("hopfly.logging.level.root") == "INFO"


class TestConfigBind:
    def test_bind_web_properties_from_kebab_case(self):
        config = Config({"hopfly": {"web": {"error-details": True, "logger-name": "svc"}}})
        props = config.bind(WebProperties)
        assert props.error_details is True
        assert props.logger_name == "svc"
        assert props.request_logging is True

    def test_bind_coerces_env_strings(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOPFLY_WEB_REQUEST_LOGGING", "false")
        props = Config({}).bind(WebProperties)
        assert props.request_logging is False

    def test_bind_int_coercion(self):
        @config_properties(prefix="hopfly.jobs")
        @dataclass
        class JobProperties:
            timeout: int = 5

        props = Config({"hopfly": {"jobs": {"timeout": "30"}}}).bind(JobProperties)
        assert props.timeout == 30

    def test_bind_pydantic_model(self):
        @config_properties(prefix="hopfly.server")
        class ServerProperties(BaseModel):
            port: int = Field(default=8000, ge=1, le=65535)

        props = Config({"hopfly": {"server": {"port": "9000"}}}).bind(ServerProperties)
        assert props.port == 9000

    def test_bind_pydantic_validation_failure(self):
        @config_properties(prefix="hopfly.server")
        class ServerProperties(BaseModel):
            port: int = Field(default=8000, ge=1, le=65535)

        with pytest.raises(ConfigurationException, match="ServerProperties"):
            Config({"hopfly": {"server": {"port": 70000}}}).bind(ServerProperties)

    def test_bind_undecorated_class_raises(self):
        @dataclass
        class Plain:
            value: str = "x"

        with pytest.raises(ConfigurationException):
            Config({}).bind(Plain)
