import json

import pytest

from yolo.server_config import ConfigError, ServerConfig


def write_config(tmp_path, name, text):
    config_dir = tmp_path / "config"
    config_dir.mkdir(exist_ok=True)
    (config_dir / name).write_text(text, encoding="utf-8")


@pytest.fixture
def project(tmp_path):
    write_config(tmp_path, "base.yaml", "host: 127.0.0.1\nport: 8000\n")
    write_config(tmp_path, "local.yaml", "base_url: http://localhost\n")
    write_config(tmp_path, "production.yaml", "host: 0.0.0.0\nbase_url: http://prod\n")
    return tmp_path


def test_reads_base_and_local_by_default(project):
    config = ServerConfig.read(project, environ={})
    assert config == ServerConfig(host="127.0.0.1", port=8000, base_url="http://localhost")


def test_server_env_selects_environment_file(project):
    config = ServerConfig.read(project, environ={"SERVER_ENV": "PRODUCTION"})
    assert config.host == "0.0.0.0"
    assert config.base_url == "http://prod"
    assert config.port == 8000


def test_environment_variables_override_files(project):
    config = ServerConfig.read(project, environ={"SERVER__PORT": "9000", "server__host": "example.com"})
    assert config.port == 9000
    assert config.host == "example.com"


def test_port_given_as_string_in_file(tmp_path):
    write_config(tmp_path, "base.yaml", "host: h\nport: '8081'\n")
    write_config(tmp_path, "local.yaml", "base_url: u\n")
    assert ServerConfig.read(tmp_path, environ={}).port == 8081


def test_json_and_toml_files_are_supported(tmp_path):
    write_config(tmp_path, "base.toml", 'host = "h"\nport = 7000\n')
    write_config(tmp_path, "local.json", json.dumps({"base_url": "u"}))
    config = ServerConfig.read(tmp_path, environ={})
    assert config == ServerConfig(host="h", port=7000, base_url="u")


def test_missing_environment_file_is_an_error(tmp_path):
    write_config(tmp_path, "base.yaml", "host: h\nport: 1\nbase_url: u\n")
    with pytest.raises(ConfigError, match="not found"):
        ServerConfig.read(tmp_path, environ={})


def test_missing_field_is_an_error(tmp_path):
    write_config(tmp_path, "base.yaml", "host: h\nport: 1\n")
    write_config(tmp_path, "local.yaml", "")
    with pytest.raises(ConfigError, match="base_url"):
        ServerConfig.read(tmp_path, environ={})


@pytest.mark.parametrize("port", ["70000", "abc", "-1"])
def test_invalid_port_is_an_error(project, port):
    with pytest.raises(ConfigError):
        ServerConfig.read(project, environ={"SERVER__PORT": port})


def test_unparsable_file_is_an_error(tmp_path):
    write_config(tmp_path, "base.json", "{not json")
    write_config(tmp_path, "local.yaml", "base_url: u\n")
    with pytest.raises(ConfigError, match="failed to parse"):
        ServerConfig.read(tmp_path, environ={})


def test_unknown_server_env_is_rejected(project):
    with pytest.raises(ValueError, match="is not supported environment value"):
        ServerConfig.read(project, environ={"SERVER_ENV": "staging"})