"""Tests for configuration loading and path expansion."""

import os

import pytest
import yaml

from wtf.common.paths import expand_path
from wtf.config import Configuration, get_config_file, get_default_data_dir, load_configuration
from wtf.errors import ConfigError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.delenv("WTF_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


def _write_config(tmp_path, text):
    path = tmp_path / "config" / "wtf" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestLocations:
    """Tests for default file locations."""

    def test_xdg_locations(self, tmp_path):
        assert get_config_file() == str(tmp_path / "config" / "wtf" / "config.yaml")
        assert get_default_data_dir() == str(tmp_path / "data" / "wtf" / "terraform-versions")

    def test_home_fallback(self, monkeypatch, tmp_path):
        monkeypatch.delenv("XDG_CONFIG_HOME")
        monkeypatch.delenv("XDG_DATA_HOME")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_file() == str(tmp_path / ".config" / "wtf" / "config.yaml")
        assert get_default_data_dir() == str(tmp_path / ".local" / "share" / "wtf" / "terraform-versions")

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WTF_CONFIG", str(tmp_path / "custom.yaml"))
        assert get_config_file() == str(tmp_path / "custom.yaml")


class TestLoadConfiguration:
    """Tests for load_configuration."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_configuration()
        assert config == Configuration()
        assert config.binary_store_path == str(tmp_path / "data" / "wtf" / "terraform-versions")
        assert config.version_constraint_file_name == ".terraform-version"
        assert config.detect_syntax is True
        assert config.auto_install is False
        assert config.wrapper.script_template == ""

    def test_reads_values(self, tmp_path):
        _write_config(tmp_path, (
            "binary_store_path: /opt/terraform\n"
            "version_constraint_file_name: .tfversion\n"
            "detect_syntax: false\n"
            "auto_install: true\n"
            "wrapper:\n"
            "  script_template: |\n"
            "    #!/bin/sh\n"
            "    exec {{ command }}\n"
        ))
        config = load_configuration()
        assert config.binary_store_path == "/opt/terraform"
        assert config.version_constraint_file_name == ".tfversion"
        assert config.detect_syntax is False
        assert config.auto_install is True
        assert config.wrapper.script_template == "#!/bin/sh\nexec {{ command }}\n"

    def test_partial_file_keeps_defaults(self, tmp_path):
        _write_config(tmp_path, "auto_install: true\n")
        config = load_configuration()
        assert config.auto_install is True
        assert config.detect_syntax is True

    def test_empty_file(self, tmp_path):
        _write_config(tmp_path, "")
        assert load_configuration() == Configuration()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "other.yaml"
        path.write_text("binary_store_path: /srv/tf\n", encoding="utf-8")
        assert load_configuration(str(path)).binary_store_path == "/srv/tf"

    def test_invalid_yaml(self, tmp_path):
        _write_config(tmp_path, "wrapper: [unclosed\n")
        with pytest.raises(ConfigError):
            load_configuration()

    def test_not_a_mapping(self, tmp_path):
        _write_config(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigError):
            load_configuration()

    def test_wrong_type(self, tmp_path):
        _write_config(tmp_path, "detect_syntax: sometimes\n")
        with pytest.raises(ConfigError):
            load_configuration()

    def test_unknown_key_warns(self, tmp_path, caplog):
        _write_config(tmp_path, "colour: blue\n")
        with caplog.at_level("WARNING"):
            load_configuration()
        assert "colour" in caplog.text

    def test_to_yaml(self):
        config = Configuration(binary_store_path="/opt/tf")
        data = yaml.safe_load(config.to_yaml())
        assert data["binary_store_path"] == "/opt/tf"
        assert data["wrapper"] == {"script_template": ""}
        assert list(data)[0] == "binary_store_path"


class TestExpandPath:
    """Tests for expand_path."""

    def test_tilde(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_path("~") == str(tmp_path)
        assert expand_path("~/tf/versions") == os.path.join(str(tmp_path), "tf/versions")

    def test_tilde_elsewhere_untouched(self):
        assert expand_path("/opt/~/x") == "/opt/~/x"
        assert expand_path("~other/x") == "~other/x"

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("TF_ROOT", "/srv")
        monkeypatch.delenv("WTF_UNSET_VAR", raising=False)
        assert expand_path("$TF_ROOT/versions") == "/srv/versions"
        assert expand_path("${TF_ROOT}/v") == "/srv/v"
        assert expand_path("/a/$WTF_UNSET_VAR/b") == "/a//b"

    def test_plain_path(self):
        assert expand_path("/opt/terraform") == "/opt/terraform"
