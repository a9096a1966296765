"""
Tests for configuration loading.

Layers, lowest to highest precedence: YAML file, TYPEWRITER_* environment
variables, explicit overrides (command-line flags).
"""

import pytest
from typewriter.backends import Language
from typewriter.config import GeneratorConfig, load_config
from typewriter.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in ("DIR", "FILE", "OUT", "LANG", "RECURSIVE", "VERBOSE", "INCLUDE_UNEXPORTED", "LOG_LEVEL", "CONFIG"):
        monkeypatch.delenv(f"TYPEWRITER_{key}", raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    config = load_config()
    assert config == GeneratorConfig()
    assert config.language == Language.FLOW
    assert config.effective_log_level == "WARNING"


def test_yaml_file(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("dir: ./models\nlang: ts\nrecursive: true\n")
    config = load_config(str(path))
    assert config.dir == "./models"
    assert config.language == Language.TYPESCRIPT
    assert config.recursive is True


def test_default_file_picked_up(tmp_path):
    (tmp_path / "typewriter.yaml").write_text("out: types.js\n")
    assert load_config().out == "types.js"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("lang: flow\nverbose: false\n")
    monkeypatch.setenv("TYPEWRITER_LANG", "ts")
    monkeypatch.setenv("TYPEWRITER_VERBOSE", "yes")
    config = load_config(str(path))
    assert config.lang == "ts"
    assert config.verbose is True
    assert config.effective_log_level == "DEBUG"


def test_overrides_win(monkeypatch):
    monkeypatch.setenv("TYPEWRITER_OUT", "env.js")
    config = load_config(overrides={"out": "flag.js", "dir": None})
    assert config.out == "flag.js"
    assert config.dir is None


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_config(str(path))


def test_unknown_key_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("language: flow\n")
    with pytest.raises(ConfigError, match="language"):
        load_config(str(path))


def test_unknown_language_rejected():
    with pytest.raises(ConfigError, match="elm"):
        load_config(overrides={"lang": "elm"})


def test_bad_boolean_rejected(monkeypatch):
    monkeypatch.setenv("TYPEWRITER_RECURSIVE", "sometimes")
    with pytest.raises(ConfigError, match="recursive"):
        load_config()


def test_dir_and_file_exclusive():
    with pytest.raises(ConfigError):
        load_config(overrides={"dir": "a", "file": "b.go"})


def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_invalid_yaml_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("lang: [flow\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(str(path))
