from pathlib import Path

import pytest

from killswitch_graduator.config.config_loader import ConfigurationError, load_config
from killswitch_graduator.config.env_utils import get_env_int, get_env_var, load_env_file
from killswitch_graduator.schemas.config_schemas_v1 import DEFAULT_EXCLUDE_DIRS, GraduatorConfig

ENV_VARS = ("KS_ACTIVATION_METHOD", "KS_IMPORT_PATTERN", "KS_THRESHOLD_DAYS", "KS_LOG_DIR", "LOG_LEVEL")


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_env_file(tmp_path / ".env", force=True)
    yield
    load_env_file(Path(".env"), force=True)


def test_env_file_precedence(tmp_path, monkeypatch):
    env_path = tmp_path / ".env"
    env_path.write_text("MYVAR=file\nKS_IMPORT_PATTERN=file-pattern\n")
    monkeypatch.setenv("MYVAR", "env")
    monkeypatch.setenv("KS_IMPORT_PATTERN", "env-pattern")

    load_env_file(env_path, force=True)

    # Environment variable should win over .env
    assert get_env_var("MYVAR") == "env"
    assert get_env_var("KS_IMPORT_PATTERN") == "env-pattern"

    # Unset env, .env should win
    monkeypatch.delenv("MYVAR", raising=False)
    monkeypatch.delenv("KS_IMPORT_PATTERN", raising=False)
    assert get_env_var("MYVAR") == "file"
    assert get_env_var("KS_IMPORT_PATTERN") == "file-pattern"
    assert get_env_var("MISSING_VAR", "fallback") == "fallback"
    # Reset
    load_env_file(Path(".env"), force=True)


def test_defaults(clean_env):
    cfg = load_config()
    assert cfg == GraduatorConfig()
    assert cfg.activation_method == "is_activated"
    assert cfg.import_pattern == "killswitch"
    assert cfg.threshold_days == 180
    assert cfg.exclude_dirs == DEFAULT_EXCLUDE_DIRS
    assert cfg.source_roots == ["src"]
    assert cfg.simplify_conditions is True


def test_yaml_file(clean_env, tmp_path):
    path = tmp_path / "graduator.yaml"
    path.write_text(
        "activation_method: isActivated\n"
        "threshold_days: 30\n"
        "exclude_dirs: [vendor]\n"
        "simplify_conditions: false\n"
    )
    cfg = load_config(path)
    assert cfg.activation_method == "isActivated"
    assert cfg.threshold_days == 30
    assert cfg.exclude_dirs == ["vendor"]
    assert cfg.simplify_conditions is False
    assert cfg.import_pattern == "killswitch"


def test_environment_overrides_yaml(clean_env, tmp_path, monkeypatch):
    path = tmp_path / "graduator.yaml"
    path.write_text("activation_method: isActivated\nthreshold_days: 30\nlog_level: INFO\n")
    monkeypatch.setenv("KS_ACTIVATION_METHOD", "enabled")
    monkeypatch.setenv("KS_THRESHOLD_DAYS", "7")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    cfg = load_config(path)
    assert cfg.activation_method == "enabled"
    assert cfg.threshold_days == 7
    assert cfg.log_level == "DEBUG"


def test_non_integer_threshold_days_is_ignored(clean_env, monkeypatch, caplog):
    monkeypatch.setenv("KS_THRESHOLD_DAYS", "soon")
    cfg = load_config()
    assert cfg.threshold_days == 180
    assert "KS_THRESHOLD_DAYS" in caplog.text


def test_empty_yaml_gives_defaults(clean_env, tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == GraduatorConfig()


@pytest.mark.parametrize("content,message", [
    (None, "not found"),
    ("activation_method: [unclosed\n", "Invalid YAML"),
    ("- just\n- a list\n", "must contain a mapping"),
    ("threshold_days: -1\n", "Invalid graduator configuration"),
])
def test_bad_config_files(clean_env, tmp_path, content, message):
    path = tmp_path / "graduator.yaml"
    if content is not None:
        path.write_text(content)
    with pytest.raises(ConfigurationError, match=message):
        load_config(path)


def test_log_dir_from_yaml_and_environment(clean_env, tmp_path, monkeypatch):
    path = tmp_path / "graduator.yaml"
    path.write_text("log_dir: yaml-logs\n")
    assert load_config(path).log_dir == "yaml-logs"

    monkeypatch.setenv("KS_LOG_DIR", "env-logs")
    assert load_config(path).log_dir == "env-logs"
    assert load_config().log_dir == "env-logs"


def test_env_file_keys_without_values_are_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("KS_BARE", raising=False)
    env_path = tmp_path / ".env"
    env_path.write_text("KS_BARE\nKS_IMPORT_PATTERN_FILE=flags\n")

    load_env_file(env_path, force=True)

    assert get_env_var("KS_BARE", "fallback") == "fallback"
    assert get_env_var("KS_IMPORT_PATTERN_FILE") == "flags"
    load_env_file(Path(".env"), force=True)


def test_get_env_int(clean_env, monkeypatch, caplog):
    assert get_env_int("KS_THRESHOLD_DAYS") is None

    monkeypatch.setenv("KS_THRESHOLD_DAYS", "30")
    assert get_env_int("KS_THRESHOLD_DAYS") == 30

    monkeypatch.setenv("KS_THRESHOLD_DAYS", "thirty")
    assert get_env_int("KS_THRESHOLD_DAYS") is None
    assert "Ignoring non-integer KS_THRESHOLD_DAYS" in caplog.text
