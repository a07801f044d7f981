from pathlib import Path

import pytest

from repo_status.config import RunConfig, load_settings_file
from repo_status.errors import ConfigError


def test_defaults():
    config = RunConfig()
    assert config.executable == "git"
    assert config.fetch is False
    assert config.fetch_with_sudo is False
    assert config.fail_fast is False
    assert config.log_file is None


def test_from_settings_accepts_string_flags_and_legacy_keys():
    config = RunConfig.from_settings(
        {
            "GitStatusExecutable": "/usr/local/bin/git",
            "GitStatusDebug": "true",
            "GitStatusFetch": "true",
            "GitStatusFetchWithSudo": "false",
            "TASK_THRESHOLD": "3",
        }
    )
    assert config.executable == "/usr/local/bin/git"
    assert config.debug is True
    assert config.fetch is True
    assert config.fetch_with_sudo is False


def test_empty_executable_falls_back_to_git():
    assert RunConfig.from_settings({"executable": "  "}).executable == "git"


def test_none_values_keep_previous_setting():
    config = RunConfig(fetch=True).updated({"fetch": None, "fail_fast": True})
    assert config.fetch is True
    assert config.fail_fast is True


def test_invalid_boolean_raises_config_error():
    with pytest.raises(ConfigError, match="fetch"):
        RunConfig.from_settings({"fetch": "sometimes"})


def test_load_settings_file_reads_table(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text(
        "[repo_status]\n"
        'executable = "git"\n'
        'repo_root = "/srv/app"\n'
        "fetch = true\n"
        "ignore_untracked = true\n"
    )

    config = RunConfig.from_settings(load_settings_file(path))

    assert config.repo_root == Path("/srv/app")
    assert config.fetch is True
    assert config.ignore_untracked is True


def test_load_settings_file_accepts_flat_file(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text("fail_fast = true\n")

    assert load_settings_file(path) == {"fail_fast": True}


def test_load_settings_file_reports_syntax_errors(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text("fetch = \n")

    with pytest.raises(ConfigError, match="invalid settings file"):
        load_settings_file(path)


def test_load_settings_file_reports_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="cannot read settings file"):
        load_settings_file(tmp_path / "missing.toml")
