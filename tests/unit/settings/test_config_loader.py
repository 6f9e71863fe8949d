"""
Unit Tests for Settings Loader
.cargo-query.yaml 탐색, 환경변수 치환, 검증 오류
"""

import pytest

from cargo_query.exceptions import WorkspaceError
from cargo_query.settings.loader import (
    CONFIG_ENV_VAR,
    CONFIG_FILE_NAME,
    find_config_file,
    load_query_config,
    resolve_env_variables,
)
from tests.helpers.file_builder import FileBuilder


@pytest.fixture(autouse=True)
def clear_config_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestResolveEnvVariables:
    """${VAR:default} 치환"""

    def test_default_value_when_unset(self, monkeypatch):
        monkeypatch.delenv("PICKER_HEIGHT", raising=False)
        assert resolve_env_variables("${PICKER_HEIGHT:40%}") == "40%"

    def test_environment_value_wins(self, monkeypatch):
        monkeypatch.setenv("PICKER_HEIGHT", "auto")
        assert resolve_env_variables("${PICKER_HEIGHT:40%}") == "auto"

    @pytest.mark.parametrize("value, expected", [
        ("15", 15),
        ("1.5", 1.5),
        ("true", True),
        ("False", False),
        ("", ""),
    ])
    def test_full_match_is_type_converted(self, monkeypatch, value, expected):
        monkeypatch.setenv("CQ_VALUE", value)
        assert resolve_env_variables("${CQ_VALUE}") == expected

    def test_partial_match_is_string_substitution(self, monkeypatch):
        monkeypatch.setenv("CQ_NAME", "bin")
        assert resolve_env_variables("pick ${CQ_NAME}> ") == "pick bin> "

    def test_unset_without_default_is_left_as_is(self, monkeypatch):
        monkeypatch.delenv("CQ_MISSING", raising=False)
        assert resolve_env_variables("${CQ_MISSING}") == "${CQ_MISSING}"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("CQ_BORDER", "true")
        data = {"picker": {"border": "${CQ_BORDER}", "list": ["${CQ_BORDER:false}", 3]}}

        assert resolve_env_variables(data) == {"picker": {"border": True, "list": [True, 3]}}


class TestFindConfigFile:

    def test_workspace_root_file(self, tmp_path):
        path = FileBuilder.create_yaml_file(tmp_path / CONFIG_FILE_NAME, {"picker": {}})
        assert find_config_file(workspace_root=tmp_path) == path

    def test_env_var_beats_workspace_file(self, tmp_path, monkeypatch):
        FileBuilder.create_yaml_file(tmp_path / CONFIG_FILE_NAME, {})
        other = FileBuilder.create_yaml_file(tmp_path / "other.yaml", {})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))

        assert find_config_file(workspace_root=tmp_path) == other

    def test_explicit_path_beats_env_var(self, tmp_path, monkeypatch):
        explicit = FileBuilder.create_yaml_file(tmp_path / "explicit.yaml", {})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.yaml"))

        assert find_config_file(explicit_path=explicit, workspace_root=tmp_path) == explicit

    def test_missing_explicit_file_is_an_error(self, tmp_path):
        with pytest.raises(WorkspaceError, match="config file not found"):
            find_config_file(explicit_path=tmp_path / "nope.yaml")

    def test_nothing_found(self, tmp_path):
        assert find_config_file(workspace_root=tmp_path) is None


class TestLoadQueryConfig:

    def test_defaults_without_file(self, tmp_path):
        config = load_query_config(workspace_root=tmp_path)
        assert config.picker.prompt == "{category}> "

    def test_loads_values_with_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CQ_MAX_HEIGHT", "12")
        FileBuilder.create_yaml_file(
            tmp_path / CONFIG_FILE_NAME,
            {
                "picker": {"height": "auto", "max_height": "${CQ_MAX_HEIGHT:20}", "border": True},
                "logging": {"level": "debug"},
            },
        )

        config = load_query_config(workspace_root=tmp_path)

        assert config.picker.height == "auto"
        assert config.picker.max_height == 12
        assert config.picker.border is True
        assert config.logging.level == "DEBUG"

    def test_empty_file_uses_defaults(self, tmp_path):
        FileBuilder.create_text_file(tmp_path / CONFIG_FILE_NAME, "")
        assert load_query_config(workspace_root=tmp_path).picker.height == "40%"

    def test_invalid_yaml(self, tmp_path):
        FileBuilder.create_text_file(tmp_path / CONFIG_FILE_NAME, "picker: [unclosed\n")

        with pytest.raises(WorkspaceError, match="failed to parse"):
            load_query_config(workspace_root=tmp_path)

    def test_non_utf8_file(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_bytes(b"picker:\n  prompt: \xff\xfe\n")

        with pytest.raises(WorkspaceError, match="failed to parse") as exc_info:
            load_query_config(workspace_root=tmp_path)
        assert exc_info.value.exit_code == 101

    def test_non_mapping_top_level(self, tmp_path):
        FileBuilder.create_text_file(tmp_path / CONFIG_FILE_NAME, "- a\n- b\n")

        with pytest.raises(WorkspaceError, match="mapping"):
            load_query_config(workspace_root=tmp_path)

    def test_validation_error_names_field(self, tmp_path):
        FileBuilder.create_yaml_file(tmp_path / CONFIG_FILE_NAME, {"picker": {"height": "huge"}})

        with pytest.raises(WorkspaceError, match="picker.height"):
            load_query_config(workspace_root=tmp_path)
