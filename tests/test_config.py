import pytest

from mscri.mscri_config import ConfigError, MscriConfig, load_config


def test_defaults_without_file_or_environment():
    config = load_config(environ={})
    assert config == MscriConfig()
    assert config.max_lexeme_length == 255
    assert config.debug is False
    assert config.prompt == "mscri> "


def test_yaml_file_is_merged(tmp_path):
    path = tmp_path / "mscri.yaml"
    path.write_text("max_lexeme_length: 16\nprompt: '> '\n")
    config = load_config(path, environ={})
    assert config.max_lexeme_length == 16
    assert config.prompt == "> "
    assert config.debug is False


def test_config_path_from_environment(tmp_path):
    path = tmp_path / "conf.yaml"
    path.write_text("debug: true\n")
    config = load_config(environ={"MSCRI_CONFIG": str(path)})
    assert config.debug is True


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "mscri.yaml"
    path.write_text("max_lexeme_length: 16\ndebug: true\n")
    config = load_config(path, environ={"MSCRI_MAX_LEXEME": "8", "MSCRI_DEBUG": "0"})
    assert config.max_lexeme_length == 8
    assert config.debug is False


@pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("", False), ("false", False), ("OFF", False)])
def test_debug_environment_values(raw, expected):
    assert load_config(environ={"MSCRI_DEBUG": raw}).debug is expected


def test_empty_yaml_file_is_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path, environ={}) == MscriConfig()


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("max_vars: 100\n")
    with pytest.raises(ConfigError, match="max_vars"):
        load_config(path, environ={})


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_invalid_yaml_is_rejected(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("key: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml", environ={})


@pytest.mark.parametrize("value", [0, -3, "ten", 2.5, True])
def test_bad_lexeme_length(value):
    with pytest.raises(ConfigError):
        MscriConfig(max_lexeme_length=value)


def test_bad_lexeme_length_from_environment():
    with pytest.raises(ConfigError):
        load_config(environ={"MSCRI_MAX_LEXEME": "lots"})


def test_config_error_is_a_value_error():
    assert issubclass(ConfigError, ValueError)
