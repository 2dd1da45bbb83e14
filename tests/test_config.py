import pytest

from bnuuyterm.config import Colors, Config, ConfigError, default_config_path


def write_toml(tmp_path, body):
    path = tmp_path / "config.toml"
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults():
    config = Config()
    assert config.font_size == 15.0
    assert config.shell == ("bash", "-i")
    assert config.background_opacity == 1.0
    assert config.colors.foreground == (0xC0, 0xC0, 0xC0)
    assert config.colors.background == (0x00, 0x00, 0x00)
    assert config.colors.cursor == (0xC0, 0xC0, 0xC0)
    assert config.colors.cursor_text == (0x00, 0x00, 0x00)
    assert config.macos_transparent_titlebar is False


def test_load_missing_file_gives_defaults(tmp_path):
    assert Config.load(tmp_path / "absent.toml") == Config()


def test_load_overrides_top_level_values(tmp_path):
    path = write_toml(tmp_path, 'font_size = 20\nshell = ["zsh"]\nbackground_opacity = 0.5\n')
    config = Config.load(path)
    assert config.font_size == 20.0
    assert config.shell == ("zsh",)
    assert config.background_opacity == 0.5
    assert config.colors == Colors()


def test_partial_colors_merge_with_defaults(tmp_path):
    path = write_toml(tmp_path, "[colors]\nforeground = [1, 2, 3]\n")
    config = Config.load(path)
    assert config.colors.foreground == (1, 2, 3)
    assert config.colors.background == Colors().background
    assert config.colors.cursor == Colors().cursor


def test_unknown_keys_are_ignored():
    config = Config.from_dict({"unknown": 1, "font_size": 12.5})
    assert config.font_size == 12.5
    assert config.shell == Config().shell


def test_from_dict_round_trips_defaults():
    assert Config.from_dict({}) == Config()


@pytest.mark.parametrize(
    "data",
    [
        {"font_size": "big"},
        {"font_size": True},
        {"shell": "bash"},
        {"shell": ["bash", 3]},
        {"colors": {"foreground": [1, 2]}},
        {"colors": {"background": [0, 0, 256]}},
        {"colors": "red"},
        {"macos_transparent_titlebar": 1},
    ],
)
def test_invalid_values_raise(data):
    with pytest.raises(ConfigError):
        Config.from_dict(data)


def test_invalid_toml_raises(tmp_path):
    path = write_toml(tmp_path, "font_size = = 3\n")
    with pytest.raises(ConfigError):
        Config.load(path)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        Config.from_dict({"background_opacity": []})


def test_default_config_path_names_toml_file():
    path = default_config_path()
    assert path.name == "config.toml"