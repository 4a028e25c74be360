import pytest

from manaflow.config import ServerConfig, missing_options, should_autostart


def test_defaults_when_file_missing(tmp_path):
    config = ServerConfig.load(tmp_path / "none.ini")
    assert config == ServerConfig(autohost=True, port=6112, scriptfolder="data")


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "config.ini"
    original = ServerConfig(autohost=False, port=7000, scriptfolder="scripts")
    original.save(path)
    assert ServerConfig.load(path) == original


def test_saved_file_format(tmp_path):
    path = tmp_path / "config.ini"
    ServerConfig().save(path)
    text = path.read_text(encoding="utf-8")
    assert "[General]" in text
    assert "port=6112" in text
    assert "autohost=true" in text


def test_save_keeps_other_entries(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[General]\nextra=1\nport=5000\n", encoding="utf-8")
    ServerConfig(port=5001).save(path)
    assert "extra=1" in path.read_text(encoding="utf-8")
    assert ServerConfig.load(path).port == 5001


def test_missing_options(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[General]\nport=5000\n", encoding="utf-8")
    assert missing_options(path) == ["autohost", "scriptfolder"]
    assert missing_options(tmp_path / "none.ini") == ["port", "autohost", "scriptfolder"]


def test_should_autostart(tmp_path):
    path = tmp_path / "config.ini"
    ServerConfig(autohost=True).save(path)
    assert should_autostart(path) is True
    ServerConfig(autohost=False).save(path)
    assert should_autostart(path) is False


def test_should_not_autostart_with_missing_option(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[General]\nautohost=true\nport=6112\n", encoding="utf-8")
    assert should_autostart(path) is False


def test_invalid_port_raises(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[General]\nport=70000\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ServerConfig.load(path)