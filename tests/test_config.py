from pathlib import Path

from readingplan import config


def use_config_file(monkeypatch, path):
    monkeypatch.setattr(config, "get_config_path", lambda: path)
    config.clear_cache()


def test_defaults_without_config_file():
    assert config.get("plan.default") == "horner"
    assert config.get("plan.days_to_generate") == 30
    assert config.get("export.title") == "Bible Reading Plan"
    assert config.get("nonexistent.key", "fallback") == "fallback"


def test_yaml_overlays_defaults(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("plan:\n  default: mcheyne\nextra:\n  kept: true\n")
    use_config_file(monkeypatch, path)

    assert config.get("plan.default") == "mcheyne"
    # Sibling keys in the same section keep their defaults
    assert config.get("plan.days_to_generate") == 30
    assert config.get("extra.kept") is True


def test_invalid_yaml_falls_back_to_defaults(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("plan: [unclosed\n")
    use_config_file(monkeypatch, path)

    assert config.get("plan.default") == "horner"
    assert "Warning" in capsys.readouterr().out


def test_deep_merge_does_not_modify_inputs():
    base = {"a": {"b": 1, "c": 2}}
    overlay = {"a": {"b": 5}}

    merged = config._deep_merge(base, overlay)

    assert merged == {"a": {"b": 5, "c": 2}}
    assert base == {"a": {"b": 1, "c": 2}}


def test_state_path_is_expanded():
    assert config.get_state_path() == Path("~/.readingplan/state.json").expanduser().resolve()
