"""Config и сборка плана публикации."""

from __future__ import annotations

import pytest

from crate_release.config import Config, load_config
from crate_release.packages import DEFAULT_CRATES, build_plan, resolve_crates


class TestConfigLoad:
    def test_defaults_when_nothing_found(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg["token_env"] == "CRATES_TOKEN"
        assert cfg["registry_url"] == "https://crates.io/api/v1/crates"
        assert cfg["_config_source"] == "<default>"
        assert "значения по умолчанию" in capsys.readouterr().err

    def test_standalone_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "crate_release.toml").write_text(
            'crates = ["x", "y"]\npublish_flags = ["--locked"]\n', encoding="utf-8"
        )
        cfg = load_config()
        assert cfg["crates"] == ["x", "y"]
        assert cfg["publish_flags"] == ["--locked"]
        assert cfg["_config_source"] == "crate_release.toml"
        # остальные ключи — из дефолтов
        assert cfg["http_timeout"] == 30

    def test_pyproject_section(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.crate_release]\ntoken_env = "MY_TOKEN"\n', encoding="utf-8"
        )
        cfg = load_config()
        assert cfg["token_env"] == "MY_TOKEN"
        assert cfg["_config_source"] == "pyproject.toml"

    def test_pyproject_without_section_is_skipped(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        assert load_config()["_config_source"] == "<default>"

    def test_explicit_path_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as excinfo:
            load_config(tmp_path / "nope.toml")
        assert excinfo.value.code == 1

    def test_explicit_path_outside_cwd(self, tmp_path, monkeypatch):
        work = tmp_path / "work"
        work.mkdir()
        monkeypatch.chdir(work)
        other = tmp_path / "other.toml"
        other.write_text('[tool.crate_release]\ndry_run = true\n', encoding="utf-8")
        cfg = load_config(other)
        assert cfg["dry_run"] is True
        assert cfg["_config_source"] == str(other)


class TestPlan:
    def test_default_crate_order(self):
        assert len(DEFAULT_CRATES) == 27
        assert DEFAULT_CRATES[0] == "ibc-primitives"
        assert DEFAULT_CRATES[-1] == "ibc-testkit"
        assert DEFAULT_CRATES.index("ibc-core") < DEFAULT_CRATES.index("ibc")

    def test_cli_replaces_list(self):
        cfg = Config({"crates": ["from-config"]})
        assert resolve_crates(["b", "a"], cfg) == ["b", "a"]

    def test_config_replaces_default(self):
        assert resolve_crates([], Config({"crates": ["c1", "c2"]})) == ["c1", "c2"]

    def test_default_list(self):
        assert resolve_crates(None, Config()) == list(DEFAULT_CRATES)

    def test_token_from_env(self):
        plan = build_plan(Config(), ["a"], environ={"CRATES_TOKEN": "abc"})
        assert plan.token == "abc"

    def test_empty_token_ignored(self):
        plan = build_plan(Config(), ["a"], environ={"CRATES_TOKEN": "  "})
        assert plan.token is None

    def test_custom_token_env_and_flags(self):
        cfg = Config({"token_env": "REG_TOKEN", "publish_flags": ["--no-verify"], "dry_run": True})
        plan = build_plan(cfg, ["a"], environ={"REG_TOKEN": "xyz", "CRATES_TOKEN": "ignored"})
        assert plan.token == "xyz"
        assert plan.extra_flags == ["--no-verify"]
        assert plan.dry_run is True

    def test_string_values_are_split(self):
        cfg = Config({"publish_flags": "--allow-dirty --locked", "crates": "ibc-core ibc"})
        plan = build_plan(cfg, None, environ={})
        assert plan.extra_flags == ["--allow-dirty", "--locked"]
        assert plan.crates == ["ibc-core", "ibc"]

    def test_single_string_value(self):
        plan = build_plan(Config({"publish_flags": "--allow-dirty", "crates": "ibc"}), None, environ={})
        assert plan.extra_flags == ["--allow-dirty"]
        assert plan.crates == ["ibc"]
