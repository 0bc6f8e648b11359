"""Tests for the configuration file support."""

from gha_pin.config import load_config
from gha_pin.github import DEFAULT_API_URL


# ---------------------------------------------------------------------------
# load_config with no file
# ---------------------------------------------------------------------------

class TestConfigDefaults:
    def test_returns_defaults_when_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.exclude == []
        assert config.ignore_repos == []
        assert config.api_url == DEFAULT_API_URL

    def test_returns_defaults_for_invalid_yaml(self, tmp_path):
        cfg = tmp_path / ".gha-pin.yml"
        cfg.write_text("just a string")
        config = load_config(config_path=str(cfg))
        assert config.exclude == []

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / ".gha-pin.yml"
        cfg.write_text("")
        assert load_config(config_path=str(cfg)).ignore_repos == []


# ---------------------------------------------------------------------------
# load_config with explicit path
# ---------------------------------------------------------------------------

class TestConfigExplicitPath:
    def test_loads_exclude(self, tmp_path):
        cfg = tmp_path / ".gha-pin.yml"
        cfg.write_text("exclude:\n  - '**/legacy-*.yml'\n")
        config = load_config(config_path=str(cfg))
        assert config.exclude == ["**/legacy-*.yml"]

    def test_loads_full_config(self, tmp_path):
        cfg = tmp_path / ".gha-pin.yml"
        cfg.write_text(
            "exclude:\n"
            "  - legacy.yml\n"
            "ignore_repos:\n"
            "  - my-org/internal-action\n"
            "api_url: https://ghe.example.com/api/v3\n"
        )
        config = load_config(config_path=str(cfg))
        assert config.exclude == ["legacy.yml"]
        assert config.ignore_repos == ["my-org/internal-action"]
        assert config.api_url == "https://ghe.example.com/api/v3"

    def test_missing_explicit_path_returns_defaults(self, tmp_path):
        config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
        assert config.exclude == []


# ---------------------------------------------------------------------------
# load_config auto-discovery
# ---------------------------------------------------------------------------

class TestConfigAutoDiscovery:
    def test_finds_config_in_root(self, tmp_path):
        (tmp_path / ".gha-pin.yml").write_text("ignore_repos:\n  - a/b\n")
        config = load_config(root=str(tmp_path))
        assert config.ignore_repos == ["a/b"]

    def test_falls_back_to_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".gha-pin.yml").write_text("ignore_repos:\n  - c/d\n")
        other = tmp_path / "repo"
        other.mkdir()
        monkeypatch.chdir(tmp_path)
        config = load_config(root=str(other))
        assert config.ignore_repos == ["c/d"]
