# tests/test_session.py - Session and configuration tests
"""
Tests for PromQLSession, strategy selection and config loading.
"""
import asyncio
import inspect

import pytest

from promq import PromQLSession, new_complete_strategy
from promq.client import OfflineProvider, PrometheusProvider
from promq.complete import CompletionResult, HybridComplete
from promq.config import load_config
from promq.config.config import CompleteConfig, Config, LintConfig
from promq.errors import ConfigError
from promq.lsp import LSPComplete

from conftest import keep_all


class TestNewCompleteStrategy:
    """Tests for building a strategy from settings."""

    def test_default_is_offline(self):
        strategy = new_complete_strategy()

        assert isinstance(strategy, HybridComplete)
        assert isinstance(strategy.provider, OfflineProvider)

    def test_prometheus(self):
        strategy = new_complete_strategy(
            CompleteConfig(source="prometheus", url="http://localhost:9090", timeout=2)
        )

        assert isinstance(strategy.provider, PrometheusProvider)
        assert strategy.provider.url == "http://localhost:9090"
        assert strategy.provider.timeout == 2

    def test_lsp(self):
        strategy = new_complete_strategy(
            CompleteConfig(source="lsp", url="http://localhost:8080", limit=20)
        )

        assert isinstance(strategy, LSPComplete)
        assert strategy.client.limit == 20

    def test_remote_without_url_is_offline(self):
        strategy = new_complete_strategy(CompleteConfig(source="prometheus"))
        assert isinstance(strategy.provider, OfflineProvider)


class TestPromQLSession:
    """Tests for the PromQLSession class."""

    def test_complete_offline(self):
        """Test an offline session answers right away."""
        session = PromQLSession()
        text = "sum(rate(http_requests_total[5m])) / "
        answer = session.complete(text, len(text))

        assert isinstance(answer, CompletionResult)
        assert "by" in answer.labels()

    def test_cursor_is_clamped(self):
        session = PromQLSession()
        answer = session.complete("http_req", 100, filter=keep_all)

        assert answer.to == 8

    def test_deferred_answer(self, provider):
        """Test metadata answers are awaitable."""
        session = PromQLSession(strategy=HybridComplete(provider))
        answer = session.complete("up{", 3)

        assert inspect.isawaitable(answer)
        assert asyncio.run(answer).labels() == ["instance", "job"]

    def test_switch_discards_pending(self, provider):
        """Test answers of a replaced strategy resolve to None."""
        session = PromQLSession(strategy=HybridComplete(provider))
        answer = session.complete("up{", 3)
        session.set_complete(CompleteConfig())

        assert asyncio.run(answer) is None
        assert isinstance(session.strategy.provider, OfflineProvider)

    def test_answers_after_switch_are_kept(self, provider):
        session = PromQLSession()
        session.set_complete(strategy=HybridComplete(provider))

        assert session.complete_sync("up{", 3).labels() == ["instance", "job"]

    def test_invalid_lsp_url(self):
        """Test a URL httpx refuses gives an empty answer."""
        session = PromQLSession(CompleteConfig(source="lsp", url="http://a\x00b"))
        assert session.complete_sync("rat", 3).is_empty

    def test_complete_sync_nothing(self):
        assert PromQLSession().complete_sync("up{", 3) is None


class TestConfig:
    """Tests for configuration loading."""

    def test_defaults(self):
        config = Config()

        assert config.complete.source == "offline"
        assert config.lint.source == "offline"
        assert config.complete_while_typing

    def test_from_dict(self):
        config = Config.from_dict({
            "complete": {"source": "Hybrid", "url": "http://p:9090", "limit": 5, "timeout": 1},
            "lint": {"source": "lsp", "url": "http://l:8080"},
            "repl": {"complete_while_typing": False},
        })

        assert config.complete.source == "prometheus"
        assert config.complete.limit == 5
        assert config.complete.timeout == 1.0
        assert config.lint.source == "lsp"
        assert not config.complete_while_typing

    def test_url_is_stripped(self):
        assert CompleteConfig.from_dict({"url": " http://p:9090\n"}).url == "http://p:9090"

    def test_unknown_lint_source(self):
        assert LintConfig.from_dict({"source": "prometheus"}).source == "offline"

    def test_validated(self):
        """Test unusable settings fall back to offline."""
        assert CompleteConfig(source="bogus").validated().source == "offline"
        assert CompleteConfig(source="lsp").validated().source == "offline"

        usable = CompleteConfig(source="lsp", url="http://l:8080")
        assert usable.validated() is usable

    def test_load_file(self, tmp_path):
        path = tmp_path / "promq.toml"
        path.write_text(
            '[complete]\nsource = "prometheus"\nurl = "http://localhost:9090"\n'
            '[repl]\nhistory_file = "~/.promq_history"\n'
        )
        config = load_config(path)

        assert config.complete.url == "http://localhost:9090"
        assert config.history_file.name == ".promq_history"
        assert config.to_dict()["complete"]["source"] == "prometheus"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.toml")

    def test_broken_explicit_file(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[complete\nsource = ")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_discovered_file(self, tmp_path, monkeypatch):
        """Test .promq.toml in the working directory is picked up."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".promq.toml").write_text('[complete]\nsource = "lsp"\nurl = "http://l"\n')

        assert load_config().complete.source == "lsp"

    def test_broken_discovered_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".promq.toml").write_text("not = [toml")

        assert load_config().complete.source == "offline"
