"""Unit tests for CLI utilities."""

import json
from unittest.mock import patch

import pytest

from sysnav.cli.utils import CliContext, echo_json, echo_json_error, open_store, run_mutation
from sysnav.config import Settings
from sysnav.core.exceptions import ConfigError, MutationError, StoreError
from sysnav.store import SYSTEMS, MemoryEntityStore


class TestJsonEnvelope:

    def test_success_envelope(self, capsys):
        echo_json("tree", {"ids": ["a"]})
        payload = json.loads(capsys.readouterr().out)
        assert payload == {"meta": {"status": "success", "command": "tree"}, "data": {"ids": ["a"]}}

    def test_error_envelope(self, capsys):
        echo_json_error("graph", ConfigError("no url"))
        payload = json.loads(capsys.readouterr().out)
        assert payload["meta"]["status"] == "error"
        assert payload["error"] == {"type": "ConfigError", "message": "no url"}


class TestCliContext:

    def test_injected_store_is_used(self):
        store = MemoryEntityStore()
        assert CliContext(store=store).store is store

    def test_memory_backend_is_seeded(self):
        ctx = CliContext(settings=Settings(backend="memory"))
        assert len(ctx.store.rows(SYSTEMS)) > 1

    def test_settings_loaded_lazily(self, tmp_path):
        with patch("sysnav.cli.utils.load_settings", return_value=Settings(backend="memory")) as mock_load:
            ctx = CliContext(config_path=tmp_path / "c.yaml")
            mock_load.assert_not_called()
            assert ctx.settings.backend == "memory"
            mock_load.assert_called_once_with(tmp_path / "c.yaml")

    def test_open_store_exits_on_config_error(self, capsys):
        ctx = CliContext(settings=Settings(backend="rest"))
        with pytest.raises(SystemExit) as exc:
            open_store(ctx)
        assert exc.value.code == 1
        assert "No store URL" in capsys.readouterr().err


class TestRunMutation:

    def test_success_message_gets_result(self, capsys):
        assert run_mutation(lambda: "abc", "Created {result}") == "abc"
        assert "Created abc" in capsys.readouterr().out

    def test_failure_exits(self, capsys):
        def fail():
            raise MutationError("delete_system_with_history", StoreError("nope"))

        with pytest.raises(SystemExit):
            run_mutation(fail, "never")
        assert "nope" in capsys.readouterr().err
