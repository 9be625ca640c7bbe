"""
CLI command tests.

Commands run against the scenario store, injected through the click
context object so no configuration file or network is involved.
"""

import json
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from sysnav.cli.main import main
from sysnav.cli.utils import CliContext
from sysnav.config import ENV_OVERRIDES, Settings
from sysnav.store import REVISIONS, SYSTEMS


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_ctx(scenario_store):
    return CliContext(settings=Settings(backend="memory", root_id="R", root_name="Root"), store=scenario_store)


@pytest.fixture
def invoke(runner, cli_ctx):
    def _invoke(*args):
        return runner.invoke(main, list(args), obj=cli_ctx)
    return _invoke


@pytest.fixture
def clean_env(monkeypatch):
    for names in ENV_OVERRIDES.values():
        for name in names:
            monkeypatch.delenv(name, raising=False)


class TestMainGroup:

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("init", "demo", "tree", "interfaces", "graph", "history", "restore", "system", "interface"):
            assert command in result.output

    def test_rest_backend_without_url_fails(self, runner, clean_env):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["tree"])
        assert result.exit_code == 1
        assert "No store URL" in result.output

    def test_memory_backend_serves_demo_data(self, runner, clean_env, monkeypatch):
        monkeypatch.setenv("SYSNAV_BACKEND", "memory")
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["tree"])
        assert result.exit_code == 0
        assert "Payments" in result.output
        assert "Ledger" in result.output

    def test_config_option(self, runner, clean_env, tmp_path):
        config = tmp_path / "alt.yaml"
        config.write_text(yaml.dump({"store": {"backend": "memory"}}))

        result = runner.invoke(main, ["--config", str(config), "tree"])

        assert result.exit_code == 0
        assert "Identity" in result.output


class TestDemoCommand:

    def test_demo_prints_tree_and_groups(self, runner):
        result = runner.invoke(main, ["demo"])
        assert result.exit_code == 0
        assert "Root System" in result.output
        assert "Direct interfaces" in result.output
        assert "Grandchildren interfaces" in result.output
        assert "Demo graph" in result.output

    def test_demo_writes_html(self, runner, tmp_path):
        out = tmp_path / "demo.html"
        result = runner.invoke(main, ["demo", "-o", str(out)])
        assert result.exit_code == 0
        assert out.exists()


class TestTreeCommand:

    def test_tree_of_configured_root(self, invoke):
        result = invoke("tree")
        assert result.exit_code == 0
        assert "Root" in result.output
        assert "Child One" in result.output
        assert "Grandchild" in result.output
        assert "External" not in result.output

    def test_tree_of_leaf(self, invoke):
        result = invoke("tree", "G1")
        assert result.exit_code == 0
        assert "No subsystems." in result.output


class TestInterfacesCommand:

    def test_tables(self, invoke):
        result = invoke("interfaces")
        assert result.exit_code == 0
        assert "Direct interfaces (1)" in result.output
        assert "Children interfaces (2)" in result.output
        assert "Grandchildren interfaces (0)" in result.output

    def test_json(self, invoke):
        result = invoke("interfaces", "--json")
        assert result.exit_code == 0

        payload = json.loads(result.output)
        assert payload["meta"]["status"] == "success"
        assert payload["data"]["counts"] == {"direct": 1, "children": 2, "grandchildren": 0}
        assert [i["id"] for i in payload["data"]["direct"]] == ["i-r-c1"]
        assert "available_systems" not in payload["data"]

    def test_available_json(self, invoke):
        result = invoke("interfaces", "--available", "--json")
        ids = [s["id"] for s in json.loads(result.output)["data"]["available_systems"]]
        assert ids[0] == "R"
        assert sorted(ids) == ["C1", "C2", "G1", "R", "X"]


class TestGraphCommand:

    def test_json_stdout(self, invoke):
        result = invoke("graph", "--json")
        assert result.exit_code == 0

        data = json.loads(result.output)["data"]
        assert {n["id"] for n in data["nodes"]} == {"R", "C1", "C2", "G1"}
        assert data["stats"]["edges_by_kind"] == {"structural": 3, "interface": 2}

    def test_html_file(self, invoke, tmp_path):
        out = tmp_path / "graph.html"
        result = invoke("graph", "-o", str(out))
        assert result.exit_code == 0
        assert "Generated" in result.output
        assert "vis.DataSet" in out.read_text()

    def test_json_file(self, invoke, tmp_path):
        out = tmp_path / "graph.json"
        result = invoke("graph", "C1", "-o", str(out))
        assert result.exit_code == 0
        assert {n["id"] for n in json.loads(out.read_text())["nodes"]} == {"C1", "G1"}

    def test_unsupported_format(self, invoke, tmp_path):
        result = invoke("graph", "-o", str(tmp_path / "graph.png"))
        assert result.exit_code == 1
        assert "Unsupported format" in result.output


class TestSystemCommands:

    def test_show(self, invoke):
        result = invoke("system", "show", "C1")
        assert result.exit_code == 0
        assert "Child One" in result.output
        assert "Subsystems (1)" in result.output

    def test_show_missing(self, invoke):
        result = invoke("system", "show", "ghost")
        assert result.exit_code == 1
        assert "System not found" in result.output

    def test_add_records_history(self, invoke, scenario_store):
        result = invoke("system", "add", "Billing", "Service", "--parent", "C2")
        assert result.exit_code == 0
        assert "Created system" in result.output

        (row,) = [r for r in scenario_store.rows(SYSTEMS) if r["name"] == "Billing"]
        history = json.loads(invoke("history", "system", row["id"], "--json").output)["data"]
        assert [h["operation"] for h in history] == ["create"]
        assert history[0]["diff"]["additions"]["name"] == "Billing"

    def test_add_blank_name_fails(self, invoke):
        result = invoke("system", "add", " ", "Service")
        assert result.exit_code == 1
        assert "must not be blank" in result.output

    def test_edit_keeps_unspecified_fields(self, invoke, scenario_store):
        result = invoke("system", "edit", "C1", "--name", "Renamed")
        assert result.exit_code == 0

        row = scenario_store.get(SYSTEMS, "C1").unwrap()
        assert (row["name"], row["category"]) == ("Renamed", "Platform")

    def test_rm_with_subsystems_fails(self, invoke, scenario_store):
        result = invoke("system", "rm", "C1", "--yes")
        assert result.exit_code == 1
        assert "delete_system_with_history failed" in result.output
        assert scenario_store.get(SYSTEMS, "C1").is_ok()

    @patch("sysnav.cli.commands.systems.Confirm.ask", return_value=False)
    def test_rm_can_be_aborted(self, mock_confirm, invoke, scenario_store):
        result = invoke("system", "rm", "C2")
        assert "Aborted." in result.output
        assert scenario_store.get(SYSTEMS, "C2").is_ok()

    def test_rm(self, invoke, scenario_store):
        result = invoke("system", "rm", "C2", "--yes")
        assert result.exit_code == 0
        assert scenario_store.get(SYSTEMS, "C2").is_err()


class TestInterfaceCommands:

    def test_add(self, invoke):
        result = invoke("interface", "add", "G1", "X", "gRPC", "--directional")
        assert result.exit_code == 0
        assert "Created interface" in result.output

    def test_add_unknown_endpoint_fails(self, invoke):
        result = invoke("interface", "add", "G1", "ghost", "gRPC")
        assert result.exit_code == 1

    def test_edit(self, invoke, scenario_store):
        result = invoke("interface", "edit", "i-c1-g1", "--connection", "Kafka", "--directional")
        assert result.exit_code == 0

        row = scenario_store.get("interfaces", "i-c1-g1").unwrap()
        assert (row["connection"], row["directional"], row["system1_id"]) == ("Kafka", 1, "C1")

    def test_edit_missing(self, invoke):
        result = invoke("interface", "edit", "ghost", "--connection", "x")
        assert result.exit_code == 1
        assert "Interface not found" in result.output

    def test_rm(self, invoke, scenario_store):
        result = invoke("interface", "rm", "i-c2-x", "-y")
        assert result.exit_code == 0
        assert scenario_store.get("interfaces", "i-c2-x").is_err()


class TestHistoryCommands:

    def test_empty_history(self, invoke):
        result = invoke("history", "system", "C1")
        assert result.exit_code == 0
        assert "No revisions" in result.output

    def test_update_diff_panel(self, invoke):
        invoke("system", "edit", "C1", "--name", "Renamed")
        result = invoke("history", "system", "C1")
        assert result.exit_code == 0
        assert "UPDATE" in result.output
        assert "Renamed" in result.output

    def test_restore(self, invoke, scenario_store):
        invoke("system", "edit", "C1", "--name", "Renamed")
        (revision,) = [r for r in scenario_store.rows(REVISIONS) if r["entity_id"] == "C1"]

        result = invoke("restore", revision["id"])

        assert result.exit_code == 0
        assert "Restored revision" in result.output
        assert scenario_store.get(SYSTEMS, "C1").unwrap()["name"] == "Child One"

    def test_restore_unknown(self, invoke):
        result = invoke("restore", "ghost")
        assert result.exit_code == 1

    def test_invalid_entity_type(self, invoke):
        result = invoke("history", "widget", "C1")
        assert result.exit_code == 2
