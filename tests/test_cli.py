"""Tests for the contract-views CLI."""

import pytest
import yaml

from contract_views import cli, config
from contract_views.cli import build_parser, main
from contract_views.types import Account, SortOrder


class TestArgParsing:
    def setup_method(self):
        self.parser = build_parser()

    def test_tree_default(self):
        args = self.parser.parse_args(["tree"])
        assert args.command == "tree"
        assert args.sort is None
        assert args.chain is None

    def test_sort_optional_order(self):
        assert self.parser.parse_args(["sort"]).order is None
        assert self.parser.parse_args(["sort", "code_id"]).order == "code_id"

    def test_contract_add(self):
        args = self.parser.parse_args(
            ["contract", "add", "counter", "5", "wasm1abc", "--creator", "wasm1me"]
        )
        assert args.contract_command == "add"
        assert args.code_id == "5"
        assert args.creator == "wasm1me"
        assert args.chain is None

    def test_import_beaker(self):
        args = self.parser.parse_args(["import-beaker", "--dir", "/tmp/p", "--force"])
        assert args.dir == "/tmp/p"
        assert args.force is True


class TestCommands:
    def test_add_and_show_tree(self, config_env, capsys):
        main(["contract", "add", "counter", "5", "wasm1abc"])
        main(["contract", "add", "escrow", "2", "wasm1esc"])
        main(["tree", "--sort", "code_id"])

        out = capsys.readouterr().out
        assert "Added contract: 5: counter (wasm1abc)" in out
        assert "Group 2" in out
        assert out.index("Group 2") < out.index("Group 5")

        stored = config.load_contracts()
        assert [c.chain_config for c in stored] == ["localnet", "localnet"]

    def test_add_invalid_code_id(self, config_env, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["contract", "add", "counter", "five", "wasm1abc"])
        assert exc.value.code == 1
        assert "Invalid code id" in capsys.readouterr().out
        assert config.load_contracts() == []

    def test_add_duplicate_address(self, config_env, capsys):
        main(["contract", "add", "counter", "5", "wasm1abc"])
        with pytest.raises(SystemExit):
            main(["contract", "add", "other", "6", "wasm1abc"])
        assert "already imported" in capsys.readouterr().out

    def test_tree_empty(self, config_env, capsys):
        main(["tree"])
        assert "No contracts on localnet" in capsys.readouterr().out

    def test_tree_hides_other_chains(self, config_env, capsys):
        main(["contract", "add", "here", "1", "wasm1here"])
        main(["contract", "add", "there", "1", "wasm1there", "--chain", "testnet"])
        capsys.readouterr()
        main(["tree"])
        out = capsys.readouterr().out
        assert "wasm1here" in out
        assert "wasm1there" not in out

    def test_sort_sets_config(self, config_env, capsys):
        main(["sort", "alphabetical"])
        assert config.get_sort_order() is SortOrder.ALPHABETICAL

    def test_sort_invalid(self, config_env):
        with pytest.raises(SystemExit):
            main(["sort", "by-date"])

    def test_sort_prompt_cancelled(self, config_env, monkeypatch, capsys):
        monkeypatch.setattr(cli, "_prompt_sort_order", lambda current: None)
        main(["sort"])
        assert "unchanged" in capsys.readouterr().out
        assert config.get_sort_order() is SortOrder.NONE

    def test_chain_switch(self, config_env, capsys):
        cfg = config.load_config()
        cfg["chains"].append({"name": "testnet"})
        config.save_config(cfg)
        main(["contract", "add", "there", "1", "wasm1there", "--chain", "testnet"])

        main(["chain", "testnet"])
        out = capsys.readouterr().out
        assert "Active chain: testnet (1 contract(s) visible)" in out

    def test_chain_unknown(self, config_env, capsys):
        with pytest.raises(SystemExit):
            main(["chain", "mainnet"])
        assert "Unknown chain" in capsys.readouterr().out

    def test_select_and_remove(self, config_env, capsys):
        main(["contract", "add", "counter", "5", "wasm1abc"])
        main(["contract", "select", "wasm1abc"])
        assert config.workspace_from_config().selected_contract == "wasm1abc"

        main(["contract", "remove", "wasm1abc"])
        assert config.load_contracts() == []
        assert config.workspace_from_config().selected_contract is None

    def test_remove_missing(self, config_env):
        with pytest.raises(SystemExit):
            main(["contract", "remove", "wasm1nope"])

    def test_add_and_remove_keep_invalid_stored_entries(self, config_env):
        kept = {"label": "keep", "address": "wasm1k", "code_id": "12x"}
        config.get_contracts_path().write_text(yaml.dump([kept]))

        main(["contract", "add", "new", "3", "wasm1n"])
        stored = yaml.safe_load(config.get_contracts_path().read_text())
        assert stored[0] == kept
        assert stored[1]["address"] == "wasm1n"

        main(["contract", "remove", "wasm1n"])
        assert yaml.safe_load(config.get_contracts_path().read_text()) == [kept]

    def test_add_refuses_address_of_invalid_entry(self, config_env, capsys):
        config.get_contracts_path().write_text(
            yaml.dump([{"label": "keep", "address": "wasm1k", "code_id": "12x"}])
        )
        with pytest.raises(SystemExit):
            main(["contract", "add", "again", "3", "wasm1k"])
        assert "already imported" in capsys.readouterr().out

    def test_corrupt_store_exits_without_writing(self, config_env, tmp_path, capsys):
        broken = "- label: alice\n  mnemonic: alice words\n- [\n"
        config.get_accounts_path().write_text(broken)
        (tmp_path / "Beaker.toml").write_text('[accounts.bob]\nmnemonic = "bob words"\n')

        with pytest.raises(SystemExit) as exc:
            main(["import-beaker", "--dir", str(tmp_path)])
        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().out
        assert config.get_accounts_path().read_text() == broken

    def test_import_beaker_and_list_accounts(self, config_env, tmp_path, capsys):
        project = tmp_path / "project"
        project.mkdir()
        (project / "Beaker.toml").write_text('[accounts.alice]\nmnemonic = "secret words"\n')

        main(["import-beaker", "--dir", str(project)])
        main(["accounts"])

        out = capsys.readouterr().out
        assert "Imported 1 account(s)" in out
        assert "alice" in out
        assert "secret words" not in out
        assert config.load_accounts() == [Account("alice", "secret words")]

    def test_import_beaker_parse_failure(self, config_env, tmp_path, capsys):
        (tmp_path / "beaker.toml").write_text("not toml = = =")
        with pytest.raises(SystemExit) as exc:
            main(["import-beaker", "--dir", str(tmp_path)])
        assert exc.value.code == 1
        assert "Beaker import failed" in capsys.readouterr().out
