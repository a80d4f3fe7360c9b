"""
CLI smoke tests for proofx_cli.main

Tests:
- build / prove / verify over addresses given on the command line
- registry subcommands against a JSON store in a temp directory
- Error mapping to exit codes and JSON error output
- config command
"""
import json

import pytest

from core.merkle import build_tree
from proofx_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)
from fixtures import checksummed, make_address, make_addresses


@pytest.fixture
def cli_env(clean_env, tmp_path):
    """Run the CLI from an empty temp directory with no config files."""
    clean_env.chdir(tmp_path)
    clean_env.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def members():
    return make_addresses(4)


class TestParser:

    def test_no_command(self, cli_env):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_registry_subcommands_parse(self):
        parser = create_parser()
        args = parser.parse_args(
            ["registry", "--store", "r.json", "register", "0x" + "ab" * 32,
             "--caller", make_address(0), "--list-size", "3"]
        )
        assert args.registry_command == "register"
        assert args.store == "r.json"
        assert args.list_size == 3
        assert args.fee is None


class TestBuildProveVerify:

    def test_build_prints_root(self, cli_env, members, capsys):
        assert main(["build", *members]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert build_tree(members).root_hex in out

    def test_build_json(self, cli_env, members, capsys):
        assert main(["build", *members, "--json"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["merkle_root"] == build_tree(members).root_hex
        assert data["list_size"] == 4
        assert data["depth"] == 3

    def test_build_writes_proofs(self, cli_env, members):
        out_file = cli_env / "out" / "proofs.json"
        assert main(["build", *members, "--out", str(out_file)]) == EXIT_SUCCESS

        data = json.loads(out_file.read_text())
        assert data["merkle_root"] == build_tree(members).root_hex
        assert len(data["proofs"]) == 4

    def test_build_invalid_address(self, cli_env, members, capsys):
        assert main(["build", *members, "0x1234"]) == EXIT_RUNTIME_ERROR
        assert "INVALID_INPUT" in capsys.readouterr().err

    def test_prove_then_verify_file(self, cli_env, members, capsys):
        proof_file = cli_env / "proof.json"
        target = checksummed(members[1])
        assert main(["prove", *members, "--address", target, "--out", str(proof_file)]) == EXIT_SUCCESS

        assert main(["verify", "--proof-file", str(proof_file)]) == EXIT_SUCCESS
        assert "VALID" in capsys.readouterr().out

    def test_verify_hand_written_checksummed_file(self, cli_env, members, capsys):
        main(["prove", *members, "--address", members[1]])
        doc = json.loads(capsys.readouterr().out)
        doc["address"] = checksummed(doc["address"])
        proof_file = cli_env / "edited.json"
        proof_file.write_text(json.dumps(doc))

        assert main(["verify", "--proof-file", str(proof_file)]) == EXIT_SUCCESS

    def test_verify_against_other_root(self, cli_env, members, capsys):
        proof_file = cli_env / "proof.json"
        main(["prove", *members, "--address", members[0], "--out", str(proof_file)])
        other_root = build_tree(make_addresses(3, start=50)).root_hex

        code = main(["verify", "--proof-file", str(proof_file), "--root", other_root])
        assert code == EXIT_VERIFICATION_FAILED
        assert "INVALID" in capsys.readouterr().out

    def test_verify_components(self, cli_env, members, capsys):
        main(["prove", *members, "--address", members[2]])
        doc = json.loads(capsys.readouterr().out)

        code = main(
            ["verify", "--root", doc["merkle_root"], "--address", members[2],
             "--proof", *doc["proof"], "--json"]
        )
        assert code == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["valid"] is True

    def test_verify_non_member(self, cli_env, members, capsys):
        main(["prove", *members, "--address", members[2]])
        doc = json.loads(capsys.readouterr().out)

        code = main(
            ["verify", "--root", doc["merkle_root"], "--address", make_address("outsider"),
             "--proof", *doc["proof"]]
        )
        assert code == EXIT_VERIFICATION_FAILED

    def test_verify_missing_arguments(self, cli_env):
        assert main(["verify", "--address", make_address(0)]) == EXIT_RUNTIME_ERROR

    def test_verify_malformed_proof_file(self, cli_env, capsys):
        bad = cli_env / "bad.json"
        bad.write_text(json.dumps({"address": "0x12", "merkle_root": "0x00"}))
        assert main(["verify", "--proof-file", str(bad)]) == EXIT_RUNTIME_ERROR
        assert "INVALID_INPUT" in capsys.readouterr().err

    def test_prove_non_member(self, cli_env, members, capsys):
        code = main(["prove", *members, "--address", make_address("outsider"), "--json"])
        assert code == EXIT_RUNTIME_ERROR
        assert json.loads(capsys.readouterr().out)["code"] == "NOT_FOUND"


class TestRegistryCommands:

    def _registry(self, store, *argv):
        return main(["registry", "--store", str(store), *argv])

    def test_register_show_update_remove(self, cli_env, members, capsys):
        store = cli_env / "registry.json"
        root = build_tree(members).root_hex
        alice = make_address("alice")

        assert self._registry(store, "register", root, "--caller", alice,
                              "--list-size", "4", "--description", "drop") == EXIT_SUCCESS
        capsys.readouterr()

        assert self._registry(store, "show", root, "--json") == EXIT_SUCCESS
        entry = json.loads(capsys.readouterr().out)
        assert entry["creator"] == alice
        assert entry["is_active"] is True

        assert self._registry(store, "update", root, "--caller", alice,
                              "--description", "drop v2") == EXIT_SUCCESS
        assert self._registry(store, "remove", root, "--caller", alice) == EXIT_SUCCESS
        capsys.readouterr()

        assert self._registry(store, "show", root, "--json") == EXIT_SUCCESS
        entry = json.loads(capsys.readouterr().out)
        assert entry["description"] == "drop v2"
        assert entry["is_active"] is False

    def test_second_registration_charged(self, cli_env, capsys):
        store = cli_env / "registry.json"
        alice = make_address("alice")
        root_a = build_tree(make_addresses(2)).root_hex
        root_b = build_tree(make_addresses(3)).root_hex

        self._registry(store, "register", root_a, "--caller", alice, "--list-size", "2")
        capsys.readouterr()

        code = self._registry(store, "register", root_b, "--caller", alice,
                              "--list-size", "3", "--fee", "0", "--json")
        assert code == EXIT_RUNTIME_ERROR
        error = json.loads(capsys.readouterr().out)
        assert error["code"] == "INSUFFICIENT_FEE"

        # Without --fee the required fee is paid
        assert self._registry(store, "register", root_b, "--caller", alice,
                              "--list-size", "3") == EXIT_SUCCESS

    def test_non_creator_rejected(self, cli_env, members, capsys):
        store = cli_env / "registry.json"
        root = build_tree(members).root_hex
        self._registry(store, "register", root, "--caller", make_address("alice"), "--list-size", "4")

        code = self._registry(store, "remove", root, "--caller", make_address("bob"))
        assert code == EXIT_RUNTIME_ERROR
        assert "UNAUTHORIZED" in capsys.readouterr().err

    def test_show_unknown(self, cli_env, capsys):
        code = self._registry(cli_env / "registry.json", "show", "0x" + "cd" * 32)
        assert code == EXIT_RUNTIME_ERROR
        assert "NOT_FOUND" in capsys.readouterr().err

    def test_newcomer_and_fee(self, cli_env, members, capsys):
        store = cli_env / "registry.json"
        alice = make_address("alice")

        assert self._registry(store, "newcomer", alice, "--json") == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["is_newcomer"] is True

        self._registry(store, "register", build_tree(members).root_hex,
                       "--caller", alice, "--list-size", "4")
        capsys.readouterr()

        assert self._registry(store, "fee", "--caller", alice, "--json") == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["required_fee"] == data["platform_fee"] > 0

    def test_set_fee_owner_only(self, cli_env, clean_env, capsys):
        store = cli_env / "registry.json"
        owner = make_address("owner")
        clean_env.setenv("PROOFX_OWNER_ADDRESS", owner)

        assert self._registry(store, "set-fee", "5", "--caller", make_address("bob")) == EXIT_RUNTIME_ERROR
        assert self._registry(store, "set-fee", "5", "--caller", owner) == EXIT_SUCCESS
        capsys.readouterr()

        assert self._registry(store, "fee", "--json") == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["platform_fee"] == 5

    def test_store_from_env(self, cli_env, clean_env, members):
        store = cli_env / "env-registry.json"
        clean_env.setenv("PROOFX_STORE_PATH", str(store))

        code = main(["registry", "register", build_tree(members).root_hex,
                     "--caller", make_address("alice"), "--list-size", "4"])
        assert code == EXIT_SUCCESS
        assert store.exists()


class TestConfigCommand:

    def test_prints_effective_config(self, cli_env, clean_env, capsys):
        clean_env.setenv("PROOFX_PLATFORM_FEE", "123")
        assert main(["config"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["registry"]["platform_fee"] == 123

    def test_reads_yaml_in_cwd(self, cli_env, capsys):
        (cli_env / "proofx.yaml").write_text("registry:\n  platform_fee: 9\n")
        assert main(["config"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["registry"]["platform_fee"] == 9

    def test_explicit_config_path(self, cli_env, capsys):
        path = cli_env / "custom.yaml"
        path.write_text("logging:\n  level: WARNING\n")
        assert main(["--config", str(path), "config"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["logging"]["level"] == "WARNING"

    def test_missing_config_file(self, cli_env):
        assert main(["--config", str(cli_env / "absent.yaml"), "config"]) == EXIT_RUNTIME_ERROR
