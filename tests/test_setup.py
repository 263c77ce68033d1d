"""Tests for the programmatic setup API."""

import json
import logging

import yaml

from matrix_stack_setup import setup as setup_mod
from matrix_stack_setup.setup import (
    RENDERERS,
    find_existing_state,
    finalize_permissions,
    generate_configuration,
    render_artifacts,
    write_artifacts,
)


class TestFindExistingState:
    """Tests for find_existing_state function."""

    def test_empty_directory(self, tmp_path):
        assert find_existing_state(tmp_path) == []

    def test_detects_compose_file(self, tmp_path):
        (tmp_path / "docker-compose.yml").write_text("version: '3.8'\n")

        assert find_existing_state(tmp_path) == [tmp_path / "docker-compose.yml"]

    def test_detects_data_directory(self, tmp_path):
        (tmp_path / "data").mkdir()

        assert find_existing_state(tmp_path) == [tmp_path / "data"]

    def test_ignores_other_files(self, tmp_path):
        (tmp_path / ".env").write_text("DOMAIN_NAME=chat.example.org\n")

        assert find_existing_state(tmp_path) == []


class TestRenderAndWrite:
    """Tests for render_artifacts and write_artifacts."""

    def test_renders_all_five_artifacts(self, settings, secrets):
        rendered = render_artifacts(settings, secrets)

        assert set(rendered) == {
            "docker-compose.yml",
            "config.yaml",
            "element-config.json",
            "nginx/matrix.conf",
            "data/synapse/homeserver.yaml",
        }

    def test_rendering_is_deterministic(self, settings, secrets):
        assert render_artifacts(settings, secrets) == render_artifacts(settings, secrets)

    def test_writes_files_and_directory_tree(self, tmp_path, settings, secrets):
        write_artifacts(tmp_path, render_artifacts(settings, secrets))

        for directory in ("data/synapse", "data/postgres", "data/certs", "nginx"):
            assert (tmp_path / directory).is_dir()
        for relative in RENDERERS:
            assert (tmp_path / relative).is_file()

        yaml.safe_load((tmp_path / "docker-compose.yml").read_text())
        yaml.safe_load((tmp_path / "config.yaml").read_text())
        yaml.safe_load((tmp_path / "data/synapse/homeserver.yaml").read_text())
        json.loads((tmp_path / "element-config.json").read_text())

    def test_overwrites_previous_output(self, tmp_path, settings, secrets):
        compose = tmp_path / "docker-compose.yml"
        compose.write_text("stale\n")

        write_artifacts(tmp_path, render_artifacts(settings, secrets))

        assert compose.read_text() != "stale\n"


class TestFinalizePermissions:
    """Tests for finalize_permissions function."""

    def test_applies_owner_and_mode(self, tmp_path, monkeypatch):
        (tmp_path / "data" / "synapse").mkdir(parents=True)
        (tmp_path / "data" / "synapse" / "homeserver.yaml").write_text("")
        (tmp_path / "data" / "postgres" / "base").mkdir(parents=True)
        chowned, chmodded = [], []
        monkeypatch.setattr(setup_mod.os, "chown", lambda path, uid, gid: chowned.append((path, uid, gid)))
        monkeypatch.setattr(setup_mod.os, "chmod", lambda path, mode: chmodded.append((path, mode)))

        assert finalize_permissions(tmp_path) is True

        assert (tmp_path / "data" / "synapse", 991, 991) in chowned
        assert (tmp_path / "data" / "synapse" / "homeserver.yaml", 991, 991) in chowned
        assert (tmp_path / "data" / "postgres" / "base", 0o777) in chmodded

    def test_failures_are_logged_not_raised(self, tmp_path, monkeypatch, caplog):
        (tmp_path / "data" / "synapse").mkdir(parents=True)
        (tmp_path / "data" / "postgres").mkdir(parents=True)

        def deny(*args):
            raise PermissionError("Operation not permitted")

        monkeypatch.setattr(setup_mod.os, "chown", deny)
        monkeypatch.setattr(setup_mod.os, "chmod", deny)

        with caplog.at_level(logging.WARNING, logger="matrix_stack_setup.setup"):
            assert finalize_permissions(tmp_path) is False

        assert "Could not chown data/synapse" in caplog.text
        assert "Could not relax permissions on data/postgres" in caplog.text


class TestGenerateConfiguration:
    """Tests for generate_configuration function."""

    def test_uses_given_secrets(self, tmp_path, monkeypatch, settings, secrets):
        monkeypatch.setattr(setup_mod, "finalize_permissions", lambda base_dir: True)

        used = generate_configuration(tmp_path, settings, secrets)

        assert used is secrets
        homeserver = yaml.safe_load((tmp_path / "data/synapse/homeserver.yaml").read_text())
        assert homeserver["registration_shared_secret"] == secrets.registration_shared_secret

    def test_generates_fresh_secrets_each_run(self, tmp_path, monkeypatch, settings):
        monkeypatch.setattr(setup_mod, "finalize_permissions", lambda base_dir: True)

        first = generate_configuration(tmp_path, settings)
        second = generate_configuration(tmp_path, settings)

        assert first != second
        manifest = yaml.safe_load((tmp_path / "docker-compose.yml").read_text())
        assert manifest["services"]["db"]["environment"]["POSTGRES_PASSWORD"] == second.postgres_password

    def test_reports_progress_and_permission_failure(self, tmp_path, monkeypatch, settings, secrets):
        monkeypatch.setattr(setup_mod, "finalize_permissions", lambda base_dir: False)
        messages = []

        generate_configuration(tmp_path, settings, secrets, callback=messages.append)

        assert messages[0] == "Generating automatic parameters..."
        assert "Finalizing permissions..." in messages
        assert messages[-1].startswith("Some permissions could not be changed")
