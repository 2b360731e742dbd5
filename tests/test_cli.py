"""Tests for the operator CLI."""
import json

from click.testing import CliRunner

from foodtruck_pos.cli import cli


def test_init_db_seeds_default_users_once(tmp_path):
    url = f"sqlite:///{tmp_path / 'pos.db'}"
    runner = CliRunner()

    first = runner.invoke(cli, ["--database-url", url, "init-db"])
    second = runner.invoke(cli, ["--database-url", url, "init-db"])

    assert first.exit_code == 0, first.output
    assert "User created: admin / admin123 (admin)" in first.output
    assert "User created: Patricio / 123456 (seller)" in first.output
    assert second.exit_code == 0, second.output
    assert "User admin already exists" in second.output


def test_export_db_writes_one_file_per_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'pos.db'}"
    output = tmp_path / "backup"
    runner = CliRunner()
    runner.invoke(cli, ["--database-url", url, "init-db"])

    result = runner.invoke(cli, ["--database-url", url, "export-db", "--output", str(output)])

    assert result.exit_code == 0, result.output
    for table in ("users", "categories", "products", "sales"):
        assert (output / f"{table}.json").exists()

    users = json.loads((output / "users.json").read_text(encoding="utf-8"))
    assert {u["username"] for u in users} == {"admin", "Patricio"}
    assert all("passwordHash" not in u for u in users)
