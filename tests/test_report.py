"""Tests for report formatting and the command-line entry point."""

from __future__ import annotations

import asyncio
import json

from envcheck.cli import main, parse_args
from envcheck.core.types import ConstraintKind
from envcheck.report import export_report, format_report
from envcheck.schema.models import DeprecationNotice, FieldViolation, ValidationOutcome

from tests.conftest import VALID_SECRET

INVALID = ValidationOutcome(
    errors=(
        FieldViolation(
            field="PORT",
            constraint=ConstraintKind.NUMERIC,
            message="PORT must be a number conforming to the specified constraints",
        ),
        FieldViolation(
            field="SSL_KEY",
            constraint=ConstraintKind.REQUIRES,
            message="SSL_KEY cannot be used without SSL_CERT",
            related="SSL_CERT",
        ),
    )
)


class TestFormatReport:
    def test_lists_every_error(self):
        text = format_report(INVALID, schema_name="server")
        assert "FAIL" in text
        assert "(server)" in text
        assert "PORT must be a number" in text
        assert "SSL_KEY cannot be used without SSL_CERT" in text

    def test_valid(self):
        text = format_report(ValidationOutcome())
        assert "PASS" in text
        assert "Errors    : 0" in text

    def test_deprecations(self):
        notices = [DeprecationNotice(field="SUBDOMAINS_ENABLED", message="Not supported")]
        text = format_report(ValidationOutcome(), notices)
        assert "Deprecated settings" in text
        assert "SUBDOMAINS_ENABLED" in text


class TestExportReport:
    def test_json(self, tmp_path):
        path = tmp_path / "out" / "report.json"
        export_report(INVALID, path, schema_name="server")
        data = json.loads(path.read_text())
        assert data["is_valid"] is False
        assert data["schema"] == "server"
        assert data["errors"][1] == {
            "field": "SSL_KEY",
            "constraint": "requires",
            "message": "SSL_KEY cannot be used without SSL_CERT",
            "related": "SSL_CERT",
        }


class TestCli:
    def _env_file(self, tmp_path, **values):
        path = tmp_path / ".env"
        path.write_text("".join(f"{k}={v}\n" for k, v in values.items()))
        return path

    def test_parse_args(self):
        args = parse_args(["--env-file", "x.env", "--fail-fast", "--no-os-environ"])
        assert args.env_file == "x.env"
        assert args.fail_fast is True
        assert args.no_os_environ is True
        assert args.schema is None

    def test_valid_environment_exits_zero(self, tmp_path, capsys):
        env_file = self._env_file(
            tmp_path,
            SECRET_KEY=VALID_SECRET,
            UTILS_SECRET="utils",
            DATABASE_URL="postgres://u:p@localhost/app",
            URL="http://localhost:3000",
        )
        code = asyncio.run(main(["--env-file", str(env_file), "--no-os-environ"]))
        assert code == 0
        assert "PASS" in capsys.readouterr().out

    def test_invalid_environment_exits_nonzero(self, tmp_path, capsys):
        env_file = self._env_file(tmp_path, PORT="abc")
        output = tmp_path / "report.json"
        code = asyncio.run(
            main(["--env-file", str(env_file), "--no-os-environ", "--output", str(output)])
        )
        assert code == 1
        out = capsys.readouterr().out
        assert "SECRET_KEY" in out
        assert "PORT" in out
        assert json.loads(output.read_text())["is_valid"] is False

    def test_custom_schema(self, tmp_path):
        schema = tmp_path / "schema.yml"
        schema.write_text("name: tiny\nfields:\n  - name: TOKEN\n    constraints: [presence]\n")
        env_file = self._env_file(tmp_path, TOKEN="t")
        code = asyncio.run(
            main(["--schema", str(schema), "--env-file", str(env_file), "--no-os-environ"])
        )
        assert code == 0

    def test_bad_schema(self, tmp_path, capsys):
        schema = tmp_path / "schema.yml"
        schema.write_text("name: tiny\nfields:\n  - name: A\n    constraints: [regex]\n")
        code = asyncio.run(main(["--schema", str(schema), "--no-os-environ"]))
        assert code == 2
        assert "invalid schema" in capsys.readouterr().out

    def test_invalid_field_value_in_schema(self, tmp_path, capsys):
        schema = tmp_path / "schema.yml"
        schema.write_text("name: tiny\nfields:\n  - name: A\n    optional: maybe\n")
        code = asyncio.run(main(["--schema", str(schema), "--no-os-environ"]))
        assert code == 2
        assert "invalid schema" in capsys.readouterr().out

    def test_malformed_yaml_schema(self, tmp_path, capsys):
        schema = tmp_path / "schema.yml"
        schema.write_text("name: tiny\nfields: [\n")
        code = asyncio.run(main(["--schema", str(schema), "--no-os-environ"]))
        assert code == 2
        assert "invalid schema" in capsys.readouterr().out
