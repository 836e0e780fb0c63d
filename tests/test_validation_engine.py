"""Tests for the validation engine."""

from __future__ import annotations

from envcheck.core.types import ConstraintKind, FieldType
from envcheck.schema.builder import (
    SchemaBuilder,
    byte_length,
    max_length,
    one_of,
    presence,
)
from envcheck.schema.models import ConstraintBinding, FieldDescriptor
from envcheck.schema.registry import FieldRegistry
from envcheck.validation.engine import ValidationEngine, collect_deprecations


def _evaluate(schema, source, **kwargs):
    registry = FieldRegistry.from_source(schema, source)
    return ValidationEngine(**kwargs).evaluate(registry)


class TestValidateField:
    def test_runs_every_constraint(self):
        descriptor = FieldDescriptor(
            name="NAME",
            field_type=FieldType.STRING,
            raw_value=None,
            resolved_value=None,
            constraints=(presence(), max_length(5)),
        )
        violations = ValidationEngine().validate_field(descriptor)
        assert [v.constraint for v in violations] == [
            ConstraintKind.PRESENCE,
            ConstraintKind.MAX_LENGTH,
        ]
        assert violations[0].message.startswith("NAME ")

    def test_optional_absent_skipped(self):
        descriptor = FieldDescriptor(
            name="NAME",
            field_type=FieldType.STRING,
            raw_value=None,
            resolved_value=None,
            optional=True,
            constraints=(presence(),),
        )
        assert ValidationEngine().validate_field(descriptor) == []

    def test_dependency_bindings_not_local(self):
        descriptor = FieldDescriptor(
            name="A",
            field_type=FieldType.STRING,
            raw_value="x",
            resolved_value="x",
            constraints=(ConstraintBinding(kind=ConstraintKind.REQUIRES, params={"field": "B"}),),
        )
        assert ValidationEngine().validate_field(descriptor) == []


class TestEvaluate:
    def test_database_url_and_bad_port(self, service_schema):
        outcome = _evaluate(
            service_schema, {"DATABASE_URL": "postgres://u:p@host/db", "PORT": "abc"}
        )
        assert not outcome.is_valid
        assert len(outcome.errors) == 1
        assert outcome.errors[0].field == "PORT"
        assert outcome.errors[0].constraint == ConstraintKind.NUMERIC
        assert outcome.errors_for("DATABASE_URL") == []

    def test_non_ascii_port_digits_rejected(self):
        schema = SchemaBuilder("s").number("PORT", optional=True).build()
        outcome = _evaluate(schema, {"PORT": "\u0663\u0660\u0660\u0660"})
        assert not outcome.is_valid
        assert outcome.errors[0].constraint == ConstraintKind.NUMERIC

    def test_ssl_key_without_cert(self, service_schema):
        outcome = _evaluate(
            service_schema, {"DATABASE_URL": "postgres://u:p@host/db", "SSL_KEY": "base64data"}
        )
        assert len(outcome.errors) == 1
        error = outcome.errors[0]
        assert error.field == "SSL_KEY"
        assert error.related == "SSL_CERT"
        assert error.constraint == ConstraintKind.REQUIRES

    def test_environment_enum(self, service_schema):
        outcome = _evaluate(
            service_schema, {"DATABASE_URL": "postgres://u:p@host/db", "ENVIRONMENT": "qa"}
        )
        assert [(e.field, e.constraint) for e in outcome.errors] == [
            ("ENVIRONMENT", ConstraintKind.ENUM)
        ]

    def test_environment_default_passes(self, service_schema):
        registry = FieldRegistry.from_source(
            service_schema, {"DATABASE_URL": "postgres://u:p@host/db"}
        )
        outcome = ValidationEngine().evaluate(registry)
        assert outcome.is_valid
        assert registry.resolve("ENVIRONMENT") == "production"

    def test_boolean_typo_is_not_an_error(self, service_schema):
        registry = FieldRegistry.from_source(
            service_schema, {"DATABASE_URL": "postgres://u:p@host/db", "FORCE_HTTPS": "yes"}
        )
        assert registry.resolve("FORCE_HTTPS") is False
        assert ValidationEngine().evaluate(registry).is_valid

    def test_collects_all_independent_violations(self):
        builder = SchemaBuilder("many")
        for i in range(5):
            builder.string(f"SECRET_{i}", byte_length(4, 8))
        outcome = _evaluate(builder.build(), {f"SECRET_{i}": "xx" for i in range(5)})
        assert len(outcome.errors) == 5
        assert outcome.invalid_fields() == [f"SECRET_{i}" for i in range(5)]

    def test_local_errors_precede_dependency_errors(self, service_schema):
        outcome = _evaluate(service_schema, {"SSL_KEY": "k", "PORT": "x"})
        kinds = [e.constraint for e in outcome.errors]
        assert kinds[-1] == ConstraintKind.REQUIRES
        assert ConstraintKind.REQUIRES not in kinds[:-1]

    def test_fail_fast_stops_at_first(self, service_schema):
        outcome = _evaluate(service_schema, {"SSL_KEY": "k", "PORT": "x"}, fail_fast=True)
        assert len(outcome.errors) == 1
        assert outcome.errors[0].field == "DATABASE_URL"

    def test_defaults_are_validated(self):
        builder = SchemaBuilder("bad-default")
        builder.string("MODE", one_of("a", "b"), default="c")
        outcome = _evaluate(builder.build(), {})
        assert len(outcome.errors) == 1


class TestDeprecations:
    def _schema(self):
        builder = SchemaBuilder("dep")
        builder.boolean("SUBDOMAINS_ENABLED", default=False, deprecated="Not supported")
        builder.string("LEGACY_TOKEN", deprecated="Use NEW_TOKEN")
        return builder.build()

    def test_default_value_not_reported(self):
        registry = FieldRegistry.from_source(self._schema(), {"SUBDOMAINS_ENABLED": "false"})
        assert collect_deprecations(registry) == []

    def test_non_default_value_reported(self):
        registry = FieldRegistry.from_source(
            self._schema(), {"SUBDOMAINS_ENABLED": "true", "LEGACY_TOKEN": "abc"}
        )
        notices = collect_deprecations(registry)
        assert [n.field for n in notices] == ["SUBDOMAINS_ENABLED", "LEGACY_TOKEN"]

    def test_deprecations_never_invalidate(self):
        registry = FieldRegistry.from_source(self._schema(), {"SUBDOMAINS_ENABLED": "true"})
        assert ValidationEngine().evaluate(registry).is_valid
