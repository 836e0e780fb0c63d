"""Schema for the collaborative knowledge-base server's process environment."""

from __future__ import annotations

from envcheck.schema.builder import (
    SchemaBuilder,
    byte_length,
    contains,
    email,
    equals,
    max_length,
    one_of,
    presence,
    url,
)
from envcheck.schema.models import SchemaDefinition

ENVIRONMENTS = ["development", "production", "staging", "test"]

PG_SSL_MODES = ["disable", "allow", "require", "prefer", "verify-ca", "verify-full"]

# Interface languages with a maintained translation.
LANGUAGES = [
    "en_US",
    "cs_CZ",
    "de_DE",
    "es_ES",
    "fa_IR",
    "fr_FR",
    "he_IL",
    "id_ID",
    "it_IT",
    "ja_JP",
    "ko_KR",
    "nl_NL",
    "pl_PL",
    "pt_BR",
    "pt_PT",
    "ru_RU",
    "sv_SE",
    "tr_TR",
    "uk_UA",
    "vi_VN",
    "zh_CN",
    "zh_TW",
]


def _core(b: SchemaBuilder) -> None:
    b.string(
        "ENVIRONMENT",
        one_of(*ENVIRONMENTS),
        default="production",
        env_keys=["ENVIRONMENT", "NODE_ENV"],
        description="The current environment name.",
    )
    b.string(
        "SECRET_KEY",
        byte_length(32, 64),
        description="Key used for encrypting data. Changing it logs every user out.",
    )
    b.string(
        "UTILS_SECRET",
        presence(),
        description="Secret passed to the cron utility endpoint to trigger scheduled tasks.",
    )
    b.string("DATABASE_URL", presence(), url(protocols=["postgres"], require_tld=False))
    b.string(
        "DATABASE_CONNECTION_POOL_URL",
        url(protocols=["postgres"], require_tld=False),
        optional=True,
    )
    b.number("DATABASE_CONNECTION_POOL_MIN", optional=True)
    b.number("DATABASE_CONNECTION_POOL_MAX", optional=True)
    b.string(
        "PGSSLMODE",
        one_of(*PG_SSL_MODES),
        optional=True,
        description="Passed through to Postgres; 'disable' turns off SSL to the database.",
    )
    b.string(
        "REDIS_URL",
        presence(),
        url(protocols=["redis", "rediss", "ioredis"], require_tld=False),
        optional=True,
    )
    b.string(
        "URL",
        presence(),
        url(require_tld=False),
        description="Fully qualified, external facing domain name of the server.",
    )
    b.string("CDN_URL", url(), optional=True)
    b.string(
        "COLLABORATION_URL",
        url(protocols=["http", "https", "ws", "wss"], require_tld=False),
        optional=True,
    )
    b.number("PORT", optional=True, description="Port the server listens on.")
    b.string("DEBUG", description="Optional extra debugging, comma separated.")
    b.number(
        "WEB_CONCURRENCY",
        optional=True,
        description="Number of processes to spawn; roughly available memory / 512MB.",
    )
    b.string("SSL_KEY", optional=True, description="Base64 encoded private key.")
    b.string("SSL_CERT", optional=True, description="Base64 encoded public certificate.")
    b.mutually_requires("SSL_KEY", "SSL_CERT")
    b.string(
        "DEPLOYMENT",
        equals("hosted"),
        optional=True,
        description="Should always be left unset in a self-hosted environment.",
    )
    b.string("TEAM_LOGO", description="Custom logo on the authentication screen.")
    b.string("DEFAULT_LANGUAGE", one_of(*LANGUAGES), default="en_US")
    b.string("SERVICES", default="collaboration,websockets,worker,web")
    b.boolean(
        "FORCE_HTTPS",
        default=True,
        description="Redirect to https in production unless SSL terminates upstream.",
    )
    b.boolean(
        "SUBDOMAINS_ENABLED",
        default=False,
        deprecated="The community edition does not support subdomains",
    )
    b.boolean(
        "TELEMETRY",
        default=True,
        env_keys=["ENABLE_UPDATES", "TELEMETRY"],
        description="Send anonymized statistics to the maintainers.",
    )
    b.number(
        "MAXIMUM_IMPORT_SIZE",
        default=5120000,
        description="Separate size limit for imports, which may exceed attachments.",
    )
    b.string(
        "ALLOWED_DOMAINS",
        env_keys=["ALLOWED_DOMAINS", "GOOGLE_ALLOWED_DOMAINS"],
        description="Comma separated list of allowed sign-in domains.",
    )


def _email(b: SchemaBuilder) -> None:
    b.string("SMTP_HOST")
    b.number("SMTP_PORT", optional=True)
    b.string("SMTP_USERNAME")
    b.string("SMTP_PASSWORD")
    b.string(
        "SMTP_FROM_EMAIL",
        email(allow_display_name=True, allow_ip_domain=True),
        optional=True,
    )
    b.string(
        "SMTP_REPLY_EMAIL",
        email(allow_display_name=True, allow_ip_domain=True),
        optional=True,
    )
    b.string("SMTP_TLS_CIPHERS")
    b.boolean("SMTP_SECURE", default=True)


def _monitoring(b: SchemaBuilder) -> None:
    b.string("SENTRY_DSN", url(), optional=True)
    b.string("RELEASE")
    b.string("DEFAULT_AVATAR_HOST", url(), default="https://tiley.herokuapp.com")
    b.string("GOOGLE_ANALYTICS_ID", contains("UA-"), optional=True)
    b.string("DD_API_KEY")


def _authentication(b: SchemaBuilder) -> None:
    b.string("GOOGLE_CLIENT_ID", optional=True)
    b.string("GOOGLE_CLIENT_SECRET", optional=True)
    b.mutually_requires("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET")

    b.string("SLACK_CLIENT_ID", optional=True, env_keys=["SLACK_CLIENT_ID", "SLACK_KEY"])
    b.string(
        "SLACK_CLIENT_SECRET", optional=True, env_keys=["SLACK_CLIENT_SECRET", "SLACK_SECRET"]
    )
    b.mutually_requires("SLACK_CLIENT_ID", "SLACK_CLIENT_SECRET")
    b.string("SLACK_VERIFICATION_TOKEN", optional=True)
    b.requires("SLACK_VERIFICATION_TOKEN", "SLACK_CLIENT_ID")
    b.string("SLACK_APP_ID", optional=True)
    b.requires("SLACK_APP_ID", "SLACK_CLIENT_ID")
    b.boolean("SLACK_MESSAGE_ACTIONS", default=False, optional=True)

    b.string("AZURE_CLIENT_ID", optional=True)
    b.string("AZURE_CLIENT_SECRET", optional=True)
    b.mutually_requires("AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET")
    b.string("AZURE_RESOURCE_APP_ID", optional=True)
    b.requires("AZURE_RESOURCE_APP_ID", "AZURE_CLIENT_ID")

    b.string("OIDC_CLIENT_ID", optional=True)
    b.string("OIDC_CLIENT_SECRET", optional=True)
    b.string(
        "OIDC_DISPLAY_NAME",
        max_length(50),
        default="OpenID Connect",
        description="Provider name shown on the sign-in button.",
    )
    b.string("OIDC_AUTH_URI", url(), optional=True)
    b.string("OIDC_TOKEN_URI", url(), optional=True)
    b.string("OIDC_USERINFO_URI", url(), optional=True)
    for companion in (
        "OIDC_CLIENT_SECRET",
        "OIDC_AUTH_URI",
        "OIDC_TOKEN_URI",
        "OIDC_USERINFO_URI",
        "OIDC_DISPLAY_NAME",
    ):
        b.requires("OIDC_CLIENT_ID", companion)
    b.requires("OIDC_CLIENT_SECRET", "OIDC_CLIENT_ID")
    b.string("OIDC_USERNAME_CLAIM", default="preferred_username")
    b.string("OIDC_SCOPES", default="openid profile email")


def server_schema() -> SchemaDefinition:
    """Build the server environment schema."""
    builder = SchemaBuilder("server")
    _core(builder)
    _email(builder)
    _monitoring(builder)
    _authentication(builder)
    return builder.build()
