# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Configuration models for the Sentry log transport."""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

DEFAULT_SERVER_NAME = "sentry-log-transport"
DEFAULT_ENVIRONMENT = "production"
DEFAULT_SAMPLE_RATE = 1.0
DEFAULT_MAX_BREADCRUMBS = 100


def _default(value: str | None, env_vars: tuple[str, ...], fallback: str) -> str:
    """Helper to pick an explicit value, then env vars in order, then fallback."""
    if value:
        return value
    for env_var in env_vars:
        env_value = os.getenv(env_var)
        if env_value:
            return env_value
    return fallback


@dataclass
class RemoteConfig:
    """Options forwarded to the remote client's initializer.

    Attributes:
        dsn: Sentry DSN (SENTRY_DSN env, then empty string)
        server_name: Server name reported with each event
        environment: Environment name (SENTRY_ENVIRONMENT, then ENVIRONMENT
            env, then "production")
        debug: Enable client debug output (set when SENTRY_DEBUG is present)
        sample_rate: Event sample rate (1.0)
        max_breadcrumbs: Breadcrumb buffer size (100)
        extra_options: Additional client options passed through unchanged
    """
    dsn: str | None = None
    server_name: str | None = None
    environment: str | None = None
    debug: bool | None = None
    sample_rate: float | None = None
    max_breadcrumbs: int | None = None
    extra_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RemoteConfig":
        """Create a RemoteConfig from a plain mapping.

        Keys that are not named fields are kept in extra_options.

        Args:
            data: Client options, may be None

        Returns:
            RemoteConfig instance
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)} - {"extra_options"}
        kwargs = {key: data.pop(key) for key in list(data) if key in known}
        extra_options = dict(data.pop("extra_options", None) or {})
        extra_options.update(data)
        return cls(extra_options=extra_options, **kwargs)

    def with_defaults(self) -> "RemoteConfig":
        """Return a copy with defaults applied for every unset field.

        Precedence: explicit value, specific env var, generic env var,
        hardcoded default.
        """
        debug = self.debug
        if not debug:
            debug = bool(os.getenv("SENTRY_DEBUG"))

        return RemoteConfig(
            dsn=_default(self.dsn, ("SENTRY_DSN",), ""),
            server_name=self.server_name or DEFAULT_SERVER_NAME,
            environment=_default(
                self.environment,
                ("SENTRY_ENVIRONMENT", "ENVIRONMENT"),
                DEFAULT_ENVIRONMENT,
            ),
            debug=debug,
            sample_rate=DEFAULT_SAMPLE_RATE if self.sample_rate is None else self.sample_rate,
            max_breadcrumbs=(
                DEFAULT_MAX_BREADCRUMBS if self.max_breadcrumbs is None else self.max_breadcrumbs
            ),
            extra_options=dict(self.extra_options),
        )

    def to_init_kwargs(self) -> dict[str, Any]:
        """Flatten into keyword arguments for the client initializer."""
        kwargs = dict(self.extra_options)
        kwargs.update(
            dsn=self.dsn,
            server_name=self.server_name,
            environment=self.environment,
            debug=self.debug,
            sample_rate=self.sample_rate,
            max_breadcrumbs=self.max_breadcrumbs,
        )
        return kwargs


@dataclass
class TransportOptions:
    """Construction options for SentryTransport.

    Attributes:
        sentry: Remote client options (RemoteConfig or plain mapping)
        levels_map: Overlay on the default severity map
        skip_sentry_init: Assume the client is already initialized
        auto_clear_scope: Clear the reporting scope before every record;
            only an explicit False disables it
        silent: Suppress all remote calls
    """
    sentry: RemoteConfig | Mapping[str, Any] | None = None
    levels_map: Mapping[str, str] | None = None
    skip_sentry_init: bool = False
    auto_clear_scope: bool | None = True
    silent: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "TransportOptions":
        """Create TransportOptions from a plain mapping.

        Args:
            data: Option values keyed by field name

        Returns:
            TransportOptions instance

        Raises:
            ValueError: If data contains unknown option names
        """
        data = dict(data or {})
        allowed = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ValueError(
                f"Unknown transport options: {unknown}. "
                f"Allowed options: {sorted(allowed)}"
            )
        return cls(**data)

    @property
    def remote_config(self) -> RemoteConfig:
        """Remote options as a RemoteConfig, defaults not yet applied."""
        if isinstance(self.sentry, RemoteConfig):
            return self.sentry
        return RemoteConfig.from_dict(self.sentry)

    @property
    def clears_scope(self) -> bool:
        return self.auto_clear_scope is not False
