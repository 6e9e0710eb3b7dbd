"""
Configuration management for the RDS engine version exporter.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from errors import ConfigError
from snapshot import CLASSIFICATION_POLICIES, POLICY_SKIP

INTERVAL_ENV = "EXPORTER_AWS_API_INTERVAL_SECONDS"
PORT_ENV = "EXPORTER_SERVER_PORT"

CATALOG_REFRESH_STARTUP = "startup"
CATALOG_REFRESH_CYCLE = "cycle"
CATALOG_REFRESH_POLICIES = (CATALOG_REFRESH_STARTUP, CATALOG_REFRESH_CYCLE)

TRUTHY = {"1", "true", "yes", "on"}


def get_env_integer(
    name: str,
    env: Optional[Mapping[str, str]] = None,
    default: Optional[int] = None,
) -> int:
    """
    Read an environment variable as an integer.

    Args:
        name: Variable name
        env: Mapping to read instead of os.environ
        default: Value used when the variable is unset; required if None

    Raises:
        ConfigError: If the variable is unset or not an integer
    """
    env = os.environ if env is None else env
    raw = env.get(name, "")
    if not raw:
        if default is not None:
            return default
        raise ConfigError(f"environment variable {name} should be set")
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"environment variable {name} could not be parsed: {e}") from e


@dataclass
class ExporterConfig:
    """Configuration for the exporter process."""

    interval_seconds: int
    server_port: int
    listen_addr: str = "0.0.0.0"
    region: Optional[str] = None
    profile: Optional[str] = None
    classification_policy: str = POLICY_SKIP
    catalog_refresh: str = CATALOG_REFRESH_STARTUP
    max_attempts: int = 5
    timeout: int = 60
    verbose: bool = False

    def __post_init__(self):
        if self.interval_seconds <= 0:
            raise ConfigError(
                f"interval must be a positive number of seconds, got {self.interval_seconds}"
            )
        if self.timeout <= 0:
            raise ConfigError(
                f"AWS timeout must be a positive number of seconds, got {self.timeout}"
            )
        if self.max_attempts <= 0:
            raise ConfigError(
                f"AWS max attempts must be at least 1, got {self.max_attempts}"
            )
        if not 0 < self.server_port < 65536:
            raise ConfigError(f"invalid server port: {self.server_port}")
        if self.classification_policy not in CLASSIFICATION_POLICIES:
            raise ConfigError(
                f"classification policy must be one of {CLASSIFICATION_POLICIES}, "
                f"got {self.classification_policy!r}"
            )
        if self.catalog_refresh not in CATALOG_REFRESH_POLICIES:
            raise ConfigError(
                f"catalog refresh must be one of {CATALOG_REFRESH_POLICIES}, "
                f"got {self.catalog_refresh!r}"
            )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ExporterConfig":
        """
        Create configuration from environment variables.

        Args:
            env: Mapping to read instead of os.environ

        Returns:
            ExporterConfig instance

        Raises:
            ConfigError: If a required variable is missing or invalid
        """
        env = os.environ if env is None else env
        return cls(
            interval_seconds=get_env_integer(INTERVAL_ENV, env),
            server_port=get_env_integer(PORT_ENV, env),
            listen_addr=env.get("EXPORTER_LISTEN_ADDR") or "0.0.0.0",
            region=env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or None,
            profile=env.get("AWS_PROFILE") or None,
            classification_policy=env.get("EXPORTER_CLASSIFICATION_POLICY") or POLICY_SKIP,
            catalog_refresh=env.get("EXPORTER_CATALOG_REFRESH")
            or CATALOG_REFRESH_STARTUP,
            max_attempts=get_env_integer("EXPORTER_AWS_MAX_ATTEMPTS", env, 5),
            timeout=get_env_integer("EXPORTER_AWS_TIMEOUT_SECONDS", env, 60),
            verbose=env.get("EXPORTER_VERBOSE", "").lower() in TRUTHY,
        )

    @classmethod
    def from_args(
        cls, args, env: Optional[Mapping[str, str]] = None
    ) -> "ExporterConfig":
        """
        Create configuration from command-line arguments.

        Flags left unset fall back to the environment.

        Args:
            args: Parsed argparse arguments
            env: Mapping to read instead of os.environ

        Returns:
            ExporterConfig instance
        """
        env = dict(os.environ if env is None else env)
        overrides = {
            INTERVAL_ENV: args.interval,
            PORT_ENV: args.port,
            "EXPORTER_LISTEN_ADDR": args.listen_addr,
            "AWS_REGION": args.region,
            "AWS_PROFILE": args.profile,
            "EXPORTER_CLASSIFICATION_POLICY": args.classification_policy,
            "EXPORTER_CATALOG_REFRESH": args.catalog_refresh,
        }
        for name, value in overrides.items():
            if value is not None:
                env[name] = str(value)
        if args.verbose:
            env["EXPORTER_VERBOSE"] = "true"

        return cls.from_env(env)
