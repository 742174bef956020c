from __future__ import annotations
import codecs
import dataclasses
import os
import pathlib
import typing as t

import yaml
from dotenv import load_dotenv

from sqlbatch.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_DRIVER,
    DEFAULT_ENCODING,
    DEFAULT_PORTS,
    ENV_DATABASE,
    ENV_DRIVER,
    ENV_HOST,
    ENV_LOG_FILE,
    ENV_PASSWORD,
    ENV_PORT,
    ENV_SCRIPT,
    ENV_USER,
)


class ConfigError(RuntimeError):
    """Raised for any user‑visible configuration problem."""


class Environment:
    """
    A thin value‑object holding the attributes required to open a database
    connection.  Nothing here talks to the database.
    """

    def __init__(self, name: str, d: dict[str, t.Any]) -> None:
        missing = [k for k in ("host", "database", "user", "password") if d.get(k) is None]
        if missing:
            raise ConfigError(
                f"Environment {name!r} is missing required setting(s): {', '.join(missing)}"
            )

        self.name: str = name
        self.host: str = str(d["host"])
        self.database: str = str(d["database"])
        self.user: str = str(d["user"])

        self.driver: str = str(d.get("driver") or DEFAULT_DRIVER).lower()
        if self.driver not in DEFAULT_PORTS:
            raise ConfigError(
                f"Unknown driver {self.driver!r} for {name!r}; "
                f"expected one of: {', '.join(sorted(DEFAULT_PORTS))}"
            )

        try:
            self.port: int = int(d.get("port") or DEFAULT_PORTS[self.driver])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid port {d.get('port')!r} for {name!r}") from exc

        # Allow `${ENV_VAR}` syntax for secrets
        raw_pwd: str = str(d["password"])
        if raw_pwd.startswith("${") and raw_pwd.endswith("}"):
            resolved = os.getenv(raw_pwd[2:-1])
            if resolved is None:
                raise ConfigError(f"Password variable {raw_pwd[2:-1]} is not set")
            self.password: str = resolved
        else:
            self.password = raw_pwd

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #
    def dsn(self) -> dict[str, t.Any]:
        """Return kwargs that mysql‑connector understands."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
        }

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


@dataclasses.dataclass(frozen=True)
class Settings:
    """Everything one run needs, resolved once at startup."""

    env: Environment
    script: pathlib.Path | None = None
    log_file: pathlib.Path | None = None
    encoding: str = DEFAULT_ENCODING

    def with_overrides(
        self,
        script: pathlib.Path | str | None = None,
        log_file: pathlib.Path | str | None = None,
    ) -> Settings:
        return dataclasses.replace(
            self,
            script=pathlib.Path(script) if script else self.script,
            log_file=pathlib.Path(log_file) if log_file else self.log_file,
        )

    def require_script(self) -> pathlib.Path:
        if self.script is None:
            raise ConfigError(
                f"No SQL script given.  Pass --file, set `script:` or {ENV_SCRIPT}."
            )
        return self.script


def _optional_path(value: t.Any) -> pathlib.Path | None:
    return pathlib.Path(str(value)).expanduser() if value else None


def from_environ(environ: t.Mapping[str, str] | None = None) -> Settings:
    """
    Build :class:`Settings` from ``DB_*`` variables (a ``.env`` file in the
    working directory is honoured but never overrides real variables).
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    d = {
        "driver": environ.get(ENV_DRIVER),
        "host": environ.get(ENV_HOST),
        "port": environ.get(ENV_PORT),
        "database": environ.get(ENV_DATABASE),
        "user": environ.get(ENV_USER),
        "password": environ.get(ENV_PASSWORD),
    }
    missing = [var for var, key in (
        (ENV_HOST, "host"),
        (ENV_DATABASE, "database"),
        (ENV_USER, "user"),
        (ENV_PASSWORD, "password"),
    ) if not d[key]]
    if missing:
        raise ConfigError(f"{', '.join(missing)} not set")

    return Settings(
        env=Environment("environ", d),
        script=_optional_path(environ.get(ENV_SCRIPT)),
        log_file=_optional_path(environ.get(ENV_LOG_FILE)),
    )


def load(path: pathlib.Path | str | None = None, env: str | None = None) -> Settings:
    """
    Parse *path* (or the default YAML) and return :class:`Settings`.

    Without an explicit *path* and without the default file, settings are
    taken from the process environment instead.
    """
    cfg_file = pathlib.Path(path) if path else DEFAULT_CONFIG_PATH
    if not cfg_file.exists():
        if path:
            raise ConfigError(f"Config file {cfg_file} not found.")
        return from_environ()

    with cfg_file.open(encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    env_name = env or raw.get("default_env")
    if not env_name:
        raise ConfigError("No environment specified and no default_env in config")

    try:
        entry = raw["environments"][env_name]
    except (KeyError, TypeError) as exc:
        raise ConfigError(f"Environment {env_name!r} not found in config") from exc
    if not isinstance(entry, dict):
        raise ConfigError(f"Environment {env_name!r} must be a mapping of connection settings")
    environment = Environment(env_name, entry)

    encoding = raw.get("encoding") or DEFAULT_ENCODING
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown script encoding {encoding!r}") from exc

    return Settings(
        env=environment,
        script=_optional_path(raw.get("script")),
        log_file=_optional_path(raw.get("log_file")),
        encoding=encoding,
    )
