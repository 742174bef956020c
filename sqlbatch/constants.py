from __future__ import annotations
import pathlib

COMMENT_PREFIX = "//"
TERMINATOR = ";"

DEFAULT_CONFIG_PATH = pathlib.Path("sqlbatch.config.yml")
DEFAULT_DRIVER = "mysql"
DEFAULT_PORTS = {"mysql": 3306, "oracle": 1521}
DEFAULT_ENCODING = "utf-8"

# Environment variables read when no YAML config is present
ENV_DRIVER = "DB_DRIVER"
ENV_HOST = "DB_HOST"
ENV_PORT = "DB_PORT"
ENV_USER = "DB_USER"
ENV_PASSWORD = "DB_PASSWORD"
ENV_DATABASE = "DB_NAME"
ENV_SCRIPT = "FILE_NAME"
ENV_LOG_FILE = "LOG_FILE_NAME"

LOG_FORMAT = "%(asctime)s %(name)s:[%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
