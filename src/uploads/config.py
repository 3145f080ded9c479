# src/uploads/config.py
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

ENV_PREFIX = "FA_"
SERVICE_NAME = os.getenv("POWERTOOLS_SERVICE_NAME", "upload-status")

def _get(environ: Mapping[str, str], name: str, prefix: str = ENV_PREFIX) -> str:
    return (environ.get(prefix + name.upper()) or "").strip()

@dataclass(frozen=True)
class Config:
    database_connection_string: str = ""
    file_uploads_bucket_name: str = ""

    def require_connection_string(self) -> str:
        if not self.database_connection_string:
            raise ConfigurationError(
                f"{ENV_PREFIX}DATABASE_CONNECTION_STRING is empty, can't connect to the metadata database"
            )
        return self.database_connection_string

def load_config(environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX) -> Config:
    # read once per invocation; missing options surface as empty strings
    env = os.environ if environ is None else environ
    return Config(
        database_connection_string=_get(env, "database_connection_string", prefix),
        file_uploads_bucket_name=_get(env, "file_uploads_bucket_name", prefix),
    )
