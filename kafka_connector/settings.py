"""
Process settings using Pydantic Settings.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class ConnectorSettings(BaseSettings):
    """Settings for the connector process, read from the environment."""

    prefix: Path = Field(default=Path("."), description="Directory holding the kafka/ resource tree")
    host: str = Field(default="0.0.0.0", description="Address the HTTP API binds to")
    port: int = Field(default=8000, description="Port the HTTP API listens on")
    log_level: str = Field(default="INFO", description="Log level for connector loggers")

    model_config = {
        "env_prefix": "KAFKA_CONNECTOR_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
