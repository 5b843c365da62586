"""Runtime configuration for the RCON console."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="RCON_CONSOLE_", env_file=".env", extra="ignore")

    app_name: str = "rcon-console"
    log_level: str = "INFO"
    log_file: str = "rcon-console.log"
    address: str = Field(default="", description="Default server address, host[:port].")
    password: str = ""
    poll_interval: int = Field(default=20, ge=1, description="Ticks between two status polls.")
    probe_timeout_seconds: float = Field(default=5.0, gt=0)
    tick_seconds: float = Field(default=0.25, gt=0, description="Period of the console tick pulse.")
    socket_timeout_seconds: float = Field(default=10.0, gt=0)
    default_port: int = Field(default=27015, ge=1, le=65535)
    cfg_dir: str = Field(default="cfg", description="Directory holding <name>.cfg command lists.")
    commands_file: str | None = Field(
        default=None,
        description="Optional command metadata file used for autocompletion.",
    )
    history_size: int = Field(default=500, ge=1)


settings = Settings()
