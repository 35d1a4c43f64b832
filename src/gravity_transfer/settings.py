"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    DEFAULT_ETH_RPC_URL,
    DEFAULT_HUB_CHAIN_ID,
    DEFAULT_LCD_URL,
    DEFAULT_RELAY_INFO_URL,
    GRAVITY_ETH_CONTRACT,
)

load_dotenv()

SECRET_FIELDS = {"eth_private_key"}


class TomlConfigSource(PydanticBaseSettingsSource):
    """Lowest-precedence source reading a TOML file (top-level or [gravity_transfer])."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
        super().__init__(settings_cls)
        self._path = path

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, "", False

    def _resolve_path(self) -> Path | None:
        if self._path:
            return self._path if self._path.exists() else None
        local_config = Path("gravity-transfer.toml")
        user_config = Path.home() / ".config" / "gravity-transfer" / "config.toml"
        if local_config.exists():
            return local_config
        if user_config.exists():
            return user_config
        return None

    def __call__(self) -> dict[str, Any]:
        path = self._resolve_path()
        if path is None:
            return {}

        with path.open("rb") as f:
            data = tomllib.load(f)
        body = data.get("gravity_transfer", data)
        if not isinstance(body, dict):
            return {}

        for key in SECRET_FIELDS:
            if key in body:
                raise ValueError(
                    f"Security violation: '{key}' found in TOML config file. "
                    f"Secrets must only be provided via environment variables or CLI flags."
                )

        return body


class TransferSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with GRAVITY_TRANSFER_)
    - Config file (TOML), lowest precedence
    """

    # --- hub chain ---
    hub_chain_id: str = DEFAULT_HUB_CHAIN_ID
    lcd_url: str = DEFAULT_LCD_URL
    broadcast_timeout: float = Field(default=30.0, gt=0)

    # --- relay congestion endpoint ---
    relay_info_url: str = DEFAULT_RELAY_INFO_URL
    relay_timeout: float = Field(default=10.0, gt=0)
    relay_max_tries: int = Field(default=3, ge=1)
    relay_deadline_seconds: float = Field(default=30.0, gt=0)

    # --- ethereum ---
    eth_rpc: str = DEFAULT_ETH_RPC_URL
    gravity_contract_address: str = GRAVITY_ETH_CONTRACT
    receipt_timeout: float = Field(default=120.0, gt=0)
    eth_private_key: SecretStr | None = None

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GRAVITY_TRANSFER_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("eth_private_key", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        env_cfg = os.environ.get("GRAVITY_TRANSFER_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump()
        if self.eth_private_key:
            data["eth_private_key"] = "***redacted***"
        return data

    @property
    def eth_private_key_value(self) -> str | None:
        return self.eth_private_key.get_secret_value() if self.eth_private_key else None
