"""
配置加载模块：支持 .env、环境变量、工作目录 config.json（或 CONFIG_FILE 指定）多来源合并。
公开接口：
- Config: 读取配置的设置类
- load_config: 构造 Config，缺失必填项时抛出 ConfigurationError
内部方法：
- Config.settings_customise_sources: 自定义配置来源顺序
- Config.parse_cors_origins: 将逗号分隔的字符串解析为 List[str]
- Config.default_rpc_url: 未配置 rpc_url 时按 network_id 推导
"""

from __future__ import annotations

import os
from typing import Annotated, Any, List, Literal, Tuple

from pydantic import (
    SecretStr,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
)

from src.server.errors import ConfigurationError


class Config(BaseSettings):
    # 签名身份与 NEAR 账户（必填）
    private_key: SecretStr
    account_id: str

    network_id: str = "testnet"
    # 为空时取 https://rpc.<network_id>.near.org
    rpc_url: str = ""
    nft_contract_id: str = "nft-vbi.testnet"
    mint_method: str = "nft_mint"
    # 300 Tgas
    mint_gas: int = 300_000_000_000_000
    # 1 NEAR（yoctoNEAR）
    mint_deposit: int = 1_000_000_000_000_000_000_000_000
    mint_timeout_s: float = 60.0
    mint_ledger: Literal["memory", "none"] = "memory"

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: Annotated[List[str], NoDecode] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("private_key")
    @classmethod
    def check_private_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("private_key 不能为空")
        return value

    @field_validator("account_id")
    @classmethod
    def check_account_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("account_id 不能为空")
        return value

    @field_validator("mint_timeout_s")
    @classmethod
    def check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("mint_timeout_s 必须大于 0")
        return value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: Any) -> Any:
        """支持从环境变量以逗号分隔的形式设置 cors_origins。"""
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        return value

    @model_validator(mode="after")
    def default_rpc_url(self) -> "Config":
        if not self.rpc_url:
            self.rpc_url = f"https://rpc.{self.network_id}.near.org"
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """自定义配置来源顺序：入参 > 环境变量 > .env > config.json（或 CONFIG_FILE）> secrets。"""
        json_file = os.environ.get("CONFIG_FILE") or "config.json"
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls, json_file=json_file),
            file_secret_settings,
        )


def load_config(**overrides: Any) -> Config:
    """
    构造配置对象。
    :param overrides: 优先级最高的配置项（主要用于测试）。
    :return: Config 实例。
    :raises ConfigurationError: 必填项缺失、配置值无效或配置文件无法解析。
    """
    try:
        return Config(**overrides)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]).upper() for err in e.errors() if err.get("loc")})
        raise ConfigurationError(
            f"缺少或无效的配置项: {', '.join(fields)}；请在环境变量、.env 或 config.json 中设置"
        ) from e
    except (SettingsError, ValueError) as e:
        raise ConfigurationError(f"配置解析失败: {e}") from e
