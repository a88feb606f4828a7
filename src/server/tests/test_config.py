"""
测试 config.py 模块：必填项缺失时快速失败，以及多来源配置合并。
"""

import json

import pytest

from src.server.config import load_config
from src.server.errors import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    for name in (
        "PRIVATE_KEY",
        "ACCOUNT_ID",
        "NETWORK_ID",
        "RPC_URL",
        "NFT_CONTRACT_ID",
        "MINT_GAS",
        "CORS_ORIGINS",
        "MINT_LEDGER",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONFIG_FILE", str(tmp_path / "missing.json"))
    monkeypatch.chdir(tmp_path)


def test_missing_credentials_fail_fast():
    with pytest.raises(ConfigurationError) as ei:
        load_config(_env_file=None)
    message = str(ei.value)
    assert "PRIVATE_KEY" in message
    assert "ACCOUNT_ID" in message


def test_missing_account_id_only(near_secret):
    with pytest.raises(ConfigurationError) as ei:
        load_config(_env_file=None, private_key=near_secret)
    assert "ACCOUNT_ID" in str(ei.value)
    assert "PRIVATE_KEY" not in str(ei.value)


def test_empty_private_key_is_rejected(monkeypatch):
    monkeypatch.setenv("PRIVATE_KEY", "")
    monkeypatch.setenv("ACCOUNT_ID", "gateway.testnet")
    with pytest.raises(ConfigurationError) as ei:
        load_config(_env_file=None)
    assert "PRIVATE_KEY" in str(ei.value)


def test_env_values_and_defaults(monkeypatch, near_secret):
    monkeypatch.setenv("PRIVATE_KEY", near_secret)
    monkeypatch.setenv("ACCOUNT_ID", "gateway.testnet")
    monkeypatch.setenv("MINT_GAS", "100000000000000")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    config = load_config(_env_file=None)

    assert config.private_key.get_secret_value() == near_secret
    assert config.account_id == "gateway.testnet"
    assert config.mint_gas == 100_000_000_000_000
    assert config.mint_deposit == 10**24
    assert config.nft_contract_id == "nft-vbi.testnet"
    assert config.mint_method == "nft_mint"
    assert config.mint_ledger == "memory"
    assert config.cors_origins == ["https://a.example", "https://b.example"]


def test_secret_is_masked_in_dump(monkeypatch, near_secret):
    config = load_config(_env_file=None, private_key=near_secret, account_id="gateway.testnet")
    assert near_secret not in config.model_dump_json()


def test_json_config_file(tmp_path, monkeypatch, near_secret):
    path = tmp_path / "gateway.json"
    path.write_text(
        json.dumps(
            {
                "private_key": near_secret,
                "account_id": "json.testnet",
                "nft_contract_id": "nft-json.testnet",
                "mint_ledger": "none",
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("CONFIG_FILE", str(path))
    monkeypatch.setenv("ACCOUNT_ID", "env.testnet")

    config = load_config(_env_file=None)

    # 环境变量优先于 config.json
    assert config.account_id == "env.testnet"
    assert config.nft_contract_id == "nft-json.testnet"
    assert config.mint_ledger == "none"


def test_invalid_timeout_is_rejected(near_secret):
    with pytest.raises(ConfigurationError) as ei:
        load_config(_env_file=None, private_key=near_secret, account_id="a.testnet", mint_timeout_s=0)
    assert "MINT_TIMEOUT_S" in str(ei.value)


def test_rpc_url_follows_network_id(near_secret):
    config = load_config(_env_file=None, private_key=near_secret, account_id="gateway.near", network_id="mainnet")
    assert config.rpc_url == "https://rpc.mainnet.near.org"


def test_default_rpc_url_is_testnet(near_secret):
    config = load_config(_env_file=None, private_key=near_secret, account_id="gateway.testnet")
    assert config.network_id == "testnet"
    assert config.rpc_url == "https://rpc.testnet.near.org"


def test_explicit_rpc_url_is_kept(monkeypatch, near_secret):
    monkeypatch.setenv("RPC_URL", "https://near-rpc.example.org")
    config = load_config(_env_file=None, private_key=near_secret, account_id="gateway.testnet", network_id="mainnet")
    assert config.rpc_url == "https://near-rpc.example.org"


def test_malformed_config_file_fails_fast(tmp_path, monkeypatch):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("CONFIG_FILE", str(path))

    with pytest.raises(ConfigurationError):
        load_config(_env_file=None)
