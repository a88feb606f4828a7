"""
测试共享的 fixture：测试用 NEAR 私钥、配置、链客户端替身与测试客户端。
"""

import asyncio
from typing import Any

import base58
import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)
from fastapi.testclient import TestClient

from src.server.config import load_config
from src.server.main import create_app


class FakeChain:
    """记录调用参数的链客户端替身。"""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.result: Any = {"status": {"SuccessValue": ""}, "transaction": {"hash": "fake-tx-hash"}}
        self.error: Exception | None = None
        self.delay_s: float = 0.0

    async def function_call(self, contract_id, method_name, args, gas, deposit):
        self.calls.append(
            {
                "contract_id": contract_id,
                "method_name": method_name,
                "args": args,
                "gas": gas,
                "deposit": deposit,
            }
        )
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return self.result


def make_near_secret(private_key: Ed25519PrivateKey, with_public: bool = True) -> str:
    seed = private_key.private_bytes(
        encoding=Encoding.Raw, format=PrivateFormat.Raw, encryption_algorithm=NoEncryption()
    )
    public = private_key.public_key().public_bytes(encoding=Encoding.Raw, format=PublicFormat.Raw)
    payload = seed + public if with_public else seed
    return "ed25519:" + base58.b58encode(payload).decode("ascii")


@pytest.fixture
def ed25519_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


@pytest.fixture
def near_secret(ed25519_key) -> str:
    return make_near_secret(ed25519_key)


@pytest.fixture
def config(near_secret, tmp_path, monkeypatch):
    # 隔离工作目录中的 config.json
    monkeypatch.setenv("CONFIG_FILE", str(tmp_path / "missing.json"))
    return load_config(
        _env_file=None,
        private_key=near_secret,
        account_id="gateway.testnet",
        nft_contract_id="nft-test.testnet",
        mint_timeout_s=0.5,
    )


@pytest.fixture
def fake_chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def app(config, fake_chain):
    return create_app(config=config, chain=fake_chain)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
