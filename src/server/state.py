"""
文件功能：
    进程级网关状态与 FastAPI 依赖注入。

公开接口：
    - GatewayState: 启动时构造一次的只读状态（配置、签名身份、链客户端、铸造账本、资格校验）
    - build_state(config, chain=None, ledger=None, oracle=None) -> GatewayState
    - get_state / get_identity / get_oracle / get_submitter: 路由使用的依赖

内部方法：
    - _build_ledger(config) -> MintLedger
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from src.server.config import Config
from src.server.mint.chain import ChainClient
from src.server.mint.ledger import InMemoryMintLedger, MintLedger, NullMintLedger
from src.server.mint.services import MintSubmitter
from src.server.signer.core import SigningIdentity
from src.server.signer.eligibility import AllowAllOracle, EligibilityOracle


@dataclass
class GatewayState:
    config: Config
    identity: SigningIdentity
    oracle: EligibilityOracle
    ledger: MintLedger
    chain: ChainClient | None = None
    submitter: MintSubmitter | None = None

    def attach_chain(self, chain: ChainClient) -> None:
        """绑定链客户端并构造铸造提交器。"""
        self.chain = chain
        self.submitter = MintSubmitter(
            chain=chain,
            ledger=self.ledger,
            contract_id=self.config.nft_contract_id,
            method_name=self.config.mint_method,
            gas=self.config.mint_gas,
            deposit=self.config.mint_deposit,
            timeout_s=self.config.mint_timeout_s,
        )


def _build_ledger(config: Config) -> MintLedger:
    if config.mint_ledger == "none":
        return NullMintLedger()
    return InMemoryMintLedger()


def build_state(
    config: Config,
    chain: ChainClient | None = None,
    ledger: MintLedger | None = None,
    oracle: EligibilityOracle | None = None,
) -> GatewayState:
    """
    根据配置构造网关状态。
    :raises ConfigurationError: 私钥无法解析。
    """
    state = GatewayState(
        config=config,
        identity=SigningIdentity.from_near_secret(config.private_key.get_secret_value()),
        oracle=oracle or AllowAllOracle(),
        ledger=ledger or _build_ledger(config),
    )
    if chain is not None:
        state.attach_chain(chain)
    return state


def get_state(request: Request) -> GatewayState:
    return request.app.state.gateway


def get_identity(request: Request) -> SigningIdentity:
    return get_state(request).identity


def get_oracle(request: Request) -> EligibilityOracle:
    return get_state(request).oracle


def get_submitter(request: Request) -> MintSubmitter | None:
    """链客户端尚未连接时返回 None，由路由返回 503。"""
    return get_state(request).submitter
