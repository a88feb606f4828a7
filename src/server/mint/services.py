"""
文件功能：
    NFT 铸造提交服务：校验请求、按 token_id 防重、调用链上 nft_mint 并汇总结果。

公开接口：
    - MintSubmitter.submit(req: MintRequest) -> MintResult

内部方法：
    - MintSubmitter._reserve(token_id) / _release(token_id) / _mark_unresolved(token_id)

公开接口的 Pydantic 模型：
    - MintRequest / MintResult（定义于 `src/server/mint/schemas.py`）
"""

from __future__ import annotations

import asyncio

from fastapi.encoders import jsonable_encoder
from loguru import logger

from src.server.errors import (
    DuplicateMintError,
    RemoteCallError,
    RemoteCallTimeoutError,
    require_fields,
)
from .chain import ChainClient
from .ledger import MintLedger
from .schemas import MintRequest, MintResult


class MintSubmitter:
    """向 NFT 合约提交铸造交易。gas 与押金均为固定策略值。"""

    def __init__(
        self,
        chain: ChainClient,
        ledger: MintLedger,
        contract_id: str,
        method_name: str,
        gas: int,
        deposit: int,
        timeout_s: float,
    ):
        self.chain = chain
        self.ledger = ledger
        self.contract_id = contract_id
        self.method_name = method_name
        self.gas = gas
        self.deposit = deposit
        self.timeout_s = timeout_s
        # 正在提交中的 token_id，仅在事件循环线程内读写
        self._in_flight: set[str] = set()
        # 超时或被取消、链上结果未知的 token_id，拒绝再次提交
        self._unresolved: set[str] = set()

    def _reserve(self, token_id: str) -> None:
        if token_id in self._unresolved:
            raise DuplicateMintError(f"token_id {token_id} 上次提交结果未知（超时或取消），拒绝重复提交")
        if token_id in self._in_flight or self.ledger.has_minted(token_id):
            raise DuplicateMintError(f"token_id {token_id} 已铸造或正在铸造")
        self._in_flight.add(token_id)

    def _release(self, token_id: str) -> None:
        self._in_flight.discard(token_id)

    def _mark_unresolved(self, token_id: str) -> None:
        self._in_flight.discard(token_id)
        self._unresolved.add(token_id)

    async def submit(self, req: MintRequest) -> MintResult:
        """
        提交铸造交易。
        :raises ValidationError: 字段缺失，此时不会调用链客户端。
        :raises DuplicateMintError: token_id 已铸造、正在铸造或上次提交超时。
        :raises RemoteCallTimeoutError: 链上调用超时，交易可能仍会上链，该 token_id 保持锁定。
        :raises RemoteCallError: 链上调用失败，消息为原始错误消息。
        """
        require_fields(
            token_id=req.token_id,
            receiver_id=req.receiver_id,
            token_metadata=req.token_metadata,
            signature_base64=req.signature_base64,
            course_id=req.course_id,
        )
        self._reserve(req.token_id)

        args = {
            "token_id": req.token_id,
            "receiver_id": req.receiver_id,
            "token_metadata": req.token_metadata,
            "signature_base64": req.signature_base64,
            "course_id": req.course_id,
        }
        logger.info(f"提交铸造: contract={self.contract_id}, token_id={req.token_id}, receiver_id={req.receiver_id}")
        try:
            result = await asyncio.wait_for(
                self.chain.function_call(
                    self.contract_id,
                    self.method_name,
                    args,
                    gas=self.gas,
                    deposit=self.deposit,
                ),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError as e:
            self._mark_unresolved(req.token_id)
            logger.error(f"铸造超时（{self.timeout_s}s），结果未知，已锁定: token_id={req.token_id}")
            raise RemoteCallTimeoutError(f"链上调用超时（{self.timeout_s}s），交易结果未知") from e
        except asyncio.CancelledError:
            self._mark_unresolved(req.token_id)
            logger.warning(f"铸造请求被取消，结果未知，已锁定: token_id={req.token_id}")
            raise
        except Exception as e:
            self._release(req.token_id)
            logger.error(f"铸造失败: token_id={req.token_id}, error={e}")
            raise RemoteCallError(str(e)) from e

        self._release(req.token_id)
        self.ledger.record_minted(req.token_id)
        logger.info(f"铸造成功: token_id={req.token_id}")
        return MintResult(success=True, transaction=jsonable_encoder(result))
