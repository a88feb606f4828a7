"""
文件功能：
    链客户端适配层：向 NEAR 合约发起带签名的写调用。

公开接口：
    - ChainClient: 链客户端协议，function_call(contract_id, method_name, args, gas, deposit)
    - NearChainClient: 基于 py-near Account 的实现，进程内共享一个实例
    - connect_chain(config) -> NearChainClient: 启动时建立连接

内部方法：
    - _failure_message(failure) -> str: 从 NEAR 执行失败结构中取出合约错误消息
    - _raise_on_failure(result): 交易状态或任一回执为 Failure 时抛出 RemoteCallError
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from loguru import logger
from py_near.account import Account

from src.server.config import Config
from src.server.errors import RemoteCallError


class ChainClient(Protocol):
    async def function_call(
        self,
        contract_id: str,
        method_name: str,
        args: dict[str, Any],
        gas: int,
        deposit: int,
    ) -> Any:
        """以网关账户身份调用合约写方法，返回交易结果。"""
        ...


def _failure_message(failure: Any) -> str:
    """
    从 NEAR 的 Failure 结构中取出合约错误消息，例如
    {"ActionError": {"kind": {"FunctionCallError": {"ExecutionError": "Smart contract panicked: ..."}}}}。
    没有 ExecutionError 时返回整个结构的 JSON。
    """
    if isinstance(failure, str):
        return failure
    pending = [failure]
    while pending:
        node = pending.pop(0)
        if isinstance(node, dict):
            if isinstance(node.get("ExecutionError"), str):
                return node["ExecutionError"]
            pending.extend(node.values())
        elif isinstance(node, (list, tuple)):
            pending.extend(node)
    return json.dumps(failure, ensure_ascii=False, default=str)


def _raise_on_failure(result: Any) -> None:
    status = getattr(result, "status", None)
    if isinstance(status, dict) and "Failure" in status:
        raise RemoteCallError(_failure_message(status["Failure"]))

    for outcome in getattr(result, "receipt_outcome", None) or []:
        error = getattr(outcome, "error", None)
        if error:
            raise RemoteCallError(_failure_message(error))


class NearChainClient:
    """持有一个已初始化的 NEAR 账户会话，供所有请求复用。"""

    def __init__(self, account_id: str, private_key: str, rpc_url: str):
        self.account_id = account_id
        self.rpc_url = rpc_url
        self._account = Account(account_id, private_key, rpc_addr=rpc_url)

    async def connect(self) -> "NearChainClient":
        await self._account.startup()
        logger.info(f"已连接 NEAR RPC: {self.rpc_url}，账户: {self.account_id}")
        return self

    async def function_call(
        self,
        contract_id: str,
        method_name: str,
        args: dict[str, Any],
        gas: int,
        deposit: int,
    ) -> Any:
        result = await self._account.function_call(
            contract_id,
            method_name,
            args,
            gas=gas,
            amount=deposit,
        )
        # 合约 panic 时 py-near 不抛异常，而是返回 status 为 Failure 的交易结果
        _raise_on_failure(result)
        return result


async def connect_chain(config: Config) -> NearChainClient:
    """根据配置建立链客户端连接。"""
    logger.info(f"正在连接 NEAR 网络: {config.network_id}")
    client = NearChainClient(
        account_id=config.account_id,
        private_key=config.private_key.get_secret_value(),
        rpc_url=config.rpc_url,
    )
    return await client.connect()
