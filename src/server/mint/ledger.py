"""
按 token_id 记录铸造结果的账本，用于拒绝重复铸造。

公开接口：
    - MintLedger: 账本协议
    - InMemoryMintLedger: 进程内实现（默认）
    - NullMintLedger: 不做任何记录
"""

from __future__ import annotations

import threading
from typing import Protocol


class MintLedger(Protocol):
    def has_minted(self, token_id: str) -> bool:
        ...

    def record_minted(self, token_id: str) -> None:
        ...


class InMemoryMintLedger:
    """进程内账本，重启后清空（生产环境建议用 Redis 或数据库）。"""

    def __init__(self) -> None:
        self._minted: set[str] = set()
        self._lock = threading.Lock()

    def has_minted(self, token_id: str) -> bool:
        with self._lock:
            return token_id in self._minted

    def record_minted(self, token_id: str) -> None:
        with self._lock:
            self._minted.add(token_id)


class NullMintLedger:
    """不检测重复铸造。"""

    def has_minted(self, token_id: str) -> bool:
        return False

    def record_minted(self, token_id: str) -> None:
        return None
