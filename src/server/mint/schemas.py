"""
文件功能：
    定义 NFT 铸造相关的公开数据模型（Pydantic）。

公开接口：
    - MintRequest: 铸造请求，五个字段均必填（由服务层校验）
    - MintResult: 铸造结果

内部方法：
    无
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class MintRequest(BaseModel):
    """铸造 NFT 的请求体。"""

    token_id: str | None = Field(default=None, description="NFT 的 token id，同时作为幂等键")
    receiver_id: str | None = Field(default=None, description="接收 NFT 的账户")
    token_metadata: dict[str, Any] | None = Field(default=None, description="NEP-177 token 元数据")
    signature_base64: str | None = Field(default=None, description="/sign 返回的 Base64 签名，原样传给合约")
    course_id: str | None = Field(default=None, description="课程 ID")


class MintResult(BaseModel):
    """铸造结果。"""

    success: bool = Field(description="是否铸造成功")
    transaction: Any = Field(default=None, description="链上交易结果")
    error: str | None = Field(default=None, description="失败原因")
