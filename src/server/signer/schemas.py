"""
签名服务的数据模型定义。
请求字段均允许缺省，由服务层统一校验并返回 400。
"""

from pydantic import BaseModel, ConfigDict, Field


class SignRequest(BaseModel):
    """
    客户端请求签名时的数据模型。
    """
    course_id: str | None = None
    user_address: str | None = None


class SignResponse(BaseModel):
    """
    服务端返回签名的数据模型。
    """
    message: str  # SHA-256 十六进制摘要
    signature: str  # Base64 编码的 Ed25519 签名


class PublicKeyResponse(BaseModel):
    """
    服务端返回签名公钥的数据模型。
    """
    model_config = ConfigDict(populate_by_name=True)

    public_key: str = Field(alias="publicKey")  # Base64 编码的 32 字节公钥


class VerifySignatureRequest(BaseModel):
    """
    客户端请求验证签名的数据模型。
    """
    course_id: str | None = None
    user_address: str | None = None
    signature: str | None = None


class VerifySignatureResponse(BaseModel):
    """
    服务端返回签名验证结果的数据模型。
    """
    valid: bool
    message: str
