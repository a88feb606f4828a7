"""
签名服务的业务逻辑层。
此模块封装了核心逻辑，提供更清晰的接口供路由层调用。
"""

from loguru import logger

from src.server.errors import NotEligibleError, require_fields
from . import core
from .eligibility import EligibilityOracle
from .schemas import (
    PublicKeyResponse,
    SignRequest,
    SignResponse,
    VerifySignatureRequest,
    VerifySignatureResponse,
)


def public_key_service(identity: core.SigningIdentity) -> PublicKeyResponse:
    """
    返回签名身份的公钥。
    :param identity: 进程启动时加载的签名身份。
    :return: 包含 Base64 公钥的响应对象。
    """
    return PublicKeyResponse(public_key=identity.public_key_b64)


async def sign_service(
    req: SignRequest,
    identity: core.SigningIdentity,
    oracle: EligibilityOracle,
) -> SignResponse:
    """
    处理签名请求的业务逻辑。
    :param req: 包含课程 ID 与用户地址的请求对象。
    :param identity: 进程启动时加载的签名身份。
    :param oracle: 资格校验实现。
    :return: 包含摘要与签名的响应对象。
    :raises ValidationError: 如果字段缺失。
    :raises NotEligibleError: 如果资格校验未通过。
    """
    require_fields(course_id=req.course_id, user_address=req.user_address)

    if not await oracle.is_eligible(req.course_id, req.user_address):
        logger.info(f"资格校验未通过: course_id={req.course_id}, user_address={req.user_address}")
        raise NotEligibleError("该用户没有获取此课程签名的资格")

    message, signature = core.sign_attestation(identity, req.course_id, req.user_address)
    logger.debug(f"已签名: course_id={req.course_id}, user_address={req.user_address}, message={message}")
    return SignResponse(message=message, signature=signature)


def verify_signature_service(
    req: VerifySignatureRequest, identity: core.SigningIdentity
) -> VerifySignatureResponse:
    """
    使用网关固定公钥验证签名。
    :raises ValidationError: 如果字段缺失。
    """
    require_fields(
        course_id=req.course_id,
        user_address=req.user_address,
        signature=req.signature,
    )
    valid = core.verify_attestation(
        identity.public_key_b64, req.course_id, req.user_address, req.signature
    )
    return VerifySignatureResponse(
        valid=valid,
        message=core.compute_digest(req.course_id, req.user_address),
    )
