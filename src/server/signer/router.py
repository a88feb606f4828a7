"""
签名服务的 FastAPI 路由定义。
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from src.server.errors import NotEligibleError, ValidationError
from src.server.state import get_identity, get_oracle
from . import services
from .core import SigningIdentity
from .eligibility import EligibilityOracle
from .schemas import (
    PublicKeyResponse,
    SignRequest,
    SignResponse,
    VerifySignatureRequest,
    VerifySignatureResponse,
)

router = APIRouter(tags=["Attestation Signer"])


@router.get("/public-key", response_model=PublicKeyResponse)
async def get_public_key(identity: SigningIdentity = Depends(get_identity)):
    """
    返回网关固定的签名公钥，供下游验证方预先固定。
    """
    return services.public_key_service(identity)


@router.post("/sign", response_model=SignResponse)
async def sign(
    req: SignRequest,
    identity: SigningIdentity = Depends(get_identity),
    oracle: EligibilityOracle = Depends(get_oracle),
):
    """
    对课程 ID 与用户地址的绑定摘要进行签名。
    """
    try:
        return await services.sign_service(req, identity, oracle)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except NotEligibleError as e:
        return JSONResponse(status_code=403, content={"error": str(e)})
    except Exception as e:
        # 捕获所有未预期的错误并返回 500
        logger.exception(f"签名时发生未预期错误: {e}")
        return JSONResponse(status_code=500, content={"error": f"内部服务器错误: {str(e)}"})


@router.post("/verify-signature", response_model=VerifySignatureResponse)
async def verify_signature(
    req: VerifySignatureRequest,
    identity: SigningIdentity = Depends(get_identity),
):
    """
    使用网关公钥验证签名是否绑定给定的课程与用户。
    """
    try:
        return services.verify_signature_service(req, identity)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
