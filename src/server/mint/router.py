"""
文件功能：
    NFT 铸造的 FastAPI 路由。

公开接口：
    - POST /mint-nft -> MintResult

内部方法：
    无
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from src.server.errors import (
    DuplicateMintError,
    RemoteCallError,
    RemoteCallTimeoutError,
    ValidationError,
)
from src.server.state import get_submitter
from .schemas import MintRequest, MintResult
from .services import MintSubmitter


router = APIRouter(tags=["Mint Submitter"])


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=MintResult(success=False, error=message).model_dump(exclude_none=True),
    )


@router.post("/mint-nft", response_model=MintResult)
async def mint_nft(req: MintRequest, submitter: MintSubmitter | None = Depends(get_submitter)):
    """提交铸造交易，返回链上交易结果。"""
    if submitter is None:
        logger.error("链客户端尚未连接，拒绝铸造请求")
        return _failure(503, "链客户端尚未连接")
    try:
        result = await submitter.submit(req)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except DuplicateMintError as e:
        return _failure(409, str(e))
    except RemoteCallTimeoutError as e:
        return _failure(504, str(e))
    except RemoteCallError as e:
        return _failure(500, str(e))
    except Exception as e:
        logger.exception(f"铸造时发生未预期错误: {e}")
        return _failure(500, f"内部服务器错误: {str(e)}")
    return JSONResponse(content={"success": result.success, "transaction": result.transaction})
