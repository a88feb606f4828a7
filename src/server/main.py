"""
FastAPI 应用入口点。
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from src.server.config import Config, load_config
from src.server.mint.chain import ChainClient, connect_chain
from src.server.mint.ledger import MintLedger
from src.server.mint.router import router as mint_router
from src.server.signer.eligibility import EligibilityOracle
from src.server.signer.router import router as signer_router
from src.server.state import build_state

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(
    config: Config | None = None,
    chain: ChainClient | None = None,
    ledger: MintLedger | None = None,
    oracle: EligibilityOracle | None = None,
) -> FastAPI:
    """
    构造应用。签名身份在此处加载一次；未注入链客户端时在 lifespan 中连接。
    :raises ConfigurationError: 必填配置缺失或私钥无效。
    """
    if config is None:
        config = load_config()
    state = build_state(config, chain=chain, ledger=ledger, oracle=oracle)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if state.chain is None:
            try:
                state.attach_chain(await connect_chain(config))
            except Exception as e:
                logger.error(f"连接 NEAR 网络失败: {e}")
                raise
        yield
        logger.info("应用关闭")

    app = FastAPI(title="NFT Mint Signing Gateway", lifespan=lifespan)
    app.state.gateway = state
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        with logger.contextualize(request_id=request_id):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # 请求体不是合法 JSON 或字段类型错误，统一按 400 返回
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        logger.info(f"请求体校验失败: {request.url.path} {details}")
        return JSONResponse(status_code=400, content={"error": f"请求体格式错误: {details}"})

    app.include_router(signer_router)
    app.include_router(mint_router)

    logger.info(f"config: {config.model_dump_json(indent=4)}")
    logger.info(f"签名公钥: {state.identity.near_public_key}")
    return app
