#!/usr/bin/env python
import os
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from loguru import logger

from src.server.config import load_config
from src.server.errors import ConfigurationError

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "{extra[request_id]} | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str) -> None:
    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)


def main() -> None:
    load_dotenv(Path.cwd() / ".env")
    setup_logging(os.getenv("LOG_LEVEL", "INFO").upper())
    logger.info("NFT Mint Signing Gateway, start running!")

    # 缺少必填配置时直接退出，不启动服务
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"启动失败: {e}")
        sys.exit(1)

    uvicorn.run(
        "src.server.main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
