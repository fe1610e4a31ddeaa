import logging

from fastapi import FastAPI

from .config import get_settings
from .logging_middleware import request_log_middleware
from .routers import (
    categories,
    dynamic_attributes,
    regions,
    session,
    sliders,
    users,
)


def _configure_logging() -> None:
    """按配置初始化根日志级别与格式。"""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用并注册所有路由。"""
    _configure_logging()
    app = FastAPI(title="Auction Admin Console")

    app.include_router(categories.router)
    app.include_router(dynamic_attributes.router)
    app.include_router(regions.router)
    app.include_router(sliders.router)
    app.include_router(users.router)
    app.include_router(session.router)

    # 请求日志中间件：记录所有控制台请求
    app.middleware("http")(request_log_middleware)

    return app


app = create_app()
