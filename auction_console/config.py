import os
from functools import lru_cache


class Settings:
    """控制台配置，全部来自环境变量。"""

    # 后端服务地址：目录服务（分类、动态属性）与管理服务（地区、轮播图、用户）
    catalog_api_base: str = os.getenv("CATALOG_API_BASE", "http://localhost:5032")
    admin_api_base: str = os.getenv("ADMIN_API_BASE", "http://localhost:5000")
    uploads_base: str = os.getenv("UPLOADS_BASE", "http://localhost:5000/uploads")

    # 请求配置
    http_timeout_seconds: float = float(os.getenv("CONSOLE_HTTP_TIMEOUT", "10"))
    language: str = os.getenv("CONSOLE_LANGUAGE", "ar")

    # 表格默认每页条数
    page_size: int = int(os.getenv("CONSOLE_PAGE_SIZE", "10"))

    # 视图状态存储：最多保留的会话数与会话空闲过期时间（分钟）
    max_sessions: int = int(os.getenv("CONSOLE_MAX_SESSIONS", "1000"))
    session_idle_minutes: int = int(os.getenv("CONSOLE_SESSION_IDLE_MINUTES", "60"))

    log_level: str = os.getenv("CONSOLE_LOG_LEVEL", "INFO")


@lru_cache()
def get_settings() -> Settings:
    """获取单例配置实例。"""
    return Settings()
