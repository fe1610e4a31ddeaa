"""
FastAPI 启动入口。

运行命令示例：

    uvicorn auction_console.main:app --reload --port 8080

说明：
- 拍卖后端地址通过环境变量配置，参见 auction_console/config.py；
- 控制台会话通过请求头 X-Console-Session 区分，缺省使用默认会话。
"""

from auction_console.main import app  # noqa: F401
