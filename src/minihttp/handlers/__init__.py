"""
Request handlers and the route table that wires them up.

    ┌──────────────────────────────────────────────────────────────────┐
    │ Order │ Method │ Path            │ Handler                       │
    ├───────┼────────┼─────────────────┼───────────────────────────────┤
    │   1   │ GET    │ /files/*        │ FileHandler.get               │
    │   2   │ POST   │ /files/*        │ FileHandler.post              │
    │   3   │ GET    │ /user-agent     │ user_agent                    │
    │   4   │ GET    │ /echo/*         │ echo                          │
    │   5   │ GET    │ /               │ index                         │
    │   -   │ GET    │ anything else   │ 404 (router fallback)         │
    │   -   │ other  │ anything else   │ 405 (router fallback)         │
    └──────────────────────────────────────────────────────────────────┘

Order matters: first match wins.
"""

from ..http.router import Router
from .basic import index, echo, user_agent
from .files import FileHandler


def create_router(directory: str) -> Router:
    """
    Build the server's route table.

    Args:
        directory: Storage directory for /files/*.

    Returns:
        A Router with every route registered in matching order.
    """
    router = Router()
    files = FileHandler(directory)

    router.add_route("/files/*", files.get, method="GET", name="file_get")
    router.add_route("/files/*", files.post, method="POST", name="file_post")
    router.add_route("/user-agent", user_agent, method="GET")
    router.add_route("/echo/*", echo, method="GET")
    router.add_route("/", index, method="GET")

    return router


__all__ = [
    "FileHandler",
    "create_router",
    "echo",
    "index",
    "user_agent",
]
