"""ASGI handler for serverless platforms.

Warm invocations reuse the app built by the first one; ``get_app`` makes
sure concurrent cold starts still build it only once. Lifespan events are
not delivered here, so the relay's HTTP client is never closed explicitly;
the relay rebuilds it whenever an invocation arrives on a different event
loop.
"""
from __future__ import annotations

from signup_bridge.main import get_app


async def handler(scope, receive, send) -> None:
    app = get_app()
    await app(scope, receive, send)
