"""Request body size ceiling."""
import logging

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from prompthub.errors import PayloadTooLarge, ValidationFailed, error_response

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than `max_bytes` with 413.

    A declared Content-Length is checked up front. Without one (chunked
    uploads) the body is read and counted as it arrives, then replayed to the
    app once it is known to fit.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        raw = Headers(scope=scope).get("content-length")
        if raw is not None:
            try:
                length = int(raw)
            except ValueError:
                await error_response(ValidationFailed())(scope, receive, send)
                return
            if length > self.max_bytes:
                await self._reject(scope, receive, send, length)
                return
            await self.app(scope, receive, send)
            return

        chunks = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before the body was complete
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self.max_bytes:
                await self._reject(scope, receive, send, received)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        body_sent = False

        async def replay() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(f"Rejected {scope.get('method')} {scope.get('path')}: body of at least {size} bytes")
        await error_response(PayloadTooLarge())(scope, receive, send)
