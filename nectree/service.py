import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import status

from .dispatch import RequestDispatcher
from .errors import EnvelopeError, PersistenceError
from .models import HttpResponse, decode_envelope
from .storage import LinkTree, Persistence

logger = logging.getLogger(__name__)


@dataclass
class Request:
    """Inbound HTTP request; `reply` gets the response, or None if dropped."""

    envelope: Any
    payload: Optional[bytes]
    reply: "asyncio.Future[Optional[HttpResponse]]"


@dataclass
class Response:
    """Reply to a request this process sent. Nothing here sends any."""

    source: str
    body: bytes = b""


class ServiceLoop:
    def __init__(self, persistence: Persistence, dispatcher: Optional[RequestDispatcher] = None):
        self.persistence = persistence
        self.dispatcher = dispatcher or RequestDispatcher(persistence)
        self.tree = LinkTree()
        self.inbox: "asyncio.Queue[Any]" = asyncio.Queue()
        self._task: Optional["asyncio.Task[None]"] = None

    def restore(self) -> None:
        self.tree = self.persistence.load_tree()
        # page on disk always reflects the restored tree
        self.persistence.render_page(self.tree)
        logger.info("Restored %d links", len(self.tree))

    def start(self) -> None:
        self.restore()
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run(self) -> None:
        while True:
            message = await self.inbox.get()
            try:
                self.handle_message(message)
            except Exception:
                logger.exception("Unhandled error while processing %r", message)
            finally:
                self.inbox.task_done()

    def handle_message(self, message: Any) -> None:
        if isinstance(message, Request):
            self.handle_request(message)
        elif isinstance(message, Response):
            logger.info("Got response from %s, ignoring", message.source)
        else:
            logger.info("Ignoring unexpected message %r", message)

    def handle_request(self, message: Request) -> None:
        if message.reply.done():
            # caller went away
            return
        try:
            request = decode_envelope(message.envelope)
        except EnvelopeError as exc:
            logger.warning("Couldn't parse request envelope, dropping: %s", exc)
            message.reply.set_result(None)
            return

        try:
            response = self.dispatcher.handle(request, message.payload, self.tree)
        except PersistenceError:
            logger.exception("%s %s failed to persist", request.method, request.path)
            response = HttpResponse(status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except Exception as exc:
            logger.exception("%s %s failed", request.method, request.path)
            message.reply.set_exception(exc)
            return
        message.reply.set_result(response)

    async def submit(self, envelope: Any, payload: Optional[bytes] = None) -> Optional[HttpResponse]:
        reply: "asyncio.Future[Optional[HttpResponse]]" = asyncio.get_running_loop().create_future()
        await self.inbox.put(Request(envelope=envelope, payload=payload, reply=reply))
        return await reply
