import logging
from typing import Optional

from fastapi import status

from .errors import DecodeError
from .models import DeleteRequest, HttpResponse, IncomingHttpRequest, SaveRequest, decode_link_request
from .storage import LinkTree, Persistence

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


class RequestDispatcher:
    """Turns one HTTP request into a link tree operation and an HTTP response."""

    def __init__(self, persistence: Persistence):
        self.persistence = persistence

    def handle(self, request: IncomingHttpRequest, payload: Optional[bytes], tree: LinkTree) -> HttpResponse:
        if request.method == "GET":
            return HttpResponse(
                status=status.HTTP_200_OK,
                headers={"content-type": HTML_CONTENT_TYPE},
                body=self.persistence.read_page(),
            )
        if request.method == "POST":
            return self.handle_post(payload, tree)
        return HttpResponse(
            status=status.HTTP_405_METHOD_NOT_ALLOWED,
            headers={"allow": "GET, POST"},
        )

    def handle_post(self, payload: Optional[bytes], tree: LinkTree) -> HttpResponse:
        try:
            operation = decode_link_request(payload)
        except DecodeError as exc:
            logger.warning("Rejected POST: %s", exc)
            return HttpResponse(
                status=status.HTTP_400_BAD_REQUEST,
                headers={"content-type": "text/plain; charset=utf-8"},
                body=str(exc).encode("utf-8"),
            )

        if isinstance(operation, SaveRequest):
            replaced = tree.get(operation.link.name) is not None
            tree.save(operation.link)
            logger.info("%s link %r", "Updated" if replaced else "Saved", operation.link.name)
        elif isinstance(operation, DeleteRequest):
            if tree.delete(operation.name):
                logger.info("Deleted link %r", operation.name)
            else:
                logger.info("Delete of unknown link %r, nothing to do", operation.name)

        # PersistenceError propagates: the caller must not report 201
        self.persistence.save_and_render(tree)
        return HttpResponse(status=status.HTTP_201_CREATED)
