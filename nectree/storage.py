import json
import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import PersistenceError, StateDecodeError
from .models import Link
from .render import render_html

_tree_adapter: TypeAdapter[Dict[str, Link]] = TypeAdapter(Dict[str, Link])


class LinkTree:
    """Links keyed by name. Only the service loop mutates it, so no locking."""

    def __init__(self, links: Optional[Mapping[str, Link]] = None) -> None:
        self._links: Dict[str, Link] = dict(links or {})

    def save(self, link: Link) -> None:
        self._links[link.name] = link

    def delete(self, name: str) -> bool:
        return self._links.pop(name, None) is not None

    def get(self, name: str) -> Optional[Link]:
        return self._links.get(name)

    def snapshot(self) -> Mapping[str, Link]:
        return MappingProxyType(dict(self._links))

    def __len__(self) -> int:
        return len(self._links)

    def __contains__(self, name: object) -> bool:
        return name in self._links


def encode_tree(tree: LinkTree) -> bytes:
    data = {name: link.model_dump(mode="json") for name, link in tree.snapshot().items()}
    return json.dumps(data, indent=2, sort_keys=True).encode("utf-8")


def decode_tree(blob: bytes) -> LinkTree:
    try:
        links = _tree_adapter.validate_json(blob)
    except ValidationError as exc:
        raise StateDecodeError(f"stored link tree is unreadable: {exc}") from exc
    for key, link in links.items():
        if key != link.name:
            raise StateDecodeError(f"stored link {link.name!r} is filed under {key!r}")
    return LinkTree(links)


def _replace_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)


class StateStore:
    """Single durable blob, fully replaced on every write."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get_state(self) -> Optional[bytes]:
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def set_state(self, blob: bytes) -> None:
        _replace_file(self.path, blob)


class HtmlFile:
    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> bytes:
        return self.path.read_bytes()

    def write(self, html: str) -> None:
        _replace_file(self.path, html.encode("utf-8"))


class Persistence:
    """
    Keeps the two durable artifacts in step with the in-memory tree:
    the state blob first, then the rendered page. Neither is rolled back
    if the other fails.
    """

    def __init__(self, state_store: StateStore, html_file: HtmlFile):
        self.state_store = state_store
        self.html_file = html_file

    def load_tree(self) -> LinkTree:
        try:
            blob = self.state_store.get_state()
        except OSError as exc:
            raise PersistenceError(f"could not read state: {exc}") from exc
        if blob is None:
            return LinkTree()
        return decode_tree(blob)

    def render_page(self, tree: LinkTree) -> str:
        html = render_html(tree.snapshot())
        try:
            self.html_file.write(html)
        except OSError as exc:
            raise PersistenceError(f"could not write page: {exc}") from exc
        return html

    def save_and_render(self, tree: LinkTree) -> str:
        try:
            self.state_store.set_state(encode_tree(tree))
        except OSError as exc:
            raise PersistenceError(f"could not write state: {exc}") from exc
        return self.render_page(tree)

    def read_page(self) -> bytes:
        try:
            return self.html_file.read()
        except OSError as exc:
            raise PersistenceError(f"could not read page: {exc}") from exc
