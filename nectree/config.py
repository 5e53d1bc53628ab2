import os
from functools import lru_cache
from pathlib import Path

TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in TRUTHY


class Settings:
    def __init__(self) -> None:
        self.host = os.environ.get("NECTREE_HOST", "127.0.0.1")
        self.port = int(os.environ.get("NECTREE_PORT", "8765"))
        self.data_dir = Path(os.environ.get("NECTREE_DATA_DIR", "./data"))
        self.ui_dir = Path(os.environ.get("NECTREE_UI_DIR", "./ui"))
        self.post_on_root = _flag("NECTREE_POST_ON_ROOT")
        self.log_level = os.environ.get("NECTREE_LOG_LEVEL", "info").lower()
        self.open_browser = _flag("NECTREE_OPEN_BROWSER")

    @property
    def state_file(self) -> Path:
        return self.data_dir / "state.json"

    @property
    def html_file(self) -> Path:
        return self.ui_dir / "index.html"


@lru_cache
def get_settings() -> Settings:
    return Settings()
