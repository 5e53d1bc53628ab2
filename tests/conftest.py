import pytest

from nectree.config import Settings
from nectree.models import Link
from nectree.storage import HtmlFile, Persistence, StateStore


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings()
    s.data_dir = tmp_path / "data"
    s.ui_dir = tmp_path / "ui"
    s.post_on_root = False
    return s


@pytest.fixture
def persistence(settings) -> Persistence:
    return Persistence(StateStore(settings.state_file), HtmlFile(settings.html_file))


@pytest.fixture
def blog() -> Link:
    return Link(name="blog", url="http://x", image="i.png", description="my blog", order=1)
