import pytest

from storefront.infrastructure.bootstrap import Container, build
from storefront.infrastructure.config import Settings


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'storefront.db'}"


@pytest.fixture
def container(database_url) -> Container:
    deps = build(Settings(database_url=database_url))
    deps.init_schema()
    yield deps
    deps.engine.dispose()
