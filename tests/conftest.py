import pytest

from packopt.controller import PackMaster


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'packs.db'}"


@pytest.fixture
def master(database_url):
    PackMaster.reset()
    wm = PackMaster(database_url)
    yield wm
    PackMaster.reset()
