# tests/conftest.py
import pytest
import numpy as np
from PIL import Image

from phantomkit.core import remote
from phantomkit.core.errors import SourceNotFound
from phantomkit.core.registry import new_registry


@pytest.fixture(autouse=True)
def no_remote_source():
    """Every test starts with remote images disabled; tests opt in explicitly."""
    remote.set_remote_source(None)
    yield
    remote.reset_remote_source()


@pytest.fixture
def isolated_registry(monkeypatch):
    """A fresh registry (built-ins only) swapped in for the process-wide one."""
    registry = new_registry()
    monkeypatch.setattr("phantomkit.core.registry.REGISTRY", registry)
    return registry


class FakeSource:
    """In-memory remote source; records every id it was asked for."""

    def __init__(self, images=None):
        self.images = dict(images or {})
        self.requests = []

    def retrieve(self, source_id):
        self.requests.append(source_id)
        if source_id not in self.images:
            raise SourceNotFound(source_id, "not in fake source")
        arr = np.asarray(self.images[source_id], dtype=np.float64)
        return arr.copy(), arr.shape


@pytest.fixture
def fake_source():
    """Fake remote source with a distinguishable 'checker_image' (all 7s) and a gradient."""
    src = FakeSource({
        "checker_image": np.full((16, 16), 7.0),
        "gradient": np.tile(np.arange(10, dtype=np.float64) * 10.0, (6, 1)),
    })
    remote.set_remote_source(src)
    return src


@pytest.fixture
def image_folder(tmp_path):
    """Folder with a 6x10 8-bit greyscale gradient saved as gradient.png."""
    arr = np.tile(np.arange(10, dtype=np.uint8) * 20, (6, 1))
    Image.fromarray(arr).save(tmp_path / "gradient.png")
    return tmp_path
