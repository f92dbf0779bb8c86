import logging

import pytest

from map_generator.server import create_app


class SequenceRng:
    """
    Stand-in for numpy.random.Generator that replays fixed values.
    Exhausted sequences return 0.
    """

    def __init__(self, randoms=(), integers=(), normals=()):
        self._randoms = list(randoms)
        self._integers = list(integers)
        self._normals = list(normals)

    def random(self):
        return self._randoms.pop(0) if self._randoms else 0.0

    def integers(self, n):
        value = self._integers.pop(0) if self._integers else 0
        return value % n

    def normal(self, loc, scale):
        z = self._normals.pop(0) if self._normals else 0.0
        return loc + z * scale


@pytest.fixture
def logger():
    return logging.getLogger("tests")


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
