import pytest

from memory_manager import ResidentSet
from page_table import Page


class ScriptedRandom:
    """Stands in for random.Random where a test needs exact draws."""

    def __init__(self, randints=(), randoms=()):
        self.randints = list(randints)
        self.randoms = list(randoms)
        self.randint_calls = 0

    def randint(self, a, b):
        self.randint_calls += 1
        value = self.randints.pop(0) if self.randints else b
        assert a <= value <= b
        return value

    def random(self):
        return self.randoms.pop(0) if self.randoms else 0.99


@pytest.fixture
def make_resident_set():
    def build(bits, aging=None):
        resident = ResidentSet(num_frames=len(bits))
        for i, (reference, dirty) in enumerate(bits):
            age = aging[i] if aging is not None else 1000
            resident.replace(i, Page(i, i + 1, data=10, reference=reference,
                                     dirty=dirty, aging=age))
        return resident
    return build


@pytest.fixture
def scripted_random():
    return ScriptedRandom
