import logging

from errors import InvariantViolation

logger = logging.getLogger(__name__)

DATA_RANGE = (1, 50)
AGING_RANGE = (100, 9999)


class Page:
    def __init__(self, page_number, instruction_ref, data=0,
                 reference=False, dirty=False, aging=0):
        self.page_number = page_number
        self.instruction_ref = instruction_ref
        self.data = data
        self.reference = reference
        self.dirty = dirty
        self.aging = aging

    def copy(self):
        return Page(self.page_number, self.instruction_ref, self.data,
                    self.reference, self.dirty, self.aging)

    def fields(self):
        return (self.page_number, self.instruction_ref, self.data,
                self.reference, self.dirty, self.aging)

    def __eq__(self, other):
        if not isinstance(other, Page):
            return NotImplemented
        return self.fields() == other.fields()

    # Mutable, so not hashable
    __hash__ = None

    def __repr__(self):
        return (f"Page(N={self.page_number}, I={self.instruction_ref}, "
                f"D={self.data}, R={int(self.reference)}, "
                f"M={int(self.dirty)}, T={self.aging})")

    def __str__(self):
        return (f"| N: {self.page_number:<3} | I: {self.instruction_ref:<3} "
                f"| D: {self.data:<3} | R: {int(self.reference)} "
                f"| M: {int(self.dirty)} | T: {self.aging:<4} |")


class BackingStore:
    """The full page universe (SWAP), one entry per page number.

    Entries only change through ``store``; everything handed out is a copy.
    """

    def __init__(self, size=100):
        self.size = size
        self.entries = []

    def initialize(self, rng):
        # Field draws happen in page order, data before aging, so a seeded
        # generator always produces the same store.
        self.entries = []
        for page_number in range(self.size):
            data = rng.randint(*DATA_RANGE)
            aging = rng.randint(*AGING_RANGE)
            self.entries.append(Page(page_number, page_number + 1, data,
                                     reference=False, dirty=False, aging=aging))
        logger.debug("Backing store initialized with %d pages", self.size)
        return self

    def _check(self, page_number):
        if page_number < 0 or page_number >= len(self.entries):
            raise InvariantViolation(
                f"Page number {page_number} out of range "
                f"(0 .. {len(self.entries) - 1})")

    def load(self, page_number):
        self._check(page_number)
        return self.entries[page_number].copy()

    def store(self, page):
        self._check(page.page_number)
        saved = page.copy()
        saved.dirty = False
        self.entries[page.page_number] = saved

    def snapshot(self):
        return tuple(page.copy() for page in self.entries)
