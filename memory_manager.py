from typing import NamedTuple, Optional, Tuple

from errors import InvariantViolation
from page_table import Page


class ResidentSet:
    def __init__(self, num_frames=10):
        self.num_frames = num_frames
        # Each frame holds its own Page copy, or None before pre-fill
        self.frames = [None] * num_frames

    def fill(self, backing_store, rng):
        """Pre-fill every frame with distinct pages drawn from the store."""
        chosen = rng.sample(range(backing_store.size), self.num_frames)
        for frame_num, page_number in enumerate(chosen):
            self.frames[frame_num] = backing_store.load(page_number)
        return self

    def find_by_instruction(self, instruction_ref) -> Optional[int]:
        for i, page in enumerate(self.frames):
            if page is not None and page.instruction_ref == instruction_ref:
                return i
        return None

    def frame_at(self, frame_num) -> Page:
        return self.frames[frame_num]

    def replace(self, frame_num, page):
        self.frames[frame_num] = page

    def reset_reference_bits(self):
        for page in self.frames:
            if page is not None:
                page.reference = False

    def check_unique(self, policy=None, frame=None):
        seen = {}
        for i, page in enumerate(self.frames):
            if page is None:
                continue
            if page.instruction_ref in seen:
                raise InvariantViolation(
                    f"Instruction {page.instruction_ref} resident in frames "
                    f"{seen[page.instruction_ref]} and {i}",
                    policy=policy, frame=frame if frame is not None else i,
                    instruction=page.instruction_ref)
            seen[page.instruction_ref] = i

    def snapshot(self) -> Tuple[Page, ...]:
        return tuple(page.copy() for page in self.frames if page is not None)


class RunStatistics(NamedTuple):
    policy_name: str
    total_references: int
    page_faults: int
    hits: int
    write_backs: int
    disk_accesses: int
    initial_resident: Tuple[Page, ...]
    final_resident: Tuple[Page, ...]


class Statistics:
    def __init__(self):
        self.references = 0
        self.hits = 0
        self.page_faults = 0
        self.disk_accesses = 0
        self.write_backs = 0

    def record_hit(self):
        self.hits += 1

    def record_page_fault(self, is_dirty_replacement=False):
        self.page_faults += 1
        if is_dirty_replacement:
            # Dirty page: write back + read new page
            self.disk_accesses += 2
            self.write_backs += 1
        else:
            # Clean page: just read new page
            self.disk_accesses += 1

    def freeze(self, policy_name, initial_resident, final_resident):
        return RunStatistics(policy_name, self.references, self.page_faults,
                             self.hits, self.write_backs, self.disk_accesses,
                             tuple(initial_resident), tuple(final_resident))

    def __str__(self):
        return (f"References: {self.references}\n"
                f"Hits: {self.hits}\n"
                f"Page Faults: {self.page_faults}\n"
                f"Write Backs: {self.write_backs}\n"
                f"Disk Accesses: {self.disk_accesses}")
