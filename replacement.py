"""Victim selection for the paging simulator.

Every policy answers ``select_victim(resident_set)`` with a frame index and is
told about loads and hits afterwards so it can keep its pointers and
timestamps in step with the resident set. The set of policies is closed:
``make_policy`` only knows the names in ``POLICY_NAMES``.
"""
import logging

from errors import ConfigurationError

logger = logging.getLogger(__name__)

PROBE_RANGE = (100, 9999)


class ReplacementPolicy:
    name = None

    def __init__(self, num_frames):
        self.num_frames = num_frames
        self.reset()

    def reset(self):
        pass

    def select_victim(self, resident_set):
        raise NotImplementedError

    def on_load(self, frame_num, step):
        pass

    def on_hit(self, frame_num, step):
        pass


class NRUPolicy(ReplacementPolicy):
    """Not Recently Used: lowest (reference, dirty) class, first in frame order."""
    name = 'NRU'

    categories = [
        (False, False),  # unreferenced, clean
        (False, True),   # unreferenced, dirty
        (True, False),   # referenced, clean
    ]

    def select_victim(self, resident_set):
        first_seen = {}
        for frame_num, page in enumerate(resident_set.frames):
            key = (page.reference, page.dirty)
            if key == self.categories[0]:
                return frame_num
            first_seen.setdefault(key, frame_num)

        for category in self.categories[1:]:
            if category in first_seen:
                return first_seen[category]
        # Only referenced, dirty pages left
        return 0


class FIFOPolicy(ReplacementPolicy):
    name = 'FIFO'

    def reset(self):
        self.pointer = 0

    def select_victim(self, resident_set):
        victim_frame = self.pointer
        self.pointer = (self.pointer + 1) % self.num_frames
        return victim_frame


class SecondChancePolicy(ReplacementPolicy):
    """FIFO that skips (and clears) referenced pages once."""
    name = 'FIFO-SC'

    def reset(self):
        self.pointer = 0

    def advance(self):
        self.pointer = (self.pointer + 1) % self.num_frames

    def select_victim(self, resident_set):
        # After one sweep every reference bit is clear, so the second sweep
        # always finds a victim.
        while True:
            page = resident_set.frame_at(self.pointer)
            if not page.reference:
                victim_frame = self.pointer
                self.advance()
                return victim_frame
            page.reference = False
            self.advance()


class ClockPolicy(SecondChancePolicy):
    name = 'CLOCK'


class LRUPolicy(ReplacementPolicy):
    name = 'LRU'

    def reset(self):
        self.last_access = [0] * self.num_frames

    def select_victim(self, resident_set):
        lru_time = float('inf')
        victim_frame = 0
        for frame_num, access_time in enumerate(self.last_access):
            if access_time < lru_time:
                lru_time = access_time
                victim_frame = frame_num
        return victim_frame

    def on_load(self, frame_num, step):
        self.last_access[frame_num] = step

    def on_hit(self, frame_num, step):
        self.last_access[frame_num] = step


class WSClockPolicy(ReplacementPolicy):
    """Working-set clock.

    A referenced page gets its bit cleared and is passed over. An
    unreferenced page is probed with a fresh random age; it is evicted when
    the probe exceeds the page's aging counter, otherwise it is still in the
    working set and the hand moves on.

    A page whose aging counter sits at the top of the probe range can never
    be evicted by the probe, so the scan is bounded at ``max_rotations``
    sweeps. When the bound is hit the page with the lowest aging counter is
    taken instead.
    """
    name = 'WS-CLOCK'

    def __init__(self, num_frames, rng, max_rotations=1000):
        self.rng = rng
        self.max_rotations = max_rotations
        super().__init__(num_frames)

    def reset(self):
        self.pointer = 0

    def advance(self):
        self.pointer = (self.pointer + 1) % self.num_frames

    def select_victim(self, resident_set):
        for _ in range(self.max_rotations * self.num_frames):
            page = resident_set.frame_at(self.pointer)
            if page.reference:
                page.reference = False
            else:
                probe_age = self.rng.randint(*PROBE_RANGE)
                if probe_age > page.aging:
                    victim_frame = self.pointer
                    self.advance()
                    return victim_frame
            self.advance()

        victim_frame = min(range(self.num_frames),
                           key=lambda i: resident_set.frame_at(i).aging)
        logger.warning("WS-Clock found no victim after %d rotations, "
                       "evicting oldest page in frame %d",
                       self.max_rotations, victim_frame)
        self.pointer = (victim_frame + 1) % self.num_frames
        return victim_frame


POLICIES = {
    policy.name: policy
    for policy in (NRUPolicy, FIFOPolicy, SecondChancePolicy, ClockPolicy,
                   LRUPolicy, WSClockPolicy)
}
POLICY_NAMES = tuple(POLICIES)


def normalize_policy_name(name):
    key = str(name).strip().upper()
    if key not in POLICIES:
        raise ConfigurationError(
            f"Unknown algorithm: {name} (choose from {', '.join(POLICY_NAMES)})")
    return key


def make_policy(name, num_frames, rng):
    key = normalize_policy_name(name)
    if key == WSClockPolicy.name:
        return WSClockPolicy(num_frames, rng)
    return POLICIES[key](num_frames)
