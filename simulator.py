import argparse
import logging
import random
import sys

from errors import ConfigurationError, InvariantViolation
from memory_manager import ResidentSet, Statistics
from page_table import BackingStore
from replacement import POLICY_NAMES, make_policy, normalize_policy_name

logger = logging.getLogger(__name__)

NUM_FRAMES = 10
STORE_SIZE = 100
NUM_REFERENCES = 1000
RESET_INTERVAL = 10
WRITE_PROBABILITY = 0.5


class RandomReferenceGenerator:
    """Endless stream of instruction ids in [1, store_size]."""

    def __init__(self, store_size, rng):
        self.store_size = store_size
        self.rng = rng

    def __iter__(self):
        return self

    def __next__(self):
        return self.rng.randint(1, self.store_size)


def validate_config(algorithm, reference_count, num_frames, store_size,
                    reset_interval):
    if num_frames <= 0:
        raise ConfigurationError(
            f"Resident capacity must be positive, got {num_frames}")
    if store_size < num_frames:
        raise ConfigurationError(
            f"Store size {store_size} is smaller than resident capacity "
            f"{num_frames}")
    if reference_count < 0:
        raise ConfigurationError(
            f"Reference count must not be negative, got {reference_count}")
    if reset_interval <= 0:
        raise ConfigurationError(
            f"Reset interval must be positive, got {reset_interval}")
    return normalize_policy_name(algorithm)


def check_references(references, reference_count):
    """Reject a sized reference sequence too short for the run."""
    if references is not None and hasattr(references, "__len__") and \
            len(references) < reference_count:
        raise ConfigurationError(
            f"Reference sequence has {len(references)} entries, "
            f"{reference_count} needed")


class PagingSimulator:

    def __init__(self, algorithm='FIFO', num_frames=NUM_FRAMES,
                 store_size=STORE_SIZE, reset_interval=RESET_INTERVAL,
                 random_seed=None, references=None):
        self.algorithm = validate_config(algorithm, 0, num_frames, store_size,
                                         reset_interval)
        self.num_frames = num_frames
        self.store_size = store_size
        self.reset_interval = reset_interval

        # One generator per run, shared by store init, pre-fill, the hit
        # write draw and the WS-Clock probe, in that order.
        self.rng = random.Random(random_seed)
        self.backing_store = BackingStore(store_size).initialize(self.rng)
        self.resident_set = ResidentSet(num_frames).fill(self.backing_store,
                                                         self.rng)
        self.policy = make_policy(self.algorithm, num_frames, self.rng)
        self.stats = Statistics()
        self.current_time = 0

        if references is None:
            references = RandomReferenceGenerator(store_size, self.rng)
        self.references = iter(references)
        self.initial_resident = self.resident_set.snapshot()

    def handle_memory_reference(self, instruction):
        if instruction < 1 or instruction > self.store_size:
            raise InvariantViolation(
                f"Reference outside 1 .. {self.store_size}",
                policy=self.algorithm, instruction=instruction)

        self.current_time += 1
        self.stats.references += 1

        frame_num = self.resident_set.find_by_instruction(instruction)
        if frame_num is not None:
            self.handle_page_hit(frame_num)
        else:
            self.handle_page_fault(instruction)

        # Periodic bookkeeping, independent of hit or fault
        if self.current_time % self.reset_interval == 0:
            self.resident_set.reset_reference_bits()

    def handle_page_hit(self, frame_num):
        page = self.resident_set.frame_at(frame_num)
        page.reference = True
        if self.rng.random() < WRITE_PROBABILITY:
            page.data += 1
            page.dirty = True
        self.stats.record_hit()
        self.policy.on_hit(frame_num, self.current_time)

    def handle_page_fault(self, instruction):
        victim_frame = self.policy.select_victim(self.resident_set)
        if not isinstance(victim_frame, int) or \
                not 0 <= victim_frame < self.num_frames:
            raise InvariantViolation("Victim frame out of range",
                                     policy=self.algorithm, frame=victim_frame,
                                     instruction=instruction)

        victim = self.resident_set.frame_at(victim_frame)
        self.stats.record_page_fault(is_dirty_replacement=victim.dirty)
        if victim.dirty:
            self.backing_store.store(victim)
            logger.debug("Wrote back page %d from frame %d",
                         victim.page_number, victim_frame)

        # Instruction I lives in page N = I - 1
        page = self.backing_store.load(instruction - 1)
        self.resident_set.replace(victim_frame, page)
        self.policy.on_load(victim_frame, self.current_time)
        logger.debug("%s fault at step %d: page %d -> frame %d (evicted %d)",
                     self.algorithm, self.current_time, page.page_number,
                     victim_frame, victim.page_number)

        self.resident_set.check_unique(policy=self.algorithm,
                                       frame=victim_frame)

    def run(self, reference_count=NUM_REFERENCES):
        if reference_count < 0:
            raise ConfigurationError(
                f"Reference count must not be negative, got {reference_count}")
        logger.info("Running %s for %d references", self.algorithm,
                    reference_count)
        for consumed in range(reference_count):
            try:
                instruction = next(self.references)
            except StopIteration:
                raise ConfigurationError(
                    f"Reference sequence ran out after {consumed} of "
                    f"{reference_count} references") from None
            self.handle_memory_reference(instruction)

        result = self.stats.freeze(self.algorithm, self.initial_resident,
                                   self.resident_set.snapshot())
        logger.info("%s finished: %d faults, %d write backs", self.algorithm,
                    result.page_faults, result.write_backs)
        return result


def run_simulation(algorithm, reference_count=NUM_REFERENCES,
                   num_frames=NUM_FRAMES, store_size=STORE_SIZE,
                   reset_interval=RESET_INTERVAL, random_seed=None,
                   references=None):
    validate_config(algorithm, reference_count, num_frames, store_size,
                    reset_interval)
    check_references(references, reference_count)
    simulator = PagingSimulator(algorithm, num_frames, store_size,
                                reset_interval, random_seed, references)
    return simulator.run(reference_count)


def run_all(algorithms=POLICY_NAMES, **kwargs):
    """Run each algorithm on fresh memory; returns {name: RunStatistics}."""
    names = [validate_config(algorithm,
                             kwargs.get('reference_count', NUM_REFERENCES),
                             kwargs.get('num_frames', NUM_FRAMES),
                             kwargs.get('store_size', STORE_SIZE),
                             kwargs.get('reset_interval', RESET_INTERVAL))
             for algorithm in algorithms]
    # Every algorithm replays the same trace
    if kwargs.get('references') is not None:
        kwargs['references'] = list(kwargs['references'])
        check_references(kwargs['references'],
                         kwargs.get('reference_count', NUM_REFERENCES))
    return {name: run_simulation(name, **kwargs) for name in names}


def format_frames(pages, title):
    lines = [f"--- {title} ---",
             "-" * 60,
             "| Frame | N:    | I:    | D:    | R: | M: | T:     |",
             "-" * 60]
    for i, page in enumerate(pages):
        lines.append(f"| {i:<5} {page}")
    lines.append("-" * 60)
    return "\n".join(lines)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Compare page replacement algorithms on a random "
                    "reference stream.")
    p.add_argument('-p', '--policy', action='append', dest='policies',
                   help=f"algorithm to run, repeatable "
                        f"(default: all of {', '.join(POLICY_NAMES)})")
    p.add_argument('-r', '--references', type=int, default=NUM_REFERENCES,
                   help=f"references per run (default: {NUM_REFERENCES})")
    p.add_argument('-n', '--frames', type=int, default=NUM_FRAMES,
                   help=f"resident frames (default: {NUM_FRAMES})")
    p.add_argument('-s', '--store-size', type=int, default=STORE_SIZE,
                   help=f"pages in the backing store (default: {STORE_SIZE})")
    p.add_argument('-k', '--reset-interval', type=int, default=RESET_INTERVAL,
                   help=f"clear reference bits every K references "
                        f"(default: {RESET_INTERVAL})")
    p.add_argument('--seed', type=int, default=None, help="random seed")
    p.add_argument('--show-swap', action='store_true',
                   help="also print the final backing store")
    p.add_argument('-v', '--verbose', action='store_true',
                   help="log every fault and write back")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    algorithms = args.policies or POLICY_NAMES
    config = dict(reference_count=args.references, num_frames=args.frames,
                  store_size=args.store_size,
                  reset_interval=args.reset_interval)
    try:
        names = [validate_config(algorithm, **config) for algorithm in algorithms]
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    results = {}
    for name in names:
        print(f"\n{'='*60}")
        print(f"Running {name} algorithm")
        print(f"{'='*60}")
        simulator = PagingSimulator(name, args.frames, args.store_size,
                                    args.reset_interval, args.seed)
        stats = simulator.run(args.references)
        results[name] = stats

        print(format_frames(stats.initial_resident, "Initial RAM"))
        print(format_frames(stats.final_resident, f"Final RAM ({name})"))
        if args.show_swap:
            print(format_frames(simulator.backing_store.snapshot(),
                                f"Final SWAP ({name})"))
        print(f"\nResults:")
        print(simulator.stats)

    # Print summary
    print("\n" + "="*80)
    print("SUMMARY OF ALL RESULTS")
    print("="*80)
    print(f"{'Algorithm':<10} {'Page Faults':<15} {'Hits':<10} "
          f"{'Write Backs':<15} {'Disk Accesses':<15}")
    print("-" * 70)
    for name, r in results.items():
        print(f"{name:<10} {r.page_faults:<15} {r.hits:<10} "
              f"{r.write_backs:<15} {r.disk_accesses:<15}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
