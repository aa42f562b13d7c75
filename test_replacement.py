import logging
import random

import pytest

from errors import ConfigurationError
from replacement import (POLICY_NAMES, ClockPolicy, FIFOPolicy, LRUPolicy,
                         NRUPolicy, SecondChancePolicy, WSClockPolicy,
                         make_policy)


def test_nru_prefers_unreferenced_clean(make_resident_set):
    resident = make_resident_set([(True, True), (False, False), (True, False)])
    assert NRUPolicy(3).select_victim(resident) == 1


def test_nru_class_order(make_resident_set):
    resident = make_resident_set([(True, True), (True, False), (False, True),
                                  (False, True)])
    assert NRUPolicy(4).select_victim(resident) == 2

    resident = make_resident_set([(True, True), (True, False), (True, False)])
    assert NRUPolicy(3).select_victim(resident) == 1


def test_nru_falls_back_to_first_frame(make_resident_set):
    resident = make_resident_set([(True, True)] * 4)
    assert NRUPolicy(4).select_victim(resident) == 0


def test_fifo_round_robin_ignores_reference_bits(make_resident_set):
    rng = random.Random(4)
    resident = make_resident_set([(rng.random() < 0.5, False)
                                  for _ in range(4)])
    policy = FIFOPolicy(4)
    victims = [policy.select_victim(resident) for _ in range(10)]
    assert victims == [0, 1, 2, 3, 0, 1, 2, 3, 0, 1]


@pytest.mark.parametrize('policy_class', [SecondChancePolicy, ClockPolicy])
def test_second_chance_clears_every_bit_once(make_resident_set, policy_class):
    resident = make_resident_set([(True, False)] * 5)
    policy = policy_class(5)
    policy.pointer = 2
    assert policy.select_victim(resident) == 2
    assert all(not page.reference for page in resident.frames)
    assert policy.pointer == 3


@pytest.mark.parametrize('policy_class', [SecondChancePolicy, ClockPolicy])
def test_second_chance_skips_referenced(make_resident_set, policy_class):
    resident = make_resident_set([(True, False), (True, True), (False, True),
                                  (True, False)])
    policy = policy_class(4)
    assert policy.select_victim(resident) == 2
    assert [p.reference for p in resident.frames] == [False, False, False, True]
    assert policy.pointer == 3

    # pointer wraps around
    assert policy.select_victim(resident) == 0
    assert policy.pointer == 1


def test_clock_keeps_its_own_pointer(make_resident_set):
    resident = make_resident_set([(False, False)] * 3)
    second_chance = SecondChancePolicy(3)
    clock = ClockPolicy(3)
    second_chance.select_victim(resident)
    second_chance.select_victim(resident)
    assert second_chance.pointer == 2
    assert clock.pointer == 0


def test_lru_evicts_least_recent(make_resident_set):
    resident = make_resident_set([(False, False)] * 5)
    policy = LRUPolicy(5)
    for frame_num, step in enumerate([1, 2, 1, 2, 2]):
        policy.on_load(frame_num, step)
    policy.on_hit(3, 5)
    victim = policy.select_victim(resident)
    assert victim != 3
    assert victim == 0


def test_lru_tie_goes_to_first_frame(make_resident_set):
    resident = make_resident_set([(False, False)] * 4)
    policy = LRUPolicy(4)
    policy.on_hit(0, 3)
    assert policy.select_victim(resident) == 1


def test_ws_clock_probe(make_resident_set, scripted_random):
    resident = make_resident_set([(True, False), (False, False), (False, True)],
                                 aging=[500, 5000, 200])
    rng = scripted_random(randints=[4000, 300])
    policy = WSClockPolicy(3, rng)
    assert policy.select_victim(resident) == 2
    assert rng.randint_calls == 2
    assert resident.frame_at(0).reference is False
    assert policy.pointer == 0


def test_ws_clock_keeps_pages_in_working_set(make_resident_set,
                                             scripted_random):
    resident = make_resident_set([(False, False), (False, False)],
                                 aging=[3000, 3000])
    # first sweep: both probes too young, second sweep evicts frame 0
    rng = scripted_random(randints=[100, 2999, 3001])
    policy = WSClockPolicy(2, rng)
    assert policy.select_victim(resident) == 0
    assert policy.pointer == 1


def test_ws_clock_bounded_scan(make_resident_set, caplog):
    resident = make_resident_set([(True, False), (False, False),
                                  (False, True)],
                                 aging=[9999, 9999, 9999])
    policy = WSClockPolicy(3, random.Random(8), max_rotations=5)
    with caplog.at_level(logging.WARNING, logger='replacement'):
        victim = policy.select_victim(resident)
    assert victim == 0
    assert policy.pointer == 1
    assert 'no victim' in caplog.text


def test_ws_clock_fallback_picks_lowest_aging(make_resident_set,
                                              scripted_random):
    resident = make_resident_set([(False, False)] * 3,
                                 aging=[9000, 400, 700])
    # every probe returns the bottom of the range, nothing is ever evicted
    rng = scripted_random(randints=[100] * 30)
    policy = WSClockPolicy(3, rng, max_rotations=10)
    assert policy.select_victim(resident) == 1
    assert rng.randint_calls == 30
    assert policy.pointer == 2


def test_make_policy_names():
    rng = random.Random(0)
    assert POLICY_NAMES == ('NRU', 'FIFO', 'FIFO-SC', 'CLOCK', 'LRU',
                            'WS-CLOCK')
    assert isinstance(make_policy('fifo-sc', 4, rng), SecondChancePolicy)
    assert type(make_policy('Clock', 4, rng)) is ClockPolicy
    ws = make_policy('ws-clock', 4, rng)
    assert isinstance(ws, WSClockPolicy)
    assert ws.rng is rng


def test_make_policy_rejects_unknown():
    with pytest.raises(ConfigurationError):
        make_policy('OPT', 4, random.Random(0))
