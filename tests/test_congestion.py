import pytest

from config_utils import EngineConfig
from world.network import NetworkState, Station, Link
from world.turn_io import Action
from planning.construction import TurnContext, MODE_SAVING
from planning.congestion import CongestionTracker


@pytest.fixture
def state():
    state = NetworkState()
    state.register_station(Station(1, 0, (0, 0), {5: 3}))
    state.register_station(Station(2, 5, (3, 0)))
    state.reset_links([Link(1, 2)], [])
    return state


def set_waiting(state, station_id, waiting):
    state.register_station(Station(station_id, 0, (0, 0), waiting))


def test_first_turn_only_records(state):
    tracker = CongestionTracker()
    set_waiting(state, 1, {5: 20})
    ctx = TurnContext(1000)
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == []
    assert tracker.snapshot == {1: 20}


def test_growing_queue_upgrades(state):
    tracker = CongestionTracker()
    tracker.update(state, EngineConfig(), TurnContext(0))

    set_waiting(state, 1, {5: 6, 7: 2})
    ctx = TurnContext(1000)
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == [Action("UPGRADE", (1, 2))]
    assert ctx.budget == 970
    assert state.get_link(1, 2).capacity == 2
    assert state.graph.edges[1, 2]['capacity'] == 2
    assert tracker.snapshot == {1: 8}


def test_queue_below_capacity_multiple(state):
    tracker = CongestionTracker()
    tracker.update(state, EngineConfig(), TurnContext(0))
    # grown, but not past 5 x capacity
    set_waiting(state, 1, {5: 5})
    ctx = TurnContext(1000)
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == []


def test_steady_queue_doesnt_upgrade(state):
    tracker = CongestionTracker()
    set_waiting(state, 1, {5: 20})
    tracker.update(state, EngineConfig(), TurnContext(0))
    ctx = TurnContext(1000)
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == []


def test_no_upgrades_while_saving(state):
    tracker = CongestionTracker()
    tracker.update(state, EngineConfig(), TurnContext(0))
    set_waiting(state, 1, {5: 20})
    ctx = TurnContext(4000)
    ctx.mode = MODE_SAVING
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == []
    # the snapshot still moves on
    assert tracker.snapshot == {1: 20}


def test_upgrade_needs_budget(state):
    tracker = CongestionTracker()
    tracker.update(state, EngineConfig(), TurnContext(0))
    set_waiting(state, 1, {5: 20})
    ctx = TurnContext(29)
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == []
    assert ctx.budget == 29


def test_long_range_links_arent_upgraded(state):
    state.reset_links([Link(1, 2, 0)], [])
    tracker = CongestionTracker()
    tracker.update(state, EngineConfig(), TurnContext(0))
    set_waiting(state, 1, {5: 20})
    ctx = TurnContext(1000)
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == []


def test_busiest_link_upgraded_first():
    state = NetworkState()
    # nobody at pad 1 can reach what they want, so link 1-2 carries nothing
    state.register_station(Station(1, 0, (0, 0), {7: 2}))
    state.register_station(Station(2, 9, (1, 0)))
    state.register_station(Station(3, 0, (0, 5), {5: 2}))
    state.register_station(Station(4, 5, (1, 5)))
    state.reset_links([Link(1, 2), Link(3, 4)], [])

    tracker = CongestionTracker()
    tracker.update(state, EngineConfig(), TurnContext(0))
    set_waiting(state, 1, {7: 10})
    set_waiting(state, 3, {5: 10})
    # only enough for one upgrade
    ctx = TurnContext(15)
    tracker.update(state, EngineConfig(), ctx)
    assert ctx.actions == [Action("UPGRADE", (3, 4))]
