import pytest

from world.network import NetworkState, Station, Link, Vehicle, \
    canonical_key, LONG_RANGE_CAPACITY


def build_state(stations, links=(), vehicles=(), **kwargs):
    state = NetworkState(**kwargs)
    for station in stations:
        state.register_station(station)
    state.reset_links(links, vehicles)
    return state


@pytest.fixture
def cross_state():
    # a pad and a module on the x axis, and two modules straddling them
    stations = [Station(1, 0, (0, 0), {5: 3}),
                Station(2, 5, (10, 0)),
                Station(3, 7, (5, 5)),
                Station(4, 7, (5, -5))]
    return build_state(stations)


def test_canonical_key():
    assert canonical_key(3, 1) == (1, 3)
    assert canonical_key(1, 3) == (1, 3)
    assert Link(9, 2, 1).key == (2, 9)


def test_station_properties():
    pad = Station(1, 0, (0, 0), {5: 3, 6: 4})
    assert pad.is_landing_pad
    assert pad.total_waiting == 7
    module = Station(2, 5, (1, 1))
    assert not module.is_landing_pad
    assert module.total_waiting == 0


def test_link_kinds():
    tube = Link(1, 2, 3)
    assert not tube.is_long_range
    assert tube.weight == 1
    long_range = Link(1, 2, LONG_RANGE_CAPACITY)
    assert long_range.is_long_range
    assert long_range.weight == 0


def test_vehicle_covers():
    vehicle = Vehicle(1, [1, 2, 3, 1])
    assert vehicle.covers(1, 2)
    assert vehicle.covers(2, 1)
    assert vehicle.covers(1, 3)
    assert not vehicle.covers(2, 4)


def test_tube_cost(cross_state):
    assert cross_state.tube_cost(1, 2) == 100
    assert cross_state.tube_cost(2, 1) == 100
    # floor(10 * sqrt(50)) = floor(70.71...)
    assert cross_state.tube_cost(1, 3) == 70


def test_tube_cost_has_floor_of_one():
    state = build_state([Station(1, 0, (0, 0)), Station(2, 5, (0, 0.05)),
                         Station(3, 5, (0, 0))])
    assert state.tube_cost(1, 2) == 1
    assert state.tube_cost(1, 3) == 1


def test_cant_duplicate_links(cross_state):
    assert cross_state.can_build_tube(1, 2)
    cross_state.add_link(1, 2)
    assert cross_state.link_exists(2, 1)
    assert not cross_state.can_build_tube(1, 2)
    assert not cross_state.can_build_tube(2, 1)


def test_cant_build_to_self_or_unknown(cross_state):
    assert not cross_state.can_build_tube(1, 1)
    assert not cross_state.can_build_tube(1, 99)


def test_existing_links_never_buildable():
    stations = [Station(ii, ii % 3, (ii * 7 % 11, ii * 5 % 13))
                for ii in range(1, 9)]
    links = [Link(1, 2), Link(2, 3), Link(4, 5, 0), Link(6, 8, 2)]
    state = build_state(stations, links)
    for link in links:
        assert not state.can_build_tube(link.aa, link.bb)
        assert not state.can_build_tube(link.bb, link.aa)


def test_crossing_tube_blocks(cross_state):
    cross_state.add_link(3, 4)
    assert not cross_state.can_build_tube(1, 2)


def test_long_range_link_doesnt_block(cross_state):
    cross_state.add_link(3, 4, LONG_RANGE_CAPACITY)
    assert cross_state.can_build_tube(1, 2)


def test_station_clearance(cross_state):
    cross_state.register_station(Station(5, 9, (5, 1)))
    assert not cross_state.can_build_tube(1, 2)


def test_station_outside_clearance(cross_state):
    cross_state.register_station(Station(5, 9, (5, 2)))
    assert cross_state.can_build_tube(1, 2)


def test_clearance_can_be_disabled():
    state = build_state([Station(1, 0, (0, 0)), Station(2, 5, (10, 0)),
                         Station(3, 9, (5, 1))],
                        check_station_clearance=False)
    assert state.can_build_tube(1, 2)


def test_register_refreshes_waiting_only(cross_state):
    cross_state.register_station(Station(1, 0, (99, 99), {5: 10}))
    pad = cross_state.stations[1]
    assert pad.waiting == {5: 10}
    assert tuple(pad.position) == (0, 0)


def test_reset_links(cross_state):
    cross_state.add_link(1, 2)
    cross_state.add_vehicle(Vehicle(4, [1, 2, 1]))
    cross_state.reset_links([Link(3, 4, 0)], [])
    assert list(cross_state.links) == [(3, 4)]
    assert not cross_state.graph.has_edge(1, 2)
    assert cross_state.graph.edges[3, 4]['weight'] == 0
    assert cross_state.vehicles == []
    # stations survive
    assert set(cross_state.graph.nodes) == {1, 2, 3, 4}


def test_coverage_and_vehicle_ids(cross_state):
    cross_state.add_link(1, 2)
    cross_state.add_link(1, 3)
    assert cross_state.max_vehicle_id() == 0
    cross_state.add_vehicle(Vehicle(7, [2, 1, 2]))
    assert cross_state.is_covered(cross_state.get_link(1, 2))
    assert not cross_state.is_covered(cross_state.get_link(1, 3))
    assert cross_state.max_vehicle_id() == 7


def test_tube_neighbours(cross_state):
    cross_state.add_link(1, 2)
    cross_state.add_link(1, 3, LONG_RANGE_CAPACITY)
    assert cross_state.tube_neighbours(1) == [2]
