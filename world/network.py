from dataclasses import dataclass, field
from math import floor
from typing import Dict, List, Tuple
import logging as log

import numpy as np
import networkx as nx

import geometry_utils as gu


LANDING_PAD = 0
# capacity value that marks a link as long-range
LONG_RANGE_CAPACITY = 0

__all__ = ['LANDING_PAD', 'LONG_RANGE_CAPACITY', 'canonical_key', 'Station',
           'Link', 'Vehicle', 'NetworkState']


def canonical_key(aa, bb):
    return (aa, bb) if aa <= bb else (bb, aa)


@dataclass
class Station:
    id: int
    kind: int
    position: np.ndarray
    # requested kind -> number of passengers waiting for it
    waiting: Dict[int, int] = field(default_factory=dict)

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float)

    @property
    def is_landing_pad(self):
        return self.kind == LANDING_PAD

    @property
    def total_waiting(self):
        return sum(self.waiting.values())


@dataclass
class Link:
    aa: int
    bb: int
    capacity: int = 1

    @property
    def key(self) -> Tuple[int, int]:
        return canonical_key(self.aa, self.bb)

    @property
    def is_long_range(self):
        return self.capacity == LONG_RANGE_CAPACITY

    @property
    def weight(self):
        # traversal cost in the path finder
        return 0 if self.is_long_range else 1


@dataclass
class Vehicle:
    id: int
    stops: List[int]

    def covers(self, aa, bb):
        key = canonical_key(aa, bb)
        return any(canonical_key(ss, tt) == key
                   for ss, tt in zip(self.stops[:-1], self.stops[1:]))


class NetworkState:
    """The stations, links and vehicles the planner reasons about.

    Stations persist for the whole game.  Links and vehicles are replaced at
    the start of each turn, and then extended as the planner commits new
    construction, so that later decisions in the same turn see it.
    """
    def __init__(self, tube_cost_per_unit=10.0, safety_radius=1.5,
                 check_station_clearance=True):
        self.tube_cost_per_unit = tube_cost_per_unit
        self.safety_radius = safety_radius
        self.check_station_clearance = check_station_clearance

        self.stations: Dict[int, Station] = {}
        self.links: Dict[Tuple[int, int], Link] = {}
        self.vehicles: List[Vehicle] = []
        self.graph = nx.Graph()

    @classmethod
    def from_config(cls, engine_cfg):
        return cls(engine_cfg.tube_cost_per_unit, engine_cfg.safety_radius,
                   engine_cfg.check_station_clearance)

    def register_station(self, station: Station):
        """Adds a new station, or refreshes the waiting passengers of one we
        already know about.  Position and kind never change."""
        known = self.stations.get(station.id)
        if known is None:
            self.stations[station.id] = station
            self.graph.add_node(station.id)
        else:
            known.waiting = dict(station.waiting)

    def reset_links(self, links, vehicles):
        self.links = {}
        self.graph = nx.Graph()
        self.graph.add_nodes_from(self.stations)
        for link in links:
            self.add_link(link.aa, link.bb, link.capacity)
        self.vehicles = list(vehicles)

    def add_link(self, aa, bb, capacity=1):
        link = Link(aa, bb, capacity)
        if link.key in self.links:
            log.warning(f"link {link.key} was added twice")
        self.links[link.key] = link
        self.graph.add_edge(aa, bb, capacity=capacity,
                            long_range=link.is_long_range, weight=link.weight)
        return link

    def add_vehicle(self, vehicle: Vehicle):
        self.vehicles.append(vehicle)

    def get_link(self, aa, bb):
        return self.links.get(canonical_key(aa, bb))

    def link_exists(self, aa, bb):
        return canonical_key(aa, bb) in self.links

    def physical_links(self):
        return [ll for ll in self.links.values() if not ll.is_long_range]

    def is_covered(self, link: Link):
        return any(vv.covers(link.aa, link.bb) for vv in self.vehicles)

    def max_vehicle_id(self):
        return max((vv.id for vv in self.vehicles), default=0)

    def landing_pads(self):
        return [ss for ss in self.stations.values() if ss.is_landing_pad]

    def position(self, station_id):
        return self.stations[station_id].position

    def station_distance(self, aa, bb):
        return gu.distance(self.position(aa), self.position(bb))

    def tube_cost(self, aa, bb):
        dist = self.station_distance(aa, bb)
        return max(1, int(floor(dist * self.tube_cost_per_unit)))

    def tube_neighbours(self, station_id):
        return [nn for nn, attrs in self.graph[station_id].items()
                if not attrs['long_range']]

    def can_build_tube(self, aa, bb):
        if aa == bb or aa not in self.stations or bb not in self.stations:
            return False
        if self.link_exists(aa, bb):
            return False

        pa = self.position(aa)
        pb = self.position(bb)
        segments = [(self.position(ll.aa), self.position(ll.bb))
                    for ll in self.physical_links()]
        if gu.segment_crosses_any(pa, pb, segments):
            return False

        if self.check_station_clearance:
            for station in self.stations.values():
                if station.id in (aa, bb):
                    continue
                clearance = gu.point_to_segment_distance(
                    station.position, pa, pb)
                if clearance < self.safety_radius:
                    return False

        return True
