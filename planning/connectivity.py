# Copyright 2023 Andrew Holliday
# 
# This file is part of the Transit Learning project.
#
# Transit Learning is free software: you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by the Free 
# Software Foundation, either version 3 of the License, or (at your option) any 
# later version.
# 
# Transit Learning is distributed in the hope that it will be useful, but 
# WITHOUT ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or 
# FITNESS FOR A PARTICULAR PURPOSE. See the GNU General Public License for more 
# details.
#
# You should have received a copy of the GNU General Public License along with 
# Transit Learning. If not, see <https://www.gnu.org/licenses/>.

from collections import defaultdict

import networkx as nx

from world.network import NetworkState


class Components:
    """Connected components of the current link graph, each annotated with the
    set of destination kinds that can be reached inside it.

    Long-range links count as ordinary edges here, since only reachability
    matters.
    """
    def __init__(self, state: NetworkState):
        self.component_of = {}
        self.capabilities = defaultdict(set)

        for comp_id, members in enumerate(nx.connected_components(state.graph)):
            for station_id in members:
                self.component_of[station_id] = comp_id
                station = state.stations.get(station_id)
                if station is not None and not station.is_landing_pad:
                    self.capabilities[comp_id].add(station.kind)

    @property
    def n_components(self):
        return len(set(self.component_of.values()))

    def kinds_reachable_from(self, station_id):
        return self.capabilities[self.component_of[station_id]]

    def is_satisfied(self, station_id, kind):
        """True if passengers at station_id can already reach a station of
        the given kind without new construction."""
        return kind in self.kinds_reachable_from(station_id)

    def same_component(self, aa, bb):
        return self.component_of[aa] == self.component_of[bb]
