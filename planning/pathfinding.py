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

from collections import defaultdict, namedtuple

import networkx as nx

from world.network import NetworkState, canonical_key


# distance reported when no station of the requested kind can be reached
UNREACHABLE = 9999

PathResult = namedtuple('PathResult', ['path', 'distance'])


def path_to_nearest_kind(state: NetworkState, start, kind):
    """Dijkstra from start to the nearest station of the given kind.  Tubes
    cost 1 to traverse and long-range links cost 0.

    Returns a PathResult whose path is the list of station ids from start to
    the target, inclusive.  If no such station is reachable, the path is
    empty and the distance is UNREACHABLE.
    """
    targets = [ss.id for ss in state.stations.values() if ss.kind == kind]
    if start in targets:
        return PathResult([start], 0)
    if not targets or start not in state.graph:
        return PathResult([], UNREACHABLE)

    # search outward from all the targets at once, stopping when start is
    # reached; the graph is undirected, so the reversed path is the answer
    try:
        dist, path = nx.multi_source_dijkstra(state.graph, targets,
                                              target=start, weight='weight')
    except nx.NetworkXNoPath:
        return PathResult([], UNREACHABLE)
    return PathResult(path[::-1], dist)


def attribute_traffic(state: NetworkState):
    """Estimates how many passengers will travel over each link, by sending
    every waiting group along its shortest path to its requested kind.

    Returns a dict mapping canonical link keys to passenger counts.
    """
    traffic = defaultdict(int)
    for pad in state.landing_pads():
        for kind, n_waiting in sorted(pad.waiting.items()):
            if n_waiting <= 0:
                continue
            path, dist = path_to_nearest_kind(state, pad.id, kind)
            if dist == UNREACHABLE:
                continue
            for aa, bb in zip(path[:-1], path[1:]):
                traffic[canonical_key(aa, bb)] += n_waiting
    return traffic
