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

import logging as log

from config_utils import EngineConfig
from world.network import NetworkState
from world.turn_io import CMD_UPGRADE
from planning.construction import TurnContext
from planning.pathfinding import attribute_traffic


class CongestionTracker:
    """Remembers how many passengers were waiting at each landing pad last
    turn, and upgrades tubes next to pads whose queues keep growing."""
    def __init__(self):
        self.snapshot = {}

    def has_grown(self, station):
        previous = self.snapshot.get(station.id)
        return previous is not None and station.total_waiting > previous

    def update(self, state: NetworkState, cfg: EngineConfig,
               ctx: TurnContext):
        if ctx.saving:
            log.debug("saving mode, so no capacity upgrades this turn")
        else:
            self.upgrade_congested_links(state, cfg, ctx)
        self.record(state)

    def upgrade_congested_links(self, state, cfg, ctx):
        # heaviest estimated traffic gets first claim on the budget
        traffic = attribute_traffic(state)
        links = sorted(state.physical_links(),
                       key=lambda ll: (-traffic.get(ll.key, 0), ll.key))
        for link in links:
            threshold = cfg.upgrade_multiple * link.capacity
            congested = False
            for station_id in link.key:
                station = state.stations.get(station_id)
                if station is not None and self.has_grown(station) and \
                   station.total_waiting > threshold:
                    congested = True
            if not congested:
                continue

            cost = state.tube_cost(link.aa, link.bb)
            if not ctx.can_afford(cost):
                continue
            ctx.spend(cost)
            ctx.emit(CMD_UPGRADE, link.aa, link.bb)
            link.capacity += 1
            state.graph.edges[link.aa, link.bb]['capacity'] = link.capacity
            log.info(f"upgraded tube {link.key} to capacity {link.capacity}")

    def record(self, state: NetworkState):
        self.snapshot = {pad.id: pad.total_waiting
                         for pad in state.landing_pads()}
