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
from world.network import NetworkState, Vehicle, LONG_RANGE_CAPACITY
from world.turn_io import Action, CMD_TUBE, CMD_TELEPORT, CMD_POD
from planning.connectivity import Components


MODE_NORMAL = "normal"
MODE_SAVING = "saving"


class TurnContext:
    """Budget, mode and emitted actions for a single turn."""
    def __init__(self, budget, next_vehicle_id=1):
        self.starting_budget = budget
        self.budget = budget
        self.mode = MODE_NORMAL
        self.actions = []
        self.next_vehicle_id = next_vehicle_id

    @property
    def saving(self):
        return self.mode == MODE_SAVING

    @property
    def spent(self):
        return self.starting_budget - self.budget

    def can_afford(self, amount):
        return self.budget >= amount

    def spend(self, amount):
        assert amount <= self.budget, \
            f"spending {amount} would overdraw budget {self.budget}"
        self.budget -= amount

    def emit(self, command, *args):
        self.actions.append(Action(command, args))

    def new_vehicle_id(self):
        vehicle_id = self.next_vehicle_id
        self.next_vehicle_id += 1
        return vehicle_id


class ConstructionExecutor:
    """Greedily commits proposals in score order, keeping the network state
    and its connectivity current after every commit."""
    def __init__(self, state: NetworkState, cfg: EngineConfig,
                 ctx: TurnContext):
        self.state = state
        self.cfg = cfg
        self.ctx = ctx
        self.components = Components(state)

    def execute(self, proposals):
        # sorted() is stable, so ties keep their arrival order
        for proposal in sorted(proposals, key=lambda pp: pp.score):
            if self.state.link_exists(proposal.source, proposal.target):
                log.debug(f"skipping {proposal}: link already built")
                continue
            if self.components.is_satisfied(proposal.source, proposal.kind):
                log.debug(f"skipping {proposal}: already served this turn")
                continue

            if proposal.long_range:
                self._try_long_range(proposal)
            else:
                self._try_tube(proposal)

    def _try_long_range(self, proposal):
        cost = self.cfg.long_range_cost
        if self.ctx.can_afford(cost):
            self.ctx.spend(cost)
            self.ctx.emit(CMD_TELEPORT, proposal.source, proposal.target)
            self._add_link(proposal.source, proposal.target,
                           LONG_RANGE_CAPACITY)
            log.info(f"long-range link {proposal.source}-{proposal.target} "
                     f"built for {cost}")
        elif self.ctx.budget > self.cfg.saving_floor:
            if not self.ctx.saving:
                log.info(f"saving up for a long-range link "
                         f"{proposal.source}-{proposal.target} "
                         f"(budget {self.ctx.budget})")
            self.ctx.mode = MODE_SAVING

    def _try_tube(self, proposal):
        if self.ctx.saving:
            return
        aa, bb = proposal.source, proposal.target
        tube_cost = self.state.tube_cost(aa, bb)
        if not self.ctx.can_afford(tube_cost + self.cfg.vehicle_cost):
            log.debug(f"can't afford tube {aa}-{bb} costing {tube_cost}")
            return
        if not self.state.can_build_tube(aa, bb):
            log.debug(f"tube {aa}-{bb} is no longer buildable")
            return

        self.ctx.spend(tube_cost)
        self.ctx.emit(CMD_TUBE, aa, bb)
        self._add_link(aa, bb, 1)

        self.ctx.spend(self.cfg.vehicle_cost)
        self._build_vehicle(self.plan_tour(aa, bb))
        log.info(f"tube {aa}-{bb} built for {tube_cost} to serve "
                 f"{proposal.n_waiting} passengers wanting {proposal.kind}")

    def _add_link(self, aa, bb, capacity):
        self.state.add_link(aa, bb, capacity)
        self.components = Components(self.state)

    def _build_vehicle(self, stops):
        vehicle = Vehicle(self.ctx.new_vehicle_id(), stops)
        self.state.add_vehicle(vehicle)
        self.ctx.emit(CMD_POD, vehicle.id, *stops)
        return vehicle

    def plan_tour(self, aa, bb):
        """A closed tour over the tube aa-bb.  If some station is joined by
        tubes to both ends, loop through it as a triangle."""
        common = set(self.state.tube_neighbours(aa)) & \
            set(self.state.tube_neighbours(bb))
        common -= {aa, bb}
        if common:
            return [aa, bb, min(common), aa]
        return [aa, bb, aa]

    def cover_unserved_links(self):
        """Makes sure no tube is left without a vehicle, so passengers can't
        get stranded on it."""
        if self.ctx.saving:
            log.debug("saving for a long-range link, uncovered tubes wait")
            return
        for link in sorted(self.state.physical_links(), key=lambda ll: ll.key):
            if self.state.is_covered(link):
                continue
            if not self.ctx.can_afford(self.cfg.vehicle_cost):
                log.warning(f"can't afford a vehicle for uncovered tube "
                            f"{link.key}")
                break
            self.ctx.spend(self.cfg.vehicle_cost)
            self._build_vehicle([link.aa, link.bb, link.aa])
