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

from collections import namedtuple
import logging as log
import time

from config_utils import EngineConfig
from world.network import NetworkState
from world.turn_io import TurnInput
from planning.connectivity import Components
from planning.proposals import generate_proposals
from planning.construction import TurnContext, ConstructionExecutor
from planning.congestion import CongestionTracker


TurnResult = namedtuple('TurnResult', ['actions', 'budget', 'mode'])


class PlanningEngine:
    """Holds everything that outlives a single turn (the station registry,
    the congestion snapshot and the vehicle id counter) and runs the per-turn
    pipeline over it.

    Construct once per game, then call refresh_turn and plan_turn (or just
    step) once per turn.
    """
    def __init__(self, cfg: EngineConfig = None):
        self.cfg = cfg or EngineConfig()
        self.state = NetworkState.from_config(self.cfg)
        self.congestion = CongestionTracker()
        self.next_vehicle_id = 1
        self.turn = 0
        self.ctx = None

    def refresh_turn(self, turn_input: TurnInput):
        for station in turn_input.new_stations:
            self.state.register_station(station)
        self.state.reset_links(turn_input.links, turn_input.vehicles)
        # never reuse an id that some vehicle has had
        self.next_vehicle_id = max(self.next_vehicle_id,
                                   self.state.max_vehicle_id() + 1)
        self.ctx = TurnContext(turn_input.budget, self.next_vehicle_id)
        self.turn += 1

    def plan_turn(self):
        assert self.ctx is not None, "refresh_turn must be called first"
        start_time = time.perf_counter()
        ctx = self.ctx

        components = Components(self.state)
        proposals = generate_proposals(self.state, components, self.cfg,
                                       ctx.budget)
        log.debug(f"turn {self.turn}: {len(proposals)} proposals over "
                  f"{components.n_components} components")

        executor = ConstructionExecutor(self.state, self.cfg, ctx)
        executor.execute(proposals)
        executor.cover_unserved_links()
        self.congestion.update(self.state, self.cfg, ctx)

        self.next_vehicle_id = ctx.next_vehicle_id
        duration = time.perf_counter() - start_time
        if duration > self.cfg.turn_time_limit_s:
            log.warning(f"Planning took {duration} seconds, which is longer "
                        f"than the allowed time of "
                        f"{self.cfg.turn_time_limit_s} seconds!")
        log.info(f"turn {self.turn}: {len(ctx.actions)} actions, spent "
                 f"{ctx.spent} of {ctx.starting_budget}, mode {ctx.mode}")
        self.ctx = None
        return TurnResult(list(ctx.actions), ctx.budget, ctx.mode)

    def step(self, turn_input: TurnInput):
        self.refresh_turn(turn_input)
        return self.plan_turn()
