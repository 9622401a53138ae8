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

from dataclasses import dataclass
import logging as log

from config_utils import EngineConfig, SCORE_THROUGHPUT, SCORE_BALANCE
from world.network import NetworkState, Station
from planning.connectivity import Components
from planning.pathfinding import path_to_nearest_kind


@dataclass
class Proposal:
    source: int
    target: int
    kind: int
    n_waiting: int
    # lower is more urgent
    score: float
    long_range: bool = False


def throughput_score(dist, n_waiting):
    return dist / (n_waiting + 1)


def balance_score(dist, n_waiting):
    return dist * n_waiting


SCORE_FNS = {
    SCORE_THROUGHPUT: throughput_score,
    SCORE_BALANCE: balance_score,
}


def long_range_score(dist, n_waiting, cfg: EngineConfig):
    """A long-range link has a flat price, so its score is that price spread
    over the demand it serves, weighted by how far that demand would
    otherwise have to travel.  Very long candidates get a discount."""
    norm_demand = n_waiting * dist / cfg.long_range_distance_norm
    score = cfg.long_range_cost / max(1.0, norm_demand)
    if dist > cfg.long_range_discount_distance:
        score *= cfg.long_range_discount
    return score


class ProposalScorer:
    def __init__(self, state: NetworkState, components: Components,
                 cfg: EngineConfig, budget: int):
        self.state = state
        self.components = components
        self.cfg = cfg
        self.budget = budget
        self.score_fn = SCORE_FNS[cfg.scoring_policy]
        self._hops_cache = {}

    def generate(self):
        """Returns at most one proposal for each unsatisfied (landing pad,
        requested kind) pair, in station id then kind order."""
        proposals = []
        for pad in sorted(self.state.landing_pads(), key=lambda ss: ss.id):
            for kind, n_waiting in sorted(pad.waiting.items()):
                if n_waiting <= 0:
                    continue
                if self.components.is_satisfied(pad.id, kind):
                    continue
                proposal = self.best_proposal(pad, kind, n_waiting)
                if proposal is None:
                    log.debug(f"no feasible connection for {n_waiting} "
                              f"passengers at {pad.id} wanting kind {kind}")
                else:
                    proposals.append(proposal)
        return proposals

    def is_useful(self, candidate: Station, kind):
        return candidate.kind == kind or \
            kind in self.components.kinds_reachable_from(candidate.id)

    def best_proposal(self, pad: Station, kind, n_waiting):
        best = None
        for cand_id in sorted(self.state.stations):
            candidate = self.state.stations[cand_id]
            if cand_id == pad.id or not self.is_useful(candidate, kind):
                continue
            proposal = self.score_candidate(pad, candidate, kind, n_waiting)
            if proposal is not None and \
               (best is None or proposal.score < best.score):
                best = proposal
        return best

    def score_candidate(self, pad: Station, candidate: Station, kind,
                        n_waiting):
        state = self.state
        cfg = self.cfg
        if state.link_exists(pad.id, candidate.id):
            return None

        dist = state.station_distance(pad.id, candidate.id)
        tube_ok = state.can_build_tube(pad.id, candidate.id)
        if not tube_ok:
            wants_long_range = n_waiting > cfg.long_range_blocked_demand
        elif n_waiting > cfg.long_range_heavy_demand:
            wants_long_range = \
                self.hops_via(candidate.id, kind) > cfg.long_range_max_hops
        else:
            wants_long_range = False

        if wants_long_range and self.budget > cfg.saving_floor:
            score = long_range_score(dist, n_waiting, cfg)
            return Proposal(pad.id, candidate.id, kind, n_waiting, score,
                            long_range=True)
        if tube_ok:
            score = self.score_fn(dist, n_waiting)
            return Proposal(pad.id, candidate.id, kind, n_waiting, score)
        return None

    def hops_via(self, candidate_id, kind):
        """Network distance to the nearest station of kind, if we were to
        connect to it through candidate_id."""
        key = (candidate_id, kind)
        if key not in self._hops_cache:
            _, dist = path_to_nearest_kind(self.state, candidate_id, kind)
            self._hops_cache[key] = 1 + dist
        return self._hops_cache[key]


def generate_proposals(state, components, cfg, budget):
    return ProposalScorer(state, components, cfg, budget).generate()
