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

from dataclasses import dataclass, fields

from omegaconf import DictConfig, OmegaConf


SCORE_THROUGHPUT = "throughput"
SCORE_BALANCE = "balance"
SCORING_POLICIES = (SCORE_THROUGHPUT, SCORE_BALANCE)


@dataclass
class EngineConfig:
    """Constants governing costs, geometry and the greedy planner's
    thresholds.  The defaults match cfg/odc_bot.yaml."""
    scoring_policy: str = SCORE_THROUGHPUT
    # tube cost is this many resources per unit of length
    tube_cost_per_unit: float = 10.0
    vehicle_cost: int = 1000
    long_range_cost: int = 5000
    # between this and long_range_cost, we save up for a long-range link
    saving_floor: int = 3500
    safety_radius: float = 1.5
    check_station_clearance: bool = True
    # upgrade when waiting passengers exceed this multiple of capacity
    upgrade_multiple: int = 5
    long_range_blocked_demand: int = 20
    long_range_heavy_demand: int = 30
    long_range_max_hops: int = 6
    long_range_distance_norm: float = 10.0
    long_range_discount_distance: float = 50.0
    long_range_discount: float = 0.5
    # warn if planning a turn takes longer than this
    turn_time_limit_s: float = 0.5

    def __post_init__(self):
        if self.scoring_policy not in SCORING_POLICIES:
            raise ValueError(
                f'Unknown scoring policy: {self.scoring_policy}')


def engine_config_from_cfg(cfg: DictConfig):
    """Builds an EngineConfig from a composed hydra config.  The config is
    expected to have an 'engine' node and optionally a 'scoring' node with a
    'policy' key."""
    kwargs = {}
    if 'engine' in cfg and cfg.engine is not None:
        kwargs.update(OmegaConf.to_container(cfg.engine, resolve=True))
    if 'scoring' in cfg and cfg.scoring is not None:
        kwargs['scoring_policy'] = cfg.scoring.policy

    known = set(ff.name for ff in fields(EngineConfig))
    unknown = set(kwargs) - known
    if unknown:
        raise ValueError(f'Unknown engine config keys: {sorted(unknown)}')
    return EngineConfig(**kwargs)
