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
import sys

import hydra
from omegaconf import DictConfig, OmegaConf

from config_utils import engine_config_from_cfg
from world.turn_io import read_turn, format_actions
from planning.engine import PlanningEngine


def run(engine, instream, outstream):
    """Reads turns from instream until it runs dry, writing one command line
    per turn to outstream."""
    n_turns = 0
    while True:
        turn_input = read_turn(instream)
        if turn_input is None:
            break
        result = engine.step(turn_input)
        print(format_actions(result.actions), file=outstream, flush=True)
        n_turns += 1
    return n_turns


@hydra.main(version_base=None, config_path="../cfg", config_name="odc_bot")
def main(cfg: DictConfig):
    log.debug(OmegaConf.to_yaml(cfg))
    engine = PlanningEngine(engine_config_from_cfg(cfg))
    log.info(f"scoring policy is {engine.cfg.scoring_policy}")
    n_turns = run(engine, sys.stdin, sys.stdout)
    log.info(f"input ended after {n_turns} turns")


if __name__ == "__main__":
    main()
