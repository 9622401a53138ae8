from collections import namedtuple, Counter
from dataclasses import dataclass, field
from typing import List

from .network import LANDING_PAD, Link, Station, Vehicle


CMD_WAIT = "WAIT"
CMD_TUBE = "TUBE"
CMD_TELEPORT = "TELEPORT"
CMD_POD = "POD"
CMD_UPGRADE = "UPGRADE"

Action = namedtuple('Action', ['command', 'args'])


class TurnFormatError(ValueError):
    pass


@dataclass
class TurnInput:
    budget: int
    links: List[Link] = field(default_factory=list)
    vehicles: List[Vehicle] = field(default_factory=list)
    new_stations: List[Station] = field(default_factory=list)


def _read_ints(stream, what):
    line = stream.readline()
    if not line:
        raise TurnFormatError(f"input ended while reading {what}")
    try:
        return [int(tok) for tok in line.split()]
    except ValueError as ee:
        raise TurnFormatError(f"bad {what} line: {line.strip()!r}") from ee


def _read_count(stream, what):
    values = _read_ints(stream, what)
    if len(values) != 1 or values[0] < 0:
        raise TurnFormatError(f"expected a single {what}, got {values}")
    return values[0]


def parse_station(line):
    """Parses either a landing pad record, "0 id x y n kind_1 ... kind_n", or a
    module record, "kind id x y"."""
    toks = line.split()
    try:
        kind = int(toks[0])
        station_id = int(toks[1])
        position = (float(toks[2]), float(toks[3]))
        if kind == LANDING_PAD:
            n_passengers = int(toks[4])
            requested = [int(tt) for tt in toks[5:]]
    except (IndexError, ValueError) as ee:
        raise TurnFormatError(f"bad station record: {line.strip()!r}") from ee

    if kind != LANDING_PAD:
        if len(toks) != 4:
            raise TurnFormatError(f"bad module record: {line.strip()!r}")
        return Station(station_id, kind, position)

    if len(requested) != n_passengers:
        raise TurnFormatError(f"landing pad {station_id} lists "
                              f"{len(requested)} passengers, expected "
                              f"{n_passengers}")
    return Station(station_id, kind, position, dict(Counter(requested)))


def read_turn(stream):
    """Reads one turn's worth of input from a line-oriented text stream.

    Blank lines between turns are skipped.  Returns None if the stream is
    exhausted, and raises TurnFormatError on malformed input.
    """
    first = stream.readline()
    while first and not first.strip():
        first = stream.readline()
    if not first:
        return None
    try:
        budget = int(first)
    except ValueError as ee:
        raise TurnFormatError(f"bad budget line: {first.strip()!r}") from ee

    links = []
    for _ in range(_read_count(stream, "link count")):
        values = _read_ints(stream, "link")
        if len(values) != 3:
            raise TurnFormatError(f"expected 'a b capacity', got {values}")
        links.append(Link(*values))

    vehicles = []
    for _ in range(_read_count(stream, "vehicle count")):
        values = _read_ints(stream, "vehicle")
        if len(values) < 2 or len(values) - 2 != values[1]:
            raise TurnFormatError(f"bad vehicle record: {values}")
        vehicles.append(Vehicle(values[0], values[2:]))

    stations = []
    for _ in range(_read_count(stream, "station count")):
        line = stream.readline()
        if not line:
            raise TurnFormatError("input ended while reading stations")
        stations.append(parse_station(line))

    return TurnInput(budget, links, vehicles, stations)


def format_action(action: Action):
    return ' '.join([action.command] + [str(aa) for aa in action.args])


def format_actions(actions):
    if not actions:
        return CMD_WAIT
    return ';'.join(format_action(aa) for aa in actions)
