import copy
import pprint
from collections import defaultdict, namedtuple

import numpy as np
import pandas as pd

PRIZE = "car"
GOAT = "goat"
DOORS = (1, 2, 3)

STAY = "stay"
SWITCH = "switch"
STRATEGIES = (STAY, SWITCH)

WIN = "win"
LOSE = "lose"
OUTCOMES = (LOSE, WIN)

RoundResult = namedtuple("RoundResult", ["strategy", "outcome"])


def create_arrangement(rng=None):
    """Shuffle one car and two goats behind the three doors
    Door d is found at index d - 1 of the returned tuple
    """
    rng = rng or np.random.default_rng()
    return tuple(str(label) for label in rng.permutation([PRIZE, GOAT, GOAT]))


def select_door(rng=None):
    """The contestant's first pick, uniform over the doors"""
    rng = rng or np.random.default_rng()
    return DOORS[rng.integers(len(DOORS))]


def prize_door(arrangement):
    return arrangement.index(PRIZE) + 1


def open_goat_door(arrangement, pick, rng=None):
    """Host opens a goat door that isn't the contestant's pick
    If the pick hides the car, either remaining door works and we pick one at random,
    otherwise only one door is left that is neither the pick nor the car
    """
    if arrangement[pick - 1] == PRIZE:
        rng = rng or np.random.default_rng()
        options = [door for door in DOORS if door != pick]
        return options[rng.integers(len(options))]
    car = prize_door(arrangement)
    return next(door for door in DOORS if door not in (pick, car))


def change_door(stay=True, opened_door=None, pick=None):
    if stay:
        return pick
    # Only one closed door remains besides the pick
    return next(door for door in DOORS if door not in (opened_door, pick))


def determine_winner(final_pick, arrangement):
    return WIN if arrangement[final_pick - 1] == PRIZE else LOSE


def check_games(n):
    """Reject anything that isn't a positive integer number of games"""
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise ValueError(f"Number of games must be an integer, got {n!r}")
    if n < 1:
        raise ValueError(f"Number of games must be at least 1, got {n}")
    return int(n)


def aggregate_results(results):
    """Row proportions of outcomes per strategy, rounded to 2 decimals
    results: a DataFrame with strategy/outcome columns, or a sequence of RoundResult
    """
    frame = results if isinstance(results, pd.DataFrame) else results_frame(results)
    table = pd.crosstab(frame["strategy"], frame["outcome"], normalize="index")
    # Keep every strategy row and outcome column even when one never happened
    table = table.reindex(index=list(STRATEGIES), columns=list(OUTCOMES), fill_value=0.0)
    table.index.name = "strategy"
    table.columns.name = "outcome"
    return table.round(2)


def results_frame(records):
    return pd.DataFrame(list(records), columns=list(RoundResult._fields))


class Game:
    def __init__(self, rng=None, verbose=0):
        """Configure and initialize a single round
        rng: our random number generator, the numpy default is quite good (PCG64)
        verbose: set to 2 to print the round state after each play
        """
        self.rng = rng or np.random.default_rng()
        self.verbose = verbose
        self.initialize_state()

    def initialize_state(self):
        """Hides the car and clears out any previous choices"""
        self.arrangement = create_arrangement(self.rng)
        self.pick = None          # Contestant's first choice
        self.opened = None        # Goat door the host reveals
        self.final = {}           # Final choice per strategy
        self.outcome = {}         # Win or lose per strategy

    def pstate(self):
        print(f"Arrangement: {self.arrangement}")
        pprint.pprint({'pick': self.pick, 'opened': self.opened,
                       'final': self.final, 'outcome': self.outcome})

    def play(self):
        """A round is:
            1) contestant chooses a door randomly
            2) host reveals a goat
            3) both strategies resolve from that same reveal and get judged
            """
        # A replay gets its own arrangement
        if self.pick is not None:
            self.initialize_state()
        self.pick = select_door(self.rng)
        self.opened = open_goat_door(self.arrangement, self.pick, self.rng)

        for strategy in STRATEGIES:
            final = change_door(strategy == STAY, self.opened, self.pick)
            self.final[strategy] = final
            self.outcome[strategy] = determine_winner(final, self.arrangement)

        if self.verbose > 1:
            self.pstate()
        return tuple(RoundResult(strategy, self.outcome[strategy])
                     for strategy in STRATEGIES)


def play_game(rng=None, verbose=0):
    return Game(rng=rng, verbose=verbose).play()


class GameSeries:
    def __init__(self, config):
        self.config = copy.deepcopy(config)
        self.rng = np.random.default_rng(self.config.get('seed'))

        # Data collection
        self.history = []
        self.stats = defaultdict(int)

    def header(self):
        seed = self.config.get('seed')
        print(f"\n--- Simulating {self.config['games']} games: stay vs switch ---")
        print(f"--- Random seed: {'fresh entropy' if seed is None else seed} ---")

    def pstats(self):
        games = self.stats['games']
        if not games:
            print("No games played yet")
            return
        for strategy in STRATEGIES:
            wins = self.stats[f"{strategy}_win"]
            print(f"{strategy}: won {wins} / {games} for {100 * wins / games:.1f}%")
        print(self.aggregate())

    def simulate(self, n=None):
        n = check_games(self.config['games'] if n is None else n)
        verbose = self.config.get('verbose', 0)
        records = []
        for game_idx in range(n):
            if verbose > 1:
                print(f"---Game {game_idx + 1}")
            records.extend(play_game(rng=self.rng, verbose=verbose))

        self.history.extend(records)
        self.stats['games'] += n
        for record in records:
            self.stats[f"{record.strategy}_{record.outcome}"] += 1
        return tuple(records)

    def results(self):
        return results_frame(self.history)

    def aggregate(self):
        return aggregate_results(self.history)

    def test(self):
        """Sanity check the paired rounds: exactly one strategy wins each round
        Runs on a scratch series so this one's history and stats are untouched
        """
        checker = GameSeries(self.config)
        problems = 0
        print("Testing -- ( games | defects )")
        for games in [1, 10, 100]:
            if problems > 5:
                break
            try:
                records = checker.simulate(games)
            except Exception as exc:
                print(exc)
                problems += 1
                continue
            rounds = zip(records[::2], records[1::2])
            defects = sum((stay.outcome == WIN) == (switch.outcome == WIN)
                          for stay, switch in rounds)
            if self.config.get('verbose', 0):
                print(f"{' '*13}{str(games).ljust(8)}{defects}")
            problems += defects
        print(f"Total problems {problems}")
        return problems


def play_n_games(n=100, rng=None, verbose=0, report=True):
    """Play n paired rounds and return every (strategy, outcome) record in order"""
    n = check_games(n)
    rng = rng or np.random.default_rng()
    records = []
    for _ in range(n):
        records.extend(play_game(rng=rng, verbose=verbose))

    results = results_frame(records)
    if report:
        print(aggregate_results(results))
    return results
