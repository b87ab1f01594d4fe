from montyhall import GameSeries

config = {
    'games': 10000,
    # Set an integer seed for a reproducible run, None draws fresh entropy
    'seed': None,
    # 1 for some informational output, 2 prints every round
    'verbose': 0,
}

if __name__ == "__main__":
    GameSeries(config).test()

    simulator = GameSeries(config)
    simulator.header()
    simulator.simulate()
    simulator.pstats()
