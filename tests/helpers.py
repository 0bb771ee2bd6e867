"""Shared test helpers"""

from tesourim.controller import InputSnapshot


class FixedRng:
    """Stands in for random.Random with every draw pinned"""

    def __init__(self, roll=1, coin=0, fraction=0.5):
        self.roll = roll
        self.coin = coin
        self.fraction = fraction

    def randint(self, a, b):
        return self.roll

    def randrange(self, n):
        return self.coin

    def random(self):
        return self.fraction

    def uniform(self, a, b):
        return a + (b - a) * self.fraction


def press(game, *actions):
    game.update(InputSnapshot.of(*actions))
