"""Park-Miller minimal standard pseudo-random generator."""

_MASK64 = 0xFFFFFFFFFFFFFFFF


def do_rand(ctx):
    """Return the next value after state ctx; it is also the new state."""
    x = (ctx & _MASK64) % 0x7FFFFFFE + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    return x - 1


class Rand:
    """A generator that keeps its own state."""

    def __init__(self, seed=1):
        self.state = seed & _MASK64

    def next(self):
        """Advance the state and return the new value."""
        self.state = do_rand(self.state)
        return self.state