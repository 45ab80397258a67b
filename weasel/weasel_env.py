#!/usr/bin/env python3
from weasel.config import ConfigurationError

# =========================
# Gene pool + target model
# =========================


class GenePool:
    """
    Ordered alphabet of allowed symbols plus the target string drawn from it.

    The order of `alphabet` is only used for distance (position index),
    and the alphabet is treated as circular by the mutation operator.
    """

    def __init__(self, alphabet: str, target: str):
        self.alphabet = alphabet
        self.target = target
        self._index = {ch: i for i, ch in enumerate(alphabet)}
        for ch in target:
            if ch not in self._index:
                raise ConfigurationError(
                    f"invalid target '{target}'\ntarget must consist of '{alphabet}'"
                )

    @classmethod
    def from_config(cls, cfg) -> "GenePool":
        return cls(cfg.alphabet, cfg.target)

    @property
    def size(self) -> int:
        """P, the number of symbols in the alphabet."""
        return len(self.alphabet)

    @property
    def target_length(self) -> int:
        """T, the number of symbols in the target."""
        return len(self.target)

    @property
    def max_score(self) -> int:
        # every position an exact match scores P
        return self.target_length * self.size

    def index(self, ch: str) -> int:
        try:
            return self._index[ch]
        except KeyError:
            raise ConfigurationError(f"symbol '{ch}' is not in pool '{self.alphabet}'")

    def symbol(self, offset: int) -> str:
        """Symbol at `offset`, wrapping around the alphabet in both directions."""
        return self.alphabet[offset % self.size]

    def shift(self, ch: str, offset: int) -> str:
        return self.symbol(self.index(ch) + offset)

    def random_symbol(self, rng) -> str:
        return self.alphabet[rng.randrange(self.size)]

    def __contains__(self, ch) -> bool:
        return ch in self._index

    def __repr__(self):
        return f"GenePool(alphabet={self.alphabet!r}, target={self.target!r})"
