"""
Path Generator

Produces short, human-typeable snippet paths such as ``nova-ridge-echo-quartz``.

Design Decisions:
- Word based: easy to read aloud and type into a terminal
- 4 words plus 0-2 extra words per call for more entropy
- Words within a path are distinct and keep their random order
- Uniqueness is NOT guaranteed here; the store's unique constraint plus
  a bounded retry in the snippet service takes care of that
"""

import random
from typing import Optional, Sequence

WORDS = [
    "solar", "maple", "drift", "echo", "cinder", "meadow", "frost", "ember",
    "atlas", "harbor", "lumen", "vantage", "quartz", "summit", "anchor", "delta",
    "prairie", "beacon", "cobalt", "ridge", "forest", "signal", "vector", "relay",
    "orbit", "emberglow", "nova", "zenith", "vertex", "alpine", "blaze", "crest",
    "dune", "forge", "glide", "helix", "ion", "jade", "krypton", "logic",
    "matrix", "nexus", "omega", "pulse", "qubit", "rune", "shard", "tracer",
    "umbra", "void", "warp", "xenon", "yield", "zero", "aero", "breeze",
    "cloud", "dash", "edge", "flare", "grid", "halo", "iris", "jump",
    "kite", "link", "mesh", "node", "optic", "path", "quant", "ray",
    "spark", "tide", "unit", "vault", "wave", "axis", "bytes", "core",
]

SEPARATOR = "-"


class PathGenerator:
    """
    Generates random word paths from a fixed vocabulary.

    The random source defaults to ``random.SystemRandom`` so paths are not
    predictable from earlier ones. Tests can pass a seeded ``random.Random``.
    """

    def __init__(
        self,
        words: Sequence[str] = WORDS,
        base_count: int = 4,
        max_extra: int = 2,
        separator: str = SEPARATOR,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the generator.

        Args:
            words: Vocabulary to draw from (duplicates are dropped)
            base_count: Minimum number of words in a path
            max_extra: Upper bound of extra words added per call
            separator: String placed between words
            rng: Random source (default: SystemRandom)
        """
        self.words = list(dict.fromkeys(words))
        self.base_count = base_count
        self.max_extra = max_extra
        self.separator = separator
        self.rng = rng or random.SystemRandom()

        if base_count + max_extra > len(self.words):
            raise ValueError(
                f"Vocabulary of {len(self.words)} words is too small for "
                f"paths of up to {base_count + max_extra} distinct words"
            )

    def generate(self) -> str:
        """
        Generate a candidate path.

        Returns:
            Distinct words joined by the separator, in random order
        """
        count = self.base_count + self.rng.randint(0, self.max_extra)
        return self.separator.join(self.rng.sample(self.words, count))


_default_generator = PathGenerator()


def generate_path() -> str:
    """Generate a path with the shared default generator."""
    return _default_generator.generate()
