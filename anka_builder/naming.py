import random
import string
import time

from anka_builder import settings

LETTERS = string.ascii_letters


class NameGenerator:
    """
    Random names for VMs and port-forwarding rules.
    The source is injectable so tests can seed it.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng: random.Random = rng or random.Random(time.time_ns())

    def random_sequence(self, length: int = settings.RANDOM_NAME_LENGTH) -> str:
        return "".join(self.rng.choice(LETTERS) for _ in range(length))

    def vm_name(self, prefix: str) -> str:
        return f"{prefix}{self.random_sequence()}"
