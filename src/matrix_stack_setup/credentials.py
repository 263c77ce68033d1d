"""Random credential generation for the Matrix stack."""

import secrets
from dataclasses import dataclass, fields

# Hex digits in both cases, minus E/e
CHARSET = "0123456789ABCDFabcdf"


def generate_random_string(length: int = 16) -> str:
    """Return a random string of ``length`` characters drawn from CHARSET.

    Uses the OS CSPRNG via :mod:`secrets`, which never blocks.
    """
    if not isinstance(length, int) or length <= 0:
        raise ValueError(f"length must be a positive integer, got {length!r}")
    return "".join(secrets.choice(CHARSET) for _ in range(length))


@dataclass(frozen=True)
class Secrets:
    """Credentials shared between the generated service configs."""
    postgres_user: str
    postgres_password: str
    postgres_db: str
    redis_password: str
    livekit_key: str
    livekit_secret: str
    registration_shared_secret: str

    @classmethod
    def generate(cls) -> "Secrets":
        return cls(
            postgres_user=generate_random_string(16),
            postgres_password=generate_random_string(16),
            postgres_db=generate_random_string(16),
            redis_password=generate_random_string(16),
            livekit_key=generate_random_string(16),
            livekit_secret=generate_random_string(32),
            registration_shared_secret=generate_random_string(16),
        )

    def __repr__(self):
        masked = ", ".join(f"{f.name}='***'" for f in fields(self))
        return f"Secrets({masked})"
