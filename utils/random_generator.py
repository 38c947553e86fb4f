"""Random secret material for refresh-token signing keys."""
import secrets
import string
import time

CHARACTERS = string.ascii_letters + string.digits
BASE36 = string.digits + string.ascii_lowercase

# Characters of the clock mixed into longer secrets as a tie-breaker
TIE_BREAKER_LENGTH = 4

_random = secrets.SystemRandom()


def _base36(value: int) -> str:
    out = ""
    while value:
        value, rem = divmod(value, 36)
        out = BASE36[rem] + out
    return out or "0"


def generate_random_string(length: int) -> str:
    """
    Return a secret of `length` characters.

    All but TIE_BREAKER_LENGTH characters come from the OS CSPRNG; the rest are
    the low base-36 digits of the nanosecond clock. The result is shuffled with
    the same CSPRNG so the clock digits have no fixed position. Secrets shorter
    than 2 * TIE_BREAKER_LENGTH are fully random.
    """
    if length < 1:
        raise ValueError("length must be positive")
    tie_breaker = ""
    if length >= 2 * TIE_BREAKER_LENGTH:
        tie_breaker = _base36(time.time_ns())[-TIE_BREAKER_LENGTH:]
    chars = [_random.choice(CHARACTERS) for _ in range(length - len(tie_breaker))]
    chars.extend(tie_breaker)
    _random.shuffle(chars)
    return "".join(chars)
