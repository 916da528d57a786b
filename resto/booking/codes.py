"""Confirmation codes and reservation management links

A management link is /reservations/{code}/{mac}, where mac is the HMAC-SHA-256
of "{code}:{email}" under the server secret. Anonymous diners reach their
booking without any server-side session, and changing the email on a booking
invalidates every link issued before.
"""

import hashlib
import hmac
import secrets
import string
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from resto.booking.errors import ConflictError, LinkSigningError

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8


def generate_confirmation_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class CodeAllocation:
    """Outcome of the confirmation code retry loop"""
    code: Optional[str]
    attempts: int

    @property
    def ok(self) -> bool:
        return self.code is not None


async def allocate_confirmation_code(
    try_insert: Callable[[str], Awaitable[None]],
    max_attempts: int = 5,
    generate: Callable[[], str] = generate_confirmation_code,
) -> CodeAllocation:
    """Insert under fresh codes until one is unique or attempts run out.

    `try_insert` raises ConflictError when the code is already taken; any
    other error propagates.
    """
    for attempt in range(1, max_attempts + 1):
        code = generate()
        try:
            await try_insert(code)
        except ConflictError:
            continue
        return CodeAllocation(code=code, attempts=attempt)
    return CodeAllocation(code=None, attempts=max_attempts)


class ReservationLinkSigner:
    """Mints and verifies reservation management links"""

    def __init__(self, secret: str, base_url: str = ""):
        self._secret = secret.encode() if secret else b""
        self.base_url = base_url.rstrip("/")

    def mac(self, confirmation_code: str, email: str) -> str:
        if not self._secret:
            raise LinkSigningError()
        message = f"{confirmation_code}:{email}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def verify(self, confirmation_code: str, email: str, mac: str) -> bool:
        if not confirmation_code or not email or not mac or not mac.isascii():
            return False
        expected = self.mac(confirmation_code, email)
        return hmac.compare_digest(expected, mac.lower())

    def path(self, confirmation_code: str, email: str) -> str:
        return f"/reservations/{confirmation_code}/{self.mac(confirmation_code, email)}"

    def url(self, confirmation_code: str, email: str) -> str:
        return f"{self.base_url}{self.path(confirmation_code, email)}"
