"""
Email verification for actions that need proof of address ownership.

An action (sign up, password change) is parked under a random token and the
address receives a link. Following the link runs the parked action. Delivery
goes through an EmailSender; the default one only logs the link.
"""
import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from sqlalchemy.orm import Session

from catalog.errors import ERROR

logger = logging.getLogger("catalog.email")

VerifiedAction = Callable[[Session], Awaitable[Any]]


class EmailSender:
    """Delivers verification links. Subclass to send real mail."""

    async def send_verification(self, email: str, action: str, link: str) -> None:
        logger.info(f"Verification for {email} ({action}): {link}")


@dataclass
class PendingVerification:
    """An action waiting for its email link to be followed."""
    email: str
    action: str
    callback: VerifiedAction
    created_at: float = field(default_factory=time.monotonic)


class EmailVerifier:
    """
    Tracks pending verifications by token.

    Usage:
        verifier = EmailVerifier(sender, base_url="https://example.org")
        await verifier.verify_email(email, "sign up", create_account)
        result = await verifier.complete(token, db)
    """

    def __init__(
        self,
        sender: Optional[EmailSender] = None,
        base_url: str = "",
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sender = sender or EmailSender()
        self._base_url = base_url.rstrip("/")
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._pending: Dict[str, PendingVerification] = {}

    def _expired(self, pending: PendingVerification) -> bool:
        return self._clock() - pending.created_at >= self._ttl_seconds

    def _purge_expired(self) -> None:
        expired = [t for t, p in self._pending.items() if self._expired(p)]
        for token in expired:
            del self._pending[token]
        if expired:
            logger.debug(f"Dropped {len(expired)} expired verifications")

    async def verify_email(self, email: str, action: str, callback: VerifiedAction) -> str:
        """
        Park `callback` until `email` confirms it.

        Args:
            email: Address that must confirm
            action: Human-readable description, e.g. "sign up"
            callback: Coroutine function taking a db session, run once the link is followed

        Returns:
            The verification token
        """
        self._purge_expired()
        token = secrets.token_urlsafe(32)
        self._pending[token] = PendingVerification(
            email=email,
            action=action,
            callback=callback,
            created_at=self._clock(),
        )
        link = f"{self._base_url}/api/verify/{token}"
        await self._sender.send_verification(email, action, link)
        return token

    async def complete(self, token: str, db: Session) -> Any:
        """
        Run the action parked under `token`.

        Raises:
            APIError: verificationInvalid if the token is unknown or expired
        """
        pending = self._pending.pop(token, None)
        if pending is None or self._expired(pending):
            raise ERROR.verification_invalid()
        logger.info(f"Verified {pending.email} for {pending.action}")
        return await pending.callback(db)

    @property
    def pending_count(self) -> int:
        return len(self._pending)
