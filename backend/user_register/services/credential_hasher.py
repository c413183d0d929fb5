"""Password hashing with a rotatable server-side pepper.

Digests are bcrypt hashes of ``password + pepper``. Two peppers are
configured: new digests always use the current one; verification tries the
current one first and then the previous one, so digests created before a
rotation keep working until the password is next reset (which re-hashes it
under the current pepper).
"""

import bcrypt

from user_register.services.errors import CredentialHashError, PasswordTooLongError

# bcrypt only looks at the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


class CredentialHasher:
    """Creates and verifies peppered bcrypt digests.

    Args:
        current_pepper: Pepper applied to every new digest.
        previous_pepper: Pepper of the last rotation, accepted on verify.
            The empty string is a valid pepper (development setups run
            without one); it is skipped only when equal to the current one.
        rounds: bcrypt cost factor.
    """

    def __init__(
        self,
        *,
        current_pepper: str,
        previous_pepper: str = "",
        rounds: int = 12,
    ) -> None:
        self._current_pepper = current_pepper
        self._previous_pepper = previous_pepper
        self._rounds = rounds
        self._dummy_digest: bytes | None = None

    def create(self, secret: str) -> str:
        """Hash a secret under the current pepper.

        Args:
            secret: Plain-text password.

        Returns:
            bcrypt digest string.

        Raises:
            PasswordTooLongError: Peppered secret exceeds bcrypt's input limit.
            CredentialHashError: bcrypt rejected the input.
        """
        peppered = (secret + self._current_pepper).encode()
        if len(peppered) > _BCRYPT_MAX_BYTES:
            raise PasswordTooLongError(_BCRYPT_MAX_BYTES)
        try:
            digest = bcrypt.hashpw(peppered, bcrypt.gensalt(rounds=self._rounds))
        except ValueError as exc:
            raise CredentialHashError("failed to hash password") from exc
        return digest.decode()

    def verify(self, candidate: str, digest: str) -> bool:
        """Check a candidate secret against a stored digest.

        Tries the current pepper, then the previous one.

        Args:
            candidate: Plain-text password presented by the caller.
            digest: Stored bcrypt digest.

        Returns:
            True on the first pepper that matches, False otherwise
            (including malformed digests and over-long candidates).
        """
        for pepper in self._peppers():
            peppered = (candidate + pepper).encode()
            if len(peppered) > _BCRYPT_MAX_BYTES:
                continue
            try:
                if bcrypt.checkpw(peppered, digest.encode()):
                    return True
            except ValueError:
                return False
        return False

    def burn_verify(self, candidate: str) -> None:
        """Spend one bcrypt comparison without a stored digest.

        Called when the account lookup misses, so that path costs the same
        as a wrong password.
        """
        if self._dummy_digest is None:
            self._dummy_digest = bcrypt.hashpw(
                b"timing-equalizer", bcrypt.gensalt(rounds=self._rounds)
            )
        bcrypt.checkpw(candidate.encode()[:_BCRYPT_MAX_BYTES], self._dummy_digest)

    def _peppers(self) -> list[str]:
        peppers = [self._current_pepper]
        if self._previous_pepper != self._current_pepper:
            peppers.append(self._previous_pepper)
        return peppers
