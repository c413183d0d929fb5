"""Domain types shared by the account service and its store."""

from dataclasses import dataclass, field

from user_register.providers.address.base import Address


@dataclass(frozen=True)
class Account:
    """A registered user.

    Attributes:
        id: Store-assigned integer id.
        name: Display name.
        email: Unique email, exactly as registered.
        address: Postal address resolved at registration.
        credential_digest: Peppered bcrypt digest. Empty on values returned
            to callers that must not see it.
    """

    id: int
    name: str
    email: str
    address: Address = field(default_factory=Address)
    credential_digest: str = ""
