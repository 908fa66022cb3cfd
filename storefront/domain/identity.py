# storefront/domain/identity.py
from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Identity:
    """Caller as reported by the auth provider (request headers)."""

    user_id: UUID | None = None
    email: str | None = None
    device_id: str | None = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def anonymous(self) -> "Identity":
        return Identity(device_id=self.device_id)
