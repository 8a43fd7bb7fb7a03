"""Member model for the property registry."""

from dataclasses import dataclass

from registry_sync.ingest.normalize import normalize_identity
from registry_sync.models.enums import MemberRole, MemberStatus


def member_id_for(identity_number: str) -> str:
    """Return the deterministic member id for a raw identity number."""
    return f"member-{normalize_identity(identity_number)}"


@dataclass
class Member:
    """Registry member (property owner or administrator).

    ``identity_number`` keeps the display form as it arrived; every
    comparison goes through ``normalized_identity``.
    """

    member_id: str
    identity_number: str
    name: str
    email: str
    phone: str
    role: MemberRole = MemberRole.CLIENT
    status: MemberStatus = MemberStatus.PENDING
    password: str | None = None  # Credential placeholder, set when claimed

    @property
    def normalized_identity(self) -> str:
        """Identity number reduced to digits and the check character."""
        return normalize_identity(self.identity_number)

    @property
    def is_claimed(self) -> bool:
        """Whether a portal login has been attached to this member."""
        return self.password is not None
