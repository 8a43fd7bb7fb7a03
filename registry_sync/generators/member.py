"""Member generator for seed data."""

from __future__ import annotations

from typing import Iterator

from registry_sync.generators.base import BaseGenerator
from registry_sync.ingest.normalize import normalize_identity
from registry_sync.models import Member, MemberRole, MemberStatus, member_id_for

IDENTITY_FORMAT = "#####-#######-#"


class MemberGenerator(BaseGenerator):
    """Generate synthetic registry members."""

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        email_domain: str = "members.registry.local",
    ) -> None:
        super().__init__(seed, locale)
        self.email_domain = email_domain
        self._used_identities: set[str] = set()

    def generate(self, role: MemberRole = MemberRole.CLIENT) -> Member:
        """Generate a single member.

        Parameters
        ----------
        role : MemberRole
            Role of the generated member.

        Returns
        -------
        Member
            Generated member with a unique identity number.
        """
        identity_number = self._unique_identity()
        normalized = normalize_identity(identity_number)
        return Member(
            member_id=member_id_for(identity_number),
            identity_number=identity_number,
            name=self.fake.name(),
            email=f"{normalized}@{self.email_domain}",
            phone=self.fake.numerify("03##-#######"),
            role=role,
            status=MemberStatus.ACTIVE,
            password=self.fake.password(length=12),
        )

    def generate_batch(self, count: int) -> Iterator[Member]:
        """Generate multiple client members.

        Parameters
        ----------
        count : int
            Number of members to generate.

        Yields
        ------
        Member
            Generated members.
        """
        for _ in range(count):
            yield self.generate()

    def _unique_identity(self) -> str:
        while True:
            identity_number = self.fake.numerify(IDENTITY_FORMAT)
            normalized = normalize_identity(identity_number)
            if normalized not in self._used_identities:
                self._used_identities.add(normalized)
                return identity_number
