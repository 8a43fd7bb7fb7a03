"""Built-in demo registry used when no durable snapshot exists."""

import logging
import random

from registry_sync.config import SeedConfig
from registry_sync.generators.account import PropertyAccountGenerator
from registry_sync.generators.member import MemberGenerator
from registry_sync.models import MemberRole
from registry_sync.store.registry import Registry

logger = logging.getLogger(__name__)


def build_seed(config: SeedConfig | None = None) -> Registry:
    """Generate the demo registry.

    One administrator plus ``config.num_members`` clients, each owning
    between ``accounts_per_member`` accounts. The same seed always yields
    the same registry.

    Parameters
    ----------
    config : SeedConfig | None
        Seed settings (default: ``SeedConfig()``).

    Returns
    -------
    Registry
        Freshly generated registry.
    """
    config = config or SeedConfig()
    member_gen = MemberGenerator(seed=config.seed, locale=config.locale)
    account_gen = PropertyAccountGenerator(seed=config.seed, locale=config.locale)
    rng = random.Random(config.seed)

    registry = Registry()
    admin = member_gen.generate(role=MemberRole.ADMIN)
    admin.name = "Registry Administrator"
    registry.add_member(admin)

    for member in member_gen.generate_batch(config.num_members):
        registry.add_member(member)
        num_accounts = rng.randint(*config.accounts_per_member)
        for account in account_gen.generate_for_member(member, num_accounts, config.transactions_per_account):
            registry.add_account(account)

    logger.info(
        "Generated seed registry: %d members, %d accounts",
        len(registry.members),
        len(registry.accounts),
    )
    return registry
