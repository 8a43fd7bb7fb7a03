"""Faker-backed generators for the built-in demo registry."""

from registry_sync.generators.account import PropertyAccountGenerator
from registry_sync.generators.member import MemberGenerator
from registry_sync.generators.seed import build_seed

__all__ = ["MemberGenerator", "PropertyAccountGenerator", "build_seed"]
