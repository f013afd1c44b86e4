"""Seed the permission catalog and the default roles of existing tenants.

Usage:
    python -m scripts.seed_rbac [--refresh-descriptions] [<tenant_id_or_domain> ...]

With no tenants only the global permission catalog is seeded. Safe to run
any number of times. Exits 1 when any upsert failed.
"""

import argparse
import asyncio
import logging
import sys

from schoolhub.core.config import get_settings
from schoolhub.infrastructure.persistence.database import dispose_engine, session_scope
from schoolhub.infrastructure.persistence.repositories import TenantRepository
from schoolhub.infrastructure.services import RbacSeeder, SeedReport
from schoolhub.shared.logging import setup_logging

logger = logging.getLogger("scripts.seed_rbac")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("tenants", nargs="*", help="Tenant ids or domains")
    parser.add_argument(
        "--refresh-descriptions",
        action="store_true",
        help="Overwrite descriptions of existing permissions with the catalog text",
    )
    return parser.parse_args(argv)


async def run(tenants: list[str], refresh_descriptions: bool = False) -> SeedReport:
    async with session_scope() as session:
        tenant_repo = TenantRepository(session)
        tenant_ids: list[str] = []
        for arg in tenants:
            tenant = await tenant_repo.get_by_id(arg) or await tenant_repo.get_by_domain(arg)
            if tenant is None:
                logger.error("Tenant not found: %s", arg)
                continue
            tenant_ids.append(tenant.id)
        seeder = RbacSeeder(session, refresh_descriptions=refresh_descriptions)
        report = await seeder.seed(tenant_ids)
        if len(tenant_ids) < len(tenants):
            report.failures.append("tenant_lookup")
    return report


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    get_settings()
    setup_logging()
    try:
        report = await run(args.tenants, refresh_descriptions=args.refresh_descriptions)
    finally:
        await dispose_engine()
    print(
        f"Permissions: {report.permissions_created} created, "
        f"{report.permissions_existing} existing; "
        f"roles: {report.roles_created} created, {report.roles_existing} existing; "
        f"role permissions added: {report.role_permissions_added}"
    )
    if report.unresolved_permissions:
        print(f"Unresolved permissions: {', '.join(sorted(set(report.unresolved_permissions)))}")
    if not report.ok:
        print(f"Failures: {', '.join(report.failures)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
