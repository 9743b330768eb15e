"""Seed a development database with the integration catalog and demo leads."""

import argparse
import asyncio
import logging
import random
from datetime import timedelta
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen_admin.database import AsyncSessionLocal, init_models
from leadgen_admin.models import Lead, LeadStatus, utcnow
from leadgen_admin.services.integration_registry import IntegrationRegistry

logger = logging.getLogger(__name__)

COMPANIES = [
    {"name": "TechCorp", "website": "techcorp.com", "industry": "Technology"},
    {"name": "DataMinds", "website": "dataminds.io", "industry": "Data Analytics"},
    {"name": "CloudServe", "website": "cloudserve.com", "industry": "Cloud Services"},
    {"name": "CyberSafe", "website": "cybersafe.net", "industry": "Cybersecurity"},
    {"name": "Code Masters", "website": "codemasters.dev", "industry": "Software Development"},
]

TITLES = ["CEO", "CTO", "VP of Engineering", "Head of Product", "Data Scientist", "Solution Architect"]
FIRST_NAMES = ["John", "Sarah", "Michael", "Emily", "David", "Jessica", "Robert", "Lisa"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Garcia", "Miller", "Davis", "Wilson"]
SOURCES = ["Apollo", "LinkedIn", "Crunchbase", "ZoomInfo"]

# More new/contacted than customers or archived
STATUS_WEIGHTS = {
    LeadStatus.NEW: 0.35,
    LeadStatus.CONTACTED: 0.25,
    LeadStatus.QUALIFIED: 0.2,
    LeadStatus.UNQUALIFIED: 0.1,
    LeadStatus.CUSTOMER: 0.05,
    LeadStatus.ARCHIVED: 0.05,
}


def build_leads(count: int, rng: random.Random) -> list:
    """Random but plausible leads spread over the last 30 days."""
    now = utcnow()
    statuses = list(STATUS_WEIGHTS)
    weights = list(STATUS_WEIGHTS.values())
    leads = []

    for i in range(count):
        first_name = rng.choice(FIRST_NAMES)
        last_name = rng.choice(LAST_NAMES)
        company = rng.choice(COMPANIES)
        status = rng.choices(statuses, weights=weights)[0]
        created_at = now - timedelta(days=rng.randint(0, 30), minutes=i)

        leads.append(Lead(
            first_name=first_name,
            last_name=last_name,
            title=rng.choice(TITLES),
            email=f"{first_name.lower()}.{last_name.lower()}{i}@{company['website']}",
            email_verified=status in (LeadStatus.QUALIFIED, LeadStatus.CUSTOMER),
            phone=f"+1-555-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}",
            linkedin_url=f"https://linkedin.com/in/{first_name.lower()}-{last_name.lower()}-{i}",
            company_name=company["name"],
            company_website=company["website"],
            company_industry=company["industry"],
            source=rng.choice(SOURCES),
            status=status.value,
            score=rng.randint(40, 99) if status != LeadStatus.NEW else None,
            tags=[],
            created_at=created_at,
            updated_at=created_at,
        ))

    return leads


async def seed(db: AsyncSession, lead_count: int = 50, rng: Optional[random.Random] = None) -> dict:
    """Create the default integrations and, if the table is empty, demo leads.

    Safe to run repeatedly. Returns how many rows of each kind were created.
    """
    rng = rng or random.Random()
    integrations_created = await IntegrationRegistry(db).initialize_defaults()

    existing = await db.scalar(select(func.count()).select_from(Lead))
    leads_created = 0

    if existing:
        logger.info(f"Found {existing} existing leads, not adding demo leads")
    else:
        db.add_all(build_leads(lead_count, rng))
        await db.commit()
        leads_created = lead_count
        logger.info(f"Created {leads_created} demo leads")

    return {"integrations": integrations_created, "leads": leads_created}


async def main(lead_count: int) -> None:
    await init_models()
    async with AsyncSessionLocal() as db:
        created = await seed(db, lead_count)

    print(f"✅ Seeded {created['integrations']} integrations and {created['leads']} leads")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--leads", type=int, default=50, help="number of demo leads to create")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(args.leads))
