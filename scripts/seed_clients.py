#!/usr/bin/env python3
"""
Seed the clients and sales tables with deterministic random data.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (clears before seeding)
- Realism-lite: credit limits correlated with a client segment, and every
  client gets a couple of open credit sales ready to be financed

Usage:
    python scripts/seed_clients.py
"""

from __future__ import annotations

import random
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from retail_credit.infra.db.models import ClientRow, CreditRow, InstallmentRow, SaleRow
from retail_credit.infra.db.session import get_session


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42  # Fixed seed for deterministic results
NUM_CLIENTS = 20
SALES_PER_CLIENT = 2

# Credit limit bands per client segment
SEGMENTS = {
    "basic": (Decimal("500000"), Decimal("1500000")),
    "standard": (Decimal("1500000"), Decimal("4000000")),
    "preferred": (Decimal("4000000"), Decimal("9000000")),
}


# ==============================================================================
# Generators
# ==============================================================================


def _random_amount(low: Decimal, high: Decimal, step: int = 10_000) -> Decimal:
    """Random amount in [low, high], rounded to `step`."""
    value = random.randint(int(low) // step, int(high) // step) * step
    return Decimal(value)


def generate_client(index: int) -> ClientRow:
    segment = random.choices(list(SEGMENTS), weights=[5, 4, 1], k=1)[0]
    low, high = SEGMENTS[segment]
    credit_limit = _random_amount(low, high)

    return ClientRow(
        id=f"C-{index:04d}",
        credit_limit=credit_limit,
        outstanding_balance=Decimal("0"),
        available_credit=credit_limit,
    )


def generate_sales(client: ClientRow) -> list[SaleRow]:
    sales = []
    for n in range(1, SALES_PER_CLIENT + 1):
        sales.append(
            SaleRow(
                id=f"V-{client.id[2:]}-{n}",
                client_id=client.id,
                total=_random_amount(Decimal("100000"), client.credit_limit),
                is_credit=True,
                voided=False,
            )
        )
    return sales


def seed_clients(num_clients: int = NUM_CLIENTS, seed: int = RANDOM_SEED) -> None:
    """
    Seed the database with clients and credit sales.

    Args:
        num_clients: Number of clients to generate
        seed: Random seed for deterministic results
    """
    random.seed(seed)

    print(f"🌱 Seeding database with {num_clients} clients (seed={seed})...")

    with get_session() as session:
        # Step 1: Clear existing data (children first)
        print("🗑️  Clearing existing credits, sales and clients...")
        session.query(InstallmentRow).delete()
        session.query(CreditRow).delete()
        session.query(SaleRow).delete()
        deleted_count = session.query(ClientRow).delete()
        print(f"   Deleted {deleted_count} existing clients")

        # Step 2: Generate and insert
        clients = [generate_client(i) for i in range(1, num_clients + 1)]
        sales = [sale for client in clients for sale in generate_sales(client)]

        session.add_all(clients)
        session.add_all(sales)
        session.flush()

        print(f"✅ Successfully seeded {len(clients)} clients and {len(sales)} sales!")

        print("\n📊 Sample clients:")
        for i, client in enumerate(clients[:5], 1):
            print(f"   {i}. {client.id} - limit ${client.credit_limit:,.2f}")

        if len(clients) > 5:
            print(f"   ... and {len(clients) - 5} more")


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_clients()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
