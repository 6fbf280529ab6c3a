"""
Account balances endpoint.

GET /api/accounts: live Starling and Trading 212 balances plus manually
entered credit card balances from the sync store.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from command_centre.core.logging import get_logger
from command_centre.core.models import AccountBalance, AccountType
from command_centre.services.banking import StarlingClient, Trading212Client
from command_centre.sync.store import SyncStore

log = get_logger(__name__)

router = APIRouter(prefix="/api")

CREDIT_CARDS = [
    ("capital-one", "Capital One"),
    ("ms-bank", "M&S"),
    ("fluid", "Fluid"),
    ("vanquis", "Vanquis"),
    ("hsbc", "HSBC"),
]

MANUAL_BALANCES_KEY = "credit-card-balances"


def build_accounts(
    starling: dict[str, Any] | None,
    trading212: dict[str, Any] | None,
    manual_balances: dict[str, Any],
    now: str,
) -> list[AccountBalance]:
    """
    Assemble the account list shown on the dashboard.

    Manual balances use the flat ``{"<id>": balance, "<id>-updated": iso}``
    shape written by the dashboard and the bookmarklet.
    """
    accounts = [
        AccountBalance(
            id="starling",
            name="Starling",
            type=AccountType.CURRENT,
            balance=starling["effective_balance"] if starling else None,
            currency=starling["currency"] if starling else "GBP",
            last_updated=now if starling else None,
            auto_sync=True,
            live=starling is not None,
        ),
        AccountBalance(
            id="trading212",
            name="Trading 212",
            type=AccountType.INVESTMENT,
            balance=trading212["total_value"] if trading212 else None,
            currency=trading212["currency"] if trading212 else "GBP",
            last_updated=now if trading212 else None,
            auto_sync=True,
            live=trading212 is not None,
            extra={
                "cash": trading212["cash"] if trading212 else None,
                "investedValue": trading212["invested_value"] if trading212 else None,
                "unrealisedPnL": trading212["unrealised_pnl"] if trading212 else None,
            },
        ),
    ]

    for card_id, name in CREDIT_CARDS:
        balance = manual_balances.get(card_id)
        accounts.append(AccountBalance(
            id=card_id,
            name=name,
            type=AccountType.CREDIT,
            balance=balance,
            currency="GBP",
            last_updated=manual_balances.get(f"{card_id}-updated") if card_id in manual_balances else None,
            auto_sync=False,
            live=False,
        ))

    return accounts


async def read_manual_balances(store: SyncStore) -> dict[str, Any]:
    """Manual credit card balances, ``{}`` if unset, malformed or unreachable."""
    value = await store.read_or_default(MANUAL_BALANCES_KEY, {})
    if not isinstance(value, dict):
        log.warning("manual_balances_malformed", value_type=type(value).__name__)
        return {}
    return value


def get_starling() -> StarlingClient:
    return StarlingClient()


def get_trading212() -> Trading212Client:
    return Trading212Client()


def get_store() -> SyncStore:
    return SyncStore()


@router.get("/accounts")
async def list_accounts(
    starling_client: StarlingClient = Depends(get_starling),
    trading212_client: Trading212Client = Depends(get_trading212),
    store: SyncStore = Depends(get_store),
):
    """All accounts with balances; unavailable providers show a null balance."""
    starling, trading212, manual = await asyncio.gather(
        starling_client.fetch_balance(),
        trading212_client.fetch_summary(),
        read_manual_balances(store),
    )

    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    accounts = build_accounts(starling, trading212, manual, now)
    return {"accounts": [a.to_dict() for a in accounts], "timestamp": now}
