from __future__ import annotations

from decimal import Decimal
from uuid import UUID

import pytest  # type: ignore[import-not-found]

from vinped.commons.results import ErrorKind, Ok, ServiceError
from vinped.wallets.schemas import CreateWalletRequest, UpdateWalletRequest
from vinped.wallets.service import wallet_changes

OWNER = UUID("00000000-0000-0000-0000-000000000001")
STRANGER = UUID("00000000-0000-0000-0000-000000000002")


def test_wallet_changes_only_includes_sent_fields() -> None:
    assert wallet_changes(UpdateWalletRequest.model_validate({"name": "Travel"})) == {
        "name": "Travel"
    }
    assert wallet_changes(UpdateWalletRequest.model_validate({})) == {}


def test_wallet_changes_null_clears_only_nullable_columns() -> None:
    req = UpdateWalletRequest.model_validate(
        {"name": None, "is_active": None, "credit_limit": None}
    )
    assert wallet_changes(req) == {"credit_limit": None}


def test_wallet_changes_converts_money_to_decimal() -> None:
    req = UpdateWalletRequest.model_validate({"credit_limit": 1500.5, "is_active": False})
    assert wallet_changes(req) == {"credit_limit": Decimal("1500.5"), "is_active": False}


@pytest.mark.anyio
async def test_create_sets_current_balance_to_initial(wallets_service, db) -> None:  # type: ignore[no-untyped-def]
    result = await wallets_service.create_wallet(
        db, user_id=OWNER, req=CreateWalletRequest(name="Nubank", initial_balance=250.75)
    )
    assert isinstance(result, Ok)
    assert result.value.current_balance == Decimal("250.75")
    assert db.commits == 1


@pytest.mark.anyio
async def test_duplicate_wallet_name_is_a_conflict(wallets_service, db) -> None:  # type: ignore[no-untyped-def]
    req = CreateWalletRequest(name="Nubank")
    await wallets_service.create_wallet(db, user_id=OWNER, req=req)
    result = await wallets_service.create_wallet(db, user_id=OWNER, req=req)
    assert isinstance(result, ServiceError)
    assert result.kind is ErrorKind.CONFLICT
    # Names are unique per owner only.
    assert isinstance(await wallets_service.create_wallet(db, user_id=STRANGER, req=req), Ok)


@pytest.mark.anyio
async def test_wallets_are_scoped_to_their_owner(wallets_service, db) -> None:  # type: ignore[no-untyped-def]
    w = (
        await wallets_service.create_wallet(
            db, user_id=OWNER, req=CreateWalletRequest(name="Cash")
        )
    ).value

    assert isinstance(await wallets_service.get_wallet(db, user_id=OWNER, wallet_id=w.id), Ok)
    for result in (
        await wallets_service.get_wallet(db, user_id=STRANGER, wallet_id=w.id),
        await wallets_service.update_wallet(
            db,
            user_id=STRANGER,
            wallet_id=w.id,
            req=UpdateWalletRequest(name="Mine now"),
        ),
    ):
        assert isinstance(result, ServiceError)
        assert result.kind is ErrorKind.NOT_FOUND
    assert (await wallets_service.list_wallets(db, user_id=STRANGER)).value == []


@pytest.mark.anyio
async def test_update_without_fields_is_rejected(wallets_service, db) -> None:  # type: ignore[no-untyped-def]
    w = (
        await wallets_service.create_wallet(
            db, user_id=OWNER, req=CreateWalletRequest(name="Cash")
        )
    ).value
    result = await wallets_service.update_wallet(
        db, user_id=OWNER, wallet_id=w.id, req=UpdateWalletRequest()
    )
    assert isinstance(result, ServiceError)
    assert result.kind is ErrorKind.VALIDATION


@pytest.mark.anyio
async def test_last_active_wallet_cannot_be_deleted(wallets_service, db) -> None:  # type: ignore[no-untyped-def]
    first = (
        await wallets_service.create_wallet(
            db, user_id=OWNER, req=CreateWalletRequest(name="Cash")
        )
    ).value
    blocked = await wallets_service.delete_wallet(db, user_id=OWNER, wallet_id=first.id)
    assert isinstance(blocked, ServiceError)
    assert blocked.details == "last_wallet"

    second = (
        await wallets_service.create_wallet(
            db, user_id=OWNER, req=CreateWalletRequest(name="Card")
        )
    ).value
    assert isinstance(
        await wallets_service.delete_wallet(db, user_id=OWNER, wallet_id=second.id), Ok
    )
