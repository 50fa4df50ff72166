"""ProfileService 테스트"""
import pytest

from core.responses import NotFoundException, ValidationException
from schemas.profile import OnboardingRequest
from schemas.paddle import TransactionCustomData
from services.credit_ledger_service import CreditLedgerService
from services.profile_service import ProfileService


@pytest.mark.asyncio
async def test_complete_onboarding_normalizes_optional_fields(fake_db):
    fake_db.add_profile("u1", onboarding_completed=False)
    service = ProfileService(fake_db)

    profile = await service.complete_onboarding(
        "u1",
        OnboardingRequest(
            restaurant_name=" Casa Lisboa ",
            country="PT",
            city="Lisbon",
            website_url="  ",
            whatsapp_number="+351900000000",
        ),
    )

    assert profile["restaurant_name"] == "Casa Lisboa"
    assert profile["website_url"] is None
    assert profile["whatsapp_number"] == "+351900000000"
    assert profile["onboarding_completed"] is True
    assert fake_db.logs[-1]["event_type"] == "user_onboarding_completed"


@pytest.mark.asyncio
async def test_onboarding_requires_city(fake_db):
    fake_db.add_profile("u1", onboarding_completed=False)
    service = ProfileService(fake_db)

    with pytest.raises(ValidationException) as exc_info:
        await service.complete_onboarding("u1", OnboardingRequest(restaurant_name="Casa", country="PT", city=" "))

    assert exc_info.value.error_code == "MISSING_REQUIRED_FIELDS"
    assert fake_db.profiles["u1"]["onboarding_completed"] is False


@pytest.mark.asyncio
async def test_credit_balance(fake_db):
    fake_db.add_profile("u1", pack_dishes_remaining=4, pack_dishes_total=10, pack_purchased_at="2025-02-01T00:00:00Z")
    service = ProfileService(fake_db)

    balance = await service.get_credit_balance("u1")

    assert balance == {
        "pack_dishes_remaining": 4,
        "pack_dishes_total": 10,
        "pack_purchased_at": "2025-02-01T00:00:00Z",
    }


@pytest.mark.asyncio
async def test_missing_profile_raises_not_found(fake_db):
    with pytest.raises(NotFoundException):
        await ProfileService(fake_db).get_credit_balance("nobody")


@pytest.mark.asyncio
async def test_current_subscription(fake_db):
    service = ProfileService(fake_db)
    assert await service.get_current_subscription("u1") is None

    fake_db.subscriptions["sub_1"] = {"user_id": "u1", "paddle_subscription_id": "sub_1", "status": "ACTIVE"}
    subscription = await service.get_current_subscription("u1")
    assert subscription["paddle_subscription_id"] == "sub_1"


@pytest.mark.asyncio
async def test_new_user_creates_profile_then_onboards_and_receives_credits(fake_db):
    service = ProfileService(fake_db)

    created = await service.create_profile("new-user", " Casa Nova ")
    assert created["restaurant_name"] == "Casa Nova"
    assert created["onboarding_completed"] is False

    profile = await service.complete_onboarding(
        "new-user",
        OnboardingRequest(restaurant_name="Casa Nova", country="PT", city="Porto"),
    )
    assert profile["onboarding_completed"] is True

    outcome = await CreditLedgerService(fake_db).apply_transaction(
        "txn_new",
        TransactionCustomData.model_validate({"userId": "new-user", "dishesCount": 5}),
    )
    assert outcome.credits["success"] is True
    assert await service.get_credit_balance("new-user") == {
        "pack_dishes_remaining": 5,
        "pack_dishes_total": 5,
        "pack_purchased_at": fake_db.profiles["new-user"]["pack_purchased_at"],
    }


@pytest.mark.asyncio
async def test_create_profile_is_idempotent_per_user(fake_db):
    fake_db.add_profile("u1", restaurant_name="Casa Lisboa", pack_dishes_remaining=3, pack_dishes_total=3)
    service = ProfileService(fake_db)

    profile = await service.create_profile("u1", "Another Name")

    assert profile["restaurant_name"] == "Casa Lisboa"
    assert profile["pack_dishes_remaining"] == 3
    assert "create_restaurant_profile" not in fake_db.mutations


@pytest.mark.asyncio
async def test_create_profile_requires_name(fake_db):
    with pytest.raises(ValidationException):
        await ProfileService(fake_db).create_profile("u1", "   ")

    assert fake_db.profiles == {}
