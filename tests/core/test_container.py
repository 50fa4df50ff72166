"""DIContainer 테스트"""
import pytest

from core.container import DIContainer
from services.email_client import ResendEmailClient


def test_has_reflects_registration():
    container = DIContainer()
    assert container.has(ResendEmailClient) is False

    container.register_singleton(ResendEmailClient, ResendEmailClient(api_key="re_test"))

    assert container.has(ResendEmailClient) is True


def test_factory_is_created_once_on_first_get():
    container = DIContainer()
    created = []
    container.register_factory(list, lambda: created.append(1) or ["instance"])

    assert created == []
    first = container.get(list)
    second = container.get(list)

    assert first is second
    assert created == [1]


def test_unregistered_service_raises():
    with pytest.raises(ValueError):
        DIContainer().get(dict)
