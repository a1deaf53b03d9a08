import pytest
from fastapi.testclient import TestClient

from backoffice.domain.model.category import Category
from backoffice.domain.model.user import User
from backoffice.infrastructure.api.app import create_app
from backoffice.infrastructure.api.auth import create_token
from backoffice.infrastructure.bootstrap import Repositories
from backoffice.infrastructure.config import Settings
from tests.factories import APPAREL_ID, KITCHEN_ID, make_mug, make_shirt
from tests.fakes import (
    FakeCategoryRepository,
    FakeOrderRepository,
    FakeProductRepository,
    FakeUserRepository,
)

ADMIN = User(id="1" * 24, name="Ann", email="ann@shop.test")


@pytest.fixture()
def settings(tmp_path):
    return Settings(data_dir=tmp_path, environment="test", jwt_secret="test-secret")


@pytest.fixture()
def repos():
    return Repositories(
        orders=FakeOrderRepository(),
        products=FakeProductRepository([make_shirt(), make_mug()]),
        categories=FakeCategoryRepository(
            [Category(APPAREL_ID, "Apparel"), Category(KITCHEN_ID, "Kitchen")]
        ),
        users=FakeUserRepository([ADMIN]),
    )


@pytest.fixture()
def client(settings, repos):
    return TestClient(create_app(settings=settings, repositories=repos))


@pytest.fixture()
def auth(settings):
    return {"Authorization": f"Bearer {create_token(ADMIN, settings)}"}
