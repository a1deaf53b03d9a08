"""Tests for catalog and account maintenance use cases."""

from decimal import Decimal

import pytest

from backoffice.application.add_category import AddCategoryHandler
from backoffice.application.add_product import AddProductHandler
from backoffice.application.create_admin import CreateAdminHandler
from backoffice.application.list_products import ListProductsHandler, ShowProductHandler
from backoffice.application.set_stock import SetStockHandler
from backoffice.application.update_product import UpdateProductHandler
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model.category import Category
from backoffice.domain.model.identity import looks_like_id
from backoffice.domain.model.user import UserRole
from tests.factories import APPAREL_ID, SHIRT_ID, make_mug, make_shirt
from tests.fakes import FakeCategoryRepository, FakeProductRepository, FakeUserRepository


def _catalog():
    return (
        FakeProductRepository([make_shirt(), make_mug()]),
        FakeCategoryRepository([Category(APPAREL_ID, "Apparel")]),
    )


class TestAddProduct:

    def test_adds_product_with_variants(self):
        products, categories = _catalog()
        dto = AddProductHandler(products, categories).handle(
            name="  Hoodie ",
            price="49.90",
            category_id=APPAREL_ID,
            stock=[("Black", "L", 4), ("Black", "XL", 2)],
            sku="HD-1",
        )
        assert looks_like_id(dto.id)
        assert dto.name == "Hoodie"
        assert dto.price == Decimal("49.90")
        assert dto.total_stock == 6
        assert products.get_by_sku("HD-1") is not None

    def test_unknown_category(self):
        products, categories = _catalog()
        with pytest.raises(EntityNotFoundError, match="Category"):
            AddProductHandler(products, categories).handle("Hoodie", "10", "0" * 24)

    def test_duplicate_sku(self):
        products, categories = _catalog()
        handler = AddProductHandler(products, categories)
        handler.handle("Hoodie", "10", APPAREL_ID, sku="HD-1")
        with pytest.raises(ValidationError, match="already in use"):
            handler.handle("Other", "10", APPAREL_ID, sku="HD-1")

    def test_duplicate_variant(self):
        products, categories = _catalog()
        with pytest.raises(ValidationError, match="Duplicate stock entry"):
            AddProductHandler(products, categories).handle(
                "Hoodie", "10", APPAREL_ID, stock=[("Black", "L", 1), ("Black", "L", 2)]
            )

    def test_blank_name(self):
        products, categories = _catalog()
        with pytest.raises(ValidationError, match="name is required"):
            AddProductHandler(products, categories).handle("  ", "10", APPAREL_ID)


class TestProductMaintenance:

    def test_update_price(self):
        products, _ = _catalog()
        dto = UpdateProductHandler(products).handle(SHIRT_ID, "35")
        assert dto.price == Decimal("35")

    def test_update_price_unknown_product(self):
        products, _ = _catalog()
        with pytest.raises(EntityNotFoundError):
            UpdateProductHandler(products).handle("0" * 24, "35")

    def test_set_stock_existing_variant(self):
        products, _ = _catalog()
        dto = SetStockHandler(products).handle(SHIRT_ID, "Red", "M", 12)
        assert {(s.color, s.size): s.quantity for s in dto.stock}[("Red", "M")] == 12

    def test_set_stock_new_variant(self):
        products, _ = _catalog()
        SetStockHandler(products).handle(SHIRT_ID, "Green", "S", 2)
        assert products.get_by_id(SHIRT_ID).available("Green", "S") == 2

    def test_set_stock_requires_variant(self):
        products, _ = _catalog()
        with pytest.raises(ValidationError):
            SetStockHandler(products).handle(SHIRT_ID, "", "M", 2)

    def test_list_products_sorted_and_filtered(self):
        products, _ = _catalog()
        assert [p.name for p in ListProductsHandler(products).handle()] == ["Mug", "Tee"]
        assert [p.name for p in ListProductsHandler(products).handle(category_id=APPAREL_ID)] == ["Tee"]

    def test_show_product(self):
        products, _ = _catalog()
        assert ShowProductHandler(products).handle(SHIRT_ID).name == "Tee"
        with pytest.raises(EntityNotFoundError):
            ShowProductHandler(products).handle("nope")


class TestCategoriesAndUsers:

    def test_add_category(self):
        categories = FakeCategoryRepository()
        category = AddCategoryHandler(categories).handle(" Shoes ")
        assert category.name == "Shoes"
        assert categories.get_by_id(category.id) is category

    def test_category_names_are_unique_ignoring_case(self):
        categories = FakeCategoryRepository([Category(APPAREL_ID, "Apparel")])
        with pytest.raises(ValidationError, match="already exists"):
            AddCategoryHandler(categories).handle("apparel")

    def test_create_admin(self):
        users = FakeUserRepository()
        user = CreateAdminHandler(users).handle("Ann", "ann@shop.test", role="super-admin")
        assert user.role == UserRole.SUPER_ADMIN
        assert user.can_manage_store

    def test_create_admin_duplicate_email(self):
        users = FakeUserRepository()
        CreateAdminHandler(users).handle("Ann", "ann@shop.test")
        with pytest.raises(ValidationError, match="already exists"):
            CreateAdminHandler(users).handle("Ann 2", "ANN@shop.test")

    def test_create_admin_unknown_role(self):
        with pytest.raises(ValidationError, match="Unknown role"):
            CreateAdminHandler(FakeUserRepository()).handle("Ann", "ann@shop.test", role="owner")
