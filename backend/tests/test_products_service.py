# Overview: Pytest coverage for the product catalog.

import pytest

from storeledger.errors import NotFoundError, ValidationError
from storeledger.services import products_service


def make_product(store, name, **overrides):
    payload = {
        "name": name,
        "category": "cement",
        "unit": "bag",
        "price": 400,
        "stockQuantity": 50,
        "minStockLevel": 10,
    }
    payload.update(overrides)
    return products_service.create_product(store.id, payload)


class TestProductCrud:

    def test_create_maps_wire_names(self, store_a):
        product = make_product(store_a, "OPC 53")
        assert product.stock_quantity == 50
        assert product.to_dict()["minStockLevel"] == 10
        assert product.to_dict()["isLowStock"] is False

    def test_category_is_normalized(self, store_a):
        product = make_product(store_a, "Red Brick", category="Bricks")
        assert product.category == "bricks"

    def test_unknown_category_rejected(self, store_a):
        with pytest.raises(ValidationError) as exc:
            make_product(store_a, "Glass", category="glass")
        assert exc.value.field == "category"

    def test_negative_price_rejected(self, store_a):
        with pytest.raises(ValidationError) as exc:
            make_product(store_a, "OPC", price=-1)
        assert exc.value.field == "price"

    def test_missing_required_field(self, store_a):
        with pytest.raises(ValidationError):
            products_service.create_product(store_a.id, {"name": "OPC"})

    def test_update_and_delete(self, store_a):
        product = make_product(store_a, "OPC")
        updated = products_service.update_product(store_a.id, product.id, {"price": 420, "stockQuantity": 5})
        assert updated.price == 420
        assert updated.is_low_stock

        products_service.delete_product(store_a.id, product.id)
        with pytest.raises(NotFoundError):
            products_service.get_product(store_a.id, product.id)

    def test_other_store_not_found(self, store_a, store_b):
        product = make_product(store_a, "OPC")
        with pytest.raises(NotFoundError):
            products_service.update_product(store_b.id, product.id, {"price": 1})


class TestListProducts:

    def test_filters(self, store_a):
        make_product(store_a, "OPC 43", price=350)
        make_product(store_a, "OPC 53", price=420, stockQuantity=5)
        make_product(store_a, "TMT Bar", category="steel", unit="kg", price=70)

        def names(**filters):
            return sorted(p["name"] for p in products_service.list_products(store_a.id, filters)["products"])

        assert names(name="opc") == ["OPC 43", "OPC 53"]
        assert names(category="Steel") == ["TMT Bar"]
        assert names(category="All") == ["OPC 43", "OPC 53", "TMT Bar"]
        assert names(minPrice="400") == ["OPC 53"]
        assert names(maxPrice=100) == ["TMT Bar"]
        assert names(maxStock=10) == ["OPC 53"]

    def test_pagination(self, store_a):
        for i in range(5):
            make_product(store_a, f"Item {i}")

        page = products_service.list_products(store_a.id, {"page": 2, "limit": 2})

        assert page["total"] == 5
        assert page["totalPages"] == 3
        assert page["page"] == 2
        assert [p["name"] for p in page["products"]] == ["Item 2", "Item 1"]

    def test_limit_is_capped(self, store_a):
        assert products_service.list_products(store_a.id, {"limit": 1000})["limit"] == 100

    def test_bad_number_filter(self, store_a):
        with pytest.raises(ValidationError) as exc:
            products_service.list_products(store_a.id, {"minPrice": "cheap"})
        assert exc.value.field == "minPrice"

    def test_store_scoped(self, store_a, store_b):
        make_product(store_b, "Foreign")
        assert products_service.list_products(store_a.id)["total"] == 0


class TestLowStock:

    def test_at_or_under_minimum(self, store_a):
        make_product(store_a, "Plenty", stockQuantity=100)
        make_product(store_a, "Edge", stockQuantity=10)
        make_product(store_a, "Empty", stockQuantity=0)

        names = [p.name for p in products_service.low_stock_products(store_a.id)]
        assert names == ["Empty", "Edge"]
