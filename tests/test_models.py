from decimal import Decimal

from storefront.models import Product


def test_product_columns_cover_only_what_orders_use():
    columns = set(Product.__table__.columns.keys())

    assert columns == {
        "id", "name", "description", "price", "stock", "images",
        "is_active", "created_at", "updated_at",
    }


def test_primary_image():
    assert Product(images=[{"url": "a.jpg", "alt": "A"}, {"url": "b.jpg"}]).primary_image == "a.jpg"
    assert Product(images=["plain.jpg"]).primary_image == "plain.jpg"
    assert Product(images=[], price=Decimal("1")).primary_image == ""
