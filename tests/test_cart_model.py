import uuid
from decimal import Decimal

from storefront.models import Cart


def new_cart():
    return Cart(user_id=uuid.uuid4(), items=[], total_items=0, total_price=Decimal("0"))


def test_add_item_merges_duplicate_lines():
    cart = new_cart()
    product_id = uuid.uuid4()

    cart.add_item(product_id, 2, Decimal("10.00"))
    cart.add_item(product_id, 1, Decimal("12.50"))

    assert len(cart.items) == 1
    assert cart.items[0]["quantity"] == 3
    # Price snapshot follows the latest add
    assert cart.items[0]["price"] == "12.50"
    assert cart.total_items == 3
    assert cart.total_price == Decimal("37.50")


def test_totals_across_lines():
    cart = new_cart()
    cart.add_item(uuid.uuid4(), 2, Decimal("19.99"))
    cart.add_item(uuid.uuid4(), 1, Decimal("5.00"))

    assert cart.total_items == 3
    assert cart.total_price == Decimal("44.98")
    assert len(cart.product_ids) == 2


def test_update_quantity_and_zero_removes():
    cart = new_cart()
    keep, drop = uuid.uuid4(), uuid.uuid4()
    cart.add_item(keep, 1, Decimal("3.00"))
    cart.add_item(drop, 1, Decimal("4.00"))

    cart.update_item_quantity(keep, 5)
    cart.update_item_quantity(drop, 0)

    assert cart.find_item(drop) is None
    assert cart.find_item(keep)["quantity"] == 5
    assert cart.total_price == Decimal("15.00")


def test_remove_and_clear():
    cart = new_cart()
    first, second = uuid.uuid4(), uuid.uuid4()
    cart.add_item(first, 1, Decimal("1.00"))
    cart.add_item(second, 2, Decimal("2.00"))

    cart.remove_item(first)
    assert cart.product_ids == [second]
    assert cart.total_items == 2

    cart.clear()
    assert cart.is_empty
    assert cart.total_items == 0
    assert cart.total_price == Decimal("0.00")


def test_mutations_replace_the_items_list():
    cart = new_cart()
    before = cart.items

    cart.add_item(uuid.uuid4(), 1, Decimal("1.00"))

    assert cart.items is not before
