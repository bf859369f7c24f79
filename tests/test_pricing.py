from decimal import Decimal

from storefront.api.orders.pricing import calculate_totals, line_subtotal, to_money


def test_free_shipping_at_or_above_threshold():
    totals = calculate_totals(Decimal("120.00"))

    assert totals.subtotal == Decimal("120.00")
    assert totals.shipping == Decimal("0.00")
    assert totals.tax == Decimal("9.60")
    assert totals.total == Decimal("129.60")


def test_flat_fee_below_threshold():
    totals = calculate_totals(Decimal("40.00"))

    assert totals.shipping == Decimal("10.00")
    assert totals.tax == Decimal("3.20")
    assert totals.total == Decimal("53.20")


def test_threshold_itself_ships_free():
    assert calculate_totals(Decimal("50.00")).shipping == Decimal("0.00")


def test_discount_is_subtracted():
    totals = calculate_totals(Decimal("100.00"), discount=Decimal("15"))

    assert totals.discount == Decimal("15.00")
    assert totals.total == Decimal("93.00")


def test_overrides_take_precedence_over_settings():
    totals = calculate_totals(
        Decimal("30.00"),
        free_shipping_threshold=Decimal("25"),
        tax_rate=Decimal("0.10"),
    )

    assert totals.shipping == Decimal("0.00")
    assert totals.tax == Decimal("3.00")
    assert totals.total == Decimal("33.00")


def test_tax_rounds_half_up_to_cents():
    # 10.31 * 0.08 = 0.8248
    assert calculate_totals(Decimal("10.31")).tax == Decimal("0.82")
    assert to_money(Decimal("0.005")) == Decimal("0.01")


def test_line_subtotal():
    lines = [(Decimal("19.99"), 2), ("5.01", 3), (Decimal("0"), 7)]

    assert line_subtotal(lines) == Decimal("55.01")
    assert line_subtotal([]) == Decimal("0.00")
