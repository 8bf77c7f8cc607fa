from formatting import exceeds_display_cap, format_amount, format_percentage_change


def test_format_percentage_change_signs() -> None:
    assert format_percentage_change(12.5) == "+12.5%"
    assert format_percentage_change(-3.0) == "-3.0%"
    assert format_percentage_change(0.0) == "0.0%"
    assert format_percentage_change(-0.0) == "0.0%"


def test_format_percentage_change_caps_large_moves() -> None:
    assert format_percentage_change(100.0) == "+100.0%"
    assert format_percentage_change(250.0) == "+100%+"
    assert format_percentage_change(-180.0) == "-100%+"
    assert exceeds_display_cap(100.01)
    assert not exceeds_display_cap(-100.0)


def test_format_amount_uses_currency_code() -> None:
    assert format_amount(1234.5, "USD") == "USD 1,234.50"
    assert format_amount(-42) == "-42.00"
