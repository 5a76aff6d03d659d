import pytest

from utils.money import calculate_commission, format_amount


@pytest.mark.parametrize(
    "total, percentage, expected",
    [
        (1_000_000, 5, 50_000),
        (12_345, 10, 1_235),  # 1234.5 rounds up
        (999, 5, 50),  # 49.95
        (10, 5, 1),  # 0.5 rounds up, not to even
        (30, 5, 2),  # 1.5
        (9, 5, 0),  # 0.45
        (7_777_777, 7, 544_444),  # 544444.39
        (1_000_000, 0, 0),
    ],
)
def test_calculate_commission_rounds_half_up(total, percentage, expected):
    assert calculate_commission(total, percentage) == expected


def test_calculate_commission_large_amounts_are_exact():
    # float arithmetic would drift here
    assert calculate_commission(9_007_199_254_740_993, 3) == 270_215_977_642_230


def test_calculate_commission_rejects_negative_total():
    with pytest.raises(ValueError):
        calculate_commission(-1, 5)


def test_format_amount():
    assert format_amount(1_500_000) == "1.500.000"
    assert format_amount(0) == "0"
