import pytest

from storefront_fx.services.money import round2
from storefront_fx.services.rates.conversion import convert_usd


def test_convert_rounds_half_up():
    result = convert_usd(10.005, 18.89)

    assert result.amount_usd == 10.01
    assert result.amount_zmw == round2(10.005 * 18.89)
    assert result.rate == 18.89


def test_convert_zero_amount():
    assert convert_usd(0, 18.5).amount_zmw == 0.0


def test_convert_whole_dollars():
    assert convert_usd(100, 18.5).amount_zmw == 1850.0


@pytest.mark.parametrize("amount,rate", [(-1, 18.5), (10, 0), (10, -2)])
def test_convert_rejects_bad_input(amount, rate):
    with pytest.raises(ValueError):
        convert_usd(amount, rate)


def test_round2():
    assert round2(2.675) == 2.68
    assert round2(1.004) == 1.0
