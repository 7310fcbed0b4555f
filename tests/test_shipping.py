from __future__ import annotations

import pytest
from kungfu import Error, Ok

from cartflow import shipping as S
from cartflow.errors import ErrorCategory, ErrorKind
from tests.fakes import FakeLocator, network_error

ONLY_EXPRESS = (S.ShippingOption("EXP", "Express", 30000, "1-2", max_distance=50),)


def test_cost_formula_rounds_half_up() -> None:
    reg = S.DEFAULT_SHIPPING_OPTIONS[0]

    assert S.cost(reg, 5.0, 2500) == 15000 + 5000 + 1250
    assert S.cost(reg, 1.2345, 0) == 16235  # 1234.5 rounds up
    assert S.cost(reg, 0, 1) == 15001  # 0.5 rounds up


def test_custom_rates() -> None:
    option = S.ShippingOption("X", "X", 0, "1")

    assert S.cost(option, 2, 2000, S.ShippingRates(distance_rate=2000, weight_rate=100)) == 4200


def test_option_beyond_max_distance_is_excluded() -> None:
    result = S.quote(S.DEFAULT_SHIPPING_OPTIONS, 75, 1000)

    assert isinstance(result, Ok)
    assert [q.service_code for q in result.value] == ["REG"]


def test_no_option_reaches() -> None:
    result = S.quote(ONLY_EXPRESS, 75, 1000)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NO_SHIPPING_AVAILABLE


def test_unbounded_option_always_reaches() -> None:
    option = S.ShippingOption("FAR", "Cargo", 9000, "5-7")

    assert option.reaches(10_000)


@pytest.mark.asyncio
async def test_estimate_without_destination_skips_locator() -> None:
    locator = FakeLocator()

    result = await S.estimate(None, 1000, locator)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.NO_ADDRESS_SELECTED
    assert result.error.category is ErrorCategory.VALIDATION
    assert locator.calls == []


@pytest.mark.asyncio
async def test_estimate_quotes_reachable_services_cheapest_first() -> None:
    locator = FakeLocator(distance_km=30)

    result = await S.estimate(S.Coordinates(-6.2, 106.8), 2000, locator)

    assert isinstance(result, Ok)
    estimate = result.value
    assert estimate.distance_km == 30
    assert [q.service_code for q in estimate.quotes] == ["REG", "EXP"]
    assert estimate.quotes[0].cost == 15000 + 30000 + 1000
    assert estimate.quote_for("EXP").service_code == "EXP"
    assert estimate.quote_for("SDS").service_code == "REG"


@pytest.mark.asyncio
async def test_estimate_surfaces_locator_failure() -> None:
    locator = FakeLocator()
    locator.fail = network_error()

    result = await S.estimate(S.Coordinates(0, 0), 0, locator, ONLY_EXPRESS)

    assert isinstance(result, Error)
    assert result.error.retryable is True


def test_format_etd() -> None:
    assert S.format_etd("2-3") == "2-3 business days"
    assert S.format_etd("1") == "1 business day"
    assert S.format_etd("0") == "Same day"
