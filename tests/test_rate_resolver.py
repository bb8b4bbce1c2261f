"""
Tests for rate band resolution and stay aggregation

- Filtering by product, contract, active flag, range and weekday
- Shortest-span tie-break
- All-or-nothing stay pricing
"""

from datetime import date
from decimal import Decimal

import pytest

from app.schemas.pricing import Pax, SalesChannel
from app.services.price_calculator import NoPricingAvailable
from app.services.rate_resolver import (
    find_applicable_rate_band,
    calculate_stay_pricing,
    resolve_stay_band,
    resolve_nightly_bands,
)


class TestFindApplicableRateBand:

    def test_matching_band_is_returned(self, make_band):
        band = make_band()
        found = find_applicable_rate_band(date(2025, 5, 12), [band], "product-1", "contract-1")
        assert found is band

    def test_no_band_returns_none(self, make_band):
        band = make_band()
        assert find_applicable_rate_band(date(2025, 6, 12), [band], "product-1", "contract-1") is None
        assert find_applicable_rate_band(date(2025, 5, 12), [], "product-1", "contract-1") is None

    def test_other_product_or_contract_is_ignored(self, make_band):
        bands = [
            make_band(id="other-product", product_id="product-2"),
            make_band(id="other-contract", contract_id="contract-2"),
        ]
        assert find_applicable_rate_band(date(2025, 5, 12), bands, "product-1", "contract-1") is None

    def test_inactive_band_is_ignored(self, make_band):
        band = make_band(active=False)
        assert find_applicable_rate_band(date(2025, 5, 12), [band], "product-1", "contract-1") is None

    def test_weekday_mask_is_applied(self, make_band):
        band = make_band(weekday_mask=31)  # Monday to Friday

        assert find_applicable_rate_band(date(2025, 5, 10), [band], "product-1", "contract-1") is None
        assert find_applicable_rate_band(date(2025, 5, 12), [band], "product-1", "contract-1") is band

    def test_shortest_span_wins(self, make_band):
        broad = make_band(id="broad", band_start=date(2025, 5, 1), band_end=date(2025, 5, 31))
        narrow = make_band(id="narrow", band_start=date(2025, 5, 10), band_end=date(2025, 5, 15))

        found = find_applicable_rate_band(date(2025, 5, 12), [broad, narrow], "product-1", "contract-1")
        assert found.id == "narrow"

        # Outside the narrow band the broad one applies
        found = find_applicable_rate_band(date(2025, 5, 20), [broad, narrow], "product-1", "contract-1")
        assert found.id == "broad"

    def test_first_band_wins_on_equal_span(self, make_band):
        first = make_band(id="first")
        second = make_band(id="second")

        found = find_applicable_rate_band(date(2025, 5, 12), [first, second], "product-1", "contract-1")
        assert found.id == "first"

        found = find_applicable_rate_band(date(2025, 5, 12), [second, first], "product-1", "contract-1")
        assert found.id == "second"

    def test_narrow_band_outside_weekday_mask_falls_back(self, make_band):
        broad = make_band(id="broad")
        weekend_only = make_band(
            id="weekend",
            band_start=date(2025, 5, 10),
            band_end=date(2025, 5, 18),
            weekday_mask=96  # Saturday and Sunday
        )

        assert find_applicable_rate_band(date(2025, 5, 10), [broad, weekend_only], "product-1", "contract-1").id == "weekend"
        assert find_applicable_rate_band(date(2025, 5, 12), [broad, weekend_only], "product-1", "contract-1").id == "broad"


class TestCalculateStayPricing:

    def test_uncovered_night_means_no_price(self, make_band, make_contract, two_adults):
        """Only the first night is covered -> None, never a partial price"""
        band = make_band(band_start=date(2025, 5, 1), band_end=date(2025, 5, 31))

        result = calculate_stay_pricing(
            rate_bands=[band],
            contract=make_contract(),
            channel=SalesChannel.B2C,
            dates=[date(2025, 5, 31), date(2025, 6, 1)],
            pax=two_adults,
            product_id="product-1",
        )

        assert result is None

    def test_weekday_gap_means_no_price(self, make_band, make_contract, two_adults):
        band = make_band(weekday_mask=31)

        result = calculate_stay_pricing(
            rate_bands=[band],
            contract=make_contract(),
            channel=SalesChannel.B2C,
            dates=[date(2025, 5, 9), date(2025, 5, 10)],  # Friday, Saturday
            pax=two_adults,
            product_id="product-1",
        )

        assert result is None

    def test_covered_stay_is_priced(self, make_band, make_contract, two_adults):
        result = calculate_stay_pricing(
            rate_bands=[make_band()],
            contract=make_contract(),
            channel=SalesChannel.B2C,
            dates=[date(2025, 5, 12), date(2025, 5, 13)],
            pax=two_adults,
            product_id="product-1",
        )

        assert result is not None
        assert result.room_subtotal_net == Decimal("240")
        assert result.total_due_now == Decimal("384")  # 240 * 1.6

    def test_first_night_band_prices_whole_stay(self, make_band, make_contract, two_adults):
        """Second night resolves to a different band but the first band is used"""
        may = make_band(id="may", pricing_meta={"prices": {"double": 100}})
        june = make_band(
            id="june",
            band_start=date(2025, 6, 1),
            band_end=date(2025, 6, 30),
            pricing_meta={"prices": {"double": 200}}
        )

        result = calculate_stay_pricing(
            rate_bands=[may, june],
            contract=make_contract(),
            channel=SalesChannel.B2C,
            dates=[date(2025, 5, 31), date(2025, 6, 1)],
            pax=two_adults,
            product_id="product-1",
        )

        assert result.nightly == [Decimal("100"), Decimal("100")]

    def test_nightly_bands_are_resolved_independently(self, make_band):
        may = make_band(id="may")
        june = make_band(id="june", band_start=date(2025, 6, 1), band_end=date(2025, 6, 30))

        bands = resolve_nightly_bands(
            [date(2025, 5, 31), date(2025, 6, 1), date(2025, 7, 1)],
            [may, june],
            "product-1",
            "contract-1"
        )

        assert [b.id if b else None for b in bands] == ["may", "june", None]

    def test_uses_contract_id_for_matching(self, make_band, make_contract, two_adults):
        band = make_band(contract_id="contract-1")

        result = calculate_stay_pricing(
            rate_bands=[band],
            contract=make_contract(id="contract-2"),
            channel=SalesChannel.B2C,
            dates=[date(2025, 5, 12)],
            pax=two_adults,
            product_id="product-1",
        )

        assert result is None

    def test_pricing_errors_propagate(self, make_band, make_contract, two_adults):
        band = make_band(pricing_meta={"prices": {}})

        with pytest.raises(NoPricingAvailable):
            calculate_stay_pricing(
                rate_bands=[band],
                contract=make_contract(),
                channel=SalesChannel.B2C,
                dates=[date(2025, 5, 12)],
                pax=two_adults,
                product_id="product-1",
            )

    def test_markup_override_is_passed_through(self, make_band, make_contract):
        result = calculate_stay_pricing(
            rate_bands=[make_band()],
            contract=make_contract(),
            channel=SalesChannel.B2C,
            dates=[date(2025, 5, 12)],
            pax=Pax(adults=2),
            product_id="product-1",
            markup_pct_override=Decimal("10"),
        )

        assert result.markup_amount == Decimal("12")
        assert result.total_due_now == Decimal("132")


class TestResolveStayBand:

    def test_first_night_band_is_returned(self, make_band):
        broad = make_band(id="broad")
        narrow = make_band(id="narrow", band_start=date(2025, 5, 10), band_end=date(2025, 5, 12))

        band = resolve_stay_band(
            [date(2025, 5, 12), date(2025, 5, 13)], [broad, narrow], "product-1", "contract-1"
        )

        assert band.id == "narrow"

    def test_uncovered_night_returns_none(self, make_band):
        band = resolve_stay_band(
            [date(2025, 5, 31), date(2025, 6, 1)], [make_band()], "product-1", "contract-1"
        )
        assert band is None

    def test_empty_stay_returns_none(self, make_band):
        assert resolve_stay_band([], [make_band()], "product-1", "contract-1") is None
