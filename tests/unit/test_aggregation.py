"""
Tests for painel.services.aggregation.
"""
from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal

from painel.domain.models import EMPTY_SNAPSHOT, OperationalAverages
from painel.services.aggregation import aggregate, daily_revenue_series, operational_averages


START = date(2024, 3, 1)
END = date(2024, 3, 3)


class TestEmptyInput:
    """Without analytic rows the snapshot is the all-zero constant."""

    def test_empty_analytic_rows(self, make_marketing, make_operational):
        snapshot = aggregate([], [make_marketing(START)], [make_operational(START)], START, END)
        assert snapshot == EMPTY_SNAPSHOT

    def test_none_inputs(self):
        assert aggregate(None, None, None, START, END) == EMPTY_SNAPSHOT

    def test_empty_snapshot_is_all_zero(self):
        assert EMPTY_SNAPSHOT.revenue_total == 0
        assert EMPTY_SNAPSHOT.total_customers == 0
        assert EMPTY_SNAPSHOT.marketing_investment == 0
        assert EMPTY_SNAPSHOT.daily_revenue == ()
        assert EMPTY_SNAPSHOT.operational == OperationalAverages()


class TestRevenue:
    """Revenue totals and the daily series."""

    def test_three_day_scenario(self, three_days):
        snapshot = aggregate(three_days, [], [], START, END)
        assert snapshot.revenue_total == Decimal("600")
        assert [p.value for p in snapshot.daily_revenue] == [Decimal(100), Decimal(200), Decimal(300)]
        assert [p.day for p in snapshot.daily_revenue] == [START, date(2024, 3, 2), END]

    def test_total_does_not_depend_on_row_order(self, make_analytic):
        rows = [
            make_analytic(START, "0.10"),
            make_analytic(START, "1234567.89"),
            make_analytic(END, "0.20"),
            make_analytic(END, "99.999"),
        ]
        forward = aggregate(rows, [], [], START, END).revenue_total
        backward = aggregate(list(reversed(rows)), [], [], START, END).revenue_total
        assert forward == backward == Decimal("1234668.189")

    def test_series_length_includes_both_ends(self, make_analytic):
        rows = [make_analytic(date(2024, 2, 10))]
        series = daily_revenue_series(rows, date(2024, 2, 1), date(2024, 2, 29))
        assert len(series) == (date(2024, 2, 29) - date(2024, 2, 1)).days + 1 == 29
        assert series[-1].day == date(2024, 2, 29)

    def test_single_day_range(self, make_analytic):
        series = daily_revenue_series([make_analytic(START, "42")], START, START)
        assert len(series) == 1
        assert series[0].value == Decimal("42")

    def test_missing_days_are_zero(self, make_analytic):
        rows = [make_analytic(date(2024, 3, 2), "200")]
        series = daily_revenue_series(rows, START, END)
        assert [p.value for p in series] == [0, Decimal(200), 0]

    def test_first_row_of_the_day_wins(self, make_analytic):
        rows = [make_analytic(START, "10"), make_analytic(START, "20")]
        snapshot = aggregate(rows, [], [], START, START)
        assert snapshot.daily_revenue[0].value == Decimal("10")
        assert snapshot.revenue_total == Decimal("30")

    def test_datetime_period_start_is_truncated(self, make_analytic):
        rows = [make_analytic(datetime(2024, 3, 2, 15, 30), "75", period_end=datetime(2024, 3, 2, 18, 0))]
        series = daily_revenue_series(rows, START, END)
        assert series[1].value == Decimal("75")

    def test_inverted_range_gives_empty_series(self, make_analytic):
        assert daily_revenue_series([make_analytic(START)], END, START) == ()

    def test_inverted_record_skips_bucket_but_counts_in_total(self, make_analytic):
        rows = [
            make_analytic(START, "100"),
            make_analytic(date(2024, 3, 2), "50", period_end=START),
        ]
        snapshot = aggregate(rows, [], [], START, END)
        assert snapshot.daily_revenue[1].value == 0
        assert snapshot.revenue_total == Decimal("150")

    def test_labels_use_brazilian_format(self, three_days):
        snapshot = aggregate(three_days, [], [], START, END)
        assert snapshot.daily_revenue[0].label == "01/03/2024"


class TestCustomers:
    """Customer counts come from the last row, never summed."""

    def test_taken_from_last_row(self, make_analytic):
        rows = [
            make_analytic(START, total_customers=500, new_customers=100, customers_to_enrich=50),
            make_analytic(END, total_customers=120, new_customers=20, customers_to_enrich=15),
        ]
        snapshot = aggregate(rows, [], [], START, END)
        assert snapshot.total_customers == 120
        assert snapshot.new_customers == 20
        assert snapshot.customers_to_enrich == 15
        assert snapshot.recurring_customers == 85

    def test_recurring_scenario(self, make_analytic):
        rows = [make_analytic(START, total_customers=100, new_customers=30, customers_to_enrich=10)]
        assert aggregate(rows, [], [], START, END).recurring_customers == 60

    def test_recurring_is_not_clamped(self, make_analytic):
        # inconsistent input is kept as-is until product decides otherwise
        rows = [make_analytic(START, total_customers=10, new_customers=8, customers_to_enrich=5)]
        assert aggregate(rows, [], [], START, END).recurring_customers == -3

    def test_distribution_percentages(self, make_analytic):
        snapshot = aggregate([make_analytic(START)], [], [], START, END)
        shares = {s.name: s for s in snapshot.customer_distribution}
        assert shares["Novos"].percentage == Decimal(30)
        assert shares["RFV"].value == 60
        assert shares["Para Enriquecer"].percentage == Decimal(10)

    def test_distribution_without_customers(self):
        assert all(s.percentage == 0 for s in EMPTY_SNAPSHOT.customer_distribution)


class TestRates:
    """Ticket, retention and repurchase rates are unweighted means."""

    def test_means(self, make_analytic):
        rows = [
            make_analytic(START, avg_ticket=Decimal("50"), retention_rate=Decimal("30"),
                          repurchase_rate_1_2=Decimal("10"), repurchase_rate_4_5=Decimal("1")),
            make_analytic(END, avg_ticket=Decimal("70"), retention_rate=Decimal("50"),
                          repurchase_rate_1_2=Decimal("20"), repurchase_rate_4_5=Decimal("2")),
        ]
        snapshot = aggregate(rows, [], [], START, END)
        assert snapshot.avg_ticket == Decimal("60")
        assert snapshot.retention_rate == Decimal("40")
        assert snapshot.repurchase_rates.rate_1_2 == Decimal("15")
        assert snapshot.repurchase_rates.rate_4_5 == Decimal("1.5")

    def test_repurchase_series_order(self, three_days):
        snapshot = aggregate(three_days, [], [], START, END)
        names = [name for name, _ in snapshot.repurchase_rates.as_series()]
        assert names == ["1ª para 2ª", "2ª para 3ª", "3ª para 4ª", "4ª para 5ª"]


class TestMarketingAndOperational:
    """Marketing sums and operational averages."""

    def test_marketing_investment_sum(self, three_days, make_marketing):
        marketing = [make_marketing(START, "150.50"), make_marketing(END, "49.50")]
        assert aggregate(three_days, marketing, [], START, END).marketing_investment == Decimal("200.00")

    def test_no_marketing_rows(self, three_days):
        assert aggregate(three_days, [], [], START, END).marketing_investment == 0

    def test_operational_averages(self, three_days, make_operational):
        ops = [
            make_operational(START, attendants_day=4, rating_ifood=Decimal("4.5"), operational_errors=1),
            make_operational(END, attendants_day=6, rating_ifood=Decimal("3.5"), operational_errors=4),
        ]
        averages = aggregate(three_days, [], ops, START, END).operational
        assert averages.attendants_day == Decimal(5)
        assert averages.rating_ifood == Decimal(4)
        assert averages.operational_errors == Decimal("2.5")
        assert averages.rating_consulting == Decimal(80)

    def test_operational_without_rows_is_zero_not_nan(self, three_days):
        averages = aggregate(three_days, [], [], START, END).operational
        for value in (getattr(averages, f.name) for f in fields(averages)):
            assert value == 0
            assert not value.is_nan()

    def test_operational_averages_helper_empty(self):
        assert operational_averages([]) == OperationalAverages()


class TestDeterminism:
    def test_idempotent(self, three_days, make_marketing, make_operational):
        args = (three_days, [make_marketing(START)], [make_operational(START)], START, END)
        assert aggregate(*args) == aggregate(*args)

    def test_inputs_are_not_mutated(self, three_days):
        before = list(three_days)
        aggregate(three_days, [], [], START, END)
        assert three_days == before

