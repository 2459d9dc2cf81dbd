"""
Tests for DashboardFilters.
"""
from datetime import date

import pytest

from painel.core.errors import ValidationError
from painel.domain.filters import DashboardFilters, default_period

TODAY = date(2024, 2, 14)


class TestDefaultPeriod:
    def test_current_month(self):
        assert default_period(TODAY) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_december(self):
        assert default_period(date(2023, 12, 31)) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_create_without_dates_uses_month(self):
        filters = DashboardFilters.create(today=TODAY)
        assert filters.period_start == date(2024, 2, 1)
        assert filters.period_end == date(2024, 2, 29)
        assert filters.store_id is None
        assert filters.days == 29


class TestUpdate:
    """Each change produces a new filter; cleared dates go back to the month."""

    def test_changing_store_keeps_dates(self):
        filters = DashboardFilters.create(today=TODAY)
        changed = filters.update(store_id=3, today=TODAY)
        assert changed.store_id == 3
        assert changed.period_start == filters.period_start
        assert filters.store_id is None

    def test_clearing_store_means_all_stores(self):
        filters = DashboardFilters.create(store_id=3, today=TODAY)
        assert filters.update(store_id=None, today=TODAY).store_id is None
        assert filters.update(store_id=0, today=TODAY).store_id is None

    def test_cleared_date_resets_to_default(self):
        filters = DashboardFilters.create(period_start=date(2024, 1, 5), period_end=date(2024, 1, 9), today=TODAY)
        changed = filters.update(period_start=None, today=TODAY)
        assert changed.period_start == date(2024, 2, 1)
        assert changed.period_end == date(2024, 1, 9)

    def test_untouched_fields_are_kept(self):
        filters = DashboardFilters.create(store_id=2, today=TODAY)
        changed = filters.update(period_end=date(2024, 2, 10), today=TODAY)
        assert changed == DashboardFilters(date(2024, 2, 1), date(2024, 2, 10), 2)


class TestValidate:
    def test_inverted_range_is_rejected(self):
        filters = DashboardFilters(period_start=date(2024, 3, 5), period_end=date(2024, 3, 1))
        with pytest.raises(ValidationError) as exc_info:
            filters.validate()
        assert exc_info.value.status_code == 422
        assert filters.days == 0

    def test_single_day_is_valid(self):
        filters = DashboardFilters(period_start=date(2024, 3, 5), period_end=date(2024, 3, 5))
        filters.validate()
        assert filters.days == 1


class TestSqlConditions:
    def test_without_store(self):
        filters = DashboardFilters(date(2024, 3, 1), date(2024, 3, 31))
        conditions, params = filters.to_sql_conditions()
        assert conditions == ["data_inicio >= :data_inicial", "data_fim <= :data_final"]
        assert params == {"data_inicial": date(2024, 3, 1), "data_final": date(2024, 3, 31)}

    def test_with_store_and_alias(self):
        filters = DashboardFilters(date(2024, 3, 1), date(2024, 3, 31), store_id=7)
        conditions, params = filters.to_sql_conditions("d")
        assert "d.loja_id = :loja_id" in conditions
        assert conditions[0] == "d.data_inicio >= :data_inicial"
        assert params["loja_id"] == 7

    def test_session_stores_when_no_store_selected(self):
        filters = DashboardFilters.create(today=TODAY, allowed_store_ids=[1, 3])
        conditions, params = filters.to_sql_conditions()
        assert "loja_id = ANY(:loja_ids)" in conditions
        assert params["loja_ids"] == [1, 3]

    def test_selected_store_takes_precedence(self):
        filters = DashboardFilters.create(store_id=3, today=TODAY, allowed_store_ids=[1, 3])
        conditions, params = filters.to_sql_conditions()
        assert "loja_id = :loja_id" in conditions
        assert "loja_ids" not in params

    def test_session_stores_survive_updates(self):
        filters = DashboardFilters.create(today=TODAY, allowed_store_ids=[1])
        assert filters.update(period_end=date(2024, 2, 10), today=TODAY).allowed_store_ids == (1,)
