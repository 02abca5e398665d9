"""Tests for chart resolution, query building and the combined report."""

import pytest
from fastapi import HTTPException

from charts import service
from charts.definitions import ALL_CHARTS, CHARTS


class TestResolveChart:
    def test_unknown_chart_is_not_found(self):
        with pytest.raises(HTTPException) as exc_info:
            service.resolve_chart("nope")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Chart 'nope' not found."

    def test_group_by_on_a_fixed_chart_is_not_found(self):
        with pytest.raises(HTTPException) as exc_info:
            service.resolve_chart("gender", "skill")

        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize("group_by", [None, "tehsil", "a.name"])
    def test_dynamic_chart_rejects_missing_or_unknown_group(self, group_by):
        with pytest.raises(HTTPException) as exc_info:
            service.resolve_chart("distribution", group_by)

        assert exc_info.value.status_code == 400

    def test_dynamic_chart_resolves_column(self):
        definition, column = service.resolve_chart("top-distribution", "craft")

        assert definition is CHARTS["top-distribution"]
        assert column == "a.craft_name"


class TestBuildChartQuery:
    def test_filters_sit_between_where_and_group_by(self):
        sql, params = service.build_chart_query(
            CHARTS["gender"],
            {"gender": "Male", "avg_monthly_income": "10000-20000"},
        )

        assert sql == (
            "SELECT a.gender AS name, COUNT(*) AS value FROM artisans_view a"
            " WHERE a.is_active = true AND a.gender = $1"
            " AND a.avg_monthly_income BETWEEN $2::numeric AND $3::numeric"
            " GROUP BY 1 ORDER BY 2 DESC, 1"
        )
        assert params == ["Male", 10000, 20000]

    def test_top_distribution_is_limited_to_five(self):
        sql, params = service.build_chart_query(CHARTS["top-distribution"], {}, group_column="a.skill_name")

        assert sql.startswith("SELECT a.skill_name AS name, COUNT(*) AS value")
        assert sql.endswith("LIMIT 5")
        assert params == []

    def test_geographical_requires_coordinates(self):
        sql, _ = service.build_chart_query(CHARTS["geographical"], {"gender": "Female"})

        assert "a.latitude IS NOT NULL AND a.longitude IS NOT NULL AND a.gender = $1" in sql


class TestDashboard:
    def test_one_parameter_list_is_shared_by_all_subqueries(self):
        sql, params = service.build_dashboard_query({"gender": "Female", "experience": "5-"})

        assert params == ["Female", 5]
        assert sql.count("a.gender = $1") == 3
        assert sql.count("a.experience >= $2::numeric") == 3
        assert "$3" not in sql

    @pytest.mark.asyncio
    async def test_counts_are_ints(self, fake_db):
        fake_db.queue(
            "fetch_one",
            {"total_active_artisans": 12, "regions_covered": 3, "new_registrations_this_month": None},
        )

        result = await service.get_dashboard(fake_db, {})

        assert result == {"total_active_artisans": 12, "regions_covered": 3, "new_registrations_this_month": 0}


class TestYesNoDistribution:
    @pytest.mark.asyncio
    async def test_unknown_field_is_rejected_before_any_query(self, fake_db):
        with pytest.raises(HTTPException) as exc_info:
            await service.get_yes_no_distribution(fake_db, "name; DROP TABLE artisans", {})

        assert exc_info.value.status_code == 400
        assert fake_db.calls == []

    @pytest.mark.asyncio
    async def test_known_field_groups_by_that_column(self, fake_db):
        fake_db.queue("fetch_all", [{"name": "Yes", "value": 4}, {"name": "No", "value": 1}])

        result = await service.get_yes_no_distribution(fake_db, "has_machinery", {"gender": "Male"})

        assert result == [{"name": "Yes", "value": 4}, {"name": "No", "value": 1}]
        [(_method, sql, args)] = fake_db.calls
        assert sql.startswith("SELECT a.has_machinery AS name")
        assert args == ("Male",)


class TestAllCharts:
    @pytest.mark.asyncio
    async def test_every_report_key_is_present(self, fake_db):
        result = await service.get_all_charts(fake_db, {"division": "Lahore"})

        assert list(result) == list(ALL_CHARTS)
        assert len(fake_db.calls) == len(ALL_CHARTS)
        assert all(args == ("Lahore",) for (_m, _sql, args) in fake_db.calls)

    @pytest.mark.asyncio
    async def test_one_failing_chart_fails_the_report(self, fake_db):
        def handler(method, sql, args):
            if "to_char" in sql:
                raise RuntimeError("relation does not exist")
            return NotImplemented

        fake_db.handler = handler

        with pytest.raises(RuntimeError):
            await service.get_all_charts(fake_db, {})

    @pytest.mark.asyncio
    async def test_every_chart_runs_and_the_first_failure_in_report_order_is_raised(self, fake_db):
        def handler(method, sql, args):
            if "a.latitude IS NOT NULL" in sql:
                raise ValueError("geographical failed")
            if "to_char" in sql:
                raise RuntimeError("registrations failed")
            return NotImplemented

        fake_db.handler = handler

        with pytest.raises(RuntimeError, match="registrations failed"):
            await service.get_all_charts(fake_db, {"gender": "Female"})

        assert len(fake_db.calls) == len(ALL_CHARTS)


class TestRepeatedReads:
    @pytest.mark.asyncio
    async def test_same_filters_give_same_query_and_result(self, fake_db):
        rows = [{"name": "Female", "value": 7}, {"name": "Male", "value": 5}]
        fake_db.queue("fetch_all", [dict(row) for row in rows], [dict(row) for row in rows])
        filters = {"division": "Lahore,Multan", "experience": "3-10"}

        first = await service.get_chart(fake_db, "gender", filters)
        second = await service.get_chart(fake_db, "gender", filters)

        assert first == second
        [(_m1, sql_1, args_1), (_m2, sql_2, args_2)] = fake_db.calls
        assert sql_1 == sql_2
        assert args_1 == args_2 == ("Lahore", "Multan", 3, 10)
        assert filters == {"division": "Lahore,Multan", "experience": "3-10"}
