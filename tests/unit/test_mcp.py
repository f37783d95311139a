"""Tests for the MCP server tools.

Tools are plain async functions under the FastMCP decorator, so they are
awaited directly with every argument passed explicitly.
"""

import asyncio

import pytest

pytest.importorskip("mcp")

from mxfin.mcp import server


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MXFIN_CONFIG_PATH", str(tmp_path))
    return tmp_path


class TestTaxBreakdownTool:

    def test_25000(self):
        result = asyncio.run(server.tax_breakdown(gross=25000, year=2024))
        assert result["net_salary"] == 20796.13
        assert result["isr_bracket"]["rate"] == 0.2136

    def test_unknown_year_returns_error(self):
        result = asyncio.run(server.tax_breakdown(gross=25000, year=1999))
        assert "error" in result

    def test_nan_is_zero_breakdown(self):
        result = asyncio.run(server.tax_breakdown(gross=float("nan"), year=None))
        assert result["net_salary"] == 0
        assert result["effective_tax_rate"] == 0


class TestAllocationTool:

    def test_split(self):
        result = asyncio.run(server.allocation_strategy(total_savings=500000))
        assert result["sofipo_amount"] == pytest.approx(214090.75)
        assert result["tax_exempt_limit"] == 214090.75


class TestPlanningTools:

    def test_financial_levels(self):
        result = asyncio.run(server.financial_levels(
            monthly_expenses=15000,
            current_savings=1800000,
            monthly_savings=None,
            annual_return=None,
        ))
        assert result["current_level"] == "Financial Independence"
        assert result["levels"][0]["years_to_reach"] == 0
        assert result["levels"][3]["years_to_reach"] == -1

    def test_retirement_projection(self):
        result = asyncio.run(server.retirement_projection(
            current_age=40,
            target_age=65,
            monthly_contribution=5000,
            current_savings=None,
            expected_return=None,
        ))
        assert result["years_to_retirement"] == 25
        assert result["recommended_risky_percentage"] == 80

    def test_registered_tools(self):
        tools = asyncio.run(server.mcp.list_tools())
        names = {tool.name for tool in tools}
        assert names == {"tax_breakdown", "allocation_strategy", "financial_levels", "retirement_projection"}
