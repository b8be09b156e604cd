"""
Growth coach agent tests - heuristic fallback and mocked Claude responses.
"""
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from growth_backend.agents.growth_coach.agent import GrowthCoachAgent, month_status, pace_status
from growth_backend.services.claude_service import ClaudeService, parse_json_object


def make_summary(**overrides):
    summary = {
        "month": "January",
        "year": 2025,
        "total_budget": 5000,
        "monthly_target_units": 150,
        "infeasible_products": 0,
        "days_in_month": 31,
        "elapsed_days": 10,
        "remaining_days": 21,
        "sold_to_date": 40,
        "current_avg_per_day": 4.5,
        "required_per_day": 6,
        "products": [
            {
                "product_name": "Cotton T-Shirt",
                "required_monthly_units": 75,
                "required_daily_units": 3,
                "sold_to_date": 30,
                "status": "ok",
            },
            {
                "product_name": "Hoodie",
                "required_monthly_units": 75,
                "required_daily_units": 3,
                "sold_to_date": 10,
                "status": "ok",
            },
        ],
    }
    summary.update(overrides)
    return summary


class TestPaceStatus:

    @pytest.mark.parametrize("current,required,expected", [
        (6, 6, "green"),
        (9, 6, "green"),
        (4.2, 6, "amber"),
        (4.1, 6, "red"),
        (0, 0, "green"),
    ])
    def test_thresholds(self, current, required, expected):
        assert pace_status(current, required) == expected

    def test_closed_month_uses_units_sold(self):
        summary = make_summary(remaining_days=0, required_per_day=0, sold_to_date=20)
        assert month_status(summary) == "red"

        summary = make_summary(remaining_days=0, required_per_day=0, sold_to_date=150)
        assert month_status(summary) == "green"


class TestGrowthCoachAgent:

    @pytest.mark.asyncio
    async def test_fallback_without_api_key(self):
        claude = ClaudeService()
        claude.client = None
        agent = GrowthCoachAgent(claude=claude)

        result = await agent.process({"summary": make_summary(), "language": "en"})

        assert result["source"] == "fallback"
        assert result["status"] == "amber"
        # 110 units left over 21 days
        assert "About 6 units/day" in result["summary"]
        assert "Remaining target: 110 units" in result["bullets"]
        assert "Monthly budget: 5,000.00 BDT" in result["bullets"]
        assert len(result["next_actions"]) == 5

    @pytest.mark.asyncio
    async def test_fallback_mentions_infeasible_products(self):
        claude = ClaudeService()
        claude.client = None
        agent = GrowthCoachAgent(claude=claude)

        result = await agent.process({"summary": make_summary(infeasible_products=2)})

        assert any("2 product(s)" in b for b in result["bullets"])

    @pytest.mark.asyncio
    async def test_ai_advice(self):
        agent = GrowthCoachAgent(claude=ClaudeService(api_key="test-key"))

        mock_response = {
            "summary": "Behind pace by 2 units/day.",
            "bullets": ["Hoodie is lagging", ""],
            "next_actions": ["Shift budget to the T-Shirt"],
        }

        with patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.return_value = mock_response
            result = await agent.process({"summary": make_summary(), "language": "bn"})

        assert result["source"] == "ai"
        assert result["status"] == "amber"
        assert result["summary"] == "Behind pace by 2 units/day."
        assert result["bullets"] == ["Hoodie is lagging"]
        assert result["next_actions"] == ["Shift budget to the T-Shirt"]

        prompt = mock.call_args.kwargs["prompt"]
        assert "January 2025" in prompt
        assert "Cotton T-Shirt" in prompt
        assert "language: bn" in prompt

    @pytest.mark.asyncio
    async def test_bad_ai_response_falls_back(self):
        agent = GrowthCoachAgent(claude=ClaudeService(api_key="test-key"))

        with patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.side_effect = ValueError("Failed to parse Claude response as JSON")
            result = await agent.process({"summary": make_summary()})

        assert result["source"] == "fallback"
        assert result["status"] == "amber"


class TestClaudeService:

    def test_parse_json_object_ignores_fences_and_chatter(self):
        reply = 'Here you go:\n```json\n{"summary": "On pace", "bullets": []}\n```'
        assert parse_json_object(reply) == {"summary": "On pace", "bullets": []}

    @pytest.mark.parametrize("reply", ["no json here", "[1, 2]", '{"summary": '])
    def test_parse_json_object_rejects_non_objects(self, reply):
        with pytest.raises(ValueError):
            parse_json_object(reply)

    @pytest.mark.asyncio
    async def test_unconfigured_service_raises(self):
        claude = ClaudeService()
        claude.client = None

        with pytest.raises(RuntimeError, match="ANTHROPIC_API_KEY"):
            await claude.generate_response("hello")

    @pytest.mark.asyncio
    async def test_structured_response_reads_text_blocks(self):
        claude = ClaudeService(api_key="test-key", model="test-model")
        response = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='{"summary": "Behind pace", '),
                SimpleNamespace(type="text", text='"next_actions": ["Boost Hoodie"]}'),
            ],
            stop_reason="end_turn",
        )

        with patch.object(claude.client.messages, "create", new_callable=AsyncMock) as create:
            create.return_value = response
            result = await claude.generate_structured_response(
                "How is January going?", response_format={"summary": "string"}
            )

        assert result == {"summary": "Behind pace", "next_actions": ["Boost Hoodie"]}
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert "How is January going?" in kwargs["messages"][0]["content"]
        assert '"summary": "string"' in kwargs["messages"][0]["content"]
