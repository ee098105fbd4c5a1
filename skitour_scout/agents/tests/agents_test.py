"""tests for the weather, hazard bulletin, web search and resort agents."""

from pathlib import Path

import httpx
import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.output_parsers import PydanticOutputParser

from skitour_scout.agents import (
    AgentContext,
    create_elevation_agent,
    create_hazard_agent,
    create_resort_agent,
    create_weather_agent,
    create_web_search_agent,
)
from skitour_scout.config.search_domains import SearchDomains
from skitour_scout.models import (
    ConfidenceLevel,
    DataSourceType,
    ElevationInput,
    HazardInput,
    LLMConfig,
    ResortInput,
    WeatherCondition,
    WeatherInput,
    WebSearchInput,
)

FIXTURES = Path(__file__).resolve().parents[2] / "extraction" / "tests" / "fixtures"
DOMAINS = SearchDomains(trusted=["skitury.pl"], denied=["booking.com"])

FORECAST = {
    "utc_offset_seconds": 3600,
    "current": {
        "temperature_2m": -3.2,
        "apparent_temperature": -8.9,
        "weather_code": 0,
        "wind_speed_10m": 9.0,
        "wind_direction_10m": 270,
        "relative_humidity_2m": 60,
        "visibility": 30000,
        "snowfall": 0.0,
        "snow_depth": 1.2,
    },
    "daily": {"snowfall_sum": [4.0]},
    "hourly": {"freezing_level_height": [900] * 24},
}


class _JsonModeFakeModel(FakeListChatModel):
    """fake chat model whose structured output parses the canned json answers"""

    def with_structured_output(self, schema, **kwargs):
        return self | PydanticOutputParser(pydantic_object=schema)


def _context(handler, region="Tatry", **kwargs) -> AgentContext:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AgentContext(region=region, http_client=client, **kwargs)


# ===== weather =====

@pytest.mark.asyncio
async def test_weather_agent():
    context = _context(lambda r: httpx.Response(200, json=FORECAST))
    result = await create_weather_agent().run(WeatherInput(latitude=49.23, longitude=19.98), context)
    await context.http_client.aclose()

    assert result.success
    assert result.agent_id == "weather"
    assert result.data.condition == WeatherCondition.CLEAR
    assert result.data.wind_direction == "W"
    assert result.data.snow_base == 120


@pytest.mark.asyncio
async def test_weather_agent_failure_is_a_result():
    context = _context(lambda r: httpx.Response(500))
    result = await create_weather_agent().run(WeatherInput(latitude=49.23, longitude=19.98), context)
    await context.http_client.aclose()

    assert not result.success
    assert "500" in result.error


@pytest.mark.asyncio
async def test_elevation_agent():
    context = _context(lambda r: httpx.Response(200, json=FORECAST), region="Beskid Śląski")
    result = await create_elevation_agent().run(ElevationInput(region="Beskid Śląski"), context)
    await context.http_client.aclose()

    assert result.success
    assert result.data.region == "Beskid Śląski"
    assert [p.summit.name for p in result.data.peaks] == [
        "Skrzyczne (summit)", "Pilsko (summit)", "Barania Góra (summit)",
    ]


# ===== hazard =====

@pytest.mark.asyncio
async def test_hazard_agent_outside_coverage_never_fetches():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, text="")

    context = _context(handler, region="Beskid Śląski")
    result = await create_hazard_agent().run(HazardInput(region="Beskid Śląski"), context)
    await context.http_client.aclose()

    assert result.success
    assert result.data is None
    assert calls == []


@pytest.mark.asyncio
async def test_hazard_agent_parses_bulletin():
    html = (FIXTURES / "bulletin_structured.html").read_text(encoding="utf-8")
    context = _context(lambda r: httpx.Response(200, text=html))
    result = await create_hazard_agent().run(HazardInput(region="Tatry"), context)
    await context.http_client.aclose()

    assert result.success
    assert result.data.level == 3


@pytest.mark.asyncio
async def test_hazard_agent_transport_error_fails_result():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    context = _context(handler)
    result = await create_hazard_agent().run(HazardInput(region="Tatry"), context)
    await context.http_client.aclose()

    assert not result.success
    assert result.error == "connection refused"


# ===== web search =====

@pytest.mark.asyncio
async def test_web_search_agent_ranks_and_extracts():
    html = (FIXTURES / "ddg_results.html").read_text(encoding="utf-8")
    context = _context(lambda r: httpx.Response(200, text=html))
    agent = create_web_search_agent(domains=DOMAINS)

    result = await agent.run(WebSearchInput(region="Tatry", locations=["Kasprowy Wierch"]), context)
    await context.http_client.aclose()

    assert result.success
    batch = result.data
    # identical pages for every query collapse to the unique, non-denied hits
    assert [r.source_url for r in batch.reports] == [
        "https://www.skitury.pl/relacje/kasprowy",
        "https://forum.example.pl/t/hala",
    ]
    assert batch.confidence.level == ConfidenceLevel.LOW
    assert batch.confidence.source_type == DataSourceType.SEARCH


@pytest.mark.asyncio
async def test_web_search_agent_tolerates_failing_queries():
    html = (FIXTURES / "ddg_results.html").read_text(encoding="utf-8")

    def handler(request):
        if "narty" in request.url.params["q"]:
            return httpx.Response(200, text=html)
        return httpx.Response(503)

    context = _context(handler)
    result = await create_web_search_agent(domains=DOMAINS).run(
        WebSearchInput(region="Tatry", locations=["Rysy"]), context
    )
    await context.http_client.aclose()

    assert result.success
    assert len(result.data.reports) == 2


@pytest.mark.asyncio
async def test_web_search_agent_empty_batch_when_nothing_found():
    context = _context(lambda r: httpx.Response(503))
    result = await create_web_search_agent(domains=DOMAINS).run(WebSearchInput(region="Tatry"), context)
    await context.http_client.aclose()

    assert result.success
    assert result.data.reports == []
    assert result.data.confidence.level == ConfidenceLevel.LOW
    assert result.data.confidence.notes.startswith("No results found. Queries tried: Tatry")


@pytest.mark.asyncio
async def test_web_search_agent_uses_llm_capability():
    html = (FIXTURES / "ddg_results.html").read_text(encoding="utf-8")
    answer = (
        '{"summary": "Good powder above 1600m on Kasprowy.", "location": "Kasprowy Wierch", '
        '"snow_type": "puch", "hazards": [], "report_date": null, '
        '"conditions_rating": "good", "observations": []}'
    )
    llm_config = LLMConfig(llm=_JsonModeFakeModel(responses=[answer]), model_name="fake-model")
    context = _context(lambda r: httpx.Response(200, text=html), capabilities={"llm"}, llm_config=llm_config)

    result = await create_web_search_agent(domains=DOMAINS).run(
        WebSearchInput(region="Tatry", locations=["Kasprowy Wierch"], max_queries=1), context
    )
    await context.http_client.aclose()

    assert result.success
    assert result.data.confidence.level == ConfidenceLevel.MEDIUM
    assert result.data.reports[0].confidence.source_name == "AI (fake-model)"


# ===== resorts =====

@pytest.mark.asyncio
async def test_resort_agent_filters_descents_for_route():
    hosts = []

    def handler(request):
        hosts.append(request.url.host)
        return httpx.Response(200, text="<p>Pokrywa śnieżna 65 cm, temperatura -4°C, stok otwarty</p>")

    context = _context(handler, region="Beskid Śląski")
    result = await create_resort_agent().run(
        ResortInput(region="Beskid Śląski", route_name="Barania Góra"), context
    )
    await context.http_client.aclose()

    assert result.success
    assert hosts == ["beskidsportarena.pl"]
    resort = result.data.resorts[0]
    assert resort.name == "Szczyrk Mountain Resort"
    assert resort.snow_depth_base == 65
    assert resort.temperature == -4
    assert resort.is_open is True


@pytest.mark.asyncio
async def test_resort_agent_unknown_region_is_empty_success():
    context = _context(lambda r: httpx.Response(500))
    result = await create_resort_agent().run(ResortInput(region="Bieszczady"), context)
    await context.http_client.aclose()

    assert result.success
    assert result.data.resorts == []
