"""
Unit tests for the discovery and construction tools, their LangChain
bindings and the system-prompt instructions.
"""
import sys
import os
import json

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from uicp.components.registry import DefinitionRegistry
from uicp.core.config import APP_CONFIG
from uicp.protocol.extractor import extract_blocks
from uicp.tools.component_tools import construct_component, discover_components
from uicp.tools.instructions import get_protocol_instructions
from uicp.tools.langchain_tools import get_uicp_langchain_tools


REGISTRY = DefinitionRegistry.from_file(APP_CONFIG.DEFINITIONS_PATH)

SCORE = {"homeTeam": "Lakers", "awayTeam": "Celtics", "homeScore": 112, "awayScore": 108}


# ─── Discover ─────────────────────────────────────────────────────────────────

def test_discover_all():
    payload = discover_components(registry=REGISTRY)

    assert payload["success"] is True
    assert payload["version"] == "1.0.0"
    assert [c["uid"] for c in payload["components"]] == ["NBAGameScore", "NewsArticlePreview", "LineChart"]
    first = payload["components"][0]
    assert set(first) == {"uid", "type", "description", "inputs", "example"}
    assert first["inputs"]["homeTeam"]["required"] is True
    assert "create_ui_component" in payload["usage"]["instructions"]

    print("PASS: Discover without filters lists every component")


def test_discover_by_type():
    payload = discover_components(component_type="news", registry=REGISTRY)

    assert payload["success"] is True
    assert [c["uid"] for c in payload["components"]] == ["NewsArticlePreview"]
    print("PASS: Discover filters by category")


def test_discover_uid_takes_precedence():
    payload = discover_components(component_type="news", uid="NBAGameScore", registry=REGISTRY)

    assert [c["uid"] for c in payload["components"]] == ["NBAGameScore"]
    print("PASS: uid filter takes precedence over type filter")


def test_discover_unknown_uid_lists_all_types():
    payload = discover_components(uid="WeatherCard", registry=REGISTRY)

    assert payload["success"] is False
    assert payload["message"] == "No component found with UID: WeatherCard"
    assert payload["available_types"] == ["sports", "news", "chart"]
    print("PASS: Zero matches return every category as a hint")


def test_discover_unknown_type():
    payload = discover_components(component_type="weather", registry=REGISTRY)

    assert payload["success"] is False
    assert payload["message"] == "No components found with type: weather"
    assert sorted(payload["available_types"]) == ["chart", "news", "sports"]
    print("PASS: Unknown type fails with category hint")


def test_discover_empty_registry():
    payload = discover_components(registry=DefinitionRegistry([]))

    assert payload == {"success": False, "message": "No components available", "available_types": []}
    print("PASS: Empty registry reports no components")


# ─── Construct ────────────────────────────────────────────────────────────────

def test_construct_missing_home_team():
    data = {k: v for k, v in SCORE.items() if k != "homeTeam"}
    payload = construct_component("NBAGameScore", data, registry=REGISTRY)

    assert payload["success"] is False
    assert payload["error"] == "Missing required fields"
    assert payload["missing_fields"] == ["homeTeam"]
    assert "homeTeam" in payload["component_schema"]
    print("PASS: Missing homeTeam reported as the only missing field")


def test_construct_unknown_uid():
    payload = construct_component("WeatherCard", {"city": "Oslo"}, registry=REGISTRY)

    assert payload["success"] is False
    assert payload["error"] == "Unknown component UID: WeatherCard"
    assert payload["available_components"] == ["NBAGameScore", "NewsArticlePreview", "LineChart"]
    print("PASS: Unknown uid lists all known uids")


def test_construct_success_round_trips():
    data = dict(SCORE, gameStatus="final", broadcaster="ESPN")
    payload = construct_component("NBAGameScore", data, registry=REGISTRY)

    assert payload["success"] is True
    assert payload["message"] == "Successfully created sports component: NBAGameScore"
    block = payload["uicp_block"]
    assert block.startswith("```uicp\n") and block.endswith("\n```")

    result = extract_blocks(f"Final: {block} Nice.")
    assert len(result.blocks) == 1
    assert result.blocks[0].uid == "NBAGameScore"
    assert result.blocks[0].data == data, "Extra fields must survive construction"
    print("PASS: Constructed block round-trips through the extractor")


def test_construct_invalid_arguments_are_payloads():
    payload = construct_component("NBAGameScore", "not a dict", registry=REGISTRY)
    assert payload["success"] is False
    assert payload["error"] == "Invalid arguments"
    assert payload["details"]

    payload = construct_component("", {}, registry=REGISTRY)
    assert payload["success"] is False
    assert payload["error"] == "Invalid arguments"

    print("PASS: Malformed tool arguments return failure payloads")


def test_construct_unserializable_data():
    data = dict(SCORE, when=object())
    payload = construct_component("NBAGameScore", data, registry=REGISTRY)

    assert payload["success"] is False
    assert "JSON-serializable" in payload["error"]
    print("PASS: Non-JSON data fails without raising")


# ─── LangChain bindings ───────────────────────────────────────────────────────

def test_langchain_tools():
    discover_tool, create_tool = get_uicp_langchain_tools(REGISTRY)

    assert discover_tool.name == "get_ui_components"
    assert create_tool.name == "create_ui_component"

    listed = json.loads(discover_tool.invoke({"component_type": "sports"}))
    assert [c["uid"] for c in listed["components"]] == ["NBAGameScore"]

    created = json.loads(create_tool.invoke({"uid": "NBAGameScore", "data": SCORE}))
    assert created["success"] is True
    assert extract_blocks(created["uicp_block"]).blocks[0].data == SCORE

    missing = json.loads(create_tool.invoke({"uid": "NBAGameScore", "data": {"homeTeam": "A"}}))
    assert missing["missing_fields"] == ["awayTeam", "homeScore", "awayScore"]

    print("PASS: LangChain tools wrap discover and construct")


# ─── Instructions ─────────────────────────────────────────────────────────────

def test_protocol_instructions():
    text = get_protocol_instructions(REGISTRY)

    assert "get_ui_components" in text
    assert "create_ui_component" in text
    assert '"NBAGameScore"' in text and '"sports"' in text
    assert get_protocol_instructions(DefinitionRegistry([])) == ""

    print("PASS: Instructions name the tools, types and uids")


if __name__ == "__main__":
    tests = [
        test_discover_all,
        test_discover_by_type,
        test_discover_uid_takes_precedence,
        test_discover_unknown_uid_lists_all_types,
        test_discover_unknown_type,
        test_discover_empty_registry,
        test_construct_missing_home_team,
        test_construct_unknown_uid,
        test_construct_success_round_trips,
        test_construct_invalid_arguments_are_payloads,
        test_construct_unserializable_data,
        test_langchain_tools,
        test_protocol_instructions,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            failed += 1

    print(f"\n{'='*50}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed == 0:
        print("All tests passed!")
    else:
        sys.exit(1)
