import json

import pytest

from angelscript_mcp.providers.interface import ProviderError
from angelscript_mcp.core.context import SearchContext
from angelscript_mcp.providers.snapshot import SnapshotProvider
from angelscript_mcp.search.pipeline import run_api_search

RECORDS = [
    {"label": "AActor::GetActorLocation", "type": "method", "data": {"id": 1}, "details": "Location doc"},
    {"label": "GetActor", "type": "function", "data": {"id": 2}, "details": "Exact doc"},
    {"label": "UWorld::SpawnActor", "type": "method", "data": {"id": 3}, "details": None},
    {"label": "FTargetActorSet", "type": "struct", "details": "Struct doc"},
    {"type": "broken"},
]


@pytest.mark.asyncio
async def test_start_loads_symbols_from_json_file(tmp_path):
    path = tmp_path / "types.json"
    path.write_text(json.dumps({"symbols": RECORDS}), encoding="utf-8")
    provider = SnapshotProvider(path)

    assert await provider.search("GetActor") == []
    await provider.start()

    assert provider.has_data() is True
    assert [r["label"] for r in await provider.search("SpawnActor")] == ["UWorld::SpawnActor"]


def test_has_data_is_unknown_until_loaded(tmp_path):
    provider = SnapshotProvider(tmp_path / "types.json")

    assert provider.has_data() is True


@pytest.mark.asyncio
async def test_start_raises_provider_error_on_bad_file(tmp_path):
    path = tmp_path / "types.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ProviderError):
        await SnapshotProvider(path).start()


@pytest.mark.asyncio
async def test_empty_snapshot_reports_no_data(tmp_path):
    path = tmp_path / "types.json"
    path.write_text("[]", encoding="utf-8")
    provider = SnapshotProvider(path)
    await provider.start()

    assert provider.has_data() is False


@pytest.mark.asyncio
async def test_search_ranks_exact_then_prefix_then_substring():
    provider = SnapshotProvider.from_records(RECORDS)

    results = await provider.search("getactor")

    assert [r["label"] for r in results] == [
        "GetActor",
        "AActor::GetActorLocation",
        "FTargetActorSet",
    ]


@pytest.mark.asyncio
async def test_substring_matches_follow_file_order():
    provider = SnapshotProvider.from_records(RECORDS)

    results = await provider.search("actor")

    assert [r["label"] for r in results] == [
        "AActor::GetActorLocation",
        "GetActor",
        "UWorld::SpawnActor",
        "FTargetActorSet",
    ]


@pytest.mark.asyncio
async def test_fetch_detail_resolves_by_token():
    provider = SnapshotProvider.from_records(RECORDS)

    results = await provider.search("SpawnActor")

    assert await provider.fetch_detail(results[0]["data"]) is None
    assert await provider.fetch_detail({"id": 1}) == "Location doc"
    assert await provider.fetch_detail({"index": 3}) == "Struct doc"


@pytest.mark.asyncio
async def test_fetch_detail_unknown_token_raises():
    provider = SnapshotProvider.from_records(RECORDS)

    with pytest.raises(ProviderError):
        await provider.fetch_detail({"id": 99})


OVERLOADS = [
    {"label": "AActor::SetActorLocation", "type": "method", "details": "overload A"},
    {"label": "AActor::SetActorLocation", "type": "method", "details": "overload B"},
    {"label": "UFoo::Bar", "type": "method", "data": None, "details": "doc Bar"},
    {"label": "UFoo::Baz", "type": "method", "data": None, "details": "doc Baz"},
    {"label": "UFoo::Qux", "type": "method", "data": {"id": 7}, "details": "doc Qux"},
    {"label": "UFoo::QuxAlias", "type": "method", "data": {"id": 7}, "details": "doc QuxAlias"},
]


@pytest.mark.asyncio
async def test_records_sharing_a_label_or_token_keep_their_own_details():
    provider = SnapshotProvider.from_records(OVERLOADS)

    tokens = [r["data"] for r in await provider.search("ufoo")]
    tokens += [r["data"] for r in await provider.search("SetActorLocation")]

    assert len({json.dumps(t, sort_keys=True) for t in tokens}) == len(OVERLOADS)
    assert [await provider.fetch_detail(t) for t in tokens] == [
        "doc Bar",
        "doc Baz",
        "doc Qux",
        "doc QuxAlias",
        "overload A",
        "overload B",
    ]


@pytest.mark.asyncio
async def test_enriched_items_carry_their_own_overload_docs():
    provider = SnapshotProvider.from_records(OVERLOADS)
    context = SearchContext(provider=provider)
    context.gate.resolve()

    overloads = json.loads(await run_api_search(context, {"query": "SetActorLocation"}))
    bar = json.loads(await run_api_search(context, {"query": "UFoo::Bar"}))

    assert [i["details"] for i in overloads["items"]] == ["overload A", "overload B"]
    assert [(i["label"], i["details"]) for i in bar["items"]] == [("UFoo::Bar", "doc Bar")]


@pytest.mark.asyncio
async def test_prefix_of_label_or_segment_ranks_before_substring():
    provider = SnapshotProvider.from_records(
        [
            {"label": "FSpawnActorParams", "details": None},
            {"label": "UWorld::SpawnActor", "details": None},
            {"label": "SpawnActorDeferred", "details": None},
        ]
    )

    results = await provider.search("spawnactor")

    assert [r["label"] for r in results] == [
        "UWorld::SpawnActor",
        "SpawnActorDeferred",
        "FSpawnActorParams",
    ]
