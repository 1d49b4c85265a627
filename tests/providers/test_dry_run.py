import pytest

from tests.fakes.items import feature, train
from tests.fakes.provider import FakeProvider
from trainpilot.contracts.config import EngineConfig
from trainpilot.contracts.exceptions import ItemNotFoundError
from trainpilot.contracts.item import CreateAggregateInput, ItemQuery
from trainpilot.engine.grouping import GroupingEngine
from trainpilot.providers.dry_run import DryRunProvider


@pytest.mark.asyncio
async def test_created_aggregates_get_negative_placeholder_ids() -> None:
    provider = DryRunProvider()

    first = await provider.create_aggregate(CreateAggregateInput(title="A", item_type="Release Train", area_path="P"))
    second = await provider.create_aggregate(CreateAggregateInput(title="B", item_type="Release Train", area_path="P"))

    assert (first, second) == (-1, -2)
    fetched = await provider.get_item_with_relations(first)
    assert fetched.title == "A"
    assert fetched.item_type == "Release Train"


@pytest.mark.asyncio
async def test_operations_are_logged_with_monotonic_sequence() -> None:
    provider = DryRunProvider()
    aggregate_id = await provider.create_aggregate(
        CreateAggregateInput(title="Q1", item_type="Release Train", area_path="P", tags=["auto-generated"])
    )

    await provider.create_relation(aggregate_id, 7, "linked")
    await provider.update_title(3, "--- Q1 ---rt:-1")
    await provider.update_notes(aggregate_id, "[ESTIMATE: 1] x")

    assert [op.sequence for op in provider.operations] == [1, 2, 3, 4]
    assert [op.name for op in provider.operations] == [
        "create_aggregate",
        "create_relation",
        "update_title",
        "update_notes",
    ]
    assert provider.operations[0].payload == {"title": "Q1", "item_type": "Release Train", "area_path": "P"}
    assert provider.operations[1].payload == {"target_id": "7", "comment": "linked"}
    assert provider.operations[2].item_id == 3


@pytest.mark.asyncio
async def test_without_inner_provider_reads_are_empty() -> None:
    provider = DryRunProvider()

    assert await provider.query_items(ItemQuery(area_path="P", item_types=["Feature"])) == []
    with pytest.raises(ItemNotFoundError):
        await provider.get_item(42)


@pytest.mark.asyncio
async def test_writes_overlay_inner_reads_without_touching_inner() -> None:
    inner = FakeProvider([train(50, "Q1", linked=[2], notes="old"), feature(2), feature(3)])
    provider = DryRunProvider(inner)

    async with provider:
        await provider.create_relation(50, 3, "linked")
        await provider.update_notes(50, "new")
        await provider.update_title(2, "Renamed")

        aggregate = await provider.get_item_with_relations(50)
        renamed = await provider.get_item(2)

    assert aggregate.linked_ids() == [2, 3]
    assert aggregate.notes == "new"
    assert renamed.title == "Renamed"
    assert inner.relation_calls == []
    assert inner.notes_calls == []
    assert inner.title_calls == []
    assert inner.items[50].notes == "old"


@pytest.mark.asyncio
async def test_grouping_over_dry_run_sends_no_writes() -> None:
    inner = FakeProvider(
        [
            train(1, "--- New Train ---rt"),
            feature(2),
            train(3, "--- Known Train ---rt:50"),
            feature(4),
            train(50, "Known Train", linked=[]),
        ]
    )
    provider = DryRunProvider(inner)
    snapshot = [inner.items[item_id] for item_id in (1, 2, 3, 4)]

    result = await GroupingEngine(provider, EngineConfig(), area_path="P", group_delay=0, dry_run=True).run(snapshot)

    assert result.dry_run is True
    assert [(op.kind.value, op.aggregate_id) for op in result.operations] == [("Created", -1), ("Updated", 50)]
    assert result.new_relations == 2
    assert not any(op.name == "update_title" for op in provider.operations)
    assert inner.create_calls == []
    assert inner.relation_calls == []
    assert inner.title_calls == []
