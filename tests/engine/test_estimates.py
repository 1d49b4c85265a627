from __future__ import annotations

import pytest

from tests.fakes.items import feature, train
from tests.fakes.provider import FakeProvider
from trainpilot.contracts.config import EngineConfig, EstimateConfig
from trainpilot.engine.estimates import (
    EstimateCodec,
    EstimatePass,
    EstimateReconciler,
    decode_estimate,
    encode_estimate,
    format_estimate,
    strip_estimate,
)

EXPLANATION = EstimateConfig().empty_notes_text

# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


class TestCodec:
    def test_decode(self) -> None:
        assert decode_estimate("[ESTIMATE: 8] Planned for Q1") == 8.0
        assert decode_estimate("  [estimate:2.5]Planned") == 2.5
        assert decode_estimate("Planned for Q1 [ESTIMATE: 8]") is None
        assert decode_estimate("") is None

    def test_strip_is_idempotent(self) -> None:
        notes = "[ESTIMATE: 8] [ESTIMATE: 3]   Planned"

        once = strip_estimate(notes)

        assert once == "Planned"
        assert strip_estimate(once) == once

    def test_reencoding_keeps_the_remainder(self) -> None:
        notes = "[ESTIMATE: 5] Shipping in Q1\nowner: storage"

        encoded = encode_estimate(13, notes)

        assert encoded == "[ESTIMATE: 13] Shipping in Q1\nowner: storage"
        assert strip_estimate(encoded) == strip_estimate(notes)
        assert decode_estimate(encoded) == 13

    @pytest.mark.parametrize("notes", ["", "   ", "[ESTIMATE: 5]", "[ESTIMATE: 5]   \n"])
    def test_empty_remainder_gets_explanation(self, notes: str) -> None:
        assert encode_estimate(13, notes) == f"[ESTIMATE: 13] {EXPLANATION}"

    def test_custom_label(self) -> None:
        codec = EstimateCodec(EstimateConfig(label="SWAG"))

        assert codec.decode("[SWAG: 21] text") == 21
        assert codec.decode("[ESTIMATE: 21] text") is None
        assert codec.encode(3, "[SWAG: 21] text") == "[SWAG: 3] text"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (13.0, "13"),
            (0.0, "0"),
            (2.5, "2.5"),
            (0.1 + 0.2, "0.30000000000000004"),
            (1e-7, "0.0000001"),
            (1e16, "10000000000000000"),
            (1e-20, "0.00000000000000000001"),
            (-2.5e-8, "-0.000000025"),
        ],
    )
    def test_format_estimate(self, value: float, expected: str) -> None:
        assert format_estimate(value) == expected
        assert decode_estimate(f"[ESTIMATE: {format_estimate(value)}]") == value


# ---------------------------------------------------------------------------
# Reconciler
# ---------------------------------------------------------------------------


def members_summing_to_13() -> list:
    return [feature(2, estimate=5), feature(3, estimate=8)]


class TestReconciler:
    @pytest.mark.asyncio
    async def test_system_authored_aggregate_is_corrected(self) -> None:
        aggregate = train(50, "Q1", notes="[ESTIMATE: 8] Planned", tags=["auto-generated"])
        provider = FakeProvider([aggregate])

        outcome = await EstimateReconciler(provider, EngineConfig()).reconcile(aggregate, members_summing_to_13())

        assert outcome.updated is True
        assert outcome.warning is None
        assert outcome.current == 8
        assert outcome.total == 13
        assert provider.notes_calls == [(50, "[ESTIMATE: 13] Planned")]

    @pytest.mark.asyncio
    async def test_manual_aggregate_is_only_flagged(self) -> None:
        aggregate = train(50, "Q1", notes="[ESTIMATE: 8] Planned")
        provider = FakeProvider([aggregate])

        outcome = await EstimateReconciler(provider, EngineConfig()).reconcile(aggregate, members_summing_to_13())

        assert outcome.updated is False
        assert outcome.warning is not None
        assert provider.notes_calls == []
        assert provider.items[50].notes == "[ESTIMATE: 8] Planned"

    @pytest.mark.asyncio
    async def test_reconcile_all_corrects_manual_aggregates(self) -> None:
        aggregate = train(50, "Q1", notes="")
        provider = FakeProvider([aggregate])

        outcome = await EstimateReconciler(provider, EngineConfig()).reconcile(
            aggregate, members_summing_to_13(), reconcile_all=True
        )

        assert outcome.updated is True
        assert provider.notes_calls == [(50, f"[ESTIMATE: 13] {EXPLANATION}")]

    @pytest.mark.asyncio
    async def test_matching_estimate_is_a_no_op(self) -> None:
        aggregate = train(50, "Q1", notes="[ESTIMATE: 13] Planned", tags=["Auto-Generated"])
        provider = FakeProvider([aggregate])

        outcome = await EstimateReconciler(provider, EngineConfig()).reconcile(aggregate, members_summing_to_13())

        assert outcome.system_authored is True
        assert outcome.updated is False
        assert outcome.warning is None
        assert provider.notes_calls == []

    @pytest.mark.asyncio
    async def test_missing_member_estimates_count_as_zero(self) -> None:
        aggregate = train(50, "Q1", tags=["auto-generated"])
        provider = FakeProvider([aggregate])
        members = [feature(2, estimate=5), feature(3), feature(4)]

        outcome = await EstimateReconciler(provider, EngineConfig()).reconcile(aggregate, members)

        assert outcome.total == 5
        assert outcome.members == 3
        assert outcome.members_without_estimate == 2


# ---------------------------------------------------------------------------
# Pass
# ---------------------------------------------------------------------------


class TestEstimatePass:
    @pytest.mark.asyncio
    async def test_scenario_system_and_manual_aggregates(self) -> None:
        provider = FakeProvider(
            [
                train(50, "System", linked=[2, 3], notes="[ESTIMATE: 8] a", tags=["auto-generated"]),
                train(60, "Manual", linked=[2, 3], notes="[ESTIMATE: 8] b"),
                feature(2, estimate=5),
                feature(3, estimate=8),
            ]
        )

        result = await EstimatePass(provider, EngineConfig()).run([provider.items[50], provider.items[60]])

        assert [(o.aggregate_id, o.updated) for o in result.outcomes] == [(50, True), (60, False)]
        assert provider.items[50].notes == "[ESTIMATE: 13] a"
        assert provider.items[60].notes == "[ESTIMATE: 8] b"
        assert [o.aggregate_id for o in result.mismatched] == [60]
        assert any("60" in warning for warning in result.warnings)

    @pytest.mark.asyncio
    async def test_only_member_type_items_are_summed(self) -> None:
        story = feature(4, estimate=100).model_copy(update={"item_type": "User Story"})
        provider = FakeProvider(
            [train(50, "Q1", linked=[2, 4], tags=["auto-generated"]), feature(2, estimate=3), story]
        )

        result = await EstimatePass(provider, EngineConfig()).run([provider.items[50]])

        assert result.outcomes[0].total == 3
        assert result.outcomes[0].members == 1

    @pytest.mark.asyncio
    async def test_aggregates_without_members_are_skipped(self) -> None:
        story = feature(4).model_copy(update={"item_type": "User Story"})
        provider = FakeProvider([train(50, "Empty"), train(60, "Stories", linked=[4]), story])

        result = await EstimatePass(provider, EngineConfig()).run([provider.items[50], provider.items[60]])

        assert result.outcomes == []
        assert len(result.skipped) == 2
        assert provider.notes_calls == []

    @pytest.mark.asyncio
    async def test_missing_members_and_failures_do_not_stop_the_pass(self) -> None:
        provider = FakeProvider(
            [
                train(50, "Broken", linked=[2]),
                train(60, "Dangling", linked=[2, 999], tags=["auto-generated"]),
                feature(2, estimate=1),
            ]
        )
        provider.fail_fetch_of = {50}

        result = await EstimatePass(provider, EngineConfig()).run([provider.items[50], provider.items[60]])

        assert [failure.item_id for failure in result.failures] == [50]
        assert [o.aggregate_id for o in result.updated] == [60]
        assert any("999" in warning for warning in result.warnings)

    @pytest.mark.asyncio
    async def test_missing_estimate_is_reported_in_warnings(self) -> None:
        provider = FakeProvider(
            [train(50, "Q1", linked=[2, 3], tags=["auto-generated"]), feature(2, estimate=2), feature(3)]
        )

        result = await EstimatePass(provider, EngineConfig()).run([provider.items[50]])

        assert result.outcomes[0].members_without_estimate == 1
        assert any("no estimate" in warning for warning in result.warnings)


@pytest.mark.asyncio
async def test_tiny_totals_are_stable_across_runs() -> None:
    aggregate = train(50, "Q1", tags=["auto-generated"])
    provider = FakeProvider([aggregate])
    reconciler = EstimateReconciler(provider, EngineConfig())
    members = [feature(2, estimate=1e-20)]

    await reconciler.reconcile(aggregate, members)
    second = await reconciler.reconcile(provider.items[50], members)

    assert provider.notes_calls == [(50, f"[ESTIMATE: 0.00000000000000000001] {EXPLANATION}")]
    assert second.current == 1e-20
    assert second.updated is False
