"""Unit tests for memory_runtime.compile.budget module."""

import pytest

from memory_runtime.compile.budget import apply_budget, fixed_overhead_tokens, truncate_content
from memory_runtime.compile.tokens import estimate_tokens
from memory_runtime.compile.types import (
    MESSAGE_OVERHEAD,
    TRUNCATION_MARKER,
    USER_MESSAGE_RESERVE,
    CompileConfig,
    normalize_compile_config,
)
from memory_runtime.types.types import SessionState, WorkingSet


def overhead(state=None, prefix=None) -> int:
    return fixed_overhead_tokens(state or SessionState(), prefix, normalize_compile_config(None))


class TestFixedOverhead:
    """Tests for fixed_overhead_tokens function."""

    def test_includes_reserves_and_state(self):
        state = SessionState()
        expected = (
            estimate_tokens(state.to_json()) + USER_MESSAGE_RESERVE + MESSAGE_OVERHEAD
        )
        assert overhead(state) == expected

    def test_includes_policy_prefix(self):
        prefix = "You are a helpful assistant."
        assert overhead(prefix=prefix) == overhead() + estimate_tokens(prefix)

    def test_grows_with_state(self):
        state = SessionState(constraints=["must be fast"] * 1, working_set=WorkingSet(paths=["a"]))
        assert overhead(state) > overhead()


class TestTruncateContent:
    """Tests for truncate_content function."""

    def test_result_fits_allowance(self):
        content = "y" * 1000
        truncated = truncate_content(content, 50)
        assert estimate_tokens(truncated) <= 50
        assert truncated.endswith(TRUNCATION_MARKER)

    def test_keeps_largest_prefix(self):
        content = "y" * 1000
        truncated = truncate_content(content, 50)
        prefix = truncated[: -len(TRUNCATION_MARKER)]
        assert content.startswith(prefix)
        # One more character would no longer fit
        assert estimate_tokens(content[: len(prefix) + 1] + TRUNCATION_MARKER) > 50

    def test_zero_allowance_gives_marker_only(self):
        assert truncate_content("abcdef", 0) == TRUNCATION_MARKER

    def test_custom_estimator(self):
        def words(text: str) -> int:
            return len(text.split())

        truncated = truncate_content("one two three four five six", 4, words)
        assert words(truncated) <= 4
        assert truncated.startswith("one two")


class TestApplyBudget:
    """Tests for apply_budget function."""

    def test_everything_fits(self, item_factory, content_of):
        items = [item_factory(content=content_of(10)) for _ in range(3)]
        result = apply_budget(items, SessionState(), 2000)
        assert len(result.included) == 3
        assert result.dropped == []
        assert result.token_estimate == overhead() + 30

    def test_inclusion_preserves_order(self, item_factory, content_of):
        items = [item_factory(content=content_of(10), priority=p) for p in (90, 70, 50)]
        result = apply_budget(items, SessionState(), 2000)
        assert [i.artifact.artifact_id for i in result.included] == [
            i.artifact.artifact_id for i in items
        ]

    def test_drops_low_priority_that_do_not_fit(self, item_factory, content_of):
        budget = overhead() + 100
        fits = item_factory(content=content_of(60), priority=50)
        too_big = item_factory(content=content_of(60), priority=50)
        result = apply_budget([fits, too_big], SessionState(), budget)
        assert result.included == [fits]
        assert result.dropped == [too_big]

    def test_continues_after_drop(self, item_factory, content_of):
        budget = overhead() + 100
        big = item_factory(content=content_of(150), priority=50)
        small = item_factory(content=content_of(20), priority=40)
        result = apply_budget([big, small], SessionState(), budget)
        assert result.included == [small]
        assert result.dropped == [big]

    def test_truncates_high_priority_unpinned(self, item_factory, content_of):
        budget = overhead() + 150
        item = item_factory(content=content_of(400), priority=100, rationale="Recent repository changes")
        result = apply_budget([item], SessionState(), budget)
        assert len(result.included) == 1
        truncated = result.included[0]
        assert truncated.artifact.content.endswith(TRUNCATION_MARKER)
        assert estimate_tokens(truncated.artifact.content) <= 150
        assert truncated.rationale == "Recent repository changes (truncated to fit budget)"
        assert result.token_estimate == budget

    def test_high_priority_not_truncated_into_small_remainder(self, item_factory, content_of):
        budget = overhead() + 100  # remaining == MIN_TRUNCATION_TOKENS, not above it
        item = item_factory(content=content_of(400), priority=100)
        result = apply_budget([item], SessionState(), budget)
        assert result.included == []
        assert result.dropped == [item]

    def test_threshold_is_inclusive(self, item_factory, content_of):
        budget = overhead() + 200
        at_threshold = item_factory(content=content_of(400), priority=80)
        below = item_factory(content=content_of(400), priority=79)
        assert len(apply_budget([at_threshold], SessionState(), budget).included) == 1
        assert len(apply_budget([below], SessionState(), budget).included) == 0

    def test_original_artifact_untouched(self, item_factory, content_of):
        content = content_of(400)
        item = item_factory(content=content, priority=100)
        apply_budget([item], SessionState(), overhead() + 150)
        assert item.artifact.content == content

    def test_pinned_processed_first(self, item_factory, content_of):
        unpinned = item_factory(content=content_of(10), priority=100)
        pinned = item_factory(content=content_of(10), priority=95, pinned=True)
        result = apply_budget([unpinned, pinned], SessionState(), 2000)
        assert result.included == [pinned, unpinned]

    def test_pinned_truncated_not_dropped(self, item_factory, content_of):
        pinned = item_factory(content=content_of(3000), priority=95, pinned=True)
        result = apply_budget([pinned], SessionState(), 2000)
        assert len(result.included) == 1
        assert result.dropped == []
        assert result.included[0].rationale.endswith("(pinned, truncated to fit budget)")
        assert estimate_tokens(result.included[0].artifact.content) <= 2000 - overhead()

    def test_pinned_after_exhaustion_get_minimum_allowance(self, item_factory, content_of):
        first = item_factory(content=content_of(3000), priority=95, pinned=True)
        second = item_factory(content=content_of(3000), priority=95, pinned=True)
        result = apply_budget([first, second], SessionState(), 1000)
        assert len(result.included) == 2
        second_content = result.included[1].artifact.content
        assert second_content.endswith(TRUNCATION_MARKER)
        assert len(second_content) > len(TRUNCATION_MARKER)

    def test_pinned_survive_budget_below_overhead(self, item_factory, content_of):
        pinned = item_factory(content=content_of(50), pinned=True, priority=95)
        result = apply_budget([pinned], SessionState(), 10)
        assert len(result.included) == 1
        assert result.token_estimate <= 10

    def test_pinned_scenario_drops_all_unpinned(self, item_factory, content_of):
        pinned = item_factory(content=content_of(3000), priority=95, pinned=True)
        snippets = [item_factory(content=content_of(150), priority=50) for _ in range(25)]
        result = apply_budget([pinned, *snippets], SessionState(), 2000)
        assert [i.artifact.artifact_id for i in result.included] == [pinned.artifact.artifact_id]
        assert len(result.dropped) == 25
        assert result.token_estimate == 2000

    @pytest.mark.parametrize("budget", [0, 1, 50, 149, 150, 151, 300, 1000, 5000])
    def test_budget_invariant(self, item_factory, content_of, budget):
        items = [
            item_factory(content=content_of(3000), priority=95, pinned=True),
            item_factory(content=content_of(500), priority=100),
            item_factory(content=content_of(200), priority=80),
            item_factory(content=content_of(40), priority=50),
            item_factory(content=content_of(5), priority=40),
        ]
        result = apply_budget(items, SessionState(), budget, policy_prefix="Be brief.")
        assert 0 <= result.token_estimate <= budget
        assert items[0].artifact.artifact_id in [i.artifact.artifact_id for i in result.included]

    def test_deterministic(self, item_factory, content_of):
        items = [item_factory(content=content_of(t), priority=p) for t, p in [(300, 100), (90, 80), (60, 50)]]
        first = apply_budget(items, SessionState(), 500)
        second = apply_budget(items, SessionState(), 500)
        assert first == second

    def test_rationale_summarizes_counts(self, item_factory, content_of):
        budget = overhead() + 50
        items = [item_factory(content=content_of(40)), item_factory(content=content_of(40))]
        result = apply_budget(items, SessionState(), budget)
        assert result.rationale == (
            f"Included 1 artifacts ({overhead() + 40} tokens), "
            f"dropped 1 to fit {budget} token budget"
        )

    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            apply_budget([], SessionState(), -1)

    def test_config_overrides_threshold(self, item_factory, content_of):
        budget = overhead() + 200
        item = item_factory(content=content_of(400), priority=60)
        config = CompileConfig(high_priority_threshold=60)
        result = apply_budget([item], SessionState(), budget, config=config)
        assert len(result.included) == 1
