"""Lens catalog and selection policy."""

import random

import pytest

from council.lenses import LENSES, Lens, LensRegistry, select_lenses


class TestCatalog:
    def test_catalog_has_sixteen_unique_lenses(self):
        names = [lens.name for lens in LENSES]
        assert len(names) == 16
        assert len(set(names)) == 16

    def test_mandatory_lenses_in_catalog_order(self):
        registry = LensRegistry()
        assert [lens.name for lens in registry.mandatory] == ["the_goal_goldratt", "urgency_musk"]

    def test_every_prompt_states_a_constraint(self):
        for lens in LENSES:
            assert lens.prompt.startswith("CONSTRAINT:"), lens.name
            assert "KEY QUESTIONS:" in lens.prompt, lens.name

    def test_lens_is_immutable(self):
        with pytest.raises(AttributeError):
            LENSES[0].name = "renamed"

    def test_duplicate_names_rejected(self):
        dup = (Lens("a", "x"), Lens("a", "y"))
        with pytest.raises(ValueError, match="Duplicate"):
            LensRegistry(dup)

    def test_get_by_name(self):
        registry = LensRegistry()
        assert registry.get("tests_beck").name == "tests_beck"
        assert registry.get("nope") is None

    def test_names_follow_catalog_order(self, small_catalog):
        registry = LensRegistry(small_catalog)
        assert registry.names == ["goal", "speed", "types", "errors", "tests", "waste"]
        assert LensRegistry().names[:2] == ["the_goal_goldratt", "urgency_musk"]


class TestSelection:
    @pytest.mark.parametrize("n", range(0, 20))
    def test_mandatory_exactly_once_and_no_repeats(self, n):
        selection = select_lenses(n, rng=random.Random(n))
        names = [lens.name for lens in selection]
        assert len(names) == len(set(names))
        assert names.count("the_goal_goldratt") == 1
        assert names.count("urgency_musk") == 1
        assert names[:2] == ["the_goal_goldratt", "urgency_musk"]
        assert len(selection) == max(2, min(n, len(LENSES)))

    @pytest.mark.parametrize("n", [0, 1, 2])
    def test_small_request_returns_mandatory_set(self, n):
        registry = LensRegistry()
        for seed in range(5):
            assert registry.select(n, rng=random.Random(seed)) == list(registry.mandatory)

    def test_not_clamped_below_mandatory_count(self, small_catalog):
        selection = select_lenses(1, catalog=small_catalog)
        assert [lens.name for lens in selection] == ["goal", "speed"]

    def test_request_above_catalog_size_takes_everything(self, small_catalog):
        selection = select_lenses(50, rng=random.Random(0), catalog=small_catalog)
        assert sorted(lens.name for lens in selection) == sorted(l.name for l in small_catalog)

    def test_optional_subset_varies_across_runs(self):
        registry = LensRegistry()
        rng = random.Random(99)
        seen = {tuple(l.name for l in registry.select(5, rng=rng)) for _ in range(50)}
        assert len(seen) > 1
        assert all(s[:2] == ("the_goal_goldratt", "urgency_musk") for s in seen)

    def test_unseeded_selection_still_valid(self):
        selection = select_lenses(6)
        assert len(selection) == 6
        assert len({lens.name for lens in selection}) == 6

    def test_every_optional_lens_gets_picked(self):
        registry = LensRegistry()
        rng = random.Random(0)
        picked = {registry.select(3, rng=rng)[2].name for _ in range(400)}
        assert picked == {lens.name for lens in registry.optional}

    def test_same_seed_same_selection(self):
        first = select_lenses(7, rng=random.Random(42))
        second = select_lenses(7, rng=random.Random(42))
        assert first == second

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            select_lenses(-1)

    def test_selection_does_not_mutate_catalog(self):
        registry = LensRegistry()
        before = registry.lenses
        registry.select(10, rng=random.Random(3))
        assert registry.lenses == before
