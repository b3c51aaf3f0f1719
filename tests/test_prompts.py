"""Member and synthesis prompt rendering."""

import random

from council.lenses import LENSES, Lens
from council.orchestration import MemberResult, render_member_prompt, render_synthesis_prompt


def _results():
    return [
        MemberResult(slot=0, lens_name="alpha", text="first finding about caching"),
        MemberResult(slot=1, lens_name="beta", text="second finding about locking"),
        MemberResult(slot=2, lens_name="gamma", text="[Member 3 error: Timed out after 10s]", error="Timed out after 10s"),
    ]


class TestMemberPrompt:
    def test_embeds_count_lens_and_task_verbatim(self):
        lens = LENSES[5]
        task = "Refactor module X\n  keep the public API stable"
        prompt = render_member_prompt(lens, task, 7)
        assert "There are 7 council members" in prompt
        assert lens.prompt in prompt
        assert task in prompt

    def test_demands_labeled_non_generic_output(self):
        lens = Lens(name="types_czaplicki", prompt="CONSTRAINT: types only")
        prompt = render_member_prompt(lens, "task", 3)
        assert "labeled [types_czaplicki]" in prompt
        assert "doing it WRONG" in prompt

    def test_is_pure(self):
        lens = LENSES[0]
        assert render_member_prompt(lens, "t", 5) == render_member_prompt(lens, "t", 5)


class TestSynthesisPrompt:
    def test_contains_every_result_once_in_slot_order(self):
        results = _results()
        prompt = render_synthesis_prompt(results, "refactor module X")
        for r in results:
            assert prompt.count(r.lens_name.upper()) == 1
            assert prompt.count(r.text) == 1
        positions = [prompt.index(f"MEMBER #{r.slot + 1}: {r.lens_name.upper()}") for r in results]
        assert positions == sorted(positions)

    def test_order_independent_of_completion_order(self):
        results = _results()
        shuffled = results[:]
        random.Random(5).shuffle(shuffled)
        assert render_synthesis_prompt(shuffled, "t") == render_synthesis_prompt(results, "t")
        assert render_synthesis_prompt(list(reversed(results)), "t") == render_synthesis_prompt(results, "t")

    def test_embeds_count_task_and_required_sections(self):
        prompt = render_synthesis_prompt(_results(), "refactor module X")
        assert "insights from 3 council members" in prompt
        assert "ORIGINAL TASK:\nrefactor module X" in prompt
        for section in (
            "EXECUTIVE SUMMARY",
            "CONSOLIDATED FINDINGS",
            "Resolve any conflicting recommendations",
            "PRIORITIZED ACTION PLAN",
            "RISKS & TRADE-OFFS",
            "IMPLEMENTATION ROADMAP",
        ):
            assert section in prompt

    def test_member_text_not_truncated(self):
        big = "z" * 600_000
        results = [MemberResult(slot=0, lens_name="alpha", text=big)]
        assert big in render_synthesis_prompt(results, "t")
