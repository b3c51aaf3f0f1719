"""
Prompt rendering for council members and for the synthesizer.

Both functions are pure. The task text and each lens prompt are embedded
verbatim; member outputs are embedded in full (the only size cap is the
executor's cap on each member's raw output).
"""

from typing import Sequence

from ..lenses import Lens
from .models import MemberResult

BANNER = "═" * 63


def render_member_prompt(lens: Lens, task: str, member_count: int) -> str:
    """Prompt for one member analyzing ``task`` through ``lens``."""
    return (
        f"You are a council member analyzing with a specific constraint. "
        f"There are {member_count} council members, each with different orthogonal constraints.\n"
        f"\n"
        f"{lens.prompt}\n"
        f"\n"
        f"YOUR TASK:\n"
        f"{task}\n"
        f"\n"
        f"YOUR OUTPUT REQUIREMENTS:\n"
        f"1. Executive summary (2-3 sentences) from your constraint's perspective ONLY\n"
        f"2. Detailed analysis with specific insights labeled [{lens.name}]\n"
        f"3. Recommendations with file paths and line numbers where applicable\n"
        f"4. Risks and trade-offs within your constraint area\n"
        f"\n"
        f"Quality over quantity - 5 constraint-specific insights > 20 generic observations.\n"
        f"If your analysis could come from any other constraint, you're doing it WRONG."
    )


def _render_member_section(result: MemberResult) -> str:
    return (
        f"{BANNER}\n"
        f"MEMBER #{result.member_number}: {result.lens_name.upper()}\n"
        f"{BANNER}\n"
        f"\n"
        f"{result.text}"
    )


def render_synthesis_prompt(results: Sequence[MemberResult], task: str) -> str:
    """Prompt reducing every member result into one recommendation.

    Results are laid out in slot order whatever order they arrive in.
    """
    ordered = sorted(results, key=lambda r: r.slot)
    analyses = "\n\n".join(_render_member_section(r) for r in ordered)

    return f"""You are a master synthesizer analyzing insights from {len(ordered)} council members who each analyzed through different constraints.

YOUR TASK:
Synthesize the following analyses into ONE coherent, actionable recommendation.

ORIGINAL TASK:
{task}

COUNCIL ANALYSES:
{analyses}

YOUR SYNTHESIS REQUIREMENTS:

1. EXECUTIVE SUMMARY (3-4 sentences)
   - What's the core issue?
   - What's the recommended solution?
   - What's the expected impact?

2. CONSOLIDATED FINDINGS
   - Identify common themes across multiple constraints
   - Highlight unique insights from specific constraints
   - Resolve any conflicting recommendations (explain which to prioritize and why)

3. PRIORITIZED ACTION PLAN
   - List specific changes in priority order (P0/P1/P2)
   - For each item: file:line, what to change, why, expected impact
   - Include concrete code snippets where applicable

4. RISKS & TRADE-OFFS
   - What are we trading off?
   - What could go wrong?
   - How to mitigate?

5. IMPLEMENTATION ROADMAP
   - What order to tackle changes?
   - What dependencies exist?

Be concise but specific. The goal is ONE clear path forward, not multiple options.
Focus on ACTIONABLE recommendations with clear next steps."""
