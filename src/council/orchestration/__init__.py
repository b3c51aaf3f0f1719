"""
Council orchestration.

  - Council: selects lenses, dispatches members in parallel, synthesizes
  - prompts: pure rendering of member and synthesis prompts
"""
from .council import Council, CouncilState, failure_placeholder
from .models import CouncilResult, MemberResult, RunTask, SynthesisResult
from .prompts import render_member_prompt, render_synthesis_prompt
