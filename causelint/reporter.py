"""
Finding assembly.

Pipeline per catch handler: validate → synthesize → dedup.
One finding per candidate, none when the handler binds nothing.
"""
from typing import List, Sequence

from .data_structures import CatchBinding, Finding, SourceSpan, ThrowCandidate
from .detectors import DetectorContext, has_cause_link
from .fixes import synthesize_fix


def _finding_for(candidate: ThrowCandidate, parameter_name: str) -> Finding:
    anchor = candidate.constructor_call_node
    return Finding(
        anchor_node=anchor,
        location=SourceSpan.of(anchor),
        parameter_name=parameter_name,
        fix=synthesize_fix(candidate, parameter_name),
    )


def report_catch(
    binding: CatchBinding,
    candidates: Sequence[ThrowCandidate],
    context: DetectorContext,
) -> List[Finding]:
    if binding.parameter_name is None:
        return []

    findings: List[Finding] = []
    seen = set()

    for candidate in candidates:
        key = (candidate.throw_node.start_byte, candidate.throw_node.end_byte)
        if key in seen:
            continue
        seen.add(key)

        if has_cause_link(candidate, binding.parameter_name, context):
            continue

        findings.append(_finding_for(candidate, binding.parameter_name))

    return findings
