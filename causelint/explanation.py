"""
Explanation Layer

Translate Findings to human-readable text.
One sentence for what is wrong, one for what to do.
"""
from dataclasses import dataclass
from typing import List

from .data_structures import MISSING_CAUSE, Finding


@dataclass(frozen=True)
class Explanation:
    finding: Finding
    path: str
    message: str


_OBSERVATION = {
    MISSING_CAUSE: "This error replaces the caught error '{name}' without keeping it as its cause.",
}

_OBSERVATION_FALLBACK = "This error discards the caught error '{name}'."

_REMEDY = {
    True:  "Pass {{ cause: {name} }} as the second argument.",
    False: "The options argument is not an object literal; add cause: {name} to it by hand.",
}


def _build_message(finding: Finding) -> str:
    name = finding.parameter_name
    observation = _OBSERVATION.get(finding.kind, _OBSERVATION_FALLBACK)
    return " ".join([
        observation.format(name=name),
        _REMEDY[finding.fixable].format(name=name),
    ])


def explain(findings: List[Finding], path: str = "<source>") -> List[Explanation]:
    return [
        Explanation(finding=f, path=path, message=_build_message(f))
        for f in findings
    ]
