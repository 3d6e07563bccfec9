"""Semantic checks over a parsed topology.

Every rule returns its findings instead of raising, so one validation pass can
report all problems together.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from topologist.domain.model import Topology

type ValidationRule = Callable[[Topology], Iterable[str]]

MAX_TOPIC_NAME_LENGTH: Final[int] = 249
_TOPIC_NAME = re.compile(r"^[a-zA-Z0-9._-]+$")
_PRINCIPAL = re.compile(r"^[A-Za-z]+:.+$")


def topic_names_are_legal(topology: Topology) -> Iterator[str]:
    for full_name, _topic in topology.qualified_topics():
        if not _TOPIC_NAME.match(full_name):
            yield f"Topic name '{full_name}' contains characters other than [a-zA-Z0-9._-]"
        if len(full_name) > MAX_TOPIC_NAME_LENGTH:
            yield f"Topic name '{full_name}' is longer than {MAX_TOPIC_NAME_LENGTH} characters"


def topic_sizes_are_positive(topology: Topology) -> Iterator[str]:
    for full_name, topic in topology.qualified_topics():
        if topic.partitions < 1:
            yield f"Topic '{full_name}' must have at least one partition"
        if topic.replication_factor < 1:
            yield f"Topic '{full_name}' must have a replication factor of at least one"


def topic_names_are_unique(topology: Topology) -> Iterator[str]:
    counts = Counter(full_name for full_name, _topic in topology.qualified_topics())
    for name, count in sorted(counts.items()):
        if count > 1:
            yield f"Topic '{name}' is declared {count} times"


def project_names_are_unique(topology: Topology) -> Iterator[str]:
    counts = Counter(project.name for project in topology.projects)
    for name, count in sorted(counts.items()):
        if count > 1:
            yield f"Project '{name}' is declared {count} times"


def principals_are_qualified(topology: Topology) -> Iterator[str]:
    for project in topology.projects:
        for principal in project.principals():
            if not _PRINCIPAL.match(principal):
                yield (
                    f"Principal '{principal}' in project '{project.name}' "
                    "must look like 'Type:name'"
                )


DEFAULT_RULES: Final[tuple[ValidationRule, ...]] = (
    topic_names_are_legal,
    topic_sizes_are_positive,
    topic_names_are_unique,
    project_names_are_unique,
    principals_are_qualified,
)


class TopologyValidator:
    def __init__(self, rules: Iterable[ValidationRule] = DEFAULT_RULES) -> None:
        self.rules = tuple(rules)

    def validate(self, topology: Topology) -> list[str]:
        findings: list[str] = []
        for rule in self.rules:
            findings.extend(rule(topology))
        return findings
