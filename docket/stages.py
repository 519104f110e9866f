"""
docket.stages
=============

The legally permitted stage successions, kept as data.

``TRANSITIONS`` maps each :class:`~docket.models.Stage` to the set of
stages a case may move to next.  Special-case branches (third parties,
subcontracting, false claims, retaliation review) are ordinary entries
with their own successor sets, so the table can be audited and amended
without touching the transition logic in :pymod:`docket.workflow`.

The NetworkX helpers at the bottom turn the table into a directed graph
for audits: every stage must be reachable from the filing, every stage
must be able to reach closure, and every route to closure must pass the
investigation unless it goes through a documented short-circuit.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

import networkx as nx

from .models import Stage

S = Stage

# ---------------------------------------------------------------------
# Allowed transitions: source stage -> frozenset[valid target stages]
# ---------------------------------------------------------------------
TRANSITIONS: Dict[Stage, FrozenSet[Stage]] = {
    S.COMPLAINT_FILED:         frozenset({S.RECEPTION, S.DERIVED_TO_AUTHORITY}),
    S.RECEPTION:               frozenset({S.COMPLAINT_AMENDMENT, S.PRECAUTIONARY_MEASURES,
                                          S.THIRD_PARTY, S.SUBCONTRACTING,
                                          S.DERIVED_TO_AUTHORITY, S.ABANDONED}),
    S.COMPLAINT_AMENDMENT:     frozenset({S.PRECAUTIONARY_MEASURES, S.ABANDONED}),
    S.THIRD_PARTY:             frozenset({S.PRECAUTIONARY_MEASURES, S.DERIVED_TO_AUTHORITY}),
    S.SUBCONTRACTING:          frozenset({S.PRECAUTIONARY_MEASURES, S.DERIVED_TO_AUTHORITY}),
    S.PRECAUTIONARY_MEASURES:  frozenset({S.REGULATOR_NOTIFICATION}),
    S.REGULATOR_NOTIFICATION:  frozenset({S.INSURER_NOTIFICATION, S.DECISION_TO_INVESTIGATE}),
    S.INSURER_NOTIFICATION:    frozenset({S.DECISION_TO_INVESTIGATE}),
    S.DECISION_TO_INVESTIGATE: frozenset({S.INVESTIGATION, S.DERIVED_TO_AUTHORITY}),
    S.INVESTIGATION:           frozenset({S.REPORT_DRAFTING, S.FALSE_CLAIM, S.RETALIATION_REVIEW}),
    S.RETALIATION_REVIEW:      frozenset({S.INVESTIGATION, S.REPORT_DRAFTING}),
    S.FALSE_CLAIM:             frozenset({S.SANCTIONS, S.CLOSED}),
    S.REPORT_DRAFTING:         frozenset({S.REPORT_REVIEW}),
    S.REPORT_REVIEW:           frozenset({S.REPORT_DRAFTING, S.INVESTIGATION_COMPLETE}),
    S.INVESTIGATION_COMPLETE:  frozenset({S.FINAL_REPORT}),
    S.FINAL_REPORT:            frozenset({S.REGULATOR_SUBMISSION}),
    S.REGULATOR_SUBMISSION:    frozenset({S.REGULATOR_RESOLUTION}),
    S.REGULATOR_RESOLUTION:    frozenset({S.MEASURES_ADOPTION, S.CLOSED}),
    S.MEASURES_ADOPTION:       frozenset({S.SANCTIONS, S.CLOSED}),
    S.SANCTIONS:               frozenset({S.CLOSED}),
    S.DERIVED_TO_AUTHORITY:    frozenset({S.CLOSED}),
    S.ABANDONED:               frozenset({S.CLOSED}),
    S.CLOSED:                  frozenset(),
}

INITIAL_STAGE = S.COMPLAINT_FILED
FINAL_STAGE = S.CLOSED
SHORT_CIRCUITS: FrozenSet[Stage] = frozenset({S.ABANDONED, S.DERIVED_TO_AUTHORITY})

# The ordinary route through the procedure, used for progress reporting.
MAIN_PATH: Tuple[Stage, ...] = (
    S.COMPLAINT_FILED,
    S.RECEPTION,
    S.PRECAUTIONARY_MEASURES,
    S.REGULATOR_NOTIFICATION,
    S.INSURER_NOTIFICATION,
    S.DECISION_TO_INVESTIGATE,
    S.INVESTIGATION,
    S.REPORT_DRAFTING,
    S.REPORT_REVIEW,
    S.INVESTIGATION_COMPLETE,
    S.FINAL_REPORT,
    S.REGULATOR_SUBMISSION,
    S.REGULATOR_RESOLUTION,
    S.MEASURES_ADOPTION,
    S.SANCTIONS,
    S.CLOSED,
)

DISPLAY_NAMES: Dict[Stage, str] = {
    S.COMPLAINT_FILED: "Complaint filed",
    S.RECEPTION: "Complaint received",
    S.COMPLAINT_AMENDMENT: "Complaint amendment",
    S.PRECAUTIONARY_MEASURES: "Precautionary measures",
    S.REGULATOR_NOTIFICATION: "Regulator notified",
    S.INSURER_NOTIFICATION: "Insurer notified",
    S.DECISION_TO_INVESTIGATE: "Decision to investigate",
    S.INVESTIGATION: "Internal investigation",
    S.REPORT_DRAFTING: "Preliminary report",
    S.REPORT_REVIEW: "Internal report review",
    S.INVESTIGATION_COMPLETE: "Investigation complete",
    S.FINAL_REPORT: "Final report",
    S.REGULATOR_SUBMISSION: "Submitted to regulator",
    S.REGULATOR_RESOLUTION: "Regulator resolution",
    S.MEASURES_ADOPTION: "Measures adoption",
    S.SANCTIONS: "Sanctions",
    S.CLOSED: "Closed",
    S.THIRD_PARTY: "Third-party conduct",
    S.SUBCONTRACTING: "Subcontracting chain",
    S.FALSE_CLAIM: "False claim",
    S.RETALIATION_REVIEW: "Retaliation review",
    S.DERIVED_TO_AUTHORITY: "Derived to external authority",
    S.ABANDONED: "Abandoned",
}


def successors(stage: Stage, table: Mapping[Stage, FrozenSet[Stage]] = TRANSITIONS) -> FrozenSet[Stage]:
    """Stages a case at *stage* may legally move to."""
    return table.get(stage, frozenset())


def is_allowed(
    source: Stage,
    target: Stage,
    table: Mapping[Stage, FrozenSet[Stage]] = TRANSITIONS,
) -> bool:
    return target in successors(source, table)


def suggested_next(stage: Stage, table: Mapping[Stage, FrozenSet[Stage]] = TRANSITIONS) -> Optional[Stage]:
    """
    The main-path successor of *stage* when one is permitted, otherwise the
    first permitted successor in declaration order; ``None`` at closure.
    """
    options = successors(stage, table)
    if not options:
        return None
    if stage in MAIN_PATH:
        for candidate in MAIN_PATH[MAIN_PATH.index(stage) + 1:]:
            if candidate in options:
                return candidate
    return next(s for s in Stage if s in options)


def display_name(stage: Stage) -> str:
    return DISPLAY_NAMES.get(stage, stage.value)


# ---------------------------------------------------------------------
# Graph audit (NetworkX)
# ---------------------------------------------------------------------
def stage_graph(table: Mapping[Stage, FrozenSet[Stage]] = TRANSITIONS) -> nx.DiGraph:
    """Directed graph with one edge per permitted transition."""
    g = nx.DiGraph()
    g.add_nodes_from(table)
    for source, targets in table.items():
        for target in targets:
            g.add_edge(source, target)
    return g


def audit_table(table: Mapping[Stage, FrozenSet[Stage]] = TRANSITIONS) -> List[str]:
    """
    Return a list of human-readable problems with *table*; empty when the
    table is sound.

    Checks
    ------
    * every :class:`Stage` has an entry;
    * every stage is reachable from :data:`INITIAL_STAGE`;
    * :data:`FINAL_STAGE` is reachable from every stage;
    * no route from filing to closure skips the investigation unless it
      passes a short-circuit stage.
    """
    problems: List[str] = []
    for stage in Stage:
        if stage not in table:
            problems.append(f"stage {stage.value} has no entry")

    g = stage_graph(table)
    reachable = nx.descendants(g, INITIAL_STAGE) | {INITIAL_STAGE}
    for stage in Stage:
        if stage not in reachable:
            problems.append(f"stage {stage.value} is unreachable from {INITIAL_STAGE.value}")
        elif stage is not FINAL_STAGE and not nx.has_path(g, stage, FINAL_STAGE):
            problems.append(f"stage {stage.value} cannot reach {FINAL_STAGE.value}")

    # Remove the investigation and the short-circuits: nothing should be left
    # connecting filing to closure.
    pruned = g.copy()
    pruned.remove_nodes_from({S.INVESTIGATION} | SHORT_CIRCUITS)
    if INITIAL_STAGE in pruned and FINAL_STAGE in pruned and nx.has_path(pruned, INITIAL_STAGE, FINAL_STAGE):
        path = nx.shortest_path(pruned, INITIAL_STAGE, FINAL_STAGE)
        problems.append("closure reachable without investigation: " + " -> ".join(s.value for s in path))
    return problems


def shortest_route(source: Stage, target: Stage = FINAL_STAGE) -> List[Stage]:
    """Fewest-step legal route between two stages (``[]`` if none)."""
    g = stage_graph()
    try:
        return nx.shortest_path(g, source, target)
    except nx.NetworkXNoPath:
        return []


def to_json() -> Dict[str, List[str]]:
    """Serializable view of the adjacency table, sorted for stable output."""
    return {
        source.value: sorted(t.value for t in targets)
        for source, targets in TRANSITIONS.items()
    }
