"""
Docket
======

A workflow engine that tracks the stages of a workplace-harassment
investigation and the statutory deadlines each stage starts.

Import structure
----------------
`import docket` is intentionally cheap: nothing is imported by default.
Heavy dependencies such as *matplotlib*, *networkx* and *sqlmodel* are
only pulled in when you access :pymod:`docket.viz`, :pymod:`docket.stages`
or :pymod:`docket.db`.

Sub-modules
~~~~~~~~~~~
- :pymod:`docket.models`        – frozen dataclasses + enums (``Deadline``, ``CaseWorkflowState`` …)
- :pymod:`docket.workdays`      – business-day arithmetic over an explicit holiday set
- :pymod:`docket.holidays`      – versioned per-jurisdiction holiday tables
- :pymod:`docket.templates`     – default statutory deadline templates
- :pymod:`docket.deadlines`     – single-deadline lifecycle (initialize, recompute, extend …)
- :pymod:`docket.extensions`    – extension requests and their approval or rejection
- :pymod:`docket.stages`        – stage adjacency table + graph audit (NetworkX)
- :pymod:`docket.workflow`      – case-level state machine
- :pymod:`docket.reporting`     – portfolio and per-case summaries
- :pymod:`docket.alerts`        – reminder schedule
- :pymod:`docket.serialization` – JSON round-trip (pydantic)
- :pymod:`docket.case_store`    – in-memory snapshot registry
- :pymod:`docket.db`            – SQLite snapshot store (SQLModel)
- :pymod:`docket.viz`           – plotting helpers (bar chart + stage graph)

Quick start
-----------
>>> from datetime import date, datetime
>>> from docket.models import Stage
>>> from docket.workflow import open_case, transition
>>> holidays = frozenset({date(2025, 6, 30)})
>>> s = open_case("case-7", "hr", datetime(2025, 6, 27, 9), holidays)
>>> s = transition(s, Stage.RECEPTION, "hr", datetime(2025, 6, 27, 10), holidays)
>>> [str(d.end_date) for d in s.deadlines]
['2025-07-03', '2025-07-03']
"""

__all__ = [
    "models",
    "workdays",
    "holidays",
    "templates",
    "deadlines",
    "extensions",
    "stages",
    "workflow",
    "reporting",
    "alerts",
    "serialization",
    "case_store",
    "db",
    "viz",
]

__version__ = "0.1.0"
