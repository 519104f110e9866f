"""
docket.errors
=============

Typed failures raised by the workflow engine.

Every engine operation is a synchronous function, so a failure is simply
raised to the immediate caller.  The engine never catches or logs these;
presenting them is the job of the API / CLI layers.
"""

from __future__ import annotations


class WorkflowError(ValueError):
    """Base class for every error raised by :pymod:`docket`."""


class InvalidTransition(WorkflowError):
    """
    Illegal stage change, or a mutation of a deadline that is already
    ``completed``.
    """


class InvalidTemplate(WorkflowError):
    """A deadline template is missing its name, day-count policy or stage."""


class OutOfRangeInput(WorkflowError):
    """Negative day counts or an extension outside the permitted range."""


class DeadlineNotFound(WorkflowError, LookupError):
    """No deadline with the requested id exists in the case."""

    def __init__(self, deadline_id: str) -> None:
        super().__init__(f"unknown deadline {deadline_id!r}")
        self.deadline_id = deadline_id


class ExtensionRequestNotFound(WorkflowError, LookupError):
    """No extension request with the requested id exists in the case."""

    def __init__(self, request_id: str) -> None:
        super().__init__(f"unknown extension request {request_id!r}")
        self.request_id = request_id
