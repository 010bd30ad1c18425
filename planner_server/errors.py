# -*- coding: utf-8 -*-
"""
Exception types raised by the planner core.

Interface layers (the REST service, the MCP tools and the CLI) translate
these into their own error reporting; none of them is fatal to a session.
"""
from __future__ import annotations


class PlannerError(Exception):
    """Base class for all planner errors."""


class ValidationError(PlannerError):
    """A create/update request failed validation. No state was changed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(PlannerError):
    """An update referenced an id that is not in the store."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} '{entity_id}' not found")
        self.kind = kind
        self.entity_id = entity_id


class ParseError(PlannerError):
    """A stored date or time string could not be converted."""


class PersistenceError(PlannerError):
    """Reading or writing a storage slot failed."""


class ExportError(PlannerError):
    """Generating or sharing an exported document failed."""

    NOTICE = "Không thể xuất file Excel"

    def __init__(self, cause: str = "") -> None:
        super().__init__(self.NOTICE)
        self.cause = cause
