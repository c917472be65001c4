"""Human-readable dump of a constraint graph's state."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from .graph import Constraint, ConstraintGraph, Variable

_RULE = "-" * 40


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, str):
        return value
    return "?"


def _names(graph: ConstraintGraph) -> tuple[dict[Variable, str], dict[Constraint, str]]:
    variable_names = {
        variable: f"v{number}" for number, variable in enumerate(graph.variables, start=1)
    }
    constraint_names = {
        constraint: f"{'stay' if constraint.priority < 0 else 'c'}{number}"
        for number, constraint in enumerate(graph.constraints, start=1)
    }
    return variable_names, constraint_names


def format_graph(graph: ConstraintGraph) -> str:
    """Render the variables and constraints of ``graph`` as a text block."""
    variable_names, constraint_names = _names(graph)
    lines = [
        _RULE,
        "|        CONSTRAINT GRAPH STATE        |",
        "|--------------------------------------|",
        "|  VARIABLES:",
    ]

    for variable in graph.variables:
        lines.append(
            f"|    {variable_names[variable]} = {_format_value(variable.value)}"
            f" (priority: {variable.force})"
        )
        if variable.defining_method is not None:
            lines.append(f"|      <- from: {constraint_names[variable.defining_method.constraint]}")
        if variable.dependent_methods:
            targets = ", ".join(
                constraint_names[method.constraint] for method in variable.dependent_methods
            )
            lines.append(f"|      -> to: {targets}")

    lines.append("|")
    lines.append("|  CONSTRAINTS:")

    for constraint in graph.constraints:
        status = "SATISFIED" if constraint.is_satisfied else "PENDING"
        lines.append(
            f"|    {constraint_names[constraint]} [strength: {constraint.priority}, {status}]"
        )
        selected = constraint.selected_method
        if selected is not None:
            inputs = ", ".join(variable_names[variable] for variable in selected.inputs)
            lines.append(f"|      *active method*  {inputs} -> {variable_names[selected.output]}")
        for method in constraint.methods:
            inputs = ", ".join(variable_names[variable] for variable in method.inputs) or "none"
            lines.append(f"|      {inputs} -> {variable_names[method.output]}")

    lines.append(_RULE)
    return "\n".join(lines) + "\n"


def print_graph(graph: ConstraintGraph, file: TextIO | None = None) -> None:
    """Write :func:`format_graph` output to ``file`` (standard output by default)."""
    (file if file is not None else sys.stdout).write(format_graph(graph))