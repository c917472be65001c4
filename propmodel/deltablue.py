"""Incremental DeltaBlue-style planning over a constraint graph."""

from __future__ import annotations

from .graph import Constraint, ConstraintGraph, Method, Variable

_IN_PROGRESS = 1
_DONE = 2


class CycleError(ValueError):
    """Raised when the solution graph contains a cycle."""


def _constraint_at(graph: ConstraintGraph, index: int) -> Constraint:
    if not 0 <= index < len(graph.constraints):
        raise IndexError(f"constraint index {index} out of range")
    return graph.constraints[index]


def enable_constraint(graph: ConstraintGraph, index: int) -> None:
    """Enable the constraint at ``index``, replanning the graph if it is blocked."""
    constraint = _constraint_at(graph, index)

    if not constraint.is_blocked():
        constraint.enable()
        return

    chosen = constraint.find_max_priority_method()
    reverse_path(graph, chosen.output)
    constraint.satisfy(chosen)

    detect_cycle(graph, chosen.output)
    recalculate_forces(graph, chosen.output)


def disable_constraint(graph: ConstraintGraph, index: int) -> None:
    """Disable the constraint at ``index`` and let the others take over its variables."""
    constraint = _constraint_at(graph, index)

    if constraint.is_stay:
        disable_stay(graph, index)
        return

    if not constraint.is_satisfied:
        constraint.disable()
        return

    constraint.unsatisfy()
    undefined = constraint.variables[0]
    graph.mark_stay_defined(undefined)
    recalculate_forces(graph, undefined)

    for position, candidate in enumerate(list(graph.constraints)):
        if candidate.is_enabled and not candidate.is_satisfied:
            enable_constraint(graph, position)


def reverse_path(graph: ConstraintGraph, variable: Variable) -> None:
    """Flip the chain of methods that carries ``variable``'s force back to its source.

    The constraint at the far end of the chain gives way to a stay, and every
    method along the chain is replaced by the sibling method that writes the
    previous variable on the path.
    """
    end_force = variable.force
    current = variable
    path: list[Method] = []

    while current.defining_constraint().priority != end_force:
        for method in current.defining_constraint().methods:
            if method.output.force == end_force and not method.is_selected():
                current = method.output
                path.append(method)
                break
        else:
            raise RuntimeError(
                f"no method carries force {end_force} from variable {current.name!r}"
            )

    current.defining_constraint().unsatisfy()
    graph.mark_stay_defined(current)

    for method in reversed(path):
        method.constraint.unsatisfy()
        method.constraint.satisfy(method)


def recalculate_forces(graph: ConstraintGraph, start: Variable) -> None:
    """Recompute the force of ``start`` and of everything downstream of it."""
    visited: set[Variable] = set()

    def visit(variable: Variable) -> None:
        visited.add(variable)
        constraint = variable.defining_constraint()
        variable.force = max(
            [
                constraint.priority,
                *(
                    method.output.force
                    for method in constraint.methods
                    if method.output is not variable
                ),
            ]
        )
        for method in list(variable.dependent_methods):
            if method.output not in visited:
                visit(method.output)

    visit(start)


def detect_cycle(graph: ConstraintGraph, start: Variable) -> None:
    """Raise :class:`CycleError` if the solution graph has a cycle reachable from ``start``."""
    state: dict[Variable, int] = {}

    def visit(variable: Variable) -> None:
        state[variable] = _IN_PROGRESS
        for method in list(variable.dependent_methods):
            target = method.output
            mark = state.get(target)
            if mark == _IN_PROGRESS:
                raise CycleError("Cycle found")
            if mark is None:
                visit(target)
        state[variable] = _DONE

    visit(start)


def disable_stay(graph: ConstraintGraph, index: int) -> None:
    """Replace the stay at ``index`` by a fresh, weaker stay on the same variable."""
    old_stay = _constraint_at(graph, index)
    variable = old_stay.variables[0]

    graph.add_constraint(Constraint.stay(variable, graph.new_stay_priority()))
    enable_constraint(graph, len(graph.constraints) - 1)

    graph.constraints[index] = graph.constraints.pop()
    graph.stay_edges[variable] = graph.constraints[index]