"""Constraint graph primitives: variables, methods, constraints and the graph."""

from __future__ import annotations

from typing import Any, Callable, Iterable

_INITIAL_STAY_PRIORITY = 1_000_000_000


class Variable:
    """A value in the graph, with the method that defines it and those reading it."""

    def __init__(self, value: Any = None, name: str = "") -> None:
        self.value = value
        self.name = name
        self.dependent_methods: list[Method] = []
        self.defining_method: Method | None = None
        self.force = 0

    def __repr__(self) -> str:
        return f"Variable(name={self.name!r}, value={self.value!r}, force={self.force})"

    def add_dependent_method(self, method: Method) -> None:
        """Record that ``method`` reads this variable."""
        self.dependent_methods.append(method)

    def remove_dependent_method(self, method: Method) -> None:
        """Forget one occurrence of ``method`` among the readers, if present."""
        for position, candidate in enumerate(self.dependent_methods):
            if candidate is method:
                del self.dependent_methods[position]
                return

    def defining_constraint(self) -> Constraint:
        """Return the constraint whose selected method writes this variable."""
        if self.defining_method is None:
            raise RuntimeError(f"variable {self.name!r} has no defining method")
        return self.defining_method.constraint


class Method:
    """One way of satisfying a constraint: computes ``output`` from ``inputs``."""

    def __init__(
        self,
        function: Callable[[], Any],
        inputs: Iterable[Variable],
        output: Variable,
        constraint: Constraint,
    ) -> None:
        self.function = function
        self.inputs = list(inputs)
        self.output = output
        self.constraint = constraint

    def __repr__(self) -> str:
        names = ", ".join(variable.name for variable in self.inputs)
        return f"Method({names} -> {self.output.name})"

    def process(self) -> None:
        """Run the method's function."""
        self.function()

    def is_selected(self) -> bool:
        """Whether this is the method currently selected by its constraint."""
        return self is self.constraint.selected_method

    def satisfy(self) -> None:
        """Wire this method into the graph as the definer of its output."""
        self.output.defining_method = self
        for variable in self.inputs:
            variable.add_dependent_method(self)

    def unsatisfy(self) -> None:
        """Remove this method's edges from the graph."""
        self.output.defining_method = None
        for variable in self.inputs:
            variable.remove_dependent_method(self)


class Constraint:
    """A relation between variables, enforced by exactly one selected method."""

    def __init__(self, variables: Iterable[Variable], priority: int) -> None:
        self.variables = list(variables)
        self.priority = priority
        self.methods: list[Method] = []
        self.selected_method: Method | None = None
        self.is_enabled = True
        self.is_satisfied = False
        self.is_stay = False

    def __repr__(self) -> str:
        kind = "stay" if self.is_stay else "constraint"
        return f"Constraint({kind}, priority={self.priority}, methods={len(self.methods)})"

    @classmethod
    def stay(cls, variable: Variable, priority: int) -> Constraint:
        """Build a stay constraint: a no-op method keeping ``variable`` as it is."""
        if variable is None:
            raise ValueError("a stay constraint needs a variable")
        constraint = cls([variable], priority)
        constraint.is_stay = True
        constraint.is_enabled = True
        constraint.add_method(Method(lambda: None, [], variable, constraint))
        return constraint

    def add_method(self, method: Method) -> None:
        self.methods.append(method)

    def process_selected_method(self) -> None:
        """Run the selected method."""
        if self.selected_method is None:
            raise RuntimeError("constraint has no selected method")
        self.selected_method.process()

    def is_blocked(self) -> bool:
        """Whether some variable is held by a force stronger than this constraint."""
        return any(variable.force > self.priority for variable in self.variables)

    def enable(self) -> None:
        self.is_enabled = True

    def disable(self) -> None:
        self.is_satisfied = False
        self.is_enabled = False

    def satisfy_by_method_index(self, index: int) -> None:
        """Select the method at ``index`` and wire it into the graph."""
        if not 0 <= index < len(self.methods):
            raise IndexError(f"method index {index} out of range")
        self.satisfy(self.methods[index])

    def satisfy(self, method: Method) -> None:
        """Select ``method`` and wire it into the graph."""
        if method is None:
            raise ValueError("cannot satisfy a constraint without a method")
        self.selected_method = method
        method.satisfy()

    def unsatisfy(self) -> None:
        """Remove the selected method's edges from the graph."""
        if self.selected_method is None:
            raise RuntimeError("constraint has no selected method")
        self.selected_method.unsatisfy()

    def find_max_priority_method(self) -> Method:
        """Return the first method whose output carries the greatest force."""
        if not self.methods:
            raise ValueError("constraint has no methods")
        best = self.methods[0]
        for method in self.methods:
            if method.output.force > best.output.force:
                best = method
        return best


class ConstraintGraph:
    """Owns the variables and constraints, and evaluates the solution graph."""

    def __init__(self) -> None:
        self.variables: list[Variable] = []
        self.constraints: list[Constraint] = []
        self.stay_edges: dict[Variable, Constraint] = {}
        self._stay_priority = _INITIAL_STAY_PRIORITY

    def add_constraint(self, constraint: Constraint) -> None:
        if constraint.is_stay:
            self.stay_edges.setdefault(constraint.variables[0], constraint)
        self.constraints.append(constraint)

    def add_variable(self, variable: Variable) -> None:
        self.variables.append(variable)

    def mark_stay_defined(self, variable: Variable) -> None:
        """Let the variable's stay constraint define it, taking the stay's force."""
        constraint = self.stay_edges[variable]
        constraint.satisfy_by_method_index(0)
        variable.force = constraint.priority

    def new_stay_priority(self) -> int:
        """Return a fresh stay priority, lower than every one handed out before."""
        self._stay_priority -= 1
        return self._stay_priority

    def find_stay_index(self, variable: Variable) -> int:
        """Return the index of the stay constraint on ``variable``."""
        for index, constraint in enumerate(self.constraints):
            if constraint.is_stay and constraint.variables[0] is variable:
                return index
        raise LookupError("Stay not found")

    def process_methods(self) -> None:
        """Run every defining method in topological order of the solution graph."""
        visited = {variable: False for variable in self.variables}
        order: list[Method | None] = []

        def visit(variable: Variable) -> None:
            visited[variable] = True
            for method in variable.dependent_methods:
                if not visited[method.output]:
                    visit(method.output)
            order.append(variable.defining_method)

        for variable in self.variables:
            if not visited[variable]:
                visit(variable)

        for method in reversed(order):
            if method is not None:
                method.process()