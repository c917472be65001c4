"""Property models: named variables kept consistent by multi-way constraints."""

from __future__ import annotations

import enum
from typing import Any, Callable, Iterable, Sequence

from . import deltablue
from .graph import Constraint, ConstraintGraph, Method, Variable

AnyFunction = Callable[[Sequence[Any]], Any]


class VariableKind(enum.Enum):
    """The role a variable plays in a property model."""

    DATA = "data"
    VALUE = "value"
    OUTPUT = "output"


class PropertyModel:
    """A solved constraint graph whose variables are addressed by name.

    Models are assembled with :class:`Builder`; afterwards values are changed
    with :meth:`set` and the graph recomputes everything that depends on them.
    """

    def __init__(self) -> None:
        self.constraint_graph = ConstraintGraph()
        self._variables: dict[str, Variable] = {}
        self._names_by_kind: dict[VariableKind, list[str]] = {kind: [] for kind in VariableKind}

    def __repr__(self) -> str:
        return f"PropertyModel(variables={list(self._variables)})"

    def set(self, name: str, value: Any) -> None:
        """Give ``name`` a new value, replan the graph and recompute dependents."""
        variable = self._variable(name)
        stay_index = self.constraint_graph.find_stay_index(variable)
        deltablue.disable_constraint(self.constraint_graph, stay_index)
        variable.value = value
        self.constraint_graph.process_methods()

    def get(self, name: str) -> Any:
        """Return the current value of ``name``."""
        return self._variable(name).value

    def enable_constraint(self, index: int) -> None:
        """Enable the constraint at ``index`` and recompute the model."""
        deltablue.enable_constraint(self.constraint_graph, index)
        self.constraint_graph.process_methods()

    def disable_constraint(self, index: int) -> None:
        """Disable the constraint at ``index`` and recompute the model."""
        deltablue.disable_constraint(self.constraint_graph, index)
        self.constraint_graph.process_methods()

    def _variable(self, name: str) -> Variable:
        try:
            return self._variables[name]
        except KeyError:
            raise KeyError(f"unknown variable {name!r}") from None

    def _add_variable(self, kind: VariableKind, name: str, value: Any) -> None:
        if name in self._variables:
            raise ValueError(f"variable {name!r} already exists")
        variable = Variable(value, name)
        self._variables[name] = variable
        self.constraint_graph.add_variable(variable)
        self._names_by_kind[VariableKind(kind)].append(name)

    def _bind_variables(self, names: Iterable[str]) -> list[Variable]:
        return [self._variable(name) for name in names]

    def _bind_method(
        self, function: AnyFunction, inputs: Iterable[str], output: str
    ) -> Callable[[], None]:
        sources = self._bind_variables(inputs)
        target = self._variable(output)

        def run() -> None:
            target.value = function([source.value for source in sources])

        return run

    def _add_constraint(self, constraint: Constraint) -> None:
        self.constraint_graph.add_constraint(constraint)

    def _add_stay_constraints(self) -> None:
        graph = self.constraint_graph
        for variable in self._variables.values():
            graph.add_constraint(Constraint.stay(variable, graph.new_stay_priority()))
            graph.mark_stay_defined(variable)

    def _prepare_solution_graph(self) -> None:
        graph = self.constraint_graph
        for index, constraint in enumerate(list(graph.constraints)):
            if constraint.is_enabled and not constraint.is_stay:
                deltablue.enable_constraint(graph, index)


class Builder:
    """Assembles a :class:`PropertyModel` step by step.

    Methods added with :meth:`add_method` belong to the constraint most
    recently started with :meth:`add_constraint`.
    """

    def __init__(self) -> None:
        self._model: PropertyModel | None = PropertyModel()
        self._current: Constraint | None = None

    def _require_model(self) -> PropertyModel:
        if self._model is None:
            raise RuntimeError("the model has already been extracted from this builder")
        return self._model

    def add_variable(self, kind: VariableKind, name: str, value: Any) -> None:
        """Add a variable named ``name`` with an initial ``value``."""
        self._require_model()._add_variable(kind, name, value)

    def add_constraint(
        self, variables: Iterable[str], priority: int, enabled: bool = True
    ) -> None:
        """Start a new constraint over the named variables."""
        model = self._require_model()
        if self._current is not None:
            model._add_constraint(self._current)
            self._current = None

        constraint = Constraint(model._bind_variables(variables), priority)
        if enabled:
            constraint.enable()
        else:
            constraint.disable()
        self._current = constraint

    def add_method(self, function: AnyFunction, inputs: Iterable[str], output: str) -> None:
        """Add a method computing ``output`` from ``inputs`` to the current constraint.

        ``function`` receives the list of input values and returns the new
        output value.
        """
        model = self._require_model()
        if self._current is None:
            raise RuntimeError("add_constraint must be called before add_method")
        input_names = list(inputs)
        run = model._bind_method(function, input_names, output)
        self._current.add_method(
            Method(run, model._bind_variables(input_names), model._variable(output), self._current)
        )

    def extract(self) -> PropertyModel:
        """Finish the model, plan its solution graph and hand it over."""
        model = self._require_model()
        if self._current is not None:
            model._add_constraint(self._current)
            self._current = None

        model._add_stay_constraints()
        model._prepare_solution_graph()
        self._model = None
        return model