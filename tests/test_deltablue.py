from dataclasses import dataclass

import pytest

from propmodel.deltablue import (
    CycleError,
    detect_cycle,
    disable_constraint,
    disable_stay,
    enable_constraint,
    recalculate_forces,
    reverse_path,
)
from propmodel.graph import Constraint, ConstraintGraph, Method, Variable


@dataclass
class Booking:
    graph: ConstraintGraph
    start: Variable
    end: Variable
    length: Variable
    main: Constraint
    length_method: Method
    end_method: Method


def _booking(end_value=15):
    graph = ConstraintGraph()
    start = Variable(1, "start_day")
    end = Variable(end_value, "end_day")
    length = Variable(14, "vacation_length")
    for variable in (start, end, length):
        graph.add_variable(variable)

    main = Constraint([start, end, length], 1)
    length_method = Method(
        lambda: setattr(length, "value", end.value - start.value), [start, end], length, main
    )
    end_method = Method(
        lambda: setattr(end, "value", start.value + length.value), [start, length], end, main
    )
    main.add_method(length_method)
    main.add_method(end_method)
    graph.add_constraint(main)

    for variable in (start, end, length):
        graph.add_constraint(Constraint.stay(variable, graph.new_stay_priority()))
        graph.mark_stay_defined(variable)

    return Booking(graph, start, end, length, main, length_method, end_method)


def test_enable_blocked_constraint_selects_method_with_strongest_output():
    booking = _booking(end_value=0)
    enable_constraint(booking.graph, 0)

    assert booking.main.selected_method is booking.end_method
    assert booking.end.defining_method is booking.end_method
    assert booking.end_method in booking.start.dependent_methods
    assert booking.end_method in booking.length.dependent_methods
    assert booking.end.force == booking.length.force

    booking.graph.process_methods()
    assert booking.end.value == 15


def test_enable_unblocked_constraint_only_enables():
    graph = ConstraintGraph()
    a, b = Variable(1, "a"), Variable(2, "b")
    graph.add_variable(a)
    graph.add_variable(b)
    constraint = Constraint([a, b], 5)
    constraint.add_method(Method(lambda: None, [a], b, constraint))
    graph.add_constraint(constraint)
    constraint.disable()

    enable_constraint(graph, 0)

    assert constraint.is_enabled is True
    assert constraint.selected_method is None
    assert b.defining_method is None


def test_enable_constraint_out_of_range():
    booking = _booking()
    with pytest.raises(IndexError):
        enable_constraint(booking.graph, len(booking.graph.constraints))


def test_cycle_is_detected_when_enabling():
    graph = ConstraintGraph()
    start, end = Variable(1, "start_day"), Variable(15, "end_day")
    graph.add_variable(start)
    graph.add_variable(end)
    constraint = Constraint([start, end], 1)
    constraint.add_method(Method(lambda: None, [start, end], start, constraint))
    graph.add_constraint(constraint)
    for variable in (start, end):
        graph.add_constraint(Constraint.stay(variable, graph.new_stay_priority()))
        graph.mark_stay_defined(variable)

    with pytest.raises(CycleError, match="Cycle found"):
        enable_constraint(graph, 0)


def test_detect_cycle_on_hand_wired_loop():
    graph = ConstraintGraph()
    a, b = Variable(0, "a"), Variable(0, "b")
    first = Constraint([a, b], 1)
    second = Constraint([a, b], 1)
    forward = Method(lambda: None, [a], b, first)
    backward = Method(lambda: None, [b], a, second)
    forward.satisfy()
    backward.satisfy()

    with pytest.raises(CycleError):
        detect_cycle(graph, a)


def test_disable_stay_replaces_stay_with_weaker_one():
    booking = _booking()
    graph = booking.graph
    enable_constraint(graph, 0)

    index = graph.find_stay_index(booking.length)
    old_stay = graph.constraints[index]
    count = len(graph.constraints)

    disable_stay(graph, index)

    new_stay = graph.constraints[index]
    assert len(graph.constraints) == count
    assert new_stay is not old_stay
    assert new_stay.is_stay
    assert new_stay.priority < old_stay.priority
    assert graph.stay_edges[booking.length] is new_stay
    assert booking.length.defining_method.constraint is new_stay
    assert booking.length.force == new_stay.priority
    assert booking.end.force == booking.length.force

    booking.length.value = 30
    graph.process_methods()
    assert booking.end.value == 31
    assert booking.start.value == 1


def test_disable_constraint_dispatches_stay():
    booking = _booking()
    graph = booking.graph
    enable_constraint(graph, 0)
    index = graph.find_stay_index(booking.start)
    old_stay = graph.constraints[index]

    disable_constraint(graph, index)

    assert graph.constraints[index] is not old_stay
    assert graph.stay_edges[booking.start] is graph.constraints[index]


def test_disable_unsatisfied_regular_constraint_disables_it():
    booking = _booking()
    enable_constraint(booking.graph, 0)

    disable_constraint(booking.graph, 0)

    assert booking.main.is_enabled is False
    assert booking.main.is_satisfied is False
    assert booking.end.defining_method is booking.end_method


def test_disable_satisfied_constraint_releases_its_output():
    booking = _booking()
    graph = booking.graph
    enable_constraint(graph, 0)
    booking.main.is_satisfied = True

    disable_constraint(graph, 0)

    assert booking.end.defining_method is None
    assert booking.end_method not in booking.start.dependent_methods
    assert booking.end_method not in booking.length.dependent_methods
    assert booking.start.defining_method.constraint is graph.stay_edges[booking.start]
    assert booking.start.force == graph.stay_edges[booking.start].priority
    assert all(constraint.is_enabled for constraint in graph.constraints)


def test_reverse_path_flips_methods_along_chain():
    booking = _booking()
    graph = booking.graph
    enable_constraint(graph, 0)

    reverse_path(graph, booking.end)

    assert booking.main.selected_method is booking.length_method
    assert booking.length.defining_method is booking.length_method
    assert booking.end.defining_method is None
    assert booking.length_method in booking.end.dependent_methods
    assert booking.end_method not in booking.length.dependent_methods


def test_reverse_path_on_stay_defined_variable_keeps_stay():
    booking = _booking()
    stay = booking.graph.stay_edges[booking.start]

    reverse_path(booking.graph, booking.start)

    assert booking.start.defining_method.constraint is stay
    assert booking.start.force == stay.priority


def test_recalculate_forces_restores_force_from_siblings():
    booking = _booking()
    graph = booking.graph
    enable_constraint(graph, 0)
    expected = booking.end.force
    booking.end.force = 0

    recalculate_forces(graph, booking.end)

    assert booking.end.force == expected
    assert booking.end.force == booking.length.force