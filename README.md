# propmodel

`propmodel` keeps a set of related values consistent. You describe named
variables and the multi-way constraints between them. Each constraint lists
several methods, and any one of them can restore the constraint by computing one
variable from the others. When you set a variable, an incremental DeltaBlue-style
solver plans again which method each constraint uses. Then every selected method
runs in dependency order.

## Installing

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Example

```python
from propmodel.model import Builder, VariableKind
from propmodel.helpers import make_any_function


def vacation_length(start_day, end_day):
    return end_day - start_day


def end_day(start_day, vacation_length):
    return start_day + vacation_length


builder = Builder()
builder.add_variable(VariableKind.DATA, "start_day", 1)
builder.add_variable(VariableKind.DATA, "end_day", 15)
builder.add_variable(VariableKind.DATA, "vacation_length", 14)

builder.add_constraint(["start_day", "end_day", "vacation_length"], 1, True)
builder.add_method(make_any_function(vacation_length), ["start_day", "end_day"], "vacation_length")
builder.add_method(make_any_function(end_day), ["start_day", "vacation_length"], "end_day")

model = builder.extract()

model.set("vacation_length", 30)
assert model.get("end_day") == 31

model.set("start_day", 10)
assert model.get("end_day") == 40
```

## Building a model

`propmodel.model.Builder` puts a model together in steps:

- `add_variable(kind, name, value)` adds a variable with a starting value.
  `kind` is a `VariableKind` (`DATA`, `VALUE` or `OUTPUT`). A name that is used
  twice raises `ValueError`.
- `add_constraint(variables, priority, enabled=True)` starts a new constraint
  over the named variables.
- `add_method(function, inputs, output)` adds a method to the constraint that
  was started last. It raises `RuntimeError` if no constraint has been started.
- `extract()` adds a stay constraint for each variable and plans the solution
  graph. Then it returns the `PropertyModel`. After this the builder cannot be
  used again, and any call to it raises `RuntimeError`.

A method gets its input values as one list and returns the new output value.
`propmodel.helpers.make_any_function` wraps an ordinary function or bound method
so that it takes that list. The wrapper raises `TypeError` if the list does not
hold exactly as many values as the function has positional parameters.

## Using a model

- `PropertyModel.set(name, value)` sets a variable, plans again, and recomputes
  the variables that depend on it.
- `PropertyModel.get(name)` returns the current value.
- Both raise `KeyError` if the name is unknown.

Constraints are numbered from 0, in the order they were added.
`PropertyModel.enable_constraint(index)` and
`PropertyModel.disable_constraint(index)` turn them on and off. The model plans
again and recomputes each time. An index out of range raises `IndexError`.

If the selected methods form a cycle, `propmodel.deltablue.CycleError` is raised.
This can also happen in `extract()`. `CycleError` is a subclass of `ValueError`.

The lower-level parts can also be used directly:

- `propmodel.graph` holds `Variable`, `Method`, `Constraint` and
  `ConstraintGraph`.
- `propmodel.deltablue` holds the planning functions: `enable_constraint`,
  `disable_constraint`, `reverse_path`, `recalculate_forces`, `detect_cycle` and
  `disable_stay`.

## Looking at the solver's state

```python
from propmodel.printer import format_graph, print_graph

print_graph(model.constraint_graph)
text = format_graph(model.constraint_graph)
```

The output lists every variable with its value, its force, the constraint that
writes it and the constraints that read it. It then lists every constraint with
its strength, whether it is marked satisfied, its active method and all of its
methods.

`print_graph` writes to standard output unless you pass a `file`.

## What it does not do

`propmodel` is a library only. It has no command-line tool and no user
interface. It does not save models: a model exists only in memory and is built
in code with `Builder`.