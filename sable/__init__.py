# Core type aliases for Sable's data model.
# Runtime values use plain Python types where one fits (int, bool, str) and
# small slotted classes elsewhere (Nil, Cons, Generator, Function, Lambda).
#
# Naming guidance:
# - SExpression: Use in reader/loader/checker code to denote syntactic forms.
# - SableValue:  Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any`; the reader never produces runtime-only values
# and the evaluator never hands AST nodes back as values.

from typing import Any, Callable

# Runtime value alias
SableValue = Any
# Syntactic forms produced by the reader
SExpression = Any

# Evaluator function type: Python evaluator used inside special forms
EvaluatorFn = Callable[..., SableValue]

__version__ = "0.3.0"
