from __future__ import annotations


class SableError(Exception):
    """ Base class for all Sable errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        # Innermost frame first; extended as the error unwinds non-tail calls
        self.context: list[str] = []

    def add_context(self, name: str) -> None:
        self.context.append(name)

    def format(self) -> str:
        lines = [self.message]
        lines.extend(f"  in {name}" for name in self.context)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.message


class SableSyntaxError(SableError):
    """ Raised when there is a syntax error"""


class SableDispatchError(SableError):
    """ Raised when no clause of a function accepts the given arguments (or argument types)"""

    def __init__(self, function: str, rendered_args: list[str]):
        super().__init__(
            f"{function}: no matching function implementation found for [{' '.join(rendered_args)}]"
        )
        self.function = function
        self.rendered_args = rendered_args


class SableTypeError(SableError):
    """ Raised on a failed cast, a failed builtin argument check or an unknown type"""

    @classmethod
    def expected(cls, context: str, type_name: str, found: str, position: int) -> SableTypeError:
        return cls(
            f"{context}: Expected all {type_name} arguments, found {found} at position {position}"
        )


class SableRuntimeError(SableError):
    """ Raised for fatal evaluation failures"""


class SableUnboundSymbol(SableRuntimeError):
    """ Raised when a symbol is used before it is bound"""


class SableArityError(SableRuntimeError):
    """ Raised when the number of arguments passed to a function is incorrect"""


class SableArithmeticError(SableRuntimeError):
    """ Raised on division or modulo by zero"""


class SableEmptyListError(SableRuntimeError):
    """ Raised when forcing past the end of a list"""


class SableFrozenScope(SableRuntimeError):
    """ Raised when binding into a scope that has already been exited"""


class SableResourceError(SableError):
    """ Raised (or logged) when releasing a scoped resource fails"""
