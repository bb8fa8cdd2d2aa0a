from __future__ import annotations


class TemplateError(ValueError):
    """Raised when template rendering fails."""


class MissingClosingBrace(TemplateError):
    def __init__(self, position: int):
        super().__init__(f"missing `}}` for placeholder opened at offset {position}")
        self.position = position


class EmptyExpression(TemplateError):
    def __init__(self, position: int):
        super().__init__(f"empty template expression at offset {position}")
        self.position = position


class InvalidExpressionSyntax(TemplateError):
    def __init__(self, expression: str, position: int):
        super().__init__(f"invalid template expression syntax at offset {position}: {expression!r}")
        self.expression = expression
        self.position = position


class ReservedKeyword(TemplateError):
    def __init__(self, name: str):
        super().__init__(f"`{name}` is a reserved keyword")
        self.name = name


class VariableNotFound(TemplateError):
    def __init__(self, name: str, position: int | None = None):
        super().__init__(f"variable {name} not found")
        self.name = name
        self.position = position


class UnsupportedValueShape(TemplateError):
    """Raised when a value of the wrong variant reaches a rendering site."""

    def __init__(self, name: str, shape: str):
        super().__init__(f"variable {name} is a {shape} and cannot be rendered here")
        self.name = name
        self.shape = shape


class LoopVariableNotFound(TemplateError):
    def __init__(self, name: str, position: int):
        super().__init__(f"loop collection {name} not found (foreach at offset {position})")
        self.name = name
        self.position = position


class UnmatchedForEach(TemplateError):
    def __init__(self, position: int):
        super().__init__(f"`foreach` at offset {position} has no matching `endfor`")
        self.position = position


class UnmatchedEndFor(TemplateError):
    def __init__(self, position: int):
        super().__init__(f"`endfor` at offset {position} has no open `foreach`")
        self.position = position


class UnsupportedValueType(TemplateError, TypeError):
    """Raised when a Python object has no template value counterpart."""
