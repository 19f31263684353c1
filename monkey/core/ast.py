"""Abstract syntax tree for the monkey language.

Nodes are pure data: each node owns its children exclusively and keeps the token that introduced it. The only
behavior is the textual rendering (str), which parenthesizes every prefix/infix/index expression so that precedence and
associativity are explicit, and which parses back into a structurally equal tree.

Structural equality (==) compares node kinds and children but ignores the introducing token, so that a tree and the
tree parsed from its rendering compare equal.
"""

from abc import ABC, abstractmethod


class Node(ABC):
    """Superclass of every statement and expression node."""

    def __init__(self, token):
        self.token = token

    def token_literal(self):
        return self.token.literal if self.token is not None else ""

    @abstractmethod
    def __str__(self):
        """Rendering used for debugging, tests, and the --ast flag."""

    def _fields(self):
        return {name: value for name, value in vars(self).items() if name != "token"}

    def __eq__(self, other):
        return type(self) is type(other) and self._fields() == other._fields()

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}('{self}')"


class Statement(Node, ABC):
    """Node in statement position."""


class Expression(Node, ABC):
    """Node in expression position."""


def _render_statements(statements):
    return "".join(f"{stmt}\n" for stmt in statements)


class Program(Node):
    """Root of every parse: an ordered list of statements."""

    def __init__(self, statements=None):
        super().__init__(None)
        self.statements = statements if statements is not None else []

    def token_literal(self):
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self):
        return _render_statements(self.statements)


class ExpressionStatement(Statement):

    def __init__(self, token, expression=None):
        super().__init__(token)
        self.expression = expression

    def __str__(self):
        return str(self.expression) if self.expression is not None else ""


class LetStatement(Statement):

    def __init__(self, token, name=None, value=None):
        super().__init__(token)
        self.name = name
        self.value = value

    def __str__(self):
        return f"{self.token_literal()} {self.name} = {self.value}"


class ReturnStatement(Statement):

    def __init__(self, token, value=None):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return f"{self.token_literal()} {self.value}"


class BlockStatement(Statement):

    def __init__(self, token, statements=None):
        super().__init__(token)
        self.statements = statements if statements is not None else []

    def __str__(self):
        return "{\n" + _render_statements(self.statements) + "}"


class Identifier(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return self.value


class IntegerLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return self.token_literal()


class StringLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return f'"{self.value}"'


class BooleanLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return "true" if self.value else "false"


class PrefixExpression(Expression):

    def __init__(self, token, operator, right=None):
        super().__init__(token)
        self.operator = operator
        self.right = right

    def __str__(self):
        return f"({self.operator}{self.right})"


class InfixExpression(Expression):

    def __init__(self, token, left, operator, right=None):
        super().__init__(token)
        self.left = left
        self.operator = operator
        self.right = right

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


class IfExpression(Expression):
    """if (condition) { consequence } else alternative, where alternative is a block or a nested if."""

    def __init__(self, token, condition=None, consequence=None, alternative=None):
        super().__init__(token)
        self.condition = condition
        self.consequence = consequence
        self.alternative = alternative

    def __str__(self):
        result = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            result += f" else {self.alternative}"
        return result


class FunctionLiteral(Expression):

    def __init__(self, token, parameters=None, body=None):
        super().__init__(token)
        self.parameters = parameters if parameters is not None else []
        self.body = body

    def __str__(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


class CallExpression(Expression):

    def __init__(self, token, function, arguments=None):
        super().__init__(token)
        self.function = function
        self.arguments = arguments if arguments is not None else []

    def __str__(self):
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.function}({args})"


class ArrayLiteral(Expression):

    def __init__(self, token, elements=None):
        super().__init__(token)
        self.elements = elements if elements is not None else []

    def __str__(self):
        return "[" + ", ".join(str(element) for element in self.elements) + "]"


class IndexExpression(Expression):

    def __init__(self, token, left, index=None):
        super().__init__(token)
        self.left = left
        self.index = index

    def __str__(self):
        return f"({self.left}[{self.index}])"


class HashLiteral(Expression):
    """Ordered (key expression, value expression) pairs. Order carries no meaning beyond duplicate-key overwrites."""

    def __init__(self, token, pairs=None):
        super().__init__(token)
        self.pairs = pairs if pairs is not None else []

    def __str__(self):
        return "{" + ", ".join(f"{key}: {value}" for key, value in self.pairs) + "}"
