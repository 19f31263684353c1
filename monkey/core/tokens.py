"""Token kinds and the Token value produced by the lexer.

Tokens are immutable once produced. Each token remembers where it started in the source (1-based line and column),
but position is only used for diagnostics: two tokens are equal when their kind and literal are equal.
"""

from enum import Enum, auto


class TokenType(Enum):
    """Every lexeme category the lexer can produce."""
    ILLEGAL = auto()
    EOF = auto()

    INT = auto()
    STRING = auto()
    IDENT = auto()

    ASSIGN = auto()
    EQ = auto()
    NOT_EQ = auto()
    BANG = auto()
    OR = auto()
    AND = auto()
    LT = auto()
    GT = auto()

    PLUS = auto()
    MINUS = auto()
    ASTERISK = auto()
    FSLASH = auto()
    CARROT = auto()

    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()

    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()

    LET = auto()
    RETURN = auto()
    FUNCTION = auto()
    IF = auto()
    ELSE = auto()
    TRUE = auto()
    FALSE = auto()


KEYWORDS = {
    "let": TokenType.LET,
    "return": TokenType.RETURN,
    "fn": TokenType.FUNCTION,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}


class Token:
    """A single lexeme: its kind and the exact source text it was read from."""
    __slots__ = ("kind", "literal", "line", "column")

    def __init__(self, kind, literal, line=0, column=0):
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "literal", literal)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "column", column)

    @staticmethod
    def lookup_ident(ident):
        """Resolves a run of letters against the keyword set."""
        return KEYWORDS.get(ident, TokenType.IDENT)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self):
        return f"Token({self.kind.name}, {self.literal!r})"

    def __str__(self):
        return f"{self.kind.name} - {self.literal}"

    def __eq__(self, other):
        return isinstance(other, Token) and self.kind == other.kind and self.literal == other.literal

    def __hash__(self):
        return hash((self.kind, self.literal))
