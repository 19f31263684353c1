"""Lexical analysis for the monkey language: turns raw source text into a flat stream of Tokens.

The lexer keeps a single cursor over the input and never looks more than one character ahead. Whitespace is skipped,
and anything it does not recognize becomes an ILLEGAL token carrying the offending text, so that the parser can report
it instead of the lexer failing.
"""

from monkey.core.tokens import Token, TokenType


class Lexer:
    """Stateful tokenizer: each call to next_token consumes and returns the next Token of the input."""
    WHITESPACE = " \t\n\r"

    SINGLE = {
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.ASTERISK,
        "/": TokenType.FSLASH,
        "^": TokenType.CARROT,
        "<": TokenType.LT,
        ">": TokenType.GT,
        ",": TokenType.COMMA,
        ":": TokenType.COLON,
        ";": TokenType.SEMICOLON,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
    }

    # first char: (second char, two-char kind, one-char kind or None if illegal alone)
    DOUBLE = {
        "=": ("=", TokenType.EQ, TokenType.ASSIGN),
        "!": ("=", TokenType.NOT_EQ, TokenType.BANG),
        "&": ("&", TokenType.AND, None),
        "|": ("|", TokenType.OR, None),
    }

    def __init__(self, source):
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1

    @property
    def char(self):
        """Character under the cursor, or "" at end of input."""
        return self.source[self.position] if self.position < len(self.source) else ""

    def peek_char(self):
        """Character after the cursor, or "" at end of input."""
        nxt = self.position + 1
        return self.source[nxt] if nxt < len(self.source) else ""

    def read_char(self):
        """Advances the cursor by one character, keeping line/column up to date."""
        if self.char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1

    def skip_whitespace(self):
        while self.char and self.char in Lexer.WHITESPACE:
            self.read_char()

    def _read_while(self, predicate):
        start = self.position
        while self.char and predicate(self.char):
            self.read_char()
        return self.source[start:self.position]

    @staticmethod
    def is_letter(char):
        return char.isalpha() or char == "_"

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    def read_string(self):
        """Reads a double-quoted string literal, cursor on the opening quote. Returns (kind, literal)."""
        start = self.position
        self.read_char()  # opening quote
        body = self._read_while(lambda char: char != '"')

        if not self.char:
            return TokenType.ILLEGAL, self.source[start:]

        self.read_char()  # closing quote
        return TokenType.STRING, body

    def next_token(self):
        """Returns the next Token of the input. Once the input is exhausted, every call returns an EOF token."""
        self.skip_whitespace()
        line, column = self.line, self.column
        char = self.char

        if not char:
            return Token(TokenType.EOF, "", line, column)

        if char in Lexer.DOUBLE:
            second, double_kind, single_kind = Lexer.DOUBLE[char]
            if self.peek_char() == second:
                self.read_char()
                self.read_char()
                return Token(double_kind, char + second, line, column)

            self.read_char()
            return Token(single_kind if single_kind else TokenType.ILLEGAL, char, line, column)

        if char in Lexer.SINGLE:
            self.read_char()
            return Token(Lexer.SINGLE[char], char, line, column)

        if char == '"':
            kind, literal = self.read_string()
            return Token(kind, literal, line, column)

        if Lexer.is_digit(char):
            return Token(TokenType.INT, self._read_while(Lexer.is_digit), line, column)

        if Lexer.is_letter(char):
            ident = self._read_while(Lexer.is_letter)
            return Token(Token.lookup_ident(ident), ident, line, column)

        self.read_char()
        return Token(TokenType.ILLEGAL, char, line, column)

    def __iter__(self):
        """Yields every remaining token, up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenType.EOF:
                return
