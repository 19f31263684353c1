"""Operator-precedence (Pratt) parser for the monkey language.

Every token kind that can start an expression registers a prefix parslet, and every token kind that can continue one
registers an infix parslet together with its binding power. parse_expression then reads:

```
left = prefix(current token)
while next token binds tighter than the caller's binding power:
    left = infix(left, next token)
```

Right-associative operators (^, &&, ||) parse their right operand at one less than their own binding power, so that an
operator of the same precedence can still attach on the right: 2 ^ 3 ^ 4 is 2 ^ (3 ^ 4) while 2 - 3 - 4 is (2 - 3) - 4.

Parse errors are never raised. They are collected (with the offending token) and parsing carries on best-effort, so a
single pass can surface several of them. A program that produced any error must not be evaluated.
"""

from abc import ABC, abstractmethod
from enum import IntEnum

from monkey.core import ast
from monkey.core.lexical import Lexer
from monkey.core.tokens import TokenType

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class BindingPower(IntEnum):
    """Totally ordered precedence levels, lowest first."""
    LOWEST = 10
    EQUALS = 11
    OR = 20
    AND = 30
    COMPARISON = 35
    SUM = 40
    PRODUCT = 50
    POWER = 60
    PREFIX = 70
    CALL = 71
    INDEX = 72


class PrefixParslet(ABC):
    """Parses an expression that starts with the current token."""

    @abstractmethod
    def parse(self, parser, token):
        """Given the parser (current token == token), returns the parsed expression or None on error."""


class InfixParslet(ABC):
    """Parses an expression that continues an already-parsed left operand."""

    def __init__(self, binding_power, is_right=False):
        self.binding_power = binding_power
        self.is_right = is_right

    @property
    def right_binding_power(self):
        """Binding power used for the right-hand recursive parse."""
        return self.binding_power - 1 if self.is_right else self.binding_power

    @abstractmethod
    def parse(self, parser, left, token):
        """Given the left operand and the operator token (now the current token), returns the combined expression."""


class IntegerParslet(PrefixParslet):

    def parse(self, parser, token):
        value = int(token.literal)
        if not INT64_MIN <= value <= INT64_MAX:
            parser.error(f"could not parse {token.literal} as integer", token)
            return None
        return ast.IntegerLiteral(token, value)


class StringParslet(PrefixParslet):

    def parse(self, parser, token):
        return ast.StringLiteral(token, token.literal)


class BooleanParslet(PrefixParslet):

    def parse(self, parser, token):
        return ast.BooleanLiteral(token, token.kind is TokenType.TRUE)


class IdentifierParslet(PrefixParslet):

    def parse(self, parser, token):
        return ast.Identifier(token, token.literal)


class PrefixOperatorParslet(PrefixParslet):
    """Unary - and !."""

    def parse(self, parser, token):
        parser.next_token()
        operand = parser.parse_expression(BindingPower.PREFIX)
        return ast.PrefixExpression(token, token.literal, operand)


class GroupedParslet(PrefixParslet):
    """( expression ): no node of its own, the rendering re-adds the parentheses."""

    def parse(self, parser, token):
        parser.next_token()
        expression = parser.parse_expression(BindingPower.LOWEST)

        if not parser.expect_peek(TokenType.RPAREN):
            return None
        return expression


class IfParslet(PrefixParslet):

    def parse(self, parser, token):
        if not parser.expect_peek(TokenType.LPAREN):
            return None

        parser.next_token()
        condition = parser.parse_expression(BindingPower.LOWEST)

        if not parser.expect_peek(TokenType.RPAREN) or not parser.expect_peek(TokenType.LBRACE):
            return None

        expression = ast.IfExpression(token, condition, parser.parse_block_statement())

        if parser.peek_token_is(TokenType.ELSE):
            parser.next_token()

            if parser.peek_token_is(TokenType.LBRACE):
                parser.next_token()
                expression.alternative = parser.parse_block_statement()
            elif parser.peek_token_is(TokenType.IF):
                parser.next_token()
                # only the nested if itself: trailing operators belong to the outer if
                expression.alternative = self.parse(parser, parser.cur_token)
            else:
                parser.peek_error(TokenType.LBRACE)
                return None

        return expression


class FunctionLiteralParslet(PrefixParslet):

    def parse(self, parser, token):
        if not parser.expect_peek(TokenType.LPAREN):
            return None

        parameters = self.parse_parameters(parser)
        if parameters is None or not parser.expect_peek(TokenType.LBRACE):
            return None

        return ast.FunctionLiteral(token, parameters, parser.parse_block_statement())

    @staticmethod
    def parse_parameters(parser):
        """Comma-separated identifiers up to the closing paren. Current token is the opening paren."""
        identifiers = []

        if parser.peek_token_is(TokenType.RPAREN):
            parser.next_token()
            return identifiers

        while True:
            if not parser.expect_peek(TokenType.IDENT):
                return None
            identifiers.append(ast.Identifier(parser.cur_token, parser.cur_token.literal))

            if not parser.peek_token_is(TokenType.COMMA):
                break
            parser.next_token()

        if not parser.expect_peek(TokenType.RPAREN):
            return None
        return identifiers


class ArrayLiteralParslet(PrefixParslet):

    def parse(self, parser, token):
        elements = parser.parse_expression_list(TokenType.RBRACKET)
        if elements is None:
            return None
        return ast.ArrayLiteral(token, elements)


class HashLiteralParslet(PrefixParslet):

    def parse(self, parser, token):
        pairs = []

        while not parser.peek_token_is(TokenType.RBRACE):
            parser.next_token()
            key = parser.parse_expression(BindingPower.LOWEST)

            if not parser.expect_peek(TokenType.COLON):
                return None

            parser.next_token()
            pairs.append((key, parser.parse_expression(BindingPower.LOWEST)))

            if not parser.peek_token_is(TokenType.RBRACE) and not parser.expect_peek(TokenType.COMMA):
                return None

        parser.next_token()
        return ast.HashLiteral(token, pairs)


class InfixOperatorParslet(InfixParslet):
    """Every binary operator: builds an InfixExpression."""

    def parse(self, parser, left, token):
        parser.next_token()
        right = parser.parse_expression(self.right_binding_power)
        return ast.InfixExpression(token, left, token.literal, right)


class CallParslet(InfixParslet):

    def __init__(self):
        super().__init__(BindingPower.CALL)

    def parse(self, parser, left, token):
        arguments = parser.parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return ast.CallExpression(token, left, arguments)


class IndexParslet(InfixParslet):

    def __init__(self):
        super().__init__(BindingPower.INDEX)

    def parse(self, parser, left, token):
        parser.next_token()
        index = parser.parse_expression(BindingPower.LOWEST)

        if not parser.expect_peek(TokenType.RBRACKET):
            return None
        return ast.IndexExpression(token, left, index)


class Parser:
    """Builds a Program from a Lexer with one token of lookahead (cur_token + peek_token)."""
    LINE_SENSITIVE = (TokenType.LPAREN, TokenType.LBRACKET)

    def __init__(self, lexer):
        self.lexer = lexer
        self.diagnostics = []  # list of (message, offending token)

        self.prefix_parslets = {}
        self.infix_parslets = {}

        self.register_prefix(TokenType.INT, IntegerParslet())
        self.register_prefix(TokenType.STRING, StringParslet())
        self.register_prefix(TokenType.IDENT, IdentifierParslet())
        self.register_prefix(TokenType.TRUE, BooleanParslet())
        self.register_prefix(TokenType.FALSE, BooleanParslet())
        self.register_prefix(TokenType.MINUS, PrefixOperatorParslet())
        self.register_prefix(TokenType.BANG, PrefixOperatorParslet())
        self.register_prefix(TokenType.LPAREN, GroupedParslet())
        self.register_prefix(TokenType.IF, IfParslet())
        self.register_prefix(TokenType.FUNCTION, FunctionLiteralParslet())
        self.register_prefix(TokenType.LBRACKET, ArrayLiteralParslet())
        self.register_prefix(TokenType.LBRACE, HashLiteralParslet())

        self.register_infix(TokenType.OR, InfixOperatorParslet(BindingPower.OR, is_right=True))
        self.register_infix(TokenType.AND, InfixOperatorParslet(BindingPower.AND, is_right=True))
        self.register_infix(TokenType.EQ, InfixOperatorParslet(BindingPower.EQUALS))
        self.register_infix(TokenType.NOT_EQ, InfixOperatorParslet(BindingPower.EQUALS))
        self.register_infix(TokenType.LT, InfixOperatorParslet(BindingPower.COMPARISON))
        self.register_infix(TokenType.GT, InfixOperatorParslet(BindingPower.COMPARISON))
        self.register_infix(TokenType.PLUS, InfixOperatorParslet(BindingPower.SUM))
        self.register_infix(TokenType.MINUS, InfixOperatorParslet(BindingPower.SUM))
        self.register_infix(TokenType.ASTERISK, InfixOperatorParslet(BindingPower.PRODUCT))
        self.register_infix(TokenType.FSLASH, InfixOperatorParslet(BindingPower.PRODUCT))
        self.register_infix(TokenType.CARROT, InfixOperatorParslet(BindingPower.POWER, is_right=True))
        self.register_infix(TokenType.LPAREN, CallParslet())
        self.register_infix(TokenType.LBRACKET, IndexParslet())

        self.cur_token = None
        self.peek_token = None
        self.next_token()
        self.next_token()

    @classmethod
    def from_source(cls, source):
        return cls(Lexer(source))

    @property
    def errors(self):
        """Parse error messages, in the order they were found."""
        return [message for message, __ in self.diagnostics]

    @property
    def has_errors(self):
        return bool(self.diagnostics)

    def register_prefix(self, kind, parslet):
        self.prefix_parslets[kind] = parslet

    def register_infix(self, kind, parslet):
        self.infix_parslets[kind] = parslet

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind):
        return self.cur_token.kind is kind

    def peek_token_is(self, kind):
        return self.peek_token.kind is kind

    def expect_peek(self, kind):
        """Advances if the next token is of the given kind, otherwise records an error and stays put."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def error(self, message, token):
        self.diagnostics.append((f"{message} (line {token.line}, column {token.column})", token))

    def peek_error(self, kind):
        self.error(f"expected next token to be {kind.name}, got {self.peek_token.kind.name} instead",
                   self.peek_token)

    def peek_binding_power(self):
        """Binding power of the next token as an infix operator. A ( or [ opening a new line starts a new statement
        rather than a call or an index, so it does not bind at all.
        """
        if self.peek_token.kind in Parser.LINE_SENSITIVE and self.peek_token.line > self.cur_token.line:
            return BindingPower.LOWEST

        parslet = self.infix_parslets.get(self.peek_token.kind)
        return parslet.binding_power if parslet else BindingPower.LOWEST

    def parse_program(self):
        """Parses the whole token stream. Check errors before evaluating the result."""
        program = ast.Program()

        while not self.cur_token_is(TokenType.EOF):
            statement = self.parse_statement()
            if statement is not None:
                program.statements.append(statement)
            self.next_token()

        return program

    def parse_statement(self):
        """Dispatches on the current token: let, return, a stray ;, or a bare expression."""
        if self.cur_token_is(TokenType.LET):
            statement = self.parse_let_statement()
        elif self.cur_token_is(TokenType.RETURN):
            statement = self.parse_return_statement()
        elif self.cur_token_is(TokenType.SEMICOLON):
            return None
        else:
            statement = ast.ExpressionStatement(self.cur_token, self.parse_expression(BindingPower.LOWEST))

        if statement is not None and self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return statement

    def parse_let_statement(self):
        token = self.cur_token

        if not self.expect_peek(TokenType.IDENT):
            return None
        name = ast.Identifier(self.cur_token, self.cur_token.literal)

        if not self.expect_peek(TokenType.ASSIGN):
            return None

        self.next_token()
        return ast.LetStatement(token, name, self.parse_expression(BindingPower.LOWEST))

    def parse_return_statement(self):
        token = self.cur_token
        self.next_token()
        return ast.ReturnStatement(token, self.parse_expression(BindingPower.LOWEST))

    def parse_block_statement(self):
        """Statements up to the matching } (or end of input). Current token is the opening brace."""
        block = ast.BlockStatement(self.cur_token)
        self.next_token()

        while not self.cur_token_is(TokenType.RBRACE) and not self.cur_token_is(TokenType.EOF):
            statement = self.parse_statement()
            if statement is not None:
                block.statements.append(statement)
            self.next_token()

        if self.cur_token_is(TokenType.EOF):
            self.error("expected RBRACE to close block, got EOF instead", self.cur_token)
        return block

    def parse_expression_list(self, end):
        """Comma-separated expressions up to the end delimiter. Current token is the opening delimiter."""
        expressions = []

        if self.peek_token_is(end):
            self.next_token()
            return expressions

        self.next_token()
        expressions.append(self.parse_expression(BindingPower.LOWEST))

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            expressions.append(self.parse_expression(BindingPower.LOWEST))

        if not self.expect_peek(end):
            return None
        return expressions

    def parse_expression(self, binding_power):
        """Precedence-climbing core: keeps extending the expression while the next operator binds tighter."""
        prefix = self.prefix_parslets.get(self.cur_token.kind)
        if prefix is None:
            self.no_prefix_parslet_error(self.cur_token)
            return None

        left = prefix.parse(self, self.cur_token)

        while not self.peek_token_is(TokenType.EOF) and binding_power < self.peek_binding_power():
            infix = self.infix_parslets.get(self.peek_token.kind)
            if infix is None:
                return left

            self.next_token()
            left = infix.parse(self, left, self.cur_token)

        return left

    def no_prefix_parslet_error(self, token):
        message = f"no prefix parse function for {token.kind.name}"
        if token.kind is TokenType.ILLEGAL:
            message += f" {token.literal!r}"
        self.error(message, token)
