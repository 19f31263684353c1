"""Runtime object model for the monkey language.

Every value produced by evaluation is a MonkeyObject. Two of the variants are not user-visible values but control-flow
signals riding the same channel: ReturnValue (unwrapped at the nearest function-call boundary) and Error (propagated
unchanged to the program's final result). "nil" is represented by None.

Integer, String and Boolean are Hashable: they reduce to a HashKey and may be used as Hash keys.
"""

from abc import ABC, abstractmethod
from collections import namedtuple
from enum import Enum

HashKey = namedtuple("HashKey", ["type", "value"])
HashPair = namedtuple("HashPair", ["key", "value"])


class ObjectType(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    ARRAY = "ARRAY"
    HASH = "HASH"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"

    def __str__(self):
        return self.value


class MonkeyObject(ABC):
    """Superclass of every runtime value."""
    type = None

    @abstractmethod
    def inspect(self):
        """Display form shown to the user."""

    def __repr__(self):
        return f"{type(self).__name__}({self.inspect()!r})"


class Hashable(ABC):
    """Capability of values that can key a Hash."""

    @abstractmethod
    def hash_key(self):
        """Stable key: equal values of the same type give equal keys."""


class Integer(MonkeyObject, Hashable):
    type = ObjectType.INTEGER

    def __init__(self, value):
        self.value = value

    def inspect(self):
        return str(self.value)

    def hash_key(self):
        return HashKey(self.type, self.value)

    def __eq__(self, other):
        return isinstance(other, Integer) and self.value == other.value

    def __hash__(self):
        return hash(self.hash_key())


class Boolean(MonkeyObject, Hashable):
    """Only ever instantiated twice: use TRUE, FALSE or Boolean.of."""
    type = ObjectType.BOOLEAN

    def __init__(self, value):
        self.value = value

    @staticmethod
    def of(value):
        return TRUE if value else FALSE

    def inspect(self):
        return "true" if self.value else "false"

    def hash_key(self):
        return HashKey(self.type, int(self.value))


TRUE = Boolean(True)
FALSE = Boolean(False)


class String(MonkeyObject, Hashable):
    type = ObjectType.STRING

    def __init__(self, value):
        self.value = value

    def inspect(self):
        return self.value

    def hash_key(self):
        return HashKey(self.type, self.value)

    def __eq__(self, other):
        return isinstance(other, String) and self.value == other.value

    def __hash__(self):
        return hash(self.hash_key())


def _display(obj):
    return "nil" if obj is None else obj.inspect()


class Array(MonkeyObject):
    type = ObjectType.ARRAY

    def __init__(self, elements):
        self.elements = elements

    def inspect(self):
        return "[" + ", ".join(_display(element) for element in self.elements) + "]"


class Hash(MonkeyObject):
    """Maps HashKey -> HashPair(original key object, value)."""
    type = ObjectType.HASH

    def __init__(self, pairs=None):
        self.pairs = pairs if pairs is not None else {}

    def get(self, key):
        """Value stored under the Hashable key, or None if absent."""
        pair = self.pairs.get(key.hash_key())
        return pair.value if pair is not None else None

    def inspect(self):
        return "{" + ", ".join(f"{_display(key)}: {_display(value)}" for key, value in self.pairs.values()) + "}"


class Function(MonkeyObject):
    """A closure: parameters and body of a FunctionLiteral plus the Environment it was evaluated in."""
    type = ObjectType.FUNCTION

    def __init__(self, parameters, body, env):
        self.parameters = parameters
        self.body = body
        self.env = env  # shared, not copied

    def inspect(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"fn({params}) {self.body}"


class BuiltIn(MonkeyObject):
    """Native function: called with the list of already-evaluated arguments, returns a MonkeyObject or None."""
    type = ObjectType.BUILTIN

    def __init__(self, name, fn):
        self.name = name
        self.fn = fn

    def __call__(self, args):
        return self.fn(args)

    def inspect(self):
        return "builtin function"


class ReturnValue(MonkeyObject):
    type = ObjectType.RETURN_VALUE

    def __init__(self, value):
        self.value = value

    def inspect(self):
        return _display(self.value)


class Error(MonkeyObject):
    """Evaluation failure. token is the node token that raised it, for diagnostics."""
    type = ObjectType.ERROR

    def __init__(self, message, token=None):
        self.message = message
        self.token = token

    def inspect(self):
        return self.message

    def __eq__(self, other):
        return isinstance(other, Error) and self.message == other.message

    def __hash__(self):
        return hash(self.message)
