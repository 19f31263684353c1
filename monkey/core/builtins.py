"""Built-in functions.

Builtins is a read-only name -> BuiltIn mapping, built once and handed to the Evaluator. Handlers receive the already
evaluated argument list and report misuse as Error objects, never as Python exceptions. Output from puts goes through
the injected writer, so the driver decides where it ends up.
"""

from collections.abc import Mapping

from monkey.core.objects import Array, BuiltIn, Error, Integer, ObjectType, String


def _arity_error(name, args, want):
    return Error(f"wrong number of arguments to {name}: got {len(args)}, want {want}")


def _type_error(name, obj):
    return Error(f"argument to {name} not supported, got {obj.type if obj is not None else 'nil'}")


class Builtins(Mapping):
    """Registry of the native functions visible to every program."""

    def __init__(self, out=print):
        self.out = out
        self._table = {}

        for name, fn in [
            ("puts", self.puts),
            ("toStr", self.to_str),
            ("len", self.length),
            ("first", self.first),
            ("last", self.last),
            ("rest", self.rest),
            ("push", self.push),
        ]:
            self._table[name] = BuiltIn(name, fn)

    def __getitem__(self, name):
        return self._table[name]

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)

    def puts(self, args):
        """Writes the display forms of all arguments as one line. Returns nil."""
        self.out("".join("nil" if arg is None else arg.inspect() for arg in args))
        return None

    @staticmethod
    def to_str(args):
        if len(args) != 1:
            return _arity_error("toStr", args, 1)
        arg = args[0]
        return String("nil" if arg is None else arg.inspect())

    @staticmethod
    def length(args):
        if len(args) != 1:
            return _arity_error("len", args, 1)

        arg = args[0]
        if isinstance(arg, String):
            return Integer(len(arg.value))
        if isinstance(arg, Array):
            return Integer(len(arg.elements))
        return _type_error("len", arg)

    @staticmethod
    def _array_arg(name, args):
        """Returns (array, None) for a single Array argument, else (None, Error)."""
        if len(args) != 1:
            return None, _arity_error(name, args, 1)
        if args[0] is None or args[0].type is not ObjectType.ARRAY:
            return None, _type_error(name, args[0])
        return args[0], None

    @staticmethod
    def first(args):
        array, error = Builtins._array_arg("first", args)
        if error:
            return error
        return array.elements[0] if array.elements else None

    @staticmethod
    def last(args):
        array, error = Builtins._array_arg("last", args)
        if error:
            return error
        return array.elements[-1] if array.elements else None

    @staticmethod
    def rest(args):
        """Every element but the first, as a new Array. nil for an empty Array."""
        array, error = Builtins._array_arg("rest", args)
        if error:
            return error
        return Array(array.elements[1:]) if array.elements else None

    @staticmethod
    def push(args):
        """New Array with the element appended. The argument Array is left untouched."""
        if len(args) != 2:
            return _arity_error("push", args, 2)

        array, element = args
        if array is None or array.type is not ObjectType.ARRAY:
            return _type_error("push", array)
        return Array(array.elements + [element])
