"""Lexical scopes.

An Environment is one frame of name -> value bindings plus a reference to the frame it is enclosed by. Frames are
shared, never copied: a closure keeps a reference to the frame it was defined in, and later bindings made in that frame
are visible through it. This is what lets a function see its own let-bound name when it recurses.
"""


class Environment:
    """A mutable scope frame with an optional enclosing frame."""

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    @classmethod
    def enclosed(cls, outer):
        """New empty frame whose lookups fall back to outer."""
        return cls(outer)

    def __getitem__(self, name):
        """Walks outward through the enclosing frames. Raises KeyError if no frame binds name."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        raise KeyError(name)

    def set(self, name, value):
        """Binds name in this frame only, never in an enclosing one. Returns value."""
        self.store[name] = value
        return value

    def __repr__(self):
        return f"Environment({sorted(self.store)}, outer={self.outer!r})"
