"""Scope chain for the WeaR interpreter."""

from wear.lang.error import WearRuntimeError


class Environment:
    """One frame of the lexical scope chain: its own bindings, the names among them that are constant, and a link to
    the enclosing frame (None for the global frame).

    Frames captured by a closure stay alive for as long as the closure does; Python's garbage collector takes care of
    the cycle between a frame and the functions defined in it.
    """

    def __init__(self, parent=None):
        self.values = {}
        self.constants = set()
        self.parent = parent

    def child(self):
        """Returns a new frame enclosed by this one."""
        return Environment(self)

    def define(self, name, value, is_const=False):
        """Binds name in this frame. Shadowing a name of an enclosing frame is allowed; redefining a name of this frame
        is not.
        """
        if name in self.values:
            raise WearRuntimeError(f"Variable '{name}' is already defined in this scope.")

        self.values[name] = value
        if is_const:
            self.constants.add(name)

    def resolve(self, name):
        """Returns the closest frame (this one or an enclosing one) that binds name, or None."""
        env = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def get(self, name):
        env = self.resolve(name)
        if env is None:
            raise WearRuntimeError(f"Undefined variable '{name}'.")
        return env.values[name]

    def assign(self, name, value):
        """Rebinds name in the closest frame that binds it, unless it is constant there."""
        env = self.resolve(name)
        if env is None:
            raise WearRuntimeError(f"Undefined variable '{name}'.")
        if name in env.constants:
            raise WearRuntimeError(f"Cannot reassign constant '{name}'.")
        env.values[name] = value

    def has(self, name):
        return self.resolve(name) is not None

    def __repr__(self):
        depth = 0
        env = self.parent
        while env is not None:
            depth += 1
            env = env.parent
        return f"Environment(depth={depth}, names={sorted(self.values)})"
