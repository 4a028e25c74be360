"""Chat commands that can be registered with a command helper."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

ObjectExecutor = Callable[[Any, Sequence[str]], Any]
CommandFunction = Callable[[list], Any]


class Command(ABC):
    """A named command with a description, run with a list of arguments."""

    def __init__(self, name: str = "", description: str = "") -> None:
        self.name = name
        self.description = description

    def parse(self, name: str, args: Sequence[str]) -> Any:
        """Run the command if ``name`` is its lower-cased name, else return False."""
        if name == self.name.lower():
            return self.execute(args)
        return False

    @abstractmethod
    def execute(self, args: Sequence[str]) -> Any:
        """Run the command and return its result, or None when it does not apply."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class ObjectCommand(Command):
    """A command that calls an executor with a bound object and the arguments."""

    def __init__(self, name: str = "", description: str = "") -> None:
        super().__init__(name, description)
        self._executor: Optional[ObjectExecutor] = None
        self._object: Any = None

    def set_executor(self, executor: ObjectExecutor, obj: Any) -> None:
        """Bind the executor and the object it is called with."""
        self._executor = executor
        self._object = obj

    def execute(self, args: Sequence[str]) -> Any:
        if self._executor is None:
            raise RuntimeError(f"command {self.name!r} has no executor")
        return self._executor(self._object, args)


class FunctionCommand(Command):
    """A command backed by a plain callable that receives the argument list."""

    def __init__(
        self,
        name: str = "",
        description: str = "",
        function: Optional[CommandFunction] = None,
    ) -> None:
        super().__init__(name, description)
        self.function = function

    def execute(self, args: Sequence[str]) -> Any:
        if self.function is None:
            return None
        return self.function(list(args))