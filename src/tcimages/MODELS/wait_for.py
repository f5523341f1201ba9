"""
Models describing the conditions a container runtime waits for before
treating a container as ready.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class WaitForKind(str, Enum):
    """
    Kinds of readiness conditions.
    """
    NOTHING = "nothing"
    STDOUT_MESSAGE = "stdout_message"
    STDERR_MESSAGE = "stderr_message"
    DURATION = "duration"
    HEALTHCHECK = "healthcheck"
    EXIT = "exit"


class WaitFor(BaseModel):
    """
    A single readiness condition. This is plain data: the runtime that
    receives it is responsible for observing it.
    """
    model_config = ConfigDict(frozen=True)

    kind: WaitForKind = WaitForKind.NOTHING
    message: Optional[str] = None
    duration: Optional[float] = None  # seconds
    exit_code: Optional[int] = None

    @classmethod
    def nothing(cls) -> "WaitFor":
        return cls(kind=WaitForKind.NOTHING)

    @classmethod
    def message_on_stdout(cls, message: str) -> "WaitFor":
        """Wait until the container writes `message` to stdout."""
        return cls(kind=WaitForKind.STDOUT_MESSAGE, message=message)

    @classmethod
    def message_on_stderr(cls, message: str) -> "WaitFor":
        """Wait until the container writes `message` to stderr."""
        return cls(kind=WaitForKind.STDERR_MESSAGE, message=message)

    @classmethod
    def seconds(cls, length: float) -> "WaitFor":
        return cls(kind=WaitForKind.DURATION, duration=float(length))

    @classmethod
    def millis(cls, length: int) -> "WaitFor":
        return cls(kind=WaitForKind.DURATION, duration=length / 1000.0)

    @classmethod
    def healthcheck(cls) -> "WaitFor":
        """Wait until the image's own HEALTHCHECK reports healthy."""
        return cls(kind=WaitForKind.HEALTHCHECK)

    @classmethod
    def exit(cls, code: Optional[int] = None) -> "WaitFor":
        """Wait until the container exits, optionally with a given code."""
        return cls(kind=WaitForKind.EXIT, exit_code=code)

    def describe(self) -> str:
        """
        Short human readable form, e.g. ``stderr: "ready"``.
        """
        if self.kind == WaitForKind.STDOUT_MESSAGE:
            return f'stdout: "{self.message}"'
        if self.kind == WaitForKind.STDERR_MESSAGE:
            return f'stderr: "{self.message}"'
        if self.kind == WaitForKind.DURATION:
            return f"sleep: {self.duration:g}s"
        if self.kind == WaitForKind.EXIT:
            if self.exit_code is None:
                return "exit"
            return f"exit: {self.exit_code}"
        return self.kind.value
