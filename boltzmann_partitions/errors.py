"""errors.py — Exceptions raised by the sampling engine."""

from __future__ import annotations


class PartitionSamplingError(RuntimeError):
    """Base exception for sampling failures.

    ``retryable`` tells the caller whether repeating the same call (with a
    larger budget or a fresh generator) can succeed.
    """

    retryable: bool = False


class InvalidPolicy(PartitionSamplingError):
    """The restriction policy is not a strictly increasing positive sequence."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class InfeasibleTarget(PartitionSamplingError):
    """No partition of the target weight exists under the policy."""

    def __init__(self, target: int, reason: str) -> None:
        super().__init__(f"no partition of {target} exists: {reason}")
        self.target = target


class ExhaustedRetries(PartitionSamplingError):
    """A conditioner used up its attempt budget without accepting a draw."""

    retryable = True

    def __init__(self, method: str, target: int, attempts: int) -> None:
        super().__init__(
            f"{method} gave up on target {target} after {attempts} attempts"
        )
        self.method = method
        self.target = target
        self.attempts = attempts
