"""Errors raised while resolving and provisioning a table."""


class TableSpecError(ValueError):
    """Table configuration failed validation. Nothing was submitted."""


class MissingRequiredField(TableSpecError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field}: required field is missing or empty")


class InvalidEnumValue(TableSpecError):
    def __init__(self, field: str, value: object, allowed: tuple[str, ...]) -> None:
        self.field = field
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"{field}: {value!r} is not one of {', '.join(allowed)}"
        )


class InvalidFieldType(TableSpecError):
    def __init__(self, field: str, value: object, expected: str) -> None:
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"{field}: expected {expected}, got {type(value).__name__} {value!r}")


class PartialIndexSpecification(TableSpecError):
    """Only one of the two secondary index inputs was supplied."""

    def __init__(self, present: str, missing: str) -> None:
        self.present = present
        self.missing = missing
        super().__init__(
            f"{missing}: required when {present} is set (secondary index needs both)"
        )


class ReconciliationFailure(RuntimeError):
    """The provisioning engine could not realize the desired state.

    The engine's own diagnostics have already been written to the terminal;
    this only records which stack failed and how.
    """

    def __init__(self, stack: str, returncode: int, command: str = "up") -> None:
        self.stack = stack
        self.returncode = returncode
        self.command = command
        super().__init__(f"pulumi {command} failed for stack {stack} (exit code {returncode})")
