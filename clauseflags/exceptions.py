# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by the clauseflags parser.

Errors fall into three groups, matching when they can happen:

- Schema errors are programmer mistakes in the command definition
  (misplaced variadic positional, required + default, duplicate names).
  They are raised once while the schema tree is built.
- Parse errors are user input problems (unknown flag, missing argument,
  conversion failure) and name the offending flag token.
- Validation errors are raised after parsing (missing required flag,
  rejected value) and name the flag and, for local flags, the clause.

Completion never raises any of these; failures on that path degrade to an
empty candidate list.

Exception Hierarchy:
- ClauseflagsError
    ├── SchemaError
    ├── ParseError
    └── ValidationError
"""


class ClauseflagsError(Exception):
    """Base exception for the clauseflags package."""


class SchemaError(ClauseflagsError):
    """Exception raised when a command schema violates a structural rule."""


class ParseError(ClauseflagsError):
    """Exception raised when the token stream cannot be parsed."""

    def __init__(self, flag: str = "", message: str = "") -> None:
        self.flag = flag
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.flag:
            return f"flag {self.flag}: {self.message}"
        return self.message


class ValidationError(ClauseflagsError):
    """Exception raised when parsed values fail required or validator checks."""

    def __init__(
        self, flag: str = "", message: str = "", clause_index: int | None = None
    ) -> None:
        self.flag = flag
        self.message = message
        self.clause_index = clause_index
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.flag:
            return f"validation failed: {self.message}"
        where = self.flag
        if self.clause_index is not None:
            where = f"{self.flag} (clause {self.clause_index})"
        return f"validation failed for {where}: {self.message}"
