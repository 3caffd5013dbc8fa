"""
Typed Exception Hierarchy for the LP Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the kernel (the CLI, an HTTP layer, tests) must be able to tell a
bad query apart from an unavailable store or a rejected burn without parsing
message strings.  Every error therefore:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE attribute (machine-readable, API-safe)
  3. Carries structured DATA (not just a message string)

Example:
    try:
        history = service.get_balance_history(subject_id, start, end)
    except InvalidRangeError as e:
        api_response(code=e.code, start=e.range_start, end=e.range_end)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from LpKernelError:

    LpKernelError (base)
    |
    +-- QueryError
    |   +-- InvalidRangeError
    |   +-- UnknownGranularityError
    |   +-- InvalidPaginationError
    |
    +-- StoreError
    |   +-- StoreUnavailableError
    |
    +-- TokenError
    |   +-- TokenNotFoundError
    |   +-- UnauthorizedBurnError
    |   +-- InsufficientBalanceError
    |   +-- InvalidAmountError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Query           | INVALID_RANGE               | End before start, or malformed instant
                | UNKNOWN_GRANULARITY         | Interval not daily/weekly/monthly
                | INVALID_PAGINATION          | page or limit below 1
----------------|-----------------------------|-----------------------------------------
Store           | STORE_UNAVAILABLE           | Event or holdings store I/O failure
----------------|-----------------------------|-----------------------------------------
Token           | TOKEN_NOT_FOUND             | Burn of an unknown token_id
                | UNAUTHORIZED_BURN           | Token held by another subject
                | INSUFFICIENT_BALANCE        | Burn amount exceeds the holding
                | INVALID_AMOUNT              | Mint/burn amount not positive
----------------|-----------------------------|-----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION      | Update/delete of a ledger event

===============================================================================
HANDLING PATTERNS
===============================================================================

1. An empty event sequence is NOT an error.  The balance history comes back
   with an empty history and the oracle's current balance.

2. StoreUnavailableError is propagated unchanged by the orchestrator.  The
   kernel never retries a read and never returns a partial history.

3. ImmutabilityViolationError signals a programming error (something tried
   to rewrite the ledger).  Investigate, do not retry.
"""


class LpKernelError(Exception):
    """
    Base exception for all LP kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LP_KERNEL_ERROR"


# Query-related exceptions


class QueryError(LpKernelError):
    """Base exception for rejected balance-history or event queries."""

    code: str = "QUERY_ERROR"


class InvalidRangeError(QueryError):
    """Requested range is malformed or ends before it starts."""

    code: str = "INVALID_RANGE"

    def __init__(self, range_start, range_end, reason: str | None = None):
        self.range_start = range_start
        self.range_end = range_end
        self.reason = reason or "end before start"
        super().__init__(
            f"Invalid range [{range_start}, {range_end}]: {self.reason}"
        )


class UnknownGranularityError(QueryError):
    """Granularity value is outside the enumerated set."""

    code: str = "UNKNOWN_GRANULARITY"

    def __init__(self, value):
        self.value = value
        super().__init__(
            f"Unknown granularity: {value!r} (expected daily, weekly or monthly)"
        )


class InvalidPaginationError(QueryError):
    """Page or limit is below 1."""

    code: str = "INVALID_PAGINATION"

    def __init__(self, page: int, limit: int):
        self.page = page
        self.limit = limit
        super().__init__(f"Invalid pagination: page={page}, limit={limit}")


# Store-related exceptions


class StoreError(LpKernelError):
    """Base exception for collaborator store failures."""

    code: str = "STORE_ERROR"


class StoreUnavailableError(StoreError):
    """The event store or holdings store could not be read."""

    code: str = "STORE_UNAVAILABLE"

    def __init__(self, store: str, detail: str):
        self.store = store
        self.detail = detail
        super().__init__(f"Store unavailable ({store}): {detail}")


# Token-related exceptions


class TokenError(LpKernelError):
    """Base exception for mint/burn failures."""

    code: str = "TOKEN_ERROR"


class TokenNotFoundError(TokenError):
    """No holding exists for the given token_id."""

    code: str = "TOKEN_NOT_FOUND"

    def __init__(self, token_id: str):
        self.token_id = token_id
        super().__init__(f"Token not found: {token_id}")


class UnauthorizedBurnError(TokenError):
    """The token is held by a different subject."""

    code: str = "UNAUTHORIZED_BURN"

    def __init__(self, token_id: str, subject_id: str):
        self.token_id = token_id
        self.subject_id = subject_id
        super().__init__(
            f"Subject {subject_id} is not the holder of token {token_id}"
        )


class InsufficientBalanceError(TokenError):
    """Burn amount exceeds the amount held on the token."""

    code: str = "INSUFFICIENT_BALANCE"

    def __init__(self, token_id: str, held, requested):
        self.token_id = token_id
        self.held = held
        self.requested = requested
        super().__init__(
            f"Insufficient balance on token {token_id}: "
            f"held {held}, requested {requested}"
        )


class InvalidAmountError(TokenError):
    """Mint or burn amount is zero, negative, or not a number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Amount must be a positive decimal, got {amount!r}")


# Immutability exceptions


class ImmutabilityError(LpKernelError):
    """Base exception for append-only violations."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted to modify or delete an append-only record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, message: str, record_id=None):
        self.record_id = record_id
        super().__init__(message)
