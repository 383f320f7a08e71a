# errors.py


class InvariantViolation(AssertionError):
    """
    Raised when a caller breaks one of the store's structural invariants
    (same entity twice in a pairwise access, wrong-kind edge endpoint, ...).
    This is a bug in the caller, not a recoverable condition.
    """
