"""Exceptions raised by the change detector."""


class ChangeDetectionError(Exception):
    """Base class for errors that abort a change-detection run."""


class RootsNotFoundError(ChangeDetectionError, FileNotFoundError):
    """Neither the previous nor the current connector root exists."""

    def __init__(self, previous_root, current_root):
        self.previous_root = previous_root
        self.current_root = current_root
        super().__init__(
            f"Neither connector root exists: previous={previous_root}, current={current_root}"
        )


class RuleConfigError(ChangeDetectionError, ValueError):
    """A severity rule file could not be parsed into a rule table."""
