from __future__ import annotations


class BoosterError(Exception):
    """Base exception class for all Booster-specific errors.

    This is the root of the Booster exception hierarchy. Catching it at the
    CLI boundary handles every expected failure while letting system
    exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            tasks = builder.build(config.tasks)
        except BoosterError as e:
            click.echo(f"error: {e.message}", err=True)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the BoosterError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
