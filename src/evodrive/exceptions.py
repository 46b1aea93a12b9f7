class EvodriveError(Exception):
    """Base for all evodrive exceptions."""

    pass


class ShapeMismatchError(EvodriveError, ValueError):
    """A genome, input vector or fitness list does not have the expected length."""

    def __init__(self, what: str, expected, actual):
        self.expected = expected
        self.actual   = actual
        super().__init__(f"{what}: expected {expected}, got {actual}")


class EmptyPopulationError(EvodriveError, ValueError):
    """An operation that needs at least one individual received none."""

    pass


class InvalidConfigurationError(EvodriveError, ValueError):
    """Configuration values that cannot be used to build a network or population."""

    pass
