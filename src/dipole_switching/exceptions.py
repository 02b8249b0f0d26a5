class PolarizationInvariantError(Exception):
    """A cell flip was requested that would corrupt the polarization counter."""
    def __init__(self, message="Cell polarization already matches the requested direction."):
        super().__init__(message)


class InvalidConfigurationError(ValueError):
    """Simulation parameters failed validation at construction or reset."""
    def __init__(self, message="Invalid simulation configuration."):
        super().__init__(message)
