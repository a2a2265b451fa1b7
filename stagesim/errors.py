class SimulationError(ValueError):
    """Base class for every error the core reports to a caller."""


class InvalidConfiguration(SimulationError):
    pass


class EmptyOrMissingInput(SimulationError):
    pass
