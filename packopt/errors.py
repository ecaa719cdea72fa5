# packopt/errors.py


class PackOptimizerError(Exception):
    """Base class for every error the optimizer reports to its callers."""


class InvalidQuantity(PackOptimizerError):
    """The requested order quantity is not a positive integer."""


class InvalidPackSizes(PackOptimizerError):
    """The pack-size catalog is empty, or holds a non-positive or duplicate size."""


class Infeasible(PackOptimizerError):
    """No reachable total was found between the order quantity and the search ceiling."""
