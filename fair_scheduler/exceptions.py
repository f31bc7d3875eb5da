"""Custom exceptions for the fair scheduler"""


class SchedulerException(Exception):
    """Base exception for the fair scheduler"""
    pass


class ConfigurationError(SchedulerException):
    """Raised when configuration or input data is invalid"""
    pass


class InfeasibleRoundError(ConfigurationError):
    """Raised when a round admits zero valid lineups under the validation rules"""

    def __init__(self, round_index: int, permutations: int):
        self.round_index = round_index
        self.permutations = permutations
        super().__init__(
            f"Round {round_index} has no valid lineups "
            f"({permutations:,} orderings examined)"
        )

    def __reduce__(self):
        return (self.__class__, (self.round_index, self.permutations))


class ComboIndexError(SchedulerException):
    """Raised when a combo index or index vector is out of range or inexact"""
    pass


class IncompleteSearchError(SchedulerException):
    """Raised when a search finished without scanning the whole combo space"""
    pass
