"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidViewModeError(DomainException):
    """View mode is neither daily nor weekly"""

    pass


class InvalidPaymentMethodError(DomainException):
    """Payment method filter contains unknown or duplicated values"""

    pass


class PeriodNotFoundError(DomainException):
    """Referenced period does not exist in the store"""

    pass


class BudgetNotFoundError(DomainException):
    """Referenced budget does not exist in the store"""

    pass


class BudgetExpansionError(DomainException):
    """A budget's stored configuration cannot be expanded into installments"""

    def __init__(self, message: str, budget_id: str | None = None):
        super().__init__(message)
        self.budget_id = budget_id


class InvalidRecurrenceConfigError(BudgetExpansionError):
    """Recurrence frequency names an unknown policy or has bad cadence values"""

    pass


class InvalidStartDayError(BudgetExpansionError):
    """Resolved start day falls outside 1-31"""

    pass


class InvalidBudgetAmountError(BudgetExpansionError):
    """Budget total is negative"""

    pass


class DataStoreError(DomainException):
    """External store query failed"""

    pass
