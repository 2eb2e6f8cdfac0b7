class LedgerError(Exception):
    """Base class for recoverable billing rule violations. A rejected operation never mutates state."""


class UsageExceeded(LedgerError):
    """Raised when recorded usage would push an account past its allocation."""

    def __init__(self, account_id, requested, remaining):
        self.account_id = account_id
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Account {account_id}: requested {requested}, remaining {remaining}"
        )


class InvalidUsageAmount(LedgerError):
    """Raised when a usage amount is negative or not a finite number."""

    def __init__(self, account_id, amount):
        self.account_id = account_id
        self.amount = amount
        super().__init__(
            f"Account {account_id}: usage amount must be a non-negative number, got {amount}"
        )


class InvalidBillIndex(LedgerError):
    """Raised when a payment targets a bill the account does not have."""

    def __init__(self, account_id, bill_index, bill_count):
        self.account_id = account_id
        self.bill_index = bill_index
        self.bill_count = bill_count
        super().__init__(
            f"Account {account_id}: no bill at index {bill_index} ({bill_count} bills on record)"
        )


class InvalidMaintenanceCost(LedgerError):
    """Raised when a maintenance cost is negative or not a finite number."""

    def __init__(self, account_id, cost):
        self.account_id = account_id
        self.cost = cost
        super().__init__(
            f"Account {account_id}: maintenance cost must be a non-negative number, got {cost}"
        )


class DuplicateID(LedgerError):
    """Raised when an account id is already registered in the ledger."""

    def __init__(self, account_id):
        self.account_id = account_id
        super().__init__(f"Account id already exists: {account_id}")


class AccountNotFound(LedgerError):
    def __init__(self, account_id):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class InvalidTrade(LedgerError):
    """Raised when a trade quantity or price is negative or not a finite number."""

    def __init__(self, quantity, price_per_unit):
        self.quantity = quantity
        self.price_per_unit = price_per_unit
        super().__init__(
            f"Trade quantity and price must be non-negative numbers, got quantity={quantity} price={price_per_unit}"
        )


class InvalidRate(LedgerError):
    """Raised when the rate table misses a category or holds a non-positive price."""

    def __init__(self, category, rate):
        self.category = category
        self.rate = rate
        super().__init__(f"Rate for {category} must be positive, got {rate}")
