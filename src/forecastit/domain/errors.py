"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class DuplicateEntryError(ConflictError):
    """An entry already exists for this rule, account and date."""


class TransferSyncError(DomainError):
    """The mirrored leg of a transfer could not be saved."""


class InvalidTransferRuleError(ValidationError):
    """A transfer rule points at the same account on both sides."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing recurring rule."""
    return f"Recurring rule {rule_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Transaction {entry_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_path_not_found(path: str) -> str:
    """Return message for missing category by path."""
    return f"Category '{path}' not found"


def duplicate_entry(rule_id: int, account_id: int, entry_date) -> str:
    """Return message for a second entry on an already generated slot."""
    return (
        f"Transaction for rule {rule_id} already exists for account {account_id} on {entry_date}"
    )


def same_transfer_accounts() -> str:
    """Return message for transfers that do not move money anywhere."""
    return "Destination account must be different from the source account"


def transfer_sync_failed(detail: str) -> str:
    """Return message when the linked transfer entry fails to save."""
    return f"Linked transfer transaction could not be saved: {detail}"


def account_delete_blocked(account_id: int, transfer_rule_count: int) -> str:
    """Return message when an account still backs transfer rules."""
    plural = "s" if transfer_rule_count != 1 else ""
    return (
        f"Cannot delete account {account_id}: it is used in {transfer_rule_count} "
        f"transfer rule{plural}. Delete or modify those rules first."
    )
