"""Motore di proiezione: ricorrenze, scadenze, proiezioni e rate."""
from financeme.services.projection.recurrence import (
    InvalidAmountError,
    InvalidDateError,
    InvalidRecurrenceError,
    Kind,
    Obligation,
    ObligationError,
    PaymentMethod,
    Recurrence,
    parse_amount,
    parse_money,
    parse_date,
    validate_obligation,
)
from financeme.services.projection.due_date import AgendaDay, is_due_on, items_due_on, month_offset
from financeme.services.projection.projection import (
    ProjectionPoint,
    YearMonth,
    bucket_of,
    format_month_label,
    historical_balance,
    project,
)
from financeme.services.projection.installments import (
    InstallmentGroup,
    group_installments,
    normalize_description,
)

__all__ = [
    'AgendaDay', 'InstallmentGroup', 'InvalidAmountError', 'InvalidDateError',
    'InvalidRecurrenceError', 'Kind', 'Obligation', 'ObligationError', 'PaymentMethod',
    'ProjectionPoint', 'Recurrence', 'YearMonth', 'bucket_of', 'format_month_label',
    'group_installments', 'historical_balance', 'is_due_on', 'items_due_on',
    'month_offset', 'normalize_description', 'parse_amount', 'parse_date', 'parse_money', 'project',
    'validate_obligation',
]
