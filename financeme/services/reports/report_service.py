"""Riepiloghi per periodo e analisi dello storico (insights)"""
from collections import defaultdict
from decimal import Decimal

from financeme.services.projection import Kind, YearMonth, format_month_label

ZERO = Decimal('0')
SENZA_CATEGORIA = 'Senza categoria'
TOP_N = 5


def _movements(obligations):
    """Solo entrate e uscite con importo; gli appuntamenti non sono movimenti."""
    return [ob for ob in obligations if ob.amount is not None and ob.kind in (Kind.INCOME, Kind.EXPENSE)]


def _by_category(obligations):
    totals = defaultdict(Decimal)
    for ob in obligations:
        totals[ob.category or SENZA_CATEGORIA] += ob.amount
    return sorted(totals.items(), key=lambda kv: kv[1], reverse=True)


def summarize(obligations, start, end, kind=None, category=None):
    """
    Riepilogo delle righe con data compresa tra start ed end inclusi

    Ogni riga conta una volta sulla sua data, anche se ricorrente.

    Args:
        kind: se indicato, solo entrate (Kind.INCOME) o solo uscite (Kind.EXPENSE)
        category: se indicata, solo le righe di quella categoria

    Returns:
        dict con totale entrate, totale uscite, saldo, uscite per categoria
        e le categorie presenti nel periodo
    """
    in_range = [ob for ob in _movements(obligations) if start <= ob.anchor_date <= end]
    categories = sorted({ob.category for ob in in_range if ob.category})
    rows = [
        ob for ob in in_range
        if (kind is None or ob.kind == kind) and (category is None or ob.category == category)
    ]

    income = sum((ob.amount for ob in rows if ob.kind == Kind.INCOME), ZERO)
    expense = sum((ob.amount for ob in rows if ob.kind == Kind.EXPENSE), ZERO)
    per_category = _by_category(ob for ob in rows if ob.kind == Kind.EXPENSE)
    return {
        'start': start.isoformat(),
        'end': end.isoformat(),
        'kind': kind.value if kind else None,
        'category': category,
        'count': len(rows),
        'total_income': float(income),
        'total_expense': float(expense),
        'balance': float(income - expense),
        'expenses_by_category': [{'category': c, 'amount': float(a)} for c, a in per_category],
        'categories': categories,
    }


def _movement_dict(ob):
    if ob is None:
        return None
    return {
        'id': ob.id,
        'date': ob.anchor_date.isoformat(),
        'category': ob.category,
        'description': ob.description,
        'amount': float(ob.amount),
    }


def insights(obligations):
    """
    Analisi dell'intero storico

    Returns:
        None se non ci sono movimenti, altrimenti dict con le prime categorie
        di spesa e di entrata, l'andamento mensile, la spesa media giornaliera
        e mensile, la spesa e l'entrata più alte
    """
    rows = _movements(obligations)
    if not rows:
        return None
    expenses = [ob for ob in rows if ob.kind == Kind.EXPENSE]
    incomes = [ob for ob in rows if ob.kind == Kind.INCOME]

    monthly = defaultdict(lambda: {'income': ZERO, 'expense': ZERO})
    for ob in rows:
        monthly[YearMonth.of(ob.anchor_date)][ob.kind.value] += ob.amount
    history = [
        {'month': str(ym), 'label': format_month_label(ym),
         'income': float(v['income']), 'expense': float(v['expense'])}
        for ym, v in sorted(monthly.items())
    ]

    first = min(ob.anchor_date for ob in rows)
    last = max(ob.anchor_date for ob in rows)
    days = max(1, (last - first).days)
    months = (last.year - first.year) * 12 + last.month - first.month + 1
    total_expense = sum((ob.amount for ob in expenses), ZERO)

    # a parità di importo vince la prima riga in ordine di data
    ordered = sorted(rows, key=lambda ob: (ob.anchor_date, str(ob.id)))
    biggest_expense = max((ob for ob in ordered if ob.kind == Kind.EXPENSE), key=lambda ob: ob.amount, default=None)
    biggest_income = max((ob for ob in ordered if ob.kind == Kind.INCOME), key=lambda ob: ob.amount, default=None)

    return {
        'first_date': first.isoformat(),
        'last_date': last.isoformat(),
        'top_expense_categories': [{'category': c, 'amount': float(a)} for c, a in _by_category(expenses)[:TOP_N]],
        'top_income_sources': [{'category': c, 'amount': float(a)} for c, a in _by_category(incomes)[:TOP_N]],
        'monthly_history': history,
        'average_daily_spending': float(total_expense / days),
        'average_monthly_spending': float(total_expense / months),
        'biggest_expense': _movement_dict(biggest_expense),
        'biggest_income': _movement_dict(biggest_income),
    }
