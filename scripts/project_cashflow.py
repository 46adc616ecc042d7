"""Stampa la proiezione di cassa di un utente.

Uso: eseguire nello stesso ambiente dell'app Flask (usa create_app()).
  python scripts/project_cashflow.py --user alice [--months 12] [--initial-balance 1000 | --from-history] [--scope 3]
"""
import argparse
import sys

from financeme import create_app


def main(argv=None):
    parser = argparse.ArgumentParser(description='Proiezione di cassa mese per mese')
    parser.add_argument('--user', required=True, help='Id dell\'utente')
    parser.add_argument('--months', type=int, default=None, help='Numero di mesi (default PROJECTION_DEFAULT_MONTHS)')
    parser.add_argument('--initial-balance', default='0', help='Saldo di partenza (default 0)')
    parser.add_argument('--from-history', action='store_true', help='Calcola il saldo di partenza dallo storico')
    parser.add_argument('--scope', type=int, default=None, help='Id del gruppo (default: righe personali)')
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        from financeme.services.projection import ObligationError, historical_balance, parse_amount, project
        from financeme.services.transactions.transaction_service import TransactionService
        from financeme.utils.formatting import format_currency

        ext = app.extensions['financeme']
        months = args.months or app.config['PROJECTION_DEFAULT_MONTHS']
        try:
            obligations = TransactionService(ext['codec'], ext['gateway']).obligations(args.user, args.scope)
            initial = historical_balance(obligations) if args.from_history else parse_amount(args.initial_balance)
            points = project(obligations, initial, months)
        except (ObligationError, PermissionError) as e:
            print(f"Proiezione non calcolabile: {e}", file=sys.stderr)
            return 1

        print(f"Saldo iniziale: {format_currency(initial)}")
        for p in points:
            d = p.to_dict()
            print(f"{d['label']:>7}  +{format_currency(p.inflow):>14}  -{format_currency(p.outflow):>14}  "
                  f"= {format_currency(p.running_balance):>14}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
