"""Controlla il limite di spesa mensile di tutti gli utenti che lo hanno configurato.

Pensato per essere eseguito periodicamente (es. cron giornaliero).
Uso: python scripts/check_spending_limits.py [--today YYYY-MM-DD]
"""
import argparse

from financeme import create_app


def main(argv=None):
    parser = argparse.ArgumentParser(description='Controllo limite di spesa mensile')
    parser.add_argument('--today', default=None, help='Data di riferimento (default oggi)')
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        from financeme.services.projection import parse_date
        from financeme.services.settings.spending_limit_service import SpendingLimitService

        ext = app.extensions['financeme']
        today = parse_date(args.today) if args.today else None
        results = SpendingLimitService(ext['codec'], ext['gateway']).check_all(today)
        for user_id, status in sorted(results.items()):
            print(f"{user_id}: {status}")
        print(f"Utenti controllati: {len(results)}")


if __name__ == '__main__':
    main()
