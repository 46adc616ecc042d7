"""Entry point per l'applicazione.

Avvia l'app Flask FinanceMe. Con SQLite le tabelle vengono create
automaticamente dalla factory; `FINANCEME_DEBUG=1` abilita il debug.
"""

import os
from financeme import create_app


def main():
    app = create_app(os.environ.get('FINANCEME_CONFIG', 'default'))
    app.run(
        host=app.config.get('HOST', '0.0.0.0'),
        port=app.config.get('PORT', 5001),
        debug=os.environ.get('FINANCEME_DEBUG') == '1',
    )


if __name__ == '__main__':
    main()
