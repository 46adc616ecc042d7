"""
Default data values separated from operational configuration.

Questo modulo contiene i valori di 'contenuto' usati dall'app (categorie
predefinite) che non dovrebbero essere miscelati con le impostazioni operative
del runtime (DB, SECRET_KEY, chiavi di cifratura).
"""

# Categorie predefinite (nome, tipo), sempre disponibili accanto a quelle dell'utente
CATEGORIE_DEFAULT = [
    # Entrate
    ('Stipendio', 'income'),
    ('Extra', 'income'),

    # Uscite
    ('Alimentari', 'expense'),
    ('Casa', 'expense'),
    ('Trasporti', 'expense'),
    ('Salute', 'expense'),
    ('Svago', 'expense'),
    ('Altro', 'expense'),
]
