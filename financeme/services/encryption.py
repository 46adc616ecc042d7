"""Cifratura reversibile dei campi sensibili (importo, categoria, descrizione).

Il codec viene costruito una sola volta dalla factory dell'app e passato
esplicitamente ai servizi che ne hanno bisogno. In caso di input non
decifrabile `decode` restituisce il sentinella `DECODE_FAILED` senza sollevare.
"""
import base64
import logging

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)

DECODE_FAILED = '\x00decode-failed\x00'


def derive_key_from_password(password: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=100000)
    return base64.urlsafe_b64encode(kdf.derive(password.encode()))


class PlainCodec:
    """Codec identità: usato quando non è configurata una chiave."""

    def encode(self, plaintext: str) -> str:
        return plaintext

    def decode(self, ciphertext: str) -> str:
        if ciphertext is None:
            return DECODE_FAILED
        return ciphertext


class FernetCodec:
    """Codec basato su Fernet con chiave derivata da una passphrase."""

    def __init__(self, passphrase: str, salt: str):
        if not passphrase:
            raise ValueError('La passphrase di cifratura è obbligatoria')
        key = derive_key_from_password(passphrase, salt.encode())
        self._cipher = Fernet(key)

    def encode(self, plaintext: str) -> str:
        return self._cipher.encrypt(plaintext.encode()).decode()

    def decode(self, ciphertext: str) -> str:
        if not ciphertext:
            return DECODE_FAILED
        try:
            return self._cipher.decrypt(ciphertext.encode()).decode()
        except (InvalidToken, UnicodeError, ValueError):
            logger.debug('decode fallita per un valore cifrato')
            return DECODE_FAILED


def is_decode_failure(value) -> bool:
    return value == DECODE_FAILED


def build_codec(config):
    """Costruisce il codec a partire dalla configurazione dell'app."""
    passphrase = config.get('ENCRYPTION_KEY')
    if not passphrase:
        logger.warning('ENCRYPTION_KEY non configurata: i campi saranno salvati in chiaro')
        return PlainCodec()
    return FernetCodec(passphrase, config.get('ENCRYPTION_SALT') or 'financeme-field-salt')


def display_decoder(codec):
    """Decodifica per la visualizzazione: i valori non decifrabili diventano stringa vuota."""
    def decode(value):
        text = codec.decode(value)
        if is_decode_failure(text):
            logger.warning('Campo non decifrabile in visualizzazione')
            return ''
        return text
    return decode


def undecodable_fields(record: dict, fields, replaced=()):
    """Campi cifrati di `record` non decifrabili e non sostituiti dal chiamante."""
    return [f for f in fields if f not in replaced and is_decode_failure(record.get(f))]
