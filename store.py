# store.py
# On-device key-value store. Every domain collection is one JSON text blob under
# a fixed string key; the file-backed store keeps each blob AES-GCM encrypted.

import json
import logging
import os
import uuid
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from errors import CorruptValueError, StorageError

try:
    from jnius import autoclass
except Exception:
    autoclass = None

logger = logging.getLogger("medtrack.store")

PATIENTS = "patients"
RESPONSIBLE_PERSONS = "responsible_persons"
MEDICINES = "medicines"
DAILY_LOGS = "daily_logs"
CURRENT_PATIENT_ID = "current_patient_id"
SCHEDULED_REMINDERS = "scheduled_reminders"

_CRYPTO_LOCK = RLock()
_NONCE_LEN = 12


# -------------------------
# Crypto utilities
# -------------------------
def _atomic_write_bytes(path: Path, data: bytes):
    tmp = path.with_suffix(path.suffix + f".tmp.{uuid.uuid4().hex}")
    tmp.parent.mkdir(parents=True, exist_ok=True)
    try:
        tmp.write_bytes(data)
        tmp.replace(path)
    finally:
        tmp.unlink(missing_ok=True)


def aes_encrypt(data: bytes, key: bytes) -> bytes:
    aes = AESGCM(key)
    nonce = os.urandom(_NONCE_LEN)
    return nonce + aes.encrypt(nonce, data, None)


def aes_decrypt(data: bytes, key: bytes) -> bytes:
    if not data or len(data) < _NONCE_LEN:
        raise InvalidTag("ciphertext too short")
    aes = AESGCM(key)
    nonce, ct = data[:_NONCE_LEN], data[_NONCE_LEN:]
    return aes.decrypt(nonce, ct, None)


# -------------------------
# Key management (AndroidKeyStore-wrapped on device, raw file elsewhere)
# -------------------------
_ANDROID_KEY_ALIAS = "medtrack_key_v1"
_RSA_OAEP = "RSA/ECB/OAEPWithSHA-256AndMGF1Padding"


def _android_keystore():
    KeyStore = autoclass("java.security.KeyStore")
    ks = KeyStore.getInstance("AndroidKeyStore")
    ks.load(None)
    if not ks.containsAlias(_ANDROID_KEY_ALIAS):
        KeyPairGenerator = autoclass("java.security.KeyPairGenerator")
        KeyProperties = autoclass("android.security.keystore.KeyProperties")
        Builder = autoclass("android.security.keystore.KeyGenParameterSpec$Builder")
        purposes = int(KeyProperties.PURPOSE_ENCRYPT) | int(KeyProperties.PURPOSE_DECRYPT)
        builder = Builder(_ANDROID_KEY_ALIAS, purposes)
        builder.setDigests([KeyProperties.DIGEST_SHA256])
        builder.setEncryptionPaddings([KeyProperties.ENCRYPTION_PADDING_RSA_OAEP])
        kpg = KeyPairGenerator.getInstance(KeyProperties.KEY_ALGORITHM_RSA, "AndroidKeyStore")
        kpg.initialize(builder.build())
        kpg.generateKeyPair()
    return ks


def _android_rsa(mode_name: str, payload: bytes) -> bytes:
    ks = _android_keystore()
    CipherJ = autoclass("javax.crypto.Cipher")
    cipher = CipherJ.getInstance(_RSA_OAEP)
    if mode_name == "wrap":
        cipher.init(CipherJ.ENCRYPT_MODE, ks.getCertificate(_ANDROID_KEY_ALIAS).getPublicKey())
    else:
        cipher.init(CipherJ.DECRYPT_MODE, ks.getEntry(_ANDROID_KEY_ALIAS, None).getPrivateKey())
    return bytes(cipher.doFinal(payload))


def get_or_create_key(key_path: Path, use_keystore: Optional[bool] = None) -> bytes:
    """Load the 32-byte storage key, generating and saving one on first run."""
    if use_keystore is None:
        use_keystore = autoclass is not None and "ANDROID_ARGUMENT" in os.environ
    key_path = Path(key_path)
    with _CRYPTO_LOCK:
        if key_path.exists():
            raw = key_path.read_bytes()
            if use_keystore:
                try:
                    k = _android_rsa("unwrap", raw)
                    if len(k) == 32:
                        return k
                except Exception:
                    logger.exception("key unwrap failed; falling back to raw key file")
            if len(raw) >= 32:
                return raw[:32]
            logger.warning("key file too short; generating a new key")

        key = AESGCM.generate_key(bit_length=256)
        if use_keystore:
            try:
                _atomic_write_bytes(key_path, _android_rsa("wrap", key))
                logger.info("key stored: android keystore")
                return key
            except Exception:
                logger.exception("key wrap failed; storing raw key file")
        _atomic_write_bytes(key_path, key)
        logger.info("key stored: file")
        return key


# -------------------------
# Stores
# -------------------------
class KeyValueStore:
    """get/set/remove of string blobs under string keys."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)

    def remove(self, key):
        self._data.pop(key, None)

    def keys(self):
        return sorted(self._data)


class EncryptedFileStore(KeyValueStore):
    def __init__(self, directory: Path, key: bytes):
        if len(key) != 32:
            raise ValueError("storage key must be 32 bytes")
        self.directory = Path(directory)
        self.key = key
        self._lock = RLock()
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"invalid store key {key!r}")
        return self.directory / f"{key}.json.aes"

    def get(self, key):
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                data = path.read_bytes()
            except OSError as e:
                raise StorageError(f"read failed for {key!r}: {e}") from e
        try:
            return aes_decrypt(data, self.key).decode("utf-8")
        except (InvalidTag, UnicodeDecodeError) as e:
            raise CorruptValueError(f"cannot decrypt {key!r}") from e

    def set(self, key, value):
        path = self._path(key)
        enc = aes_encrypt(str(value).encode("utf-8"), self.key)
        with self._lock:
            try:
                _atomic_write_bytes(path, enc)
            except OSError as e:
                raise StorageError(f"write failed for {key!r}: {e}") from e

    def remove(self, key):
        path = self._path(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(f"remove failed for {key!r}: {e}") from e

    def size_bytes(self) -> int:
        with self._lock:
            return sum(p.stat().st_size for p in self.directory.glob("*.json.aes"))


def open_store(directory: Path, key_path: Path) -> EncryptedFileStore:
    return EncryptedFileStore(directory, get_or_create_key(key_path))


# -------------------------
# JSON helpers
# -------------------------
def read_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """Decode the blob under `key`. Corrupt or malformed blobs read as `default`."""
    try:
        raw = store.get(key)
    except CorruptValueError:
        logger.warning("store: %s is corrupt; treating as empty", key)
        return default
    if raw is None or raw == "":
        return default
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("store: %s holds malformed JSON; treating as empty", key)
        return default
    if value is None or not isinstance(value, type(default)):
        logger.warning("store: %s holds %s, expected %s; treating as empty",
                       key, type(value).__name__, type(default).__name__)
        return default
    return value


def write_json(store: KeyValueStore, key: str, value: Any):
    store.set(key, json.dumps(value, ensure_ascii=False, separators=(",", ":")))
