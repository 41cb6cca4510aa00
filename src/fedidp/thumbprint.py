import logging
from typing import Optional

from cryptography import exceptions
from cryptography.hazmat.primitives import hashes
from cryptojwt.utils import as_bytes

from fedidp.defaults import DEFAULT_HASH_ALG
from fedidp.exception import UnsupportedAlgorithm

logger = logging.getLogger(__name__)


class ThumbprintGenerator(object):
    """
    Computes the thumbprint used as lookup key for a certificate.

    The thumbprint is the lowercase hex digest of the UTF-8 encoded certificate text.
    """

    def __init__(self, hash_alg: Optional[str] = DEFAULT_HASH_ALG):
        self.hash_alg = (hash_alg or DEFAULT_HASH_ALG).upper()

    def _algorithm(self) -> hashes.HashAlgorithm:
        _cls = getattr(hashes, self.hash_alg, None)
        if not isinstance(_cls, type) or not issubclass(_cls, hashes.HashAlgorithm):
            raise UnsupportedAlgorithm(f"Unknown hash algorithm: {self.hash_alg}")
        try:
            return _cls()
        except TypeError as err:
            # Algorithms like BLAKE2 or SHAKE need a digest size
            raise UnsupportedAlgorithm(f"Can not use hash algorithm {self.hash_alg}: {err}")

    def fingerprint(self, certificate: str) -> str:
        """
        Hash of the certificate text as given, PEM markers and line breaks included.
        This is not an X.509 fingerprint, which is computed over the DER bytes, and the two
        will differ for the same certificate.
        """
        try:
            _hash = hashes.Hash(self._algorithm())
        except exceptions.UnsupportedAlgorithm as err:
            raise UnsupportedAlgorithm(f"Hash algorithm {self.hash_alg} not available: {err}")

        _hash.update(as_bytes(certificate))
        return _hash.finalize().hex()

    __call__ = fingerprint
