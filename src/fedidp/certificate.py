"""
Detection and normalization of the certificate field of an identity provider.

A certificate field may hold, for historical reasons, any of:

* a JSON array of ``{"thumbPrint": ..., "certValue": ...}`` objects,
* one or more concatenated PEM blocks in plain text,
* a base64 encoded blob containing one or more PEM blocks,
* an opaque blob which is used as is (one time encoded).

Whatever the input the codec never raises, it degrades to a best effort result.
"""
import base64
import binascii
import json
import logging
from typing import List
from typing import Optional

from cryptojwt.utils import as_bytes
from cryptojwt.utils import as_unicode

from fedidp.defaults import EMPTY_JSON_ARRAY
from fedidp.defaults import JSON_ARRAY_IDENTIFIER
from fedidp.defaults import PEM_BEGIN_CERTIFICATE
from fedidp.defaults import PEM_END_CERTIFICATE
from fedidp.exception import UnsupportedAlgorithm
from fedidp.message import CertificateInfo
from fedidp.thumbprint import ThumbprintGenerator

logger = logging.getLogger(__name__)

THUMB_PRINT = "thumbPrint"
CERT_VALUE = "certValue"

EMPTY = "empty"
JSON_FORMAT = "json"
PLAIN_TEXT = "plain_text"
ENCODED = "encoded"
ONE_TIME_ENCODED = "one_time_encoded"


class DecodeResult(object):
    """
    The outcome of decoding a certificate field.

    :param encoding: The detected encoding
    :param certificates: List of CertificateInfo instances
    :param degraded: True if a fallback was used or nothing could be extracted
    :param error: Description of a failure that left the result empty
    """

    def __init__(self,
                 encoding: str,
                 certificates: Optional[List[CertificateInfo]] = None,
                 degraded: Optional[bool] = False,
                 error: Optional[str] = None):
        self.encoding = encoding
        self.certificates = certificates or []
        self.degraded = degraded
        self.error = error

    @property
    def ok(self):
        return self.error is None

    def __len__(self):
        return len(self.certificates)

    def __iter__(self):
        return iter(self.certificates)

    def __repr__(self):
        return (f"<DecodeResult encoding={self.encoding} certificates={len(self.certificates)} "
                f"degraded={self.degraded} error={self.error}>")


def count_certificates(text: str) -> int:
    return text.count(PEM_BEGIN_CERTIFICATE)


def _ordinal_index(text: str, ordinal: int) -> int:
    index = -1
    for _ in range(ordinal):
        index = text.find(PEM_BEGIN_CERTIFICATE, index + 1)
        if index == -1:
            break
    return index


def extract_certificate(text: str, ordinal: int) -> str:
    """
    Extract the ordinal:th (1-based) certificate from a text with concatenated PEM blocks.
    The extracted part runs from its begin marker up to the next begin marker or to the
    end of the text.

    :param text: Text with one or more PEM blocks
    :param ordinal: Which certificate to return
    :return: The certificate text
    """
    _start = _ordinal_index(text, ordinal)
    if _start == -1:
        raise ValueError(f"No certificate number {ordinal}")

    if ordinal == count_certificates(text):
        return text[_start:]
    return text[_start:_ordinal_index(text, ordinal + 1)]


def b64decode(value: str) -> bytes:
    """Strict standard base64 decoding that doesn't insist on padding."""
    _remainder = len(value) % 4
    if _remainder == 1:
        raise binascii.Error("Invalid base64 length")
    elif _remainder:
        value += "=" * (4 - _remainder)
    return base64.b64decode(value, validate=True)


def b64encode(value: str) -> str:
    return as_unicode(base64.b64encode(as_bytes(value)))


def _json_certificates(value: str) -> Optional[List[CertificateInfo]]:
    try:
        _array = json.loads(value)
    except ValueError:
        return None

    if not isinstance(_array, list):
        return None

    res = []
    for item in _array:
        if not isinstance(item, dict):
            return None
        _thumb_print = item.get(THUMB_PRINT)
        _cert_value = item.get(CERT_VALUE)
        if not isinstance(_thumb_print, str) or not isinstance(_cert_value, str):
            return None
        logger.debug(f"Handling json format certificate. ThumbPrint of the certificate is: "
                     f"{_thumb_print}")
        res.append(CertificateInfo(thumbPrint=_thumb_print, certValue=_cert_value))

    if len(res) > 1:
        logger.debug(f"{len(res)} certificates have been found")
    return res


class CertificateCodec(object):

    def __init__(self, thumbprint_generator: Optional[ThumbprintGenerator] = None):
        self.thumbprint_generator = thumbprint_generator or ThumbprintGenerator()

    def decode(self, raw: Optional[str]) -> List[CertificateInfo]:
        return self.inspect(raw).certificates

    def inspect(self, raw: Optional[str]) -> DecodeResult:
        if raw is None:
            return DecodeResult(EMPTY)

        _value = raw.strip()
        if not _value or _value == EMPTY_JSON_ARRAY:
            return DecodeResult(EMPTY)

        _certs = _json_certificates(_value)
        if _certs is not None:
            return DecodeResult(JSON_FORMAT, _certs)

        if _value.startswith(PEM_BEGIN_CERTIFICATE):
            _encoding, _handler = PLAIN_TEXT, self._plain_text
        else:
            _encoding, _handler = ENCODED, self._encoded

        try:
            return _handler(_value)
        except UnsupportedAlgorithm as err:
            logger.error(f"Error while generating thumbPrint. Unsupported hash algorithm: {err}")
            return DecodeResult(_encoding, degraded=True, error=str(err))

    def _certificate_info(self, certificate: str) -> CertificateInfo:
        _thumb_print = self.thumbprint_generator.fingerprint(certificate)
        logger.debug(f"ThumbPrint of the certificate is: {_thumb_print}")
        return CertificateInfo(thumbPrint=_thumb_print, certValue=certificate)

    def _extract_all(self, text: str, encode: bool) -> List[CertificateInfo]:
        _number = count_certificates(text)
        if _number == 0:
            logger.error(f"Uploaded certificate doesn't have {PEM_BEGIN_CERTIFICATE} and "
                         f"{PEM_END_CERTIFICATE}")
        else:
            logger.debug(f"{_number} certificates have been found.")

        res = []
        for ordinal in range(1, _number + 1):
            _cert = extract_certificate(text, ordinal)
            if encode:
                _cert = b64encode(_cert)
            res.append(self._certificate_info(_cert))
        return res

    def _plain_text(self, value: str) -> DecodeResult:
        logger.debug(f"Handling plain text certificate: {value}")
        _certs = self._extract_all(value, encode=False)
        return DecodeResult(PLAIN_TEXT, _certs, degraded=not _certs)

    def _one_time_encoded(self, value: str) -> DecodeResult:
        _thumb_print = self.thumbprint_generator.fingerprint(b64encode(value))
        _info = CertificateInfo(thumbPrint=_thumb_print, certValue=value)
        return DecodeResult(ONE_TIME_ENCODED, [_info], degraded=True)

    def _encoded(self, value: str) -> DecodeResult:
        logger.debug(f"Handling encoded certificates: {value}")
        try:
            _decoded = b64decode(value).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            logger.debug("Not valid base64, using the value as a one time encoded certificate")
            return self._one_time_encoded(value)

        # Certificates that are encoded once but lack the BEGIN and END markers
        if _decoded.strip() and not _decoded.startswith(PEM_BEGIN_CERTIFICATE):
            return self._one_time_encoded(value)

        _certs = self._extract_all(_decoded, encode=True)
        return DecodeResult(ENCODED, _certs, degraded=not _certs)


def get_certificate(raw: Optional[str]) -> Optional[str]:
    """
    Legacy single certificate view of a certificate field.
    If the value is a JSON array only the certValue of the first element is returned.

    :param raw: The stored certificate field
    :return: A certificate value
    """
    if not raw or not raw.strip() or not raw.startswith(JSON_ARRAY_IDENTIFIER):
        return raw

    if raw == EMPTY_JSON_ARRAY:
        return ""

    try:
        _array = json.loads(raw)
    except ValueError:
        logger.warning("Certificate looks like a JSON array but could not be parsed")
        return raw

    if not isinstance(_array, list):
        return raw
    if not _array:
        return ""

    _first = _array[0]
    if isinstance(_first, dict) and isinstance(_first.get(CERT_VALUE), str):
        return _first[CERT_VALUE]

    logger.warning(f"First element of the certificate array has no {CERT_VALUE}")
    return raw
