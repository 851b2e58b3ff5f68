"""Certificates and their fingerprints."""

from __future__ import annotations

import base64
import binascii
import hashlib
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.x509.oid import NameOID

_PEM_BLOCK = re.compile(r"-----BEGIN ([A-Z0-9 _]+)-----(.*?)-----END \1-----", re.S)


class CertificateError(Exception):
    """A certificate could not be parsed or is incomplete."""


@dataclass(frozen=True)
class Certificate:
    """A certificate chain (DER encoded) with its private key."""

    certificate: tuple[bytes, ...]
    private_key: PrivateKeyTypes

    @classmethod
    def generate_self_signed(cls, subject_alt_names: Iterable[str]) -> Certificate:
        """Create a new ECDSA P-256 self-signed certificate."""
        names = list(subject_alt_names)
        key = ec.generate_private_key(ec.SECP256R1())
        subject = x509.Name(
            [x509.NameAttribute(NameOID.COMMON_NAME, names[0] if names else "self signed")]
        )
        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(datetime(1975, 1, 1, tzinfo=timezone.utc))
            .not_valid_after(datetime(4096, 1, 1, tzinfo=timezone.utc))
        )
        if names:
            builder = builder.add_extension(
                x509.SubjectAlternativeName([x509.DNSName(n) for n in names]),
                critical=False,
            )
        cert = builder.sign(key, hashes.SHA256())
        return cls((cert.public_bytes(serialization.Encoding.DER),), key)

    @classmethod
    def from_pem(cls, pem: str) -> Certificate:
        """Parse a PEM document holding a private key and certificates."""
        key: PrivateKeyTypes | None = None
        certs: list[bytes] = []
        for tag, body in _PEM_BLOCK.findall(pem):
            try:
                der = base64.b64decode("".join(body.split()), validate=True)
            except binascii.Error as e:
                raise CertificateError(f"invalid base64 in {tag} block") from e
            if "PRIVATE" in tag:
                try:
                    key = serialization.load_der_private_key(der, password=None)
                except (ValueError, TypeError, UnsupportedAlgorithm) as e:
                    raise CertificateError(f"invalid private key: {e}") from e
            elif tag == "CERTIFICATE":
                try:
                    x509.load_der_x509_certificate(der)
                except ValueError as e:
                    raise CertificateError(f"invalid certificate: {e}") from e
                certs.append(der)
        if key is None:
            raise CertificateError("no private key found")
        if not certs:
            raise CertificateError("no certificate found")
        return cls(tuple(certs), key)

    def serialize_pem(self) -> str:
        """Private key followed by the certificates, PEM encoded."""
        parts = [
            self.private_key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            ).decode("ascii")
        ]
        for der in self.certificate:
            cert = x509.load_der_x509_certificate(der)
            parts.append(cert.public_bytes(serialization.Encoding.PEM).decode("ascii"))
        return "".join(parts)


def generate_fingerprint(data: bytes) -> str:
    """SHA-256 of ``data`` as colon-separated lower-case hex bytes."""
    return ":".join(f"{b:02x}" for b in hashlib.sha256(data).digest())


def certificate_fingerprint(cert: Certificate) -> str:
    """Fingerprint of the first certificate in the chain."""
    if not cert.certificate:
        raise CertificateError("certificate missing")
    return generate_fingerprint(cert.certificate[0])


def load_certificate(path: str | os.PathLike[str]) -> Certificate:
    """Load a certificate and key from a PEM file."""
    return Certificate.from_pem(Path(path).read_text(encoding="ascii"))


def load_or_generate_key_and_cert(path: str | os.PathLike[str]) -> Certificate:
    """Load the certificate at ``path``, creating one if there is none."""
    path = Path(path)
    if path.is_file():
        return load_certificate(path)
    return generate_key_and_cert(path)


def generate_key_and_cert(path: str | os.PathLike[str]) -> Certificate:
    """Generate a self-signed certificate and store it, owner read-only."""
    path = Path(path)
    cert = Certificate.generate_self_signed(["ignored"])
    serialized = cert.serialize_pem()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="ascii") as f:
        if hasattr(os, "fchmod"):
            os.fchmod(f.fileno(), 0o400)
        f.write(serialized)
    return cert