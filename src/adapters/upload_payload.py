"""Preparación de bytes para las subidas (Base64 + MD5).

Los fallos aquí (stream ilegible, etc.) no tienen categoría propia: se
registran y se propagan tal cual al llamador.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from dataclasses import dataclass
from typing import BinaryIO

log = logging.getLogger(__name__)


def read_payload(data: bytes | bytearray | BinaryIO) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    try:
        out = data.read()
    except OSError:
        log.error("Unable to read upload data from stream", exc_info=True)
        raise
    if not isinstance(out, (bytes, bytearray)):
        raise TypeError("upload stream must be opened in binary mode")
    log.debug("Loaded upload data from stream, %d bytes", len(out))
    return bytes(out)


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()  # nosec - checksum requerido por el servicio


def base64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@dataclass(frozen=True)
class UploadPayload:
    content: bytes
    md5_sum: str

    @property
    def byte_count(self) -> int:
        return len(self.content)

    def encoded(self) -> str:
        return base64_encode(self.content)


def prepare_payload(data: bytes | bytearray | BinaryIO) -> UploadPayload:
    content = read_payload(data)
    payload = UploadPayload(content=content, md5_sum=md5_hex(content))
    log.debug("Prepared upload payload: %d bytes, md5=%s", payload.byte_count, payload.md5_sum)
    return payload
