#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Tue Jul  2 10:14:03 2024

@author: mike
"""


class AWSRESTError(Exception):
    """Top-level exception to capture awsrest errors."""

    ...


class ConfigurationError(AWSRESTError, ValueError):
    """Credentials, regions or environment values that cannot be used."""

    ...


class RequestBuildError(AWSRESTError, ValueError):
    """An operation builder could not produce a transport request."""

    ...


class SigningError(AWSRESTError):
    """The hash primitive used for signing could not be constructed."""

    ...


class ServiceError(AWSRESTError):
    """
    Error reported by the service in an XML error document. The string to sign and the signature the service computed are exposed as-is for diagnosing signature mismatches.
    """

    def __init__(self, status: int, code: str=None, message: str=None, request_id: str=None, host_id: str=None, string_to_sign_bytes: str=None, signature_provided: str=None, aws_access_key_id: str=None, extra: dict=None):
        self.status = status
        self.code = code
        self.message = message
        self.request_id = request_id
        self.host_id = host_id
        self.string_to_sign_bytes = string_to_sign_bytes
        self.signature_provided = signature_provided
        self.aws_access_key_id = aws_access_key_id
        self.extra = extra if extra is not None else {}

        super().__init__(f'{status} {code}: {message}')

    @property
    def string_to_sign_raw(self):
        """
        The bytes the service signed, decoded from its space-separated hex. None if the service did not send them.
        """
        if self.string_to_sign_bytes is None:
            return None

        return bytes.fromhex(self.string_to_sign_bytes)

    @property
    def string_to_sign(self):
        """
        string_to_sign_raw as text. Bytes that are not UTF-8 show up as U+FFFD.
        """
        raw = self.string_to_sign_raw
        if raw is None:
            return None

        return raw.decode('utf-8', errors='replace')

    def __repr__(self):
        return f'ServiceError(status={self.status!r}, code={self.code!r}, message={self.message!r}, request_id={self.request_id!r})'
