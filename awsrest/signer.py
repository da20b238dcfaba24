#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Mon Feb  9 09:33:39 2026

@author: mike
"""
import hmac
import base64
import hashlib
import logging
import datetime
import urllib.parse
from collections.abc import Mapping
from typing import NamedTuple, Union
from urllib3 import HTTPHeaderDict

from . import utils
from .exceptions import SigningError

logger = logging.getLogger(__name__)

#######################################################
### Parameters

aws_header_prefix = 'x-amz'
auth_scheme = 'AWS'

#######################################################
### Header normalization


class NormalizedHeader(NamedTuple):
    normal: str  # lower-cased name
    header: str  # name as first given
    value: str  # trimmed values joined by commas

    @property
    def is_aws(self):
        return self.normal.startswith(aws_header_prefix)


def _iter_header_values(headers):
    """
    Yield (name, list of values) from an HTTPHeaderDict, a mapping, or a sequence of pairs.
    """
    if isinstance(headers, HTTPHeaderDict):
        for name in headers:
            yield name, headers.getlist(name)
    elif isinstance(headers, Mapping):
        for name, value in headers.items():
            if value is None:
                yield name, []
            elif isinstance(value, str):
                yield name, [value]
            else:
                yield name, list(value)
    else:
        for name, value in headers:
            yield name, [value]


def normalize_headers(headers):
    """
    Canonicalize a multi-valued header set. There is one NormalizedHeader per distinct (case-insensitive) header name, with all of its values stripped of surrounding whitespace and joined by commas in the order they were added. A header with no values gets an empty value. The result is sorted by the lower-cased names.

    Parameters
    ----------
    headers : urllib3.HTTPHeaderDict, Mapping, or sequence of (name, value) pairs

    Returns
    -------
    list of NormalizedHeader
    """
    grouped = {}
    for name, values in _iter_header_values(headers):
        normal = name.lower()
        if normal in grouped:
            grouped[normal][1].extend(values)
        else:
            grouped[normal] = (name, list(values))

    normalized = [NormalizedHeader(normal, name, ','.join(value.strip() for value in values)) for normal, (name, values) in grouped.items()]
    normalized.sort(key=lambda h: h.normal)

    return normalized


#######################################################
### String to sign


def canonical_resource(path: str, query: str=''):
    """
    The url path, plus "?" and the raw query when the query is not empty.
    """
    if query:
        return f'{path}?{query}'
    return path


def string_to_sign(method: str, content_md5: str, content_type: str, date: str, headers, resource: str):
    """
    Assemble the exact string that gets signed.

    METHOD, CONTENT-MD5, CONTENT-TYPE and DATE-OR-EXPIRES each take a line, then one "name:value" line per x-amz header (in sorted order), and the resource last with no trailing newline.

    Parameters
    ----------
    method : str
        The http method.
    content_md5 : str
        The Content-MD5 header value or an empty string.
    content_type : str
        The Content-Type header value or an empty string.
    date : str
        The date line. Empty for header signing (the date travels in x-amz-date) and the expiry epoch seconds for url signing.
    headers : list of NormalizedHeader
        Output of normalize_headers. Only the x-amz headers are used.
    resource : str
        Output of canonical_resource.

    Returns
    -------
    str
    """
    lines = [method, content_md5, content_type, date]
    for h in headers:
        if h.is_aws:
            lines.append(f'{h.normal}:{h.value}')
    lines.append(resource)

    return '\n'.join(lines)


def _first_value(headers, name):
    values = headers.getlist(name)
    if values:
        return values[0]
    return ''


def header_string_to_sign(request):
    """
    The header-mode string to sign of a prepared request. The date line is left empty because x-amz-date is always set alongside Date and is part of the x-amz block.
    """
    headers = request.headers

    return string_to_sign(
        request.method,
        _first_value(headers, 'Content-MD5'),
        _first_value(headers, 'Content-Type'),
        '',
        normalize_headers(headers),
        canonical_resource(request.path, request.query),
        )


def url_string_to_sign(path: str, expires: int):
    """
    The query-mode string to sign. Only GETs are signed this way, there are no content headers or x-amz headers, and the query is not part of the resource.
    """
    return string_to_sign('GET', '', '', str(expires), [], path)


#######################################################
### Signer


class Signer:
    """
    Signs requests with the HMAC-SHA1 "AWS" scheme. This is the only object that reads the secret access key.
    """
    def __init__(self, credentials: utils.Credentials):
        self._credentials = credentials

    @property
    def access_key_id(self):
        return self._credentials.access_key_id

    def signature(self, to_sign: str):
        """
        Standard base64 of the HMAC-SHA1 of to_sign keyed by the secret access key.
        """
        try:
            mac = hmac.new(self._credentials.secret_access_key.encode('utf-8'), to_sign.encode('utf-8'), hashlib.sha1)
        except ValueError as err:
            raise SigningError(f'HMAC-SHA1 is not available: {err}') from err

        return base64.b64encode(mac.digest()).decode('ascii')

    def sign(self, request, date: datetime.datetime=None):
        """
        Header-mode signing. Sets the Date and x-amz-date headers to the same instant and the Authorization header to "AWS <access key id>:<signature>". The request headers are modified in place.

        Parameters
        ----------
        request : PreparedRequest
            The request to sign.
        date : datetime.datetime or None
            The signing time. Defaults to now.

        Returns
        -------
        str
            The string that was signed.
        """
        now = utils.http_date(date)
        headers = request.headers
        headers['Date'] = now
        headers['x-amz-date'] = now

        to_sign = header_string_to_sign(request)
        headers['Authorization'] = f'{auth_scheme} {self.access_key_id}:{self.signature(to_sign)}'

        logger.debug('Signed %s %s', request.method, canonical_resource(request.path, request.query))

        return to_sign

    def sign_url(self, url, lifetime: Union[int, datetime.timedelta], now: datetime.datetime=None):
        """
        Query-mode signing for shareable GET links. The query of the url is replaced by AWSAccessKeyId, Expires, and Signature (percent-encoded).

        Parameters
        ----------
        url : str or urllib.parse.SplitResult
            The url to sign.
        lifetime : int or datetime.timedelta
            Seconds until the link expires.
        now : datetime.datetime or None
            The signing time. Defaults to now.

        Returns
        -------
        str
            The signed url.
        """
        if isinstance(url, str):
            url = urllib.parse.urlsplit(url)
        if isinstance(lifetime, datetime.timedelta):
            lifetime = int(lifetime.total_seconds())

        expires = int(utils.utc(now).timestamp()) + int(lifetime)
        signature = self.signature(url_string_to_sign(url.path, expires))

        query = urllib.parse.urlencode([('AWSAccessKeyId', self.access_key_id), ('Expires', str(expires)), ('Signature', signature)])

        logger.debug('Signed url for %s expiring at %s', url.path, expires)

        return url._replace(query=query).geturl()
