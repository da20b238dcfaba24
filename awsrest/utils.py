#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Sat Oct  8 11:02:46 2022

@author: mike
"""
import os
import base64
import hashlib
import datetime
import email.utils
import urllib.parse
from collections.abc import Mapping
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ConfigurationError

#######################################################
### Parameters

access_key_id_env = 'AWS_ACCESS_KEY_ID'
secret_access_key_env = 'AWS_SECRET_ACCESS_KEY'

rfc3339_format = '%Y-%m-%dT%H:%M:%SZ'
http_date_format = '%a, %d %b %Y %H:%M:%S %Z'

##################################################
### Config classes


class Credentials(BaseModel):
    """
    The access key id (public) and the secret access key (only ever used as the HMAC key).
    """
    model_config = ConfigDict(frozen=True)

    access_key_id: str = Field(min_length=1)
    secret_access_key: str = Field(min_length=1, repr=False)


class Region(BaseModel):
    """
    A protocol scheme and an endpoint host. Instances are immutable and shared process-wide.
    """
    model_config = ConfigDict(frozen=True)

    protocol: Literal['http', 'https'] = 'https'
    endpoint: str = Field(min_length=1)

    @field_validator('endpoint')
    @classmethod
    def _check_endpoint(cls, value):
        if ('://' in value) or ('/' in value) or ('?' in value):
            raise ValueError(f'{value} must be a bare host name (optionally with a port).')
        return value

    def url(self, subdomain: str='', path: str='', query=None):
        """
        Resolve a subdomain, path and query against the region. See resolve_url.
        """
        return resolve_url(self, subdomain, path, query)


#######################################################
### Helper Functions


def credentials_from_env(environ: Mapping=None):
    """
    Load the credentials from the AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY environment variables.

    Parameters
    ----------
    environ : Mapping or None
        The environment to read from. Defaults to os.environ.

    Returns
    -------
    Credentials
    """
    if environ is None:
        environ = os.environ

    access_key_id = environ.get(access_key_id_env)
    secret_access_key = environ.get(secret_access_key_env)

    missing = [name for name, value in ((access_key_id_env, access_key_id), (secret_access_key_env, secret_access_key)) if not value]
    if missing:
        raise ConfigurationError(f'Missing environment variables: {", ".join(missing)}')

    return Credentials(access_key_id=access_key_id, secret_access_key=secret_access_key)


def encode_query(query):
    """
    Form-encode a query multimap with the names in stable sorted order. Values under the same name keep their insertion order.

    Parameters
    ----------
    query : Mapping or sequence of (name, value) pairs
        Mapping values can be a single value or a list/tuple of values. None values are left out.

    Returns
    -------
    str
    """
    if isinstance(query, Mapping):
        items = query.items()
    else:
        items = query

    pairs = []
    for name, value in sorted(items, key=lambda item: item[0]):
        if isinstance(value, (list, tuple)):
            pairs.extend((name, v) for v in value if v is not None)
        elif value is not None:
            pairs.append((name, value))

    return urllib.parse.urlencode(pairs)


def resolve_url(region: Region, subdomain: str='', path: str='', query=None):
    """
    Build a fully qualified url from a region, an optional subdomain, a path, and an optional query.

    A query of None gives no query string at all. An empty query also encodes to an empty query string, so neither adds a "?" to the url.

    Parameters
    ----------
    region : Region
        Provides the scheme and endpoint host.
    subdomain : str
        Prepended to the endpoint as "subdomain.endpoint" when not empty.
    path : str
        The url path.
    query : Mapping, sequence of pairs, or None
        The query parameters.

    Returns
    -------
    urllib.parse.SplitResult
    """
    host = region.endpoint
    if subdomain:
        host = f'{subdomain}.{host}'

    raw_query = ''
    if query is not None:
        raw_query = encode_query(query)

    return urllib.parse.SplitResult(region.protocol, host, path, raw_query, '')


def utc(dt: datetime.datetime=None):
    """
    Return dt in UTC (naive datetimes are taken as UTC). None gives the current time.
    """
    if dt is None:
        return datetime.datetime.now(datetime.timezone.utc)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)

    return dt.astimezone(datetime.timezone.utc)


def http_date(dt: datetime.datetime=None):
    """
    RFC 1123 date as used in the Date header, e.g. "Mon, 02 Jan 2006 15:04:05 GMT".
    """
    return email.utils.format_datetime(utc(dt), usegmt=True)


def rfc3339(dt: datetime.datetime=None):
    """
    RFC 3339 timestamp in UTC, e.g. "2006-01-02T15:04:05Z".
    """
    return utc(dt).strftime(rfc3339_format)


def content_md5(data: bytes):
    """
    The base64 encoded MD5 digest of data, as used in the Content-MD5 header.
    """
    return base64.b64encode(hashlib.md5(data).digest()).decode('ascii')


def parse_http_date(value: str):
    """

    """
    try:
        return datetime.datetime.strptime(value, http_date_format).replace(tzinfo=datetime.timezone.utc)
    except ValueError:
        return None


def add_metadata_from_urllib3(response):
    """
    Function to create metadata from the http headers/response.
    """
    headers = response.headers
    metadata = {'status': response.status}

    for key, value in headers.items():
        key = key.lower()
        if key == 'content-length':
            metadata['content_length'] = int(value)
        elif key == 'content-type':
            metadata['content_type'] = value
        elif key == 'etag':
            metadata['etag'] = value.strip('"')
        elif key == 'x-amz-version-id':
            metadata['version_id'] = value
        elif key == 'x-amz-delete-marker':
            metadata['delete_marker'] = value == 'true'
        elif key == 'last-modified':
            last_modified = parse_http_date(value)
            if last_modified is not None:
                metadata['last_modified'] = last_modified
        elif key.startswith('x-amz-meta-'):
            new_key = key[len('x-amz-meta-'):]
            metadata[new_key] = value

    return metadata
