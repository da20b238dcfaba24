#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on May 13 08:04:38 2024

@author: mike
"""
import datetime
import urllib.parse
from dataclasses import dataclass, field, replace
from typing import Union

from . import utils, response
from .request import prepare
from .exceptions import RequestBuildError

#######################################################
### Parameters

US_STANDARD = utils.Region(protocol='https', endpoint='s3.amazonaws.com')
US_WEST_1 = utils.Region(protocol='https', endpoint='s3-us-west-1.amazonaws.com')
US_WEST_2 = utils.Region(protocol='https', endpoint='s3-us-west-2.amazonaws.com')
EU_WEST_1 = utils.Region(protocol='https', endpoint='s3-eu-west-1.amazonaws.com')
AP_SOUTHEAST_1 = utils.Region(protocol='https', endpoint='s3-ap-southeast-1.amazonaws.com')
AP_SOUTHEAST_2 = utils.Region(protocol='https', endpoint='s3-ap-southeast-2.amazonaws.com')
AP_NORTHEAST_1 = utils.Region(protocol='https', endpoint='s3-ap-northeast-1.amazonaws.com')
SA_EAST_1 = utils.Region(protocol='https', endpoint='s3-sa-east-1.amazonaws.com')

max_metadata_size = 2048

#######################################################
### Helper functions


def object_path(bucket: str, key: str):
    """
    The path-style resource of an object, with the key percent-encoded.
    """
    if not bucket:
        raise RequestBuildError('bucket must not be empty.')
    if not key:
        raise RequestBuildError('key must not be empty.')

    return f'/{bucket}/{urllib.parse.quote(key, safe="/~")}'


def _set_header(headers: tuple, name: str, value: str):
    """
    Replace every value of a header (case-insensitive) with a single value.
    """
    lower = name.lower()
    return tuple(h for h in headers if h[0].lower() != lower) + ((name, value),)


class AclGrantee:
    """
    A grantee for the x-amz-grant-* headers. The first of email_address, id, and uri that is set is used.
    """
    def __init__(self, email_address: str=None, id: str=None, uri: str=None):
        self.email_address = email_address
        self.id = id
        self.uri = uri

    def __str__(self):
        if self.email_address:
            return f'emailAddress="{self.email_address}"'
        elif self.id:
            return f'id="{self.id}"'
        elif self.uri:
            return f'uri="{self.uri}"'
        return ''

    def __repr__(self):
        return f'AclGrantee({str(self)})'


#######################################################
### Operation builders


@dataclass(frozen=True)
class PutObject:
    """
    Builder for an object PUT. Every setter returns a new PutObject, so a partly configured builder can be shared and reused.
    """
    client: object = field(repr=False)
    bucket: str
    key: str
    headers: tuple = ()
    body: bytes = field(default=None, repr=False)

    def _add(self, name: str, value: str):
        return replace(self, headers=self.headers + ((name, value),))

    def _set(self, name: str, value: str):
        return replace(self, headers=_set_header(self.headers, name, value))

    def request(self, region: utils.Region):
        return prepare('PUT', region, object_path(self.bucket, self.key), self.headers, None, self.body)

    def exec(self):
        """
        Sign and send the PUT.

        Returns
        -------
        PutObjectResponse
        """
        resp = self.client.do(self, preload_content=True)

        return response.PutObjectResponse(resp)

    def content(self, data: bytes):
        """
        Attach the body. Content-Length and Content-MD5 are computed here so they're in place before signing.
        """
        data = bytes(data)
        headers = _set_header(self.headers, 'Content-Length', str(len(data)))
        headers = _set_header(headers, 'Content-MD5', utils.content_md5(data))

        return replace(self, headers=headers, body=data)

    def content_type(self, mime: str):
        return self._set('Content-Type', mime)

    def content_encoding(self, encoding: str):
        return self._set('Content-Encoding', encoding)

    def cache_control(self, control: str):
        return self._set('Cache-Control', control)

    def expires(self, value: Union[int, datetime.timedelta, datetime.datetime]):
        """
        Set the Expires header. A datetime is used as is; seconds or a timedelta are counted from now.
        """
        if isinstance(value, int):
            value = datetime.timedelta(seconds=value)
        if isinstance(value, datetime.timedelta):
            value = utils.utc() + value

        return self._set('Expires', utils.http_date(value))

    def metadata(self, meta: dict):
        """
        Add user metadata as x-amz-meta-* headers. Keys and values must be strings and the total must be under 2048 bytes.
        """
        size = 0
        for name, value in self.headers:
            if name.lower().startswith('x-amz-meta-'):
                size += len(name[len('x-amz-meta-'):].encode()) + len(value.encode())

        headers = self.headers
        for meta_key, meta_val in meta.items():
            if isinstance(meta_key, str) and isinstance(meta_val, str):
                size += len(meta_key.encode())
                size += len(meta_val.encode())
            else:
                raise TypeError('metadata keys and values must be strings.')
            headers += ((f'x-amz-meta-{meta_key}', meta_val),)

        if size > max_metadata_size:
            raise ValueError(f'metadata size is {size} bytes, but it must be under {max_metadata_size} bytes.')

        return replace(self, headers=headers)

    def copy_source(self, bucket: str, key: str):
        return self._set('x-amz-copy-source', f'{bucket}/{key}')

    def metadata_directive(self, directive: str):
        """
        COPY or REPLACE.
        """
        return self._set('x-amz-metadata-directive', directive)

    def copy_source_if_match(self, etag: str):
        return self._add('x-amz-copy-source-if-match', etag)

    def copy_source_if_none_match(self, etag: str):
        return self._add('x-amz-copy-source-if-none-match', etag)

    def copy_source_if_unmodified_since(self, latest: datetime.datetime):
        return self._set('x-amz-copy-source-if-unmodified-since', utils.http_date(latest))

    def copy_source_if_modified_since(self, latest: datetime.datetime):
        return self._set('x-amz-copy-source-if-modified-since', utils.http_date(latest))

    def server_side_encryption(self, algorithm: str):
        return self._set('x-amz-server-side-encryption', algorithm)

    def storage_class(self, storage_class: str):
        return self._set('x-amz-storage-class', storage_class)

    def website_redirect_location(self, uri: str):
        return self._set('x-amz-website-redirect-location', uri)

    def acl(self, acl: str):
        """
        A canned ACL such as "private" or "public-read".
        """
        return self._set('x-amz-acl', acl)

    def grant_read(self, grantee: AclGrantee):
        return self._add('x-amz-grant-read', str(grantee))

    def grant_write(self, grantee: AclGrantee):
        return self._add('x-amz-grant-write', str(grantee))

    def grant_read_acp(self, grantee: AclGrantee):
        return self._add('x-amz-grant-read-acp', str(grantee))

    def grant_write_acp(self, grantee: AclGrantee):
        return self._add('x-amz-grant-write-acp', str(grantee))

    def grant_full_control(self, grantee: AclGrantee):
        return self._add('x-amz-grant-full-control', str(grantee))


@dataclass(frozen=True)
class GetObject:
    """
    Builder for an object GET. The response streams, so it has to be released by the caller.
    """
    client: object = field(repr=False)
    bucket: str
    key: str
    headers: tuple = ()
    query: tuple = ()

    def _add(self, name: str, value: str):
        return replace(self, headers=self.headers + ((name, value),))

    def _set(self, name: str, value: str):
        return replace(self, headers=_set_header(self.headers, name, value))

    def _param(self, name: str, value: str):
        return replace(self, query=self.query + ((name, value),))

    def request(self, region: utils.Region):
        return prepare('GET', region, object_path(self.bucket, self.key), self.headers, self.query)

    def exec(self):
        """
        Sign and send the GET.

        Returns
        -------
        GetObjectResponse
        """
        resp = self.client.do(self, preload_content=False)

        return response.GetObjectResponse(resp)

    def version_id(self, version_id: str):
        return self._param('versionId', version_id)

    def response_content_type(self, mime: str):
        return self._param('response-content-type', mime)

    def response_content_language(self, language: str):
        return self._param('response-content-language', language)

    def response_expires(self, value: Union[str, datetime.datetime]):
        if isinstance(value, datetime.datetime):
            value = utils.http_date(value)
        return self._param('response-expires', value)

    def response_cache_control(self, control: str):
        return self._param('response-cache-control', control)

    def response_content_disposition(self, disposition: str):
        return self._param('response-content-disposition', disposition)

    def response_content_encoding(self, encoding: str):
        return self._param('response-content-encoding', encoding)

    def range(self, start: int=None, end: int=None):
        """
        Byte range to fetch. Either end can be left open.
        """
        if (start is None) and (end is None):
            raise ValueError('At least one of start or end must be given.')

        start = '' if start is None else str(start)
        end = '' if end is None else str(end)

        return self._set('Range', f'bytes={start}-{end}')

    def if_modified_since(self, latest: datetime.datetime):
        return self._set('If-Modified-Since', utils.http_date(latest))

    def if_unmodified_since(self, latest: datetime.datetime):
        return self._set('If-Unmodified-Since', utils.http_date(latest))

    def if_match(self, etag: str):
        return self._add('If-Match', etag)

    def if_none_match(self, etag: str):
        return self._add('If-None-Match', etag)


@dataclass(frozen=True)
class DeleteObject:
    """ """
    client: object = field(repr=False)
    bucket: str
    key: str
    headers: tuple = ()
    query: tuple = ()

    def request(self, region: utils.Region):
        return prepare('DELETE', region, object_path(self.bucket, self.key), self.headers, self.query)

    def exec(self):
        """
        Sign and send the DELETE.

        Returns
        -------
        DeleteObjectResponse
        """
        resp = self.client.do(self, preload_content=True)

        return response.DeleteObjectResponse(resp)

    def mfa(self, serial: str, value: str):
        """
        Serial number of the MFA device and the current token, needed on MFA Delete buckets.
        """
        return replace(self, headers=_set_header(self.headers, 'x-amz-mfa', f'{serial} {value}'))

    def version_id(self, version_id: str):
        return replace(self, query=self.query + (('versionId', version_id),))
