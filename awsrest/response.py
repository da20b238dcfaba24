#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Mon Feb  9 09:33:39 2026

@author: mike
"""
import warnings
import weakref
import xml.etree.ElementTree as ET

from . import utils
from .exceptions import ServiceError

#######################################################
### Parameters

error_fields = {
    'Code': 'code',
    'Message': 'message',
    'RequestId': 'request_id',
    'HostId': 'host_id',
    'StringToSignBytes': 'string_to_sign_bytes',
    'SignatureProvided': 'signature_provided',
    'AWSAccessKeyId': 'aws_access_key_id',
    }

#############################################################
### Error parsing


def _local_name(tag):
    return tag.split('}')[-1]


def _iter_error_elements(root):
    """
    Yield the leaf elements of an error document. S3 puts them directly under <Error>, while the query APIs nest an <Error> inside <ErrorResponse>.
    """
    for child in root:
        if _local_name(child.tag) == 'Error' and len(child):
            yield from _iter_error_elements(child)
        else:
            yield child


def parse_error(status: int, body: bytes):
    """
    Build a ServiceError from an XML error document.

    Parameters
    ----------
    status : int
        The http status code.
    body : bytes or None
        The response body. An empty body gives an error with only the status.

    Returns
    -------
    ServiceError
    """
    if not body:
        return ServiceError(status)

    try:
        root = ET.fromstring(body)
    except ET.ParseError:
        return ServiceError(status, 'ParseError', 'Could not parse XML error response: ' + str(body))

    kwargs = {}
    extra = {}
    for elem in _iter_error_elements(root):
        name = _local_name(elem.tag)
        if name in error_fields:
            kwargs[error_fields[name]] = elem.text
        else:
            extra[name] = elem.text

    return ServiceError(status, extra=extra, **kwargs)


#############################################################
### Response classes


class ObjectResponse:
    """
    Status, headers, and metadata of an object operation. The body has already been read and the connection released.
    """
    def __init__(self, response):
        self.status = response.status
        self.reason = response.reason
        self.headers = dict(response.headers)
        self.metadata = utils.add_metadata_from_urllib3(response)

    def __repr__(self):
        return f'status: {self.status}'


class PutObjectResponse(ObjectResponse):
    """ """

    @property
    def etag(self):
        return self.metadata.get('etag')


class DeleteObjectResponse(ObjectResponse):
    """ """

    @property
    def delete_marker(self):
        return self.metadata.get('delete_marker', False)


def _release_unreleased(response):
    warnings.warn('GetObjectResponse was garbage collected without being released. Call release() or use it as a context manager.', ResourceWarning)
    response.drain_conn()
    response.release_conn()


class GetObjectResponse(ObjectResponse):
    """
    Wraps a streaming get_object response. The stream holds a connection from the pool until release (or close) is called, so use it as a context manager or release it explicitly.
    """
    def __init__(self, response):
        super().__init__(response)
        self.stream = response
        self._finalizer = weakref.finalize(self, _release_unreleased, response)
        self._finalizer.atexit = False

    @property
    def released(self):
        return not self._finalizer.alive

    def read(self, amt: int=None):
        """
        Read up to amt bytes from the body (everything when amt is None).
        """
        return self.stream.read(amt)

    def release(self):
        """
        Drain what's left of the body and hand the connection back to the pool. Calling it more than once is fine.
        """
        if self._finalizer.detach() is not None:
            self.stream.drain_conn()
            self.stream.release_conn()

    close = release

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.release()


class SendEmailResponse:
    """
    Result of a SendEmail call.
    """
    def __init__(self, response):
        self.status = response.status
        self.reason = response.reason
        self.headers = dict(response.headers)
        self.message_id = None
        self.request_id = None
        self.data = response.data

        # Only a successful XML result carries the ids, anything else stays in data
        content_type = response.headers.get('Content-Type', '')

        if self.data and ((self.status // 100) == 2) and ('xml' in content_type):
            try:
                root = ET.fromstring(self.data)
            except ET.ParseError:
                return

            for elem in root.iter():
                name = _local_name(elem.tag)
                if name == 'MessageId':
                    self.message_id = elem.text
                elif name == 'RequestId':
                    self.request_id = elem.text

    def __repr__(self):
        return f'status: {self.status}'
