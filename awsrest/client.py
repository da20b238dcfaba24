#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on May 13 08:04:38 2024

@author: mike
"""
import logging
import datetime
from typing import Union

from . import http_url, utils, response, s3, ses
from .signer import Signer

logger = logging.getLogger(__name__)

#######################################################
### Main class


class Client:
    """

    """
    def __init__(self, credentials: utils.Credentials, region: utils.Region, session=None, max_pool_connections: int=10, read_timeout: int=120):
        """
        Holds the credentials, the region, and the http connection pool. One client can be shared by many threads and operations: signing only reads the (immutable) credentials and region.

        Parameters
        ----------
        credentials : Credentials
            The access key id and secret access key. Only the signer reads the secret.
        region : Region
            The region all requests of this client go to.
        session : urllib3.PoolManager or None
            The http transport. One is created from max_pool_connections and read_timeout when None.
        max_pool_connections : int
            The number of connection pools to cache.
        read_timeout: int
            The read timeout in seconds.
        """
        if session is None:
            session = http_url.session(max_pool_connections, read_timeout)

        self._signer = Signer(credentials)
        self._session = session
        self.region = region

    @property
    def access_key_id(self):
        return self._signer.access_key_id

    def __repr__(self):
        return f'Client(access_key_id={self.access_key_id!r}, region={self.region!r})'

    def sign(self, request, date: datetime.datetime=None):
        """
        Header-mode signing of a prepared request (in place). Returns the string that was signed.
        """
        return self._signer.sign(request, date)

    def sign_url(self, url, lifetime: Union[int, datetime.timedelta], now: datetime.datetime=None):
        """
        Query-mode signing of a GET url. Returns the signed url.
        """
        return self._signer.sign_url(url, lifetime, now)

    def presign(self, bucket: str, key: str, lifetime: Union[int, datetime.timedelta]):
        """
        Shareable url to GET an object until lifetime (seconds) runs out.

        Parameters
        ----------
        bucket : str
            The bucket name.
        key : str
            The object key.
        lifetime : int or datetime.timedelta
            Seconds until the url expires.

        Returns
        -------
        str
        """
        url = self.region.url('', s3.object_path(bucket, key))

        return self.sign_url(url, lifetime)

    def prepare(self, request):
        """
        Produce the transport request of an operation for this client's region and sign it.

        Returns
        -------
        PreparedRequest
        """
        prepared = request.request(self.region)
        self.sign(prepared)

        return prepared

    def do(self, request, preload_content: bool=True):
        """
        Wrapper to prepare, sign, and send an operation via urllib3. A non-2xx response with an XML body is raised as a ServiceError, any other response is returned.

        Parameters
        ----------
        request : Request
            The operation.
        preload_content : bool
            Read the whole body up front (and release the connection) or leave it streaming.

        Returns
        -------
        urllib3.HTTPResponse
        """
        prepared = self.prepare(request)
        logger.debug('Sending %r', prepared)

        resp = self._session.request(prepared.method, prepared.geturl(), body=prepared.body, headers=prepared.headers, preload_content=preload_content, redirect=False)

        content_type = resp.headers.get('Content-Type', '')
        if ((resp.status // 100) != 2) and ('xml' in content_type):
            body = resp.data
            resp.release_conn()
            error = response.parse_error(resp.status, body)
            logger.debug('Service error for %r: %r', prepared, error)
            raise error

        return resp

    def put_object(self, bucket: str, key: str):
        """
        Start a PUT of an object. Configure it with the builder methods and send it with exec().
        """
        return s3.PutObject(self, bucket, key)

    def get_object(self, bucket: str, key: str):
        """
        Start a GET of an object. The GetObjectResponse returned by exec() must be released.
        """
        return s3.GetObject(self, bucket, key)

    def delete_object(self, bucket: str, key: str):
        return s3.DeleteObject(self, bucket, key)

    def send_email(self):
        """
        Start a SendEmail request. The client's region must be an email region (see awsrest.ses).
        """
        return ses.SendEmail(self)
