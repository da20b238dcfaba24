#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Tue Jul  2 11:40:21 2024

@author: mike
"""
import urllib.parse
from typing import Optional, Protocol, runtime_checkable
from urllib3 import HTTPHeaderDict

from . import utils

#######################################################
### Request contract


@runtime_checkable
class Request(Protocol):
    """
    Anything that can produce a transport request for a region. Every operation builder implements this on its own.
    """
    def request(self, region: utils.Region) -> 'PreparedRequest':
        ...


class PreparedRequest:
    """
    A transport-level request: method, url, headers, and an optional body. Signing modifies the headers in place, so a fresh instance is made for every execution.
    """
    def __init__(self, method: str, url: urllib.parse.SplitResult, headers: HTTPHeaderDict=None, body: Optional[bytes]=None):
        self.method = method
        self.url = url
        self.headers = HTTPHeaderDict(headers) if headers is not None else HTTPHeaderDict()
        self.body = body

    @property
    def host(self):
        return self.url.netloc

    @property
    def path(self):
        return self.url.path

    @property
    def query(self):
        return self.url.query

    def geturl(self):
        return self.url.geturl()

    def __repr__(self):
        return f'{self.method} {self.geturl()}'


def prepare(method: str, region: utils.Region, path: str, headers=(), query=None, body: bytes=None, subdomain: str=''):
    """
    Resolve the url for the region and collect the headers into a new PreparedRequest.

    Parameters
    ----------
    method : str
        The http method.
    region : Region
        The region the request goes to.
    path : str
        The url path.
    headers : sequence of (name, value) pairs
        Added in order, so repeated names become multi-valued headers.
    query : Mapping, sequence of pairs, or None
        The query parameters. None means no query string.
    body : bytes or None
        The request body.
    subdomain : str
        Optional subdomain of the region endpoint.

    Returns
    -------
    PreparedRequest
    """
    url = utils.resolve_url(region, subdomain, path, query)
    header_dict = HTTPHeaderDict()
    for name, value in headers:
        header_dict.add(name, value)

    return PreparedRequest(method, url, header_dict, body)
