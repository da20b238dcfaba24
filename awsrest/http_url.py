#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on May 13 08:04:38 2024

@author: mike
"""
import urllib3


def session(max_pool_connections: int = 10, read_timeout: int=120):
    """
    Function to setup a urllib3 pool manager for the signed requests. Retries and redirects are disabled, so transport errors reach the caller as they happen.

    Parameters
    ----------
    max_pool_connections : int
        The number of connection pools to cache.
    read_timeout: int
        The read timeout in seconds.

    Returns
    -------
    Pool Manager object
    """
    timeout = urllib3.util.Timeout(read=read_timeout)
    http = urllib3.PoolManager(num_pools=max_pool_connections, timeout=timeout, retries=False)

    return http
