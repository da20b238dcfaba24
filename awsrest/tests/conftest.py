import io
import pytest
import urllib3
from collections import deque

from awsrest import Client, Credentials, Region

#################################################
### Mock transport


class MockPoolManager:
    """
    Stands in for urllib3.PoolManager. Responses are queued in FIFO order and the requests are captured for inspection.
    """
    def __init__(self):
        self._responses = deque()
        self.requests = []

    def add_response(self, status=200, headers=None, body=b''):
        self._responses.append((status, headers or {}, body))

    def request(self, method, url, body=None, headers=None, preload_content=True, **kwargs):
        self.requests.append({'method': method, 'url': url, 'body': body, 'headers': urllib3.HTTPHeaderDict(headers)})
        status, resp_headers, resp_body = self._responses.popleft()

        return urllib3.HTTPResponse(body=io.BytesIO(resp_body), headers=resp_headers, status=status, preload_content=preload_content)


#################################################
### Fixtures


@pytest.fixture
def credentials():
    return Credentials(access_key_id='AKID', secret_access_key='secret')


@pytest.fixture
def region():
    return Region(protocol='https', endpoint='s3.amazonaws.com')


@pytest.fixture
def pool():
    return MockPoolManager()


@pytest.fixture
def client(credentials, region, pool):
    return Client(credentials, region, session=pool)
