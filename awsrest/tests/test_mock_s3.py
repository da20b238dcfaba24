import pytest
import uuid
import boto3
import urllib3
import concurrent.futures
from moto.server import ThreadedMotoServer

from awsrest import Client, Credentials, Region, ServiceError


@pytest.fixture(scope="module")
def s3_server():
    server = ThreadedMotoServer(port=5055)
    server.start()
    yield "http://localhost:5055"
    server.stop()


@pytest.fixture(scope="module")
def bucket(s3_server):
    bucket_name = "test-bucket"

    # Create the bucket in the mock server using boto3
    s3_client = boto3.client(
        "s3", endpoint_url=s3_server, aws_access_key_id="testing", aws_secret_access_key="testing", region_name="us-east-1"
    )
    s3_client.create_bucket(Bucket=bucket_name)

    return bucket_name


@pytest.fixture
def moto_client(bucket):
    credentials = Credentials(access_key_id="testing", secret_access_key="testing")
    region = Region(protocol="http", endpoint="localhost:5055")

    return Client(credentials, region)


def test_mock_s3_put_get_object(moto_client, bucket):
    key = f"test-key-{uuid.uuid4().hex}"
    data = b"hello world"

    # Put object
    resp = moto_client.put_object(bucket, key).content(data).content_type("text/plain").metadata({"owner": "joe"}).exec()
    assert resp.status == 200
    assert resp.etag

    # Get object
    with moto_client.get_object(bucket, key).exec() as resp:
        assert resp.status == 200
        assert resp.metadata["owner"] == "joe"
        assert resp.read() == data


def test_mock_s3_get_range(moto_client, bucket):
    key = f"range-key-{uuid.uuid4().hex}"
    moto_client.put_object(bucket, key).content(b"0123456789").exec()

    with moto_client.get_object(bucket, key).range(2, 5).exec() as resp:
        assert resp.status == 206
        assert resp.read() == b"2345"


def test_mock_s3_missing_key(moto_client, bucket):
    with pytest.raises(ServiceError) as err:
        moto_client.get_object(bucket, f"missing-{uuid.uuid4().hex}").exec()

    assert err.value.status == 404
    assert err.value.code == "NoSuchKey"


def test_mock_s3_delete_object(moto_client, bucket):
    key = f"delete-key-{uuid.uuid4().hex}"
    moto_client.put_object(bucket, key).content(b"bye").exec()

    resp = moto_client.delete_object(bucket, key).exec()
    assert resp.status == 204

    with pytest.raises(ServiceError):
        moto_client.get_object(bucket, key).exec()


def test_mock_s3_presigned_url(moto_client, bucket):
    key = f"shared key {uuid.uuid4().hex}"
    moto_client.put_object(bucket, key).content(b"shared").exec()

    url = moto_client.presign(bucket, key, 60)
    resp = urllib3.request("GET", url)

    assert resp.status == 200
    assert resp.data == b"shared"


def test_mock_s3_concurrent_puts(moto_client, bucket):
    keys = [f"concurrent-{i}-{uuid.uuid4().hex}" for i in range(10)]

    def put(key):
        return moto_client.put_object(bucket, key).content(key.encode()).exec().status

    with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
        statuses = list(executor.map(put, keys))

    assert statuses == [200] * len(keys)

    for key in keys:
        with moto_client.get_object(bucket, key).exec() as resp:
            assert resp.read() == key.encode()
