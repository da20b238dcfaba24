import base64
import dataclasses
import datetime
import urllib.parse
import pytest

from awsrest import Client, ServiceError, RequestBuildError
from awsrest import ses
from awsrest.signer import header_string_to_sign

#################################################
### Parameters

fixed_time = datetime.datetime(2013, 1, 24, 7, 36, 58, tzinfo=datetime.timezone.utc)

send_email_result = b"""<SendEmailResponse xmlns="http://ses.amazonaws.com/doc/2010-12-01/">
  <SendEmailResult>
    <MessageId>000001271b15238a-fd3ae762-2563-11df-8cd4-6d4e828a9ae8-000000</MessageId>
  </SendEmailResult>
  <ResponseMetadata>
    <RequestId>fd3ae762-2563-11df-8cd4-6d4e828a9ae8</RequestId>
  </ResponseMetadata>
</SendEmailResponse>"""

message_rejected = b"""<ErrorResponse xmlns="http://ses.amazonaws.com/doc/2010-12-01/">
  <Error>
    <Type>Sender</Type>
    <Code>MessageRejected</Code>
    <Message>Email address is not verified.</Message>
  </Error>
  <RequestId>a3b5e8f1-2563-11df-8cd4-6d4e828a9ae8</RequestId>
</ErrorResponse>"""


@pytest.fixture
def email_client(credentials, pool):
    return Client(credentials, ses.US_EAST_1, session=pool)


def complete(client):
    return client.send_email().to('to@example.com').sender('from@example.com').subject('Welcome').text('Hello, example!').timestamp(fixed_time)


################################################
### Encoded words


def test_encoded_word():
    assert ses.utf8_b_encoded_word('hello') == '=?UTF-8?B?aGVsbG8=?='
    assert ses.utf8_b_decode_word('=?UTF-8?B?aGVsbG8=?=') == 'hello'
    assert ses.utf8_b_decode_word(ses.utf8_b_encoded_word('Grüße')) == 'Grüße'


def test_decode_latin1_word():
    assert ses.utf8_b_decode_word('=?ISO-8859-1?B?6Q==?=') == 'é'
    assert ses.utf8_b_decode_word('=?utf-8?b?aGVsbG8=?=') == 'hello'


@pytest.mark.parametrize('word', [
    'UTF-8?B?aGVsbG8=?=',
    '=?UTF-8?B?aGVsbG8=',
    '=?UTF-8?aGVsbG8=?=',
    '=?UTF-8?B?aGVs?bG8=?=',
    '=?KOI8-R?B?aGVsbG8=?=',
    '=?UTF-8?Q?hello?=',
    '=?UTF-8?B?not base64!?=',
    ])
def test_decode_word_errors(word):
    with pytest.raises(ValueError):
        ses.utf8_b_decode_word(word)


def test_encode_address():
    assert ses.encode_address('joe@example.com') == 'joe@example.com'
    assert ses.encode_address('Joe <joe@example.com>') == 'Joe <joe@example.com>'

    name = base64.b64encode('José'.encode('utf-8')).decode()
    assert ses.encode_address('José <jose@example.com>') == f'=?UTF-8?B?{name}?= <jose@example.com>'

    whole = base64.b64encode('josé@example.com'.encode('utf-8')).decode()
    assert ses.encode_address('josé@example.com') == f'=?UTF-8?B?{whole}?='


################################################
### Builder


def test_params(email_client):
    builder = (complete(email_client)
               .to('to2@example.com')
               .cc('cc@example.com')
               .bcc('bcc1@example.com', 'bcc2@example.com')
               .reply_to('reply@example.com')
               .return_path('bounce@example.com')
               .html('<p>Hello, example!</p>')
               )
    params = dict(builder.params())

    assert params['AWSAccessKeyId'] == 'AKID'
    assert params['Action'] == 'SendEmail'
    assert params['Timestamp'] == '2013-01-24T07:36:58Z'
    assert params['Destination.ToAddresses.member.1'] == 'to@example.com'
    assert params['Destination.ToAddresses.member.2'] == 'to2@example.com'
    assert params['Destination.CcAddresses.member.1'] == 'cc@example.com'
    assert 'Destination.CcAddresses.member.2' not in params
    assert params['Destination.BccAddresses.member.1'] == 'bcc1@example.com'
    assert params['Destination.BccAddresses.member.2'] == 'bcc2@example.com'
    assert params['ReplyToAddresses.member.1'] == 'reply@example.com'
    assert params['ReturnPath'] == 'bounce@example.com'
    assert params['Source'] == 'from@example.com'
    assert params['Message.Subject.Charset'] == 'UTF-8'
    assert params['Message.Subject.Data'] == 'Welcome'
    assert params['Message.Body.Text.Data'] == 'Hello, example!'
    assert params['Message.Body.Html.Charset'] == 'UTF-8'
    assert params['Message.Body.Html.Data'] == '<p>Hello, example!</p>'


def test_text_only_has_no_html(email_client):
    params = dict(complete(email_client).params())

    assert 'Message.Body.Html.Data' not in params
    assert 'Destination.CcAddresses.member.1' not in params
    assert 'ReturnPath' not in params


def test_builder_is_reusable(email_client):
    base = complete(email_client)
    other = base.to('other@example.com')

    assert base.to_addresses == ('to@example.com',)
    assert other.to_addresses == ('to@example.com', 'other@example.com')


@pytest.mark.parametrize('strip', ['source', 'to_addresses', 'subject_data', 'text_data'])
def test_missing_fields(email_client, strip):
    builder = complete(email_client)
    builder = dataclasses.replace(builder, **{strip: () if strip == 'to_addresses' else None})

    with pytest.raises(RequestBuildError):
        builder.params()


def test_request(email_client):
    request = complete(email_client).request(email_client.region)
    body = urllib.parse.parse_qs(request.body.decode())

    assert request.method == 'POST'
    assert request.geturl() == 'https://email.us-east-1.amazonaws.com/'
    assert request.headers['Content-Type'] == 'application/x-www-form-urlencoded'
    assert request.headers['Content-Length'] == str(len(request.body))
    assert body['Action'] == ['SendEmail']
    assert body['Message.Body.Text.Data'] == ['Hello, example!']


################################################
### Execution


def test_exec(email_client, pool):
    pool.add_response(200, {'Content-Type': 'text/xml'}, send_email_result)

    resp = complete(email_client).exec()

    assert resp.status == 200
    assert resp.message_id == '000001271b15238a-fd3ae762-2563-11df-8cd4-6d4e828a9ae8-000000'
    assert resp.request_id == 'fd3ae762-2563-11df-8cd4-6d4e828a9ae8'

    sent = pool.requests[0]
    assert sent['method'] == 'POST'
    assert sent['headers']['Authorization'].startswith('AWS AKID:')

    class Sent:
        method = 'POST'
        headers = sent['headers']
        path = '/'
        query = ''

    to_sign = header_string_to_sign(Sent)
    assert to_sign.split('\n')[2] == 'application/x-www-form-urlencoded'
    assert to_sign.endswith('\n/')


def test_exec_rejected(email_client, pool):
    pool.add_response(400, {'Content-Type': 'text/xml'}, message_rejected)

    with pytest.raises(ServiceError) as err:
        complete(email_client).exec()

    assert err.value.status == 400
    assert err.value.code == 'MessageRejected'
    assert err.value.message == 'Email address is not verified.'
    assert err.value.request_id == 'a3b5e8f1-2563-11df-8cd4-6d4e828a9ae8'
    assert err.value.extra['Type'] == 'Sender'


def test_exec_non_xml_error_is_returned(email_client, pool):
    pool.add_response(503, {'Content-Type': 'text/html'}, b'<html>busy</html>')

    resp = complete(email_client).exec()

    assert resp.status == 503
    assert resp.message_id is None
    assert resp.data == b'<html>busy</html>'


def test_exec_incomplete_sends_nothing(email_client, pool):
    with pytest.raises(RequestBuildError):
        email_client.send_email().to('to@example.com').exec()

    assert pool.requests == []
