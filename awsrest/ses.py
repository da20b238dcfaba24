#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Jun 26 14:02:11 2024

@author: mike
"""
import base64
import datetime
import binascii
import email.utils
from dataclasses import dataclass, field, replace

from . import utils, response
from .request import prepare
from .exceptions import RequestBuildError

#######################################################
### Parameters

US_EAST_1 = utils.Region(protocol='https', endpoint='email.us-east-1.amazonaws.com')
US_WEST_2 = utils.Region(protocol='https', endpoint='email.us-west-2.amazonaws.com')
EU_WEST_1 = utils.Region(protocol='https', endpoint='email.eu-west-1.amazonaws.com')

charset = 'UTF-8'
decodable_charsets = {'utf-8': 'utf-8', 'iso-8859-1': 'iso-8859-1'}

form_content_type = 'application/x-www-form-urlencoded'

#######################################################
### Encoded words


def utf8_b_encoded_word(text: str):
    """
    RFC 2047 "B" encoded word of text in UTF-8, e.g. =?UTF-8?B?ZXjDoG1wbGU=?=
    """
    return f'=?{charset}?B?{base64.b64encode(text.encode("utf-8")).decode("ascii")}?='


def utf8_b_decode_word(word: str):
    """
    Decode an RFC 2047 "B" encoded word. Only the UTF-8 and ISO-8859-1 charsets are accepted.

    Parameters
    ----------
    word : str
        The encoded word.

    Returns
    -------
    str
    """
    if not word.startswith('=?'):
        raise ValueError('expected prefix "=?"')
    if not word.endswith('?=') or len(word) < 4:
        raise ValueError('expected suffix "?="')

    pieces = word[2:-2].split('?')
    if len(pieces) != 3:
        raise ValueError(f'expected charset, encoding and text separated by "?", got {len(pieces)} pieces')

    word_charset, encoding, text = pieces
    if word_charset.lower() not in decodable_charsets:
        raise ValueError(f'unsupported charset: {word_charset!r}')
    if encoding.upper() != 'B':
        raise ValueError(f'unsupported encoding: {encoding!r}')

    try:
        data = base64.b64decode(text, validate=True)
    except binascii.Error as err:
        raise ValueError(f'invalid base64 text: {text!r}') from err

    return data.decode(decodable_charsets[word_charset.lower()])


def encode_address(address: str):
    """
    Addresses that aren't plain ASCII get their display name (or the whole address when there's no display name) turned into an encoded word.
    """
    if address.isascii():
        return address

    name, addr = email.utils.parseaddr(address)
    if name and addr and addr.isascii():
        return f'{utf8_b_encoded_word(name)} <{addr}>'

    return utf8_b_encoded_word(address)


#######################################################
### Operation builder


@dataclass(frozen=True)
class SendEmail:
    """
    Builder for the SendEmail action. Every setter returns a new SendEmail.

    Example
    -------
    client.send_email().to('example@example.com').sender('noreply@example.com').subject('Welcome').text('Hello, example!').exec()
    """
    client: object = field(repr=False)
    to_addresses: tuple = ()
    cc_addresses: tuple = ()
    bcc_addresses: tuple = ()
    reply_to_addresses: tuple = ()
    return_path_address: str = None
    source: str = None
    subject_data: str = None
    text_data: str = field(default=None, repr=False)
    html_data: str = field(default=None, repr=False)
    sent_at: datetime.datetime = None

    def to(self, *addrs: str):
        return replace(self, to_addresses=self.to_addresses + addrs)

    def cc(self, *addrs: str):
        return replace(self, cc_addresses=self.cc_addresses + addrs)

    def bcc(self, *addrs: str):
        return replace(self, bcc_addresses=self.bcc_addresses + addrs)

    def reply_to(self, *addrs: str):
        return replace(self, reply_to_addresses=self.reply_to_addresses + addrs)

    def return_path(self, addr: str):
        """
        Where bounces and complaints get forwarded.
        """
        return replace(self, return_path_address=addr)

    def sender(self, addr: str):
        return replace(self, source=addr)

    def subject(self, data: str):
        return replace(self, subject_data=data)

    def text(self, data: str):
        return replace(self, text_data=data)

    def html(self, data: str):
        return replace(self, html_data=data)

    def timestamp(self, dt: datetime.datetime):
        """
        Fix the Timestamp parameter. Defaults to the time the request is produced.
        """
        return replace(self, sent_at=dt)

    def params(self):
        """
        The form parameters of the action as (name, value) pairs.
        """
        if not self.source:
            raise RequestBuildError('SendEmail needs a sender.')
        if not (self.to_addresses or self.cc_addresses or self.bcc_addresses):
            raise RequestBuildError('SendEmail needs at least one destination address.')
        if self.subject_data is None:
            raise RequestBuildError('SendEmail needs a subject.')
        if (self.text_data is None) and (self.html_data is None):
            raise RequestBuildError('SendEmail needs a text or html body.')

        params = [
            ('AWSAccessKeyId', self.client.access_key_id),
            ('Action', 'SendEmail'),
            ('Timestamp', utils.rfc3339(self.sent_at)),
            ]

        for member, addrs in (('Destination.ToAddresses', self.to_addresses), ('Destination.CcAddresses', self.cc_addresses), ('Destination.BccAddresses', self.bcc_addresses), ('ReplyToAddresses', self.reply_to_addresses)):
            for i, addr in enumerate(addrs, 1):
                params.append((f'{member}.member.{i}', encode_address(addr)))

        if self.return_path_address:
            params.append(('ReturnPath', self.return_path_address))
        params.append(('Source', encode_address(self.source)))

        params.append(('Message.Subject.Charset', charset))
        params.append(('Message.Subject.Data', self.subject_data))
        if self.text_data is not None:
            params.append(('Message.Body.Text.Charset', charset))
            params.append(('Message.Body.Text.Data', self.text_data))
        if self.html_data is not None:
            params.append(('Message.Body.Html.Charset', charset))
            params.append(('Message.Body.Html.Data', self.html_data))

        return params

    def request(self, region: utils.Region):
        body = utils.encode_query(self.params()).encode('utf-8')
        headers = (
            ('Content-Type', form_content_type),
            ('Content-Length', str(len(body))),
            ('Content-MD5', utils.content_md5(body)),
            )

        return prepare('POST', region, '/', headers, None, body)

    def exec(self):
        """
        Sign and send the email.

        Returns
        -------
        SendEmailResponse
        """
        resp = self.client.do(self, preload_content=True)

        return response.SendEmailResponse(resp)
