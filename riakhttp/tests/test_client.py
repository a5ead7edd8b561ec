# Copyright 2010-present Basho Technologies, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import base64
import socket
import unittest

from http.client import RemoteDisconnected

from riakhttp import RiakClient, RiakBucket, SecurityCreds
from riakhttp.riak_error import ProtocolError, TransportError
from riakhttp.tests import DUMMY_HTTP_PORT, RUN_CLIENT
from riakhttp.tests.base import FakeResponse, IntegrationTestBase, \
    UnitTestBase, json_response


class ClientConfigTests(unittest.TestCase):
    def test_defaults(self):
        client = RiakClient()
        self.assertEqual('127.0.0.1', client.host)
        self.assertEqual(8098, client.port)
        self.assertEqual('riak', client.prefix)
        self.assertEqual('mapred', client.mapred_prefix)
        self.assertEqual('http', client.scheme)
        self.assertIsNone(client.credentials)
        self.assertEqual(2, client.get_r())
        self.assertEqual(2, client.get_w())
        self.assertEqual(2, client.get_dw())

    def test_random_client_id(self):
        c1 = RiakClient()
        c2 = RiakClient()
        self.assertTrue(c1.get_client_id().startswith('py_'))
        self.assertTrue(c2.get_client_id().startswith('py_'))
        self.assertIsInstance(c1.client_id, str)

    def test_uses_client_id_if_given(self):
        client = RiakClient(client_id='my-client')
        self.assertEqual('my-client', client.client_id)

    def test_setters_chain_and_round_trip(self):
        client = RiakClient()
        result = client.set_r(1).set_w(3).set_dw(4).set_client_id('abc')
        self.assertIs(client, result)
        self.assertEqual(1, client.get_r())
        self.assertEqual(3, client.get_w())
        self.assertEqual(4, client.get_dw())
        self.assertEqual('abc', client.get_client_id())

        client.set_r(5).set_r(6)
        self.assertEqual(6, client.get_r())

    def test_quorum_properties(self):
        client = RiakClient()
        client.w = 'quorum'
        self.assertEqual('quorum', client.get_w())
        client.dw = 1
        self.assertEqual(1, client.dw)

    def test_invalid_quorum_values(self):
        client = RiakClient()
        for bad in (0, -1, 'two', 1.5, True, None):
            with self.assertRaises(ValueError):
                client.set_r(bad)
        with self.assertRaises(ValueError):
            RiakClient(w=0)
        self.assertEqual(2, client.get_r())

    def test_empty_client_id_rejected(self):
        with self.assertRaises(ValueError):
            RiakClient().set_client_id('')

    def test_invalid_scheme(self):
        with self.assertRaises(ValueError):
            RiakClient(scheme='ftp')

    def test_credentials_from_dict(self):
        client = RiakClient(credentials={'username': 'riakuser',
                                         'password': 'secret'})
        self.assertIsInstance(client.credentials, SecurityCreds)
        self.assertEqual('riakuser', client.credentials.username)
        self.assertEqual('http', client.scheme)

    def test_tls_credentials_imply_https(self):
        creds = SecurityCreds(cacert_file='/path/to/cacert.pem')
        client = RiakClient(credentials=creds)
        self.assertEqual('https', client.scheme)
        client = RiakClient(credentials=creds, scheme='http')
        self.assertEqual('http', client.scheme)

    def test_invalid_credentials(self):
        with self.assertRaises(TypeError):
            RiakClient(credentials=['riakuser'])


class ClientBucketTests(unittest.TestCase):
    def test_bucket_references_client_and_name(self):
        client = RiakClient()
        bucket = client.bucket('test')
        self.assertIsInstance(bucket, RiakBucket)
        self.assertIs(client, bucket.client)
        self.assertEqual('test', bucket.name)

    def test_bucket_is_reused_while_referenced(self):
        client = RiakClient()
        b1 = client.bucket('test')
        b2 = client.bucket('test')
        self.assertIs(b1, b2)
        self.assertNotEqual(b1, client.bucket('other'))

    def test_bucket_name_must_be_string(self):
        client = RiakClient()
        with self.assertRaises(TypeError):
            client.bucket(42)
        with self.assertRaises(TypeError):
            client.bucket(b'bytes')

    def test_bucket_quorum_falls_back_to_client(self):
        client = RiakClient().set_r(3)
        bucket = client.bucket('test')
        self.assertEqual(3, bucket.get_r())
        self.assertEqual(2, bucket.get_w())
        bucket.set_r(1).set_w('all').set_dw(1)
        self.assertEqual(1, bucket.get_r())
        self.assertEqual('all', bucket.get_w())
        self.assertEqual(1, bucket.get_dw())
        self.assertEqual(4, bucket.get_r(4))
        self.assertEqual(3, client.get_r())
        with self.assertRaises(ValueError):
            bucket.set_dw(0)


class ClientRequestTests(UnitTestBase, unittest.TestCase):
    def test_buckets(self):
        client = self.create_client(
            json_response({'buckets': ['b1', 'b2']}))
        buckets = client.buckets()
        self.assertEqual(['b1', 'b2'], [b.name for b in buckets])
        for bucket in buckets:
            self.assertIs(client, bucket.client)
        self.assertEqual('GET', self.requests[0]['method'])
        self.assertEqual('/riak?buckets=true', self.requests[0]['uri'])

    def test_buckets_with_timeout(self):
        client = self.create_client(json_response({'buckets': []}))
        self.assertEqual([], client.get_buckets(timeout=5000))
        self.assertEqual('/riak?buckets=true&timeout=5000',
                         self.requests[0]['uri'])
        with self.assertRaises(ValueError):
            client.get_buckets(timeout=-1)

    def test_buckets_uses_configured_prefix(self):
        client = self.create_client(json_response({'buckets': []}),
                                    prefix='kv')
        client.buckets()
        self.assertEqual('/kv?buckets=true', self.requests[0]['uri'])

    def test_buckets_malformed_json(self):
        client = self.create_client(FakeResponse(200, b'<html>'),
                                    FakeResponse(200, b'<html>'))
        with self.assertRaises(ProtocolError):
            client.buckets()
        with self.assertRaises(TransportError):
            client.buckets()

    def test_buckets_unexpected_shape(self):
        client = self.create_client(json_response({'keys': ['a']}),
                                    json_response({'buckets': [1, 2]}))
        with self.assertRaises(ProtocolError):
            client.buckets()
        with self.assertRaises(ProtocolError):
            client.buckets()

    def test_buckets_error_status(self):
        client = self.create_client(FakeResponse(500, b'oops'))
        with self.assertRaises(TransportError) as cm:
            client.buckets()
        self.assertEqual(500, cm.exception.status)
        self.assertEqual(b'oops', cm.exception.body)

    def test_buckets_unreachable(self):
        client = self.create_client(ConnectionRefusedError())
        with self.assertRaises(TransportError):
            client.buckets()
        self.assertTrue(self.connection.instances[0].closed)

    def test_get_keys(self):
        client = self.create_client(json_response({'keys': ['k1']}),
                                    json_response({'keys': []}))
        bucket = client.bucket('my bucket')
        self.assertEqual(['k1'], bucket.get_keys())
        self.assertEqual('/riak/my+bucket?keys=true&props=false',
                         self.requests[0]['uri'])
        self.assertEqual([], client.get_keys('other', timeout=10))
        self.assertEqual('/riak/other?keys=true&props=false&timeout=10',
                         self.requests[1]['uri'])

    def test_is_alive(self):
        client = self.create_client(FakeResponse(200, b'OK'))
        self.assertTrue(client.is_alive())
        self.assertEqual('GET', self.requests[0]['method'])
        self.assertEqual('/ping', self.requests[0]['uri'])

    def test_is_alive_requires_ok_body_and_status(self):
        client = self.create_client(FakeResponse(200, b'NOT OK'),
                                    FakeResponse(503, b'OK'),
                                    FakeResponse(200, b'OK\n'),
                                    FakeResponse(200, b''))
        self.assertFalse(client.is_alive())
        self.assertFalse(client.is_alive())
        self.assertFalse(client.is_alive())
        self.assertFalse(client.is_alive())

    def test_is_alive_swallows_transport_errors(self):
        client = self.create_client(ConnectionRefusedError(),
                                    socket.timeout('timed out'),
                                    RemoteDisconnected('closed'))
        self.assertFalse(client.is_alive())
        self.assertFalse(client.is_alive())
        self.assertFalse(client.is_alive())

    def test_ping_raises_transport_errors(self):
        client = self.create_client(ConnectionRefusedError())
        with self.assertRaises(TransportError):
            client.ping()

    def test_request_headers(self):
        client = self.create_client(FakeResponse(200, b'OK'),
                                    FakeResponse(200, b'OK'),
                                    client_id='client-1')
        client.ping()
        headers = self.requests[0]['headers']
        self.assertEqual('client-1', headers['X-Riak-ClientId'])
        self.assertNotIn('Authorization', headers)

        client.set_client_id('client-2')
        client.ping()
        self.assertEqual('client-2',
                         self.requests[1]['headers']['X-Riak-ClientId'])

    def test_basic_auth_header(self):
        client = self.create_client(
            FakeResponse(200, b'OK'),
            credentials={'username': 'user', 'password': 'pass'})
        client.ping()
        expected = 'Basic ' + base64.b64encode(b'user:pass').decode('ascii')
        self.assertEqual(expected,
                         self.requests[0]['headers']['Authorization'])

    def test_connection_configuration(self):
        client = self.create_client(FakeResponse(200, b'OK'),
                                    host='riak.example.com', port='8099',
                                    timeout=2.5)
        client.ping()
        conn = self.connection.instances[0]
        self.assertEqual('riak.example.com', conn.host)
        self.assertEqual(8099, conn.port)
        self.assertEqual(2.5, conn.timeout)

    def test_closed_client(self):
        with self.create_client(FakeResponse(200, b'OK')) as client:
            self.assertTrue(client.ping())
        self.assertTrue(self.connection.instances[0].closed)
        with self.assertRaises(RuntimeError):
            client.ping()


@unittest.skipUnless(RUN_CLIENT, 'RUN_CLIENT is 0')
class ClientTests(IntegrationTestBase, unittest.TestCase):
    def test_is_alive(self):
        self.assertTrue(self.client.is_alive())

    def test_is_alive_bad_port(self):
        client = self.create_client(http_port=DUMMY_HTTP_PORT)
        self.assertFalse(client.is_alive())
        with self.assertRaises(TransportError):
            client.ping()
        client.close()

    def test_buckets(self):
        buckets = self.client.buckets()
        for bucket in buckets:
            self.assertIsInstance(bucket, RiakBucket)
