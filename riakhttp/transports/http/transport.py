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

from http.client import HTTPConnection

from riakhttp.riak_error import TransportError
from riakhttp.transports.transport import Transport
from riakhttp.transports.http.codec import HttpCodec
from riakhttp.transports.http.connection import HttpConnection
from riakhttp.transports.http.resources import HttpResources
from riakhttp.util import bytes_to_str


class HttpTransport(Transport,
                    HttpConnection, HttpResources, HttpCodec):
    """
    Talks to one Riak node over HTTP, on a single persistent
    connection. Built and owned by
    :class:`~riakhttp.client.RiakClient`.
    """

    def __init__(self, host='127.0.0.1', port=8098, scheme='http',
                 prefix='riak', mapred_prefix='mapred',
                 credentials=None,
                 connection_class=HTTPConnection,
                 client_id=None,
                 timeout=None):
        """
        Opens (lazily, as http.client does) the connection to the node.
        """
        super(HttpTransport, self).__init__()

        self._host = host
        self._port = port
        self._scheme = scheme
        self._prefix = prefix
        self._mapred_prefix = mapred_prefix
        self._credentials = credentials
        self._connection_class = connection_class
        self._client_id = client_id
        self._timeout = timeout
        if not self._client_id:
            self._client_id = self.make_random_client_id()
        self._connect()

    def ping(self):
        """
        True when /ping answers 200 with the body ``OK``.
        """
        status, body = self.http_request('GET', self.ping_url())
        return (status == 200) and (bytes_to_str(body) == 'OK')

    def get_buckets(self, timeout=None):
        """
        Lists the bucket names known to the node.
        """
        url = self.bucket_list_url(timeout=timeout)
        status, body = self.http_request('GET', url)
        self.check_http_code(status, [200], body)
        return self._decode_listing(body, 'buckets')

    def get_keys(self, bucket, timeout=None):
        """
        Lists the key names in ``bucket``.
        """
        url = self.key_list_url(bucket, timeout=timeout)
        status, body = self.http_request('GET', url)
        self.check_http_code(status, [200], body)
        return self._decode_listing(body, 'keys')

    def mapred(self, inputs, query, timeout=None):
        """
        Run a MapReduce query.
        """
        # Construct the job, optionally set the timeout...
        content = self._construct_mapred_json(inputs, query, timeout)

        # Do the request...
        url = self.mapred_url()
        headers = {'Content-Type': 'application/json'}
        status, body = self.http_request('POST', url, content, headers)

        # Make sure the expected status code came back...
        if status != 200:
            raise TransportError(
                'Error running MapReduce operation. Status: %s Body: %r' %
                (status, body), status=status, body=body)

        return self._decode_json(body)
