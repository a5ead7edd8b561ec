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
import logging

from http.client import HTTPConnection, HTTPException, NotConnected
from urllib.parse import urlsplit

from riakhttp.riak_error import TransportError
from riakhttp.util import str_to_bytes


class HttpConnection(object):
    """
    Connection and low-level request methods for HttpTransport.
    """

    def http_request(self, method, url, body=None, headers=None):
        """
        Performs a single HTTP request and returns a 2-tuple of the
        response status and the (bytes) response body. The status is
        not interpreted; that is left to the caller.

        :param method: the HTTP verb, e.g. ``'GET'`` or ``'POST'``
        :type method: string
        :param url: a full URL as built by :meth:`build_rest_path`, or
          an absolute path on the node
        :type url: string
        :param body: the optional request body
        :type body: string, bytes
        :param headers: optional request headers
        :type headers: dict
        :rtype: tuple
        """
        status, _, response_body = self._request(method, url,
                                                 dict(headers or {}), body)
        return status, response_body

    def _request(self, method, url, headers=None, body=None):
        """
        Given a Method, URL, Headers, and Body, perform and HTTP
        request, and return a 3-tuple containing the response status,
        response headers (as http.client.HTTPMessage), and response body.
        """
        if headers is None:
            headers = {}
        headers.setdefault('Accept', 'application/json, */*;q=0.5')
        headers.setdefault('X-Riak-ClientId', self.client_id)

        credentials = self._credentials
        if credentials is not None and credentials.has_basic_auth():
            self._security_auth_headers(credentials.username,
                                        credentials.password or '',
                                        headers)

        uri = self._request_uri(url)
        response = None
        try:
            self._connection.request(method, uri, str_to_bytes(body),
                                     headers)
            response = self._connection.getresponse()
            response_body = response.read()
        except (HTTPException, OSError) as e:
            self.close()
            logging.debug('%s %s failed: %r', method, url, e)
            raise TransportError('Could not complete %s %s: %s' %
                                 (method, url, e)) from e
        finally:
            if response is not None:
                response.close()

        logging.debug('%s %s -> %d', method, url, response.status)
        return response.status, response.msg, response_body

    def _request_uri(self, url):
        parts = urlsplit(url)
        if not parts.scheme:
            return url
        uri = parts.path or '/'
        if parts.query:
            uri += '?' + parts.query
        return uri

    def _connect(self):
        """
        Use the appropriate connection class; optionally with security.
        """
        if self._scheme == 'https':
            self._connection = self._connection_class(
                host=self._host,
                port=self._port,
                credentials=self._credentials,
                timeout=self._timeout)
        else:
            self._connection = self._connection_class(
                host=self._host,
                port=self._port,
                timeout=self._timeout)

    def close(self):
        """
        Closes the underlying HTTP connection.
        """
        if self._connection is None:
            return
        try:
            self._connection.close()
        except NotConnected:
            pass

    # These are set by the HttpTransport initializer
    _connection_class = HTTPConnection
    _connection = None
    _scheme = 'http'
    _credentials = None
    _timeout = None

    def _security_auth_headers(self, username, password, headers):
        """
        Add in the requisite HTTP Authentication Headers

        :param username: Riak Security Username
        :type str
        :param password: Riak Security Password
        :type str
        :param headers: Dictionary of headers
        :type dict
        """
        userColonPassword = username + ":" + password
        b64UserColonPassword = base64. \
            b64encode(str_to_bytes(userColonPassword)).decode("ascii")
        headers['Authorization'] = 'Basic %s' % b64UserColonPassword
