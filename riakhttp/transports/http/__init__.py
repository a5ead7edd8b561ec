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

import socket
import ssl

from http.client import HTTPConnection, HTTPSConnection

from riakhttp.security import configure_ssl_context
from riakhttp.transports.http.transport import HttpTransport


class NoNagleHTTPConnection(HTTPConnection):
    """
    Plain HTTP connection with Nagle's algorithm disabled, so small
    request bodies are not held back waiting for an ACK
    """
    def connect(self):
        """
        Set TCP_NODELAY on socket
        """
        HTTPConnection.connect(self)
        self.sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)


class RiakHTTPSConnection(HTTPSConnection):
    def __init__(self,
                 host,
                 port,
                 credentials=None,
                 timeout=None):
        """
        HTTPS connection whose SSL context is built from the client's
        credentials. Without TLS material the system CA store is used.

        :param host: Riak host name
        :type host: str
        :param port: Riak HTTPS port
        :type port: int
        :param credentials: optional TLS and basic-auth settings
        :type credentials: SecurityCreds
        :param timeout: socket timeout in seconds
        :type timeout: int
        """
        if credentials is not None and credentials.has_tls():
            context = configure_ssl_context(credentials)
        else:
            context = ssl.create_default_context()
        super(RiakHTTPSConnection, self).__init__(host=host,
                                                  port=port,
                                                  timeout=timeout,
                                                  context=context)
        self.credentials = credentials


def connection_class_for(scheme):
    """
    Picks the connection class used to talk to Riak with the given
    URL scheme.

    :param scheme: ``'http'`` or ``'https'``
    :type scheme: str
    """
    if scheme == 'https':
        return RiakHTTPSConnection
    elif scheme == 'http':
        return NoNagleHTTPConnection
    else:
        raise ValueError("scheme must be 'http' or 'https', not %r" %
                         (scheme,))


__all__ = ['HttpTransport', 'NoNagleHTTPConnection', 'RiakHTTPSConnection',
           'connection_class_for']
