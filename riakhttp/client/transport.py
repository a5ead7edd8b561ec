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

from riakhttp.transports.http import HttpTransport, connection_class_for


class RiakClientTransport(object):
    """
    Methods for RiakClient related to creating and holding its
    transport. Requests are never retried: a failed request surfaces
    immediately to the caller.
    """

    # These will be set or redefined by the RiakClient initializer
    _http_transport = None
    _connection_class = None
    _closed = False

    def _transport(self):
        """
        _transport()

        Returns the client's HTTP transport, creating it on first use.
        """
        if self._closed:
            raise RuntimeError("Client is closed.")
        if self._http_transport is None:
            connection_class = self._connection_class or \
                connection_class_for(self._scheme)
            self._http_transport = HttpTransport(
                host=self._host,
                port=self._port,
                scheme=self._scheme,
                prefix=self._prefix,
                mapred_prefix=self._mapred_prefix,
                credentials=self._credentials,
                connection_class=connection_class,
                client_id=self._client_id,
                timeout=self._timeout)
        return self._http_transport

    def close(self):
        """
        Closes the underlying HTTP connection. The client cannot be
        used afterwards.
        """
        if not self._closed:
            self._closed = True
            if self._http_transport is not None:
                self._http_transport.close()
                self._http_transport = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def with_transport(fn):
    """
    Wraps a client operation so that it receives the client's
    transport as its first argument. Used internally.
    """
    def wrapper(self, *args, **kwargs):
        return fn(self, self._transport(), *args, **kwargs)

    wrapper.__doc__ = fn.__doc__
    wrapper.__name__ = fn.__name__

    return wrapper
