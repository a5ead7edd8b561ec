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

from weakref import WeakValueDictionary

from riakhttp.bucket import RiakBucket
from riakhttp.client.operations import RiakClientOperations
from riakhttp.mapreduce import RiakMapReduceChain
from riakhttp.security import SecurityCreds
from riakhttp.transports.transport import Transport
from riakhttp.util import validate_quorum


class RiakClient(RiakMapReduceChain, RiakClientOperations):
    """
    The ``RiakClient`` object holds information necessary to connect
    to Riak over HTTP. Requests can be made to Riak directly through
    the client or by using the methods on related objects.

    Setters return the client itself, so configuration can be chained::

        client = RiakClient(host='riak1').set_r(1).set_w(3)
    """

    #: The supported URL schemes
    SCHEMES = ['http', 'https']

    def __init__(self, host='127.0.0.1', port=8098, prefix='riak',
                 mapred_prefix='mapred', scheme=None, client_id=None,
                 r=2, w=2, dw=2, credentials=None, timeout=None,
                 connection_class=None):
        """
        Construct a new ``RiakClient`` object.

        :param host: Hostname or IP address of the Riak node
        :type host: string
        :param port: HTTP port of the Riak node
        :type port: integer
        :param prefix: REST interface prefix
        :type prefix: string
        :param mapred_prefix: Map/Reduce interface prefix
        :type mapred_prefix: string
        :param scheme: ``'http'`` or ``'https'``; defaults to ``'https'``
          when the credentials carry TLS material, ``'http'`` otherwise
        :type scheme: string
        :param client_id: the client ID; a random one is generated
          when omitted
        :type client_id: string
        :param r: default R-value
        :param w: default W-value
        :param dw: default DW-value
        :param credentials: optional object of security info
        :type credentials: :class:`~riakhttp.security.SecurityCreds` or dict
        :param timeout: socket timeout in seconds
        :type timeout: float
        :param connection_class: overrides the ``http.client``
          connection class
        """
        self._host = host
        self._port = int(port)
        self._prefix = prefix
        self._mapred_prefix = mapred_prefix
        self._credentials = self._create_credentials(credentials)
        if scheme is None:
            if self._credentials is not None and \
                    self._credentials.has_tls():
                scheme = 'https'
            else:
                scheme = 'http'
        self._set_scheme(scheme)
        self._client_id = client_id or Transport.make_random_client_id()
        self._r = validate_quorum('r', r)
        self._w = validate_quorum('w', w)
        self._dw = validate_quorum('dw', dw)
        self._timeout = timeout
        self._connection_class = connection_class
        self._http_transport = None
        self._closed = False
        self._buckets = WeakValueDictionary()

    def _set_scheme(self, value):
        if value not in self.SCHEMES:
            raise ValueError("scheme option is invalid, must be one of %s" %
                             repr(self.SCHEMES))
        self._scheme = value

    @property
    def host(self):
        return self._host

    @property
    def port(self):
        return self._port

    @property
    def prefix(self):
        return self._prefix

    @property
    def mapred_prefix(self):
        return self._mapred_prefix

    @property
    def scheme(self):
        return self._scheme

    @property
    def credentials(self):
        return self._credentials

    def get_r(self):
        """
        Get the R-value setting for this client. (default 2)

        :rtype: integer, string
        """
        return self._r

    def set_r(self, r):
        """
        Set the R-value for this client. This value is used for reads
        where no R-value is given in the call and none has been set
        on the bucket.

        :param r: The R value.
        :type r: integer, string
        :rtype: :class:`RiakClient`
        """
        self._r = validate_quorum('r', r)
        return self

    def get_w(self):
        """
        Get the W-value setting for this client. (default 2)

        :rtype: integer, string
        """
        return self._w

    def set_w(self, w):
        """
        Set the W-value for this client. See :meth:`set_r` for a
        description of how these values are used.

        :rtype: :class:`RiakClient`
        """
        self._w = validate_quorum('w', w)
        return self

    def get_dw(self):
        return self._dw

    def set_dw(self, dw):
        self._dw = validate_quorum('dw', dw)
        return self

    def get_client_id(self):
        return self._client_id

    def set_client_id(self, client_id):
        """
        Set the client ID for this client. Should not be called unless
        you know what you are doing.

        :param client_id: The new client ID.
        :type client_id: string
        :rtype: :class:`RiakClient`
        """
        if not client_id:
            raise ValueError('client_id must be a non-empty string')
        self._client_id = client_id
        if self._http_transport is not None:
            self._http_transport.client_id = client_id
        return self

    r = property(get_r, set_r, doc="""The default R-value""")
    w = property(get_w, set_w, doc="""The default W-value""")
    dw = property(get_dw, set_dw, doc="""The default DW-value""")
    client_id = property(get_client_id, set_client_id,
                         doc="""The client ID for this client instance""")

    def bucket(self, name):
        """
        Get the bucket by the specified name. Since buckets always exist,
        this will always return a
        :class:`RiakBucket <riakhttp.bucket.RiakBucket>`.

        :param name: the bucket name
        :type name: str
        :rtype: :class:`RiakBucket <riakhttp.bucket.RiakBucket>`
        """
        if not isinstance(name, str):
            raise TypeError('Bucket name must be a string')

        return self._buckets.setdefault(name, RiakBucket(self, name))

    def _create_credentials(self, n):
        """
        Create security credentials, if necessary.
        """
        if not n:
            return None
        elif isinstance(n, SecurityCreds):
            return n
        elif isinstance(n, dict):
            return SecurityCreds(**n)
        else:
            raise TypeError("%s is not a valid security configuration"
                            % repr(n))

    def __repr__(self):
        return '<RiakClient %s://%s:%d>' % (self._scheme, self._host,
                                            self._port)

    def __hash__(self):
        return hash((self._scheme, self._host, self._port, self._prefix,
                     self._mapred_prefix))

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return hash(self) == hash(other)
        else:
            return False

    def __ne__(self, other):
        if isinstance(other, self.__class__):
            return hash(self) != hash(other)
        else:
            return True
