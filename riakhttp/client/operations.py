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

import logging

from riakhttp.bucket import RiakBucket
from riakhttp.client.transport import RiakClientTransport, with_transport
from riakhttp.riak_error import ProtocolError, TransportError
from riakhttp.util import validate_timeout


class RiakClientOperations(RiakClientTransport):
    """
    Methods for RiakClient that result in requests sent to the Riak
    node.

    Note that many of these methods have an implicit 'transport'
    argument that will be prepended automatically, and does not need
    to be supplied by the user.
    """

    @with_transport
    def get_buckets(self, transport, timeout=None):
        """
        get_buckets(timeout=None)

        Get the list of buckets as :class:`RiakBucket
        <riakhttp.bucket.RiakBucket>` instances.

        .. warning:: Do not use this in production, as it requires
           traversing through all keys stored in a cluster.

        :param timeout: a timeout value in milliseconds
        :type timeout: int
        :rtype: list of :class:`RiakBucket <riakhttp.bucket.RiakBucket>`
                instances
        """
        validate_timeout(timeout)
        names = transport.get_buckets(timeout=timeout)
        for name in names:
            if not isinstance(name, str):
                raise ProtocolError('Bucket name is not a string: %r' %
                                    (name,))
        return [self.bucket(name) for name in names]

    buckets = get_buckets

    @with_transport
    def ping(self, transport):
        """
        ping()

        Check if the Riak server for this ``RiakClient`` instance is
        alive. Unlike :meth:`is_alive`, transport failures are raised.

        :rtype: boolean
        """
        return transport.ping()

    def is_alive(self):
        """
        Check if the Riak server for this ``RiakClient`` instance is
        alive. A node that cannot be reached is reported as not alive.

        :rtype: boolean
        """
        try:
            return self.ping()
        except TransportError as e:
            logging.debug('Liveness check failed: %s', e)
            return False

    @with_transport
    def get_keys(self, transport, bucket, timeout=None):
        """
        get_keys(bucket, timeout=None)

        Lists all keys in a bucket.

        .. warning:: Do not use this in production, as it requires
           traversing through all keys stored in a cluster.

        :param bucket: the bucket whose keys are fetched
        :type bucket: RiakBucket or string
        :param timeout: a timeout value in milliseconds
        :type timeout: int
        :rtype: list
        """
        validate_timeout(timeout)
        if isinstance(bucket, RiakBucket):
            bucket = bucket.name
        return transport.get_keys(bucket, timeout=timeout)

    @with_transport
    def mapred(self, transport, inputs, query, timeout=None):
        """
        mapred(inputs, query, timeout)

        Executes a MapReduce query.

        :param inputs: the input list/structure
        :type inputs: list, dict, string
        :param query: the list of query phases
        :type query: list
        :param timeout: the query timeout
        :type timeout: integer, None
        :rtype: mixed
        """
        validate_timeout(timeout)
        return transport.mapred(inputs, query, timeout)
