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

from riakhttp.util import validate_quorum


class RiakBucket(object):
    """
    The ``RiakBucket`` object is a proxy for a bucket on the Riak
    server. Buckets always exist in Riak, so a ``RiakBucket`` is never
    checked against the server when it is created.
    """

    def __init__(self, client, name):
        """
        Returns a new ``RiakBucket`` instance.

        :param client: A :class:`RiakClient <riakhttp.client.RiakClient>`
               instance
        :type client: :class:`RiakClient <riakhttp.client.RiakClient>`
        :param name: The bucket name
        :type name: string
        """
        if not isinstance(name, str):
            raise TypeError('Bucket name must be a string')

        self._client = client
        self.name = name
        self._r = None
        self._w = None
        self._dw = None

    @property
    def client(self):
        return self._client

    def __hash__(self):
        return hash((self.name, self._client))

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

    def __repr__(self):
        return '<RiakBucket %r>' % self.name

    def get_r(self, r=None):
        """
        Get the R-value for this bucket. If ``r`` is given it wins,
        then the value set on this bucket, then the client default.

        :param r: a per-call R value
        :type r: integer, string
        :rtype: integer, string
        """
        if r is not None:
            return r
        if self._r is not None:
            return self._r
        return self._client.get_r()

    def set_r(self, r):
        """
        Set the R-value for this bucket, overriding the client
        default. See :meth:`get_r`.

        :param r: the R value
        :type r: integer, string
        :rtype: :class:`RiakBucket`
        """
        self._r = validate_quorum('r', r)
        return self

    def get_w(self, w=None):
        if w is not None:
            return w
        if self._w is not None:
            return self._w
        return self._client.get_w()

    def set_w(self, w):
        self._w = validate_quorum('w', w)
        return self

    def get_dw(self, dw=None):
        if dw is not None:
            return dw
        if self._dw is not None:
            return self._dw
        return self._client.get_dw()

    def set_dw(self, dw):
        self._dw = validate_quorum('dw', dw)
        return self

    def get_keys(self, timeout=None):
        """
        Return all keys within the bucket.

        .. warning:: Do not use this in production, as it requires
           traversing through all keys stored in a cluster.

        :param timeout: a timeout value in milliseconds
        :type timeout: int
        :rtype: list of keys
        """
        return self._client.get_keys(self, timeout=timeout)

    def mapreduce(self):
        """
        Start assembling a Map/Reduce operation over every key in
        this bucket.

        :rtype: :class:`~riakhttp.mapreduce.RiakMapReduce`
        """
        from riakhttp.mapreduce import RiakMapReduce
        return RiakMapReduce(self._client).add_bucket(self)
