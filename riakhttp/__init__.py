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

"""
The Riak HTTP API for Python allows you to connect to a Riak node over
its HTTP interface, list buckets and keys, check that the node is
alive, and build and run Javascript (and Erlang) based Map/Reduce and
link-walking operations.
"""

from riakhttp.riak_error import RiakError, TransportError, ProtocolError, \
    InvalidStateError
from riakhttp.security import SecurityCreds, SecurityError
from riakhttp.client import RiakClient
from riakhttp.bucket import RiakBucket
from riakhttp.mapreduce import RiakKeyFilter, RiakMapReduce, RiakLink, \
    MapReduceResult


__all__ = ['RiakBucket', 'RiakClient', 'RiakMapReduce', 'RiakKeyFilter',
           'RiakLink', 'MapReduceResult', 'RiakError', 'TransportError',
           'ProtocolError', 'InvalidStateError', 'SecurityCreds',
           'SecurityError', 'ONE', 'ALL', 'QUORUM', 'key_filter']

__version__ = '1.0.0'

ONE = "one"
ALL = "all"
QUORUM = "quorum"

key_filter = RiakKeyFilter()
