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


class RiakError(Exception):
    """
    Base class for exceptions generated in the Riak API.
    """
    def __init__(self, *args, **kwargs):
        super(RiakError, self).__init__(*args, **kwargs)
        if len(args) > 0:
            self.value = args[0]
        else:
            self.value = 'unknown'

    def __str__(self):
        return repr(self.value)


class TransportError(RiakError):
    """
    Raised when a request could not be carried out: the node could not
    be reached, the connection timed out or broke, the TLS handshake
    failed, or the node answered with an unexpected HTTP status.

    :attr:`status` and :attr:`body` are set when the node did answer.
    """
    def __init__(self, message='Transport error', status=None, body=None):
        super(TransportError, self).__init__(message)
        self.status = status
        self.body = body


class ProtocolError(TransportError):
    """
    Raised when a response body is malformed or does not have the
    expected shape. The request itself went through, so :attr:`status`
    and :attr:`body` are left unset.
    """
    def __init__(self, message='Malformed response'):
        super(ProtocolError, self).__init__(message)


class InvalidStateError(RiakError):
    """
    Raised when an operation is attempted on a
    :class:`~riakhttp.mapreduce.RiakMapReduce` job that is not in a
    state to accept it, e.g. adding a phase after the job was run.
    """
    def __init__(self, message='Invalid state'):
        super(InvalidStateError, self).__init__(message)
