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


def bytes_to_str(value, encoding='utf-8'):
    if isinstance(value, str) or value is None:
        return value
    elif isinstance(value, list):
        return [bytes_to_str(elem) for elem in value]
    else:
        return value.decode(encoding)


def str_to_bytes(value, encoding='utf-8'):
    if value is None or isinstance(value, bytes):
        return value
    elif isinstance(value, list):
        return [str_to_bytes(elem) for elem in value]
    else:
        return value.encode(encoding)


#: Symbolic quorum values understood by Riak in place of an integer
QUORUM_NAMES = ('one', 'all', 'quorum', 'default')


def validate_quorum(name, value):
    """
    Raises an exception if the given R/W/DW value is invalid. Valid
    values are positive integers and the symbolic names in
    :data:`QUORUM_NAMES`.
    """
    if isinstance(value, str) and value in QUORUM_NAMES:
        return value
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    raise ValueError('%s must be a positive integer or one of %s, not %r' %
                     (name, ', '.join(QUORUM_NAMES), value))


def validate_timeout(timeout):
    """
    Raises an exception if the given timeout is an invalid value. A
    timeout is a positive number of milliseconds, or ``None``.
    """
    if timeout is None:
        return

    if isinstance(timeout, int) and not isinstance(timeout, bool) \
            and timeout > 0:
        return

    raise ValueError('timeout must be a positive integer')
