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

from riakhttp.riak_error import ProtocolError, TransportError
from riakhttp.util import bytes_to_str

try:
    import simplejson as json
except ImportError:
    import json


class HttpCodec(object):
    """
    Methods for HTTP transport that unmarshal HTTP responses.
    """

    def check_http_code(self, status, expected_statuses, body=None):
        if status not in expected_statuses:
            raise TransportError('Expected status %s, received %s' %
                                 (expected_statuses, status),
                                 status=status, body=body)

    def _decode_json(self, body):
        """
        Decodes a JSON response body.

        :raises ProtocolError: when the body is not valid JSON
        """
        try:
            return json.loads(bytes_to_str(body))
        except (ValueError, UnicodeDecodeError) as e:
            raise ProtocolError('Response is not valid JSON: %r' %
                                (body,)) from e

    def _decode_listing(self, body, field):
        """
        Decodes a ``{field: [...]}`` listing, such as the bucket list
        or a bucket's key list.
        """
        decoded = self._decode_json(body)
        if not isinstance(decoded, dict) or \
                not isinstance(decoded.get(field), list):
            raise ProtocolError('Expected a "%s" list in response: %r' %
                                (field, decoded))
        return decoded[field]
