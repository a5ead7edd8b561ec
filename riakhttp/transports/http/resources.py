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

import re

from urllib.parse import quote_plus, urlencode

from riakhttp.util import bytes_to_str


class HttpResources(object):
    """
    Methods for HttpTransport related to URL generation, i.e.
    creating the proper paths.
    """

    # Set by the HttpTransport initializer
    _scheme = 'http'
    _host = '127.0.0.1'
    _port = 8098
    _prefix = 'riak'
    _mapred_prefix = 'mapred'

    def base_url(self):
        return '%s://%s:%d' % (self._scheme, self._host, self._port)

    def build_rest_path(self, bucket=None, key=None, spec=None, params=None):
        """
        Builds the full URL of a resource under the configured REST
        prefix, i.e. ``{scheme}://{host}:{port}/{prefix}/{bucket}/{key}``.

        :param bucket: optional bucket name
        :type bucket: string
        :param key: optional key within the bucket
        :type key: string
        :param spec: an optional trailing path segment (e.g. a link
          walking spec), appended unquoted
        :type spec: string
        :param params: optional query parameters
        :type params: dict
        :rtype: string
        """
        if key is not None and bucket is None:
            raise ValueError('A key requires a bucket')
        if bucket is not None:
            bucket = quote_plus(bucket)
        if key is not None:
            key = quote_plus(key)
        return self.base_url() + mkpath(self._prefix, bucket, key, spec,
                                        **(params or {}))

    def ping_url(self):
        return self.base_url() + mkpath('ping')

    def mapred_url(self, **options):
        return self.base_url() + mkpath(self._mapred_prefix, **options)

    def bucket_list_url(self, **options):
        query = {'buckets': True}
        query.update(options)
        return self.build_rest_path(params=query)

    def key_list_url(self, bucket, **options):
        query = {'keys': True, 'props': False}
        query.update(options)
        return self.build_rest_path(bucket, params=query)


def mkpath(*segments, **query):
    """
    Constructs the path & query portion of a URI from path segments
    and a dict.
    """
    # Remove empty segments (e.g. no key specified)
    segments = [bytes_to_str(s) for s in segments if s is not None]
    # Join the segments into a path
    pathstring = '/'.join(segments)
    # Remove extra slashes
    pathstring = re.sub('/+', '/', pathstring)

    # Add the query string if it exists
    _query = {}
    for key in sorted(query):
        if isinstance(query[key], bool):
            _query[key] = str(query[key]).lower()
        elif query[key] is not None:
            _query[key] = query[key]

    if len(_query) > 0:
        pathstring += "?" + urlencode(_query)

    if not pathstring.startswith('/'):
        pathstring = '/' + pathstring

    return pathstring
