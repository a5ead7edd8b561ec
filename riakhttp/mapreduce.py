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

from collections import namedtuple
from collections.abc import Iterable

from riakhttp.bucket import RiakBucket
from riakhttp.riak_error import InvalidStateError, ProtocolError, \
    TransportError
from riakhttp.util import bytes_to_str, validate_timeout

try:
    import simplejson as json
except ImportError:
    import json


#: A link returned by a link phase. ``tag`` is ``None`` when Riak
#: leaves it out.
RiakLink = namedtuple("RiakLink", ("bucket", "key", "tag"))

#: The output of one kept phase of a job.
MapReduceResult = namedtuple("MapReduceResult", ("phase", "kind", "data"))

PHASE_KINDS = ('map', 'reduce', 'link')


class RiakMapReduce(object):
    """
    Builds a map/reduce job against one client. A job has inputs and an
    ordered list of phases; the builder methods return the job itself
    so a whole query can be written as one chained expression::

        client.add('logs').map('Riak.mapValuesJson').reduce_sum().run()

    A job starts empty, accumulates inputs and phases, and is finalized
    by :meth:`run`. After that every builder method raises
    :class:`~riakhttp.riak_error.InvalidStateError`; the job itself can
    still be run again.
    """
    def __init__(self, client):
        """
        :param client: the client used to send the job
        :type client: :class:`~riakhttp.client.RiakClient`
        """
        self._client = client
        self._phases = []
        self._inputs = []
        self._key_filters = []
        self._input_mode = None
        self._finalized = False

    @property
    def phases(self):
        """
        A copy of the phase list, first phase first.

        :rtype: list
        """
        return list(self._phases)

    @property
    def finalized(self):
        return self._finalized

    def _check_mutable(self):
        if self._finalized:
            raise InvalidStateError('MapReduce job has already been run '
                                    'and can no longer be modified')

    def _enter_input_mode(self, mode):
        self._check_mutable()
        if self._input_mode not in (None, mode):
            raise InvalidStateError('Already added %s input, can\'t add '
                                    '%s input.' % (self._input_mode, mode))
        if mode == 'query' and self._key_filters:
            raise InvalidStateError('Key filters can only be used with '
                                    'a bucket input.')
        self._input_mode = mode

    def add(self, bucket, key=None, data=None):
        """
        Adds job inputs. Given only a bucket, the whole bucket is the
        input. Given a key, or a list of keys, each bucket/key pair is
        added along with the optional ``data``.

        :param bucket: bucket name or bucket
        :type bucket: string, :class:`~riakhttp.bucket.RiakBucket`
        :param key: one key or a list of them
        :type key: string, list, None
        :param data: JSON-serializable data handed to the first phase
        :rtype: :class:`RiakMapReduce`
        """
        if key is None and data is None:
            return self.add_bucket(bucket)
        return self.add_bucket_key_data(bucket, key, data)

    def add_bucket_key_data(self, bucket, key, data=None):
        """
        Appends ``[bucket, key, data]`` inputs, one per key when ``key``
        is a list. These inputs accumulate across calls.

        :rtype: :class:`RiakMapReduce`
        """
        self._enter_input_mode('keys')
        if self._key_filters:
            raise InvalidStateError('Key filters can only be used with '
                                    'a bucket input.')
        bucket = _bucket_name(bucket)
        if isinstance(key, Iterable) and not isinstance(key, str):
            keys = list(key)
        else:
            keys = [key]
        self._inputs.extend([bucket, k, data] for k in keys)
        return self

    def add_bucket(self, bucket):
        """
        Uses every key of ``bucket`` as input, replacing an earlier
        bucket input.

        :param bucket: bucket name or bucket
        :type bucket: string, :class:`~riakhttp.bucket.RiakBucket`
        :rtype: :class:`RiakMapReduce`
        """
        self._enter_input_mode('bucket')
        self._inputs = {'bucket': _bucket_name(bucket)}
        return self

    def add_key_filters(self, key_filters):
        """
        Narrows a bucket input with key filters, e.g. a
        :class:`RiakKeyFilter`.

        :param key_filters: filters to append
        :type key_filters: list, :class:`RiakKeyFilter`
        :rtype: :class:`RiakMapReduce`
        """
        self._check_key_filters_allowed()
        self._key_filters.extend(key_filters)
        return self

    def add_key_filter(self, *args):
        """
        Appends one key filter given as its name and arguments, e.g.
        ``add_key_filter('tokenize', '-', 1)``.

        :rtype: :class:`RiakMapReduce`
        """
        self._check_key_filters_allowed()
        self._key_filters.append(list(args))
        return self

    def _check_key_filters_allowed(self):
        self._check_mutable()
        if self._input_mode in ('query', 'keys'):
            raise InvalidStateError('Key filters can only be used with '
                                    'a bucket input.')

    def search(self, index, query):
        """
        Feeds the job with the results of a Riak Search query. Riak
        rejects the job when search is not enabled on the cluster.

        :param index: the search index (for legacy search, the bucket)
        :type index: string
        :param query: the query string
        :type query: string
        :rtype: :class:`RiakMapReduce`
        """
        self._enter_input_mode('query')
        self._inputs = {'bucket': index, 'index': index, 'query': query}
        return self

    def index(self, bucket, index, startkey, endkey=None):
        """
        Feeds the job with the keys matched by a secondary index query:
        an exact match on ``startkey``, or the range ``startkey`` to
        ``endkey`` when an end key is given.

        :param bucket: the bucket to query
        :type bucket: string, :class:`~riakhttp.bucket.RiakBucket`
        :param index: the index name, e.g. ``'field_bin'``
        :type index: string
        :param startkey: the value to match, or the start of the range
        :type startkey: string, integer
        :param endkey: the end of the range
        :type endkey: string, integer, None
        :rtype: :class:`RiakMapReduce`
        """
        self._enter_input_mode('query')
        inputs = {'bucket': _bucket_name(bucket), 'index': index}
        if endkey is None:
            inputs['key'] = startkey
        else:
            inputs['start'] = startkey
            inputs['end'] = endkey
        self._inputs = inputs
        return self

    def add_phase(self, kind, function=None, arg=None, keep=False,
                  language=None):
        """
        Appends a phase to the job.

        :param kind: one of ``'map'``, ``'reduce'`` or ``'link'``
        :type kind: string
        :param function: for map and reduce phases, the function to
          run (see :meth:`map`); for link phases an optional
          ``(bucket, tag)`` pair
        :type function: string, list, tuple
        :param arg: static argument passed to the function
        :param keep: whether the output of this phase is returned
        :type keep: boolean
        :param language: ``'javascript'`` or ``'erlang'``; guessed from
          ``function`` when omitted
        :type language: string
        :rtype: :class:`RiakMapReduce`
        """
        self._check_mutable()
        if kind == 'link':
            bucket, tag = function or ('_', '_')
            phase = RiakLinkPhase(bucket, tag, keep)
        elif kind in ('map', 'reduce'):
            if function is None:
                raise ValueError('A %s phase requires a function' % kind)
            if language is None:
                language = 'erlang' if isinstance(function, list) \
                    else 'javascript'
            phase = RiakMapReducePhase(kind, function, language, keep, arg)
        else:
            raise ValueError('phase kind must be one of %s, not %r' %
                             (', '.join(PHASE_KINDS), kind))
        self._phases.append(phase)
        return self

    def link(self, bucket='_', tag='_', keep=False):
        """
        Appends a link-walking phase following links to ``bucket``
        tagged ``tag``; ``'_'`` matches anything.

        :rtype: :class:`RiakMapReduce`
        """
        return self.add_phase('link', (bucket, tag), keep=keep)

    def map(self, function, arg=None, keep=False, language=None):
        """
        Appends a map phase.

        ``function`` names the code to run: a built-in Javascript
        function such as ``'Riak.mapValues'``, Javascript source (any
        string containing ``{``), a ``[bucket, key]`` pair locating
        stored Javascript, or an Erlang ``[module, function]`` pair.
        Erlang source strings need ``language='erlang'``.

        :param function: the function to run
        :type function: string, list
        :param arg: static argument passed to the function
        :param keep: whether the output of this phase is returned
        :type keep: boolean
        :param language: ``'javascript'`` or ``'erlang'``
        :type language: string
        :rtype: :class:`RiakMapReduce`
        """
        return self.add_phase('map', function, arg, keep, language)

    def reduce(self, function, arg=None, keep=False, language=None):
        """
        Appends a reduce phase; see :meth:`map` for the arguments.

        :rtype: :class:`RiakMapReduce`
        """
        return self.add_phase('reduce', function, arg, keep, language)

    def to_json(self, timeout=None):
        """
        Serializes the job as :meth:`run` would send it, without
        sending it.

        :param timeout: job timeout in milliseconds
        :type timeout: integer, None
        :rtype: string
        """
        inputs, query, _ = self._normalize_query()
        job = {'inputs': inputs, 'query': query}
        if timeout is not None:
            job['timeout'] = timeout
        return json.dumps(job)

    def run(self, timeout=None):
        """
        Sends the job and waits for its results, returning one
        :data:`MapReduceResult` per kept phase. When no phase asked to
        be kept, the last one is. Link phase output comes back as
        :data:`RiakLink` tuples.

        :param timeout: job timeout in milliseconds
        :type timeout: integer, None
        :rtype: list
        """
        inputs, query, kept = self._normalize_query()
        validate_timeout(timeout)
        self._finalized = True

        logging.debug('Running MapReduce job: %d phases, %d kept',
                      len(query), len(kept))
        try:
            result = self._client.mapred(inputs, query, timeout)
        except TransportError as e:
            body = bytes_to_str(e.body) or ''
            if 'worker_startup_failed' in body and \
                    any(p.erlang_source for p in self._phases):
                raise TransportError('May have tried erlang strfun '
                                     'when not allowed\n'
                                     'original error: ' + str(e),
                                     status=e.status,
                                     body=e.body) from e
            raise

        return self._collect_results(result, kept)

    def _normalize_query(self):
        if not self._phases:
            raise InvalidStateError('A MapReduce job needs at least one '
                                    'phase')
        if self._key_filters and self._input_mode != 'bucket':
            raise InvalidStateError('Key filters need a bucket input.')

        keeps = [phase.keep for phase in self._phases]
        if not any(keeps):
            keeps[-1] = True
        query = [phase.to_array(keep)
                 for phase, keep in zip(self._phases, keeps)]
        kept = [i for i, keep in enumerate(keeps) if keep]

        # Riak takes a bare bucket name unless key filters are attached
        inputs = self._inputs
        if self._input_mode == 'bucket':
            if self._key_filters:
                inputs = dict(inputs, key_filters=list(self._key_filters))
            else:
                inputs = inputs['bucket']

        return inputs, query, kept

    def _collect_results(self, result, kept):
        if len(kept) == 1:
            per_phase = [result]
        elif isinstance(result, list) and len(result) == len(kept):
            per_phase = result
        else:
            raise ProtocolError('Expected results for %d kept phases, '
                                'got %r' % (len(kept), result))

        results = []
        for index, data in zip(kept, per_phase):
            kind = self._phases[index].kind
            if data is None:
                data = []
            if kind == 'link':
                data = _to_links(data)
            results.append(MapReduceResult(index, kind, data))
        return results

    # Shortcuts to the Javascript functions bundled with Riak

    def map_values(self, keep=False):
        """
        Map phase returning each object's value (``Riak.mapValues``).
        """
        return self.map("Riak.mapValues", keep=keep)

    def map_values_json(self, keep=False):
        """
        Map phase returning each object's value parsed as JSON
        (``Riak.mapValuesJson``).
        """
        return self.map("Riak.mapValuesJson", keep=keep)

    def reduce_sum(self, keep=False):
        return self.reduce("Riak.reduceSum", keep=keep)

    def reduce_min(self, keep=False):
        return self.reduce("Riak.reduceMin", keep=keep)

    def reduce_max(self, keep=False):
        return self.reduce("Riak.reduceMax", keep=keep)

    def reduce_sort(self, js_cmp=None, keep=False):
        """
        Reduce phase sorting its input (``Riak.reduceSort``).

        :param js_cmp: optional Javascript comparator, as taken by
          ``Array.prototype.sort``
        :type js_cmp: string
        """
        return self.reduce("Riak.reduceSort", arg=js_cmp, keep=keep)

    def reduce_numeric_sort(self, keep=False):
        return self.reduce("Riak.reduceNumericSort", keep=keep)

    def reduce_limit(self, limit, keep=False):
        """
        Reduce phase keeping the first ``limit`` values.
        """
        # Riak.reduceLimit misbehaves on some riak_kv releases
        source = """function(values, limit) {
            return values.slice(0, limit);
        }"""
        return self.reduce(source, arg=limit, keep=keep)

    def reduce_slice(self, start, end, keep=False):
        """
        Reduce phase keeping ``values[start:end]`` (``Riak.reduceSlice``).
        """
        return self.reduce("Riak.reduceSlice", arg=[start, end], keep=keep)

    def filter_not_found(self, keep=False):
        """
        Reduce phase dropping not-found markers (``Riak.filterNotFound``).
        """
        return self.reduce("Riak.filterNotFound", keep=keep)


def _bucket_name(bucket):
    if isinstance(bucket, RiakBucket):
        return bucket.name
    return bucket


def _to_links(data):
    links = []
    for entry in data:
        if not isinstance(entry, list) or len(entry) not in (2, 3):
            raise ProtocolError('Malformed link in result: %r' % (entry,))
        bucket, key = entry[0], entry[1]
        tag = entry[2] if len(entry) == 3 else None
        links.append(RiakLink(bucket, key, tag))
    return links


class RiakMapReducePhase(object):
    """
    A map or reduce step of a :class:`RiakMapReduce` job. Jobs create
    these; there is rarely a reason to build one by hand.
    """

    def __init__(self, type, function, language, keep, arg):
        """
        :param type: ``'map'`` or ``'reduce'``
        :type type: string
        :param function: the code to run, see :meth:`RiakMapReduce.map`
        :type function: string, list
        :param language: ``'javascript'`` or ``'erlang'``
        :type language: string
        :param keep: whether the phase output is returned
        :type keep: boolean
        :param arg: static argument for the function
        """
        self._type = type
        self._language = language
        self._function = function
        self._keep = keep
        self._arg = arg

    @property
    def kind(self):
        return self._type

    @property
    def keep(self):
        return self._keep

    @property
    def erlang_source(self):
        """
        ``True`` when the phase carries Erlang source code, which Riak
        only runs when ``allow_strfun`` is enabled.
        """
        return self._language == 'erlang' and \
            isinstance(self._function, str)

    def _function_fields(self):
        function = self._function
        if isinstance(function, list):
            if self._language == 'erlang':
                return {'module': function[0], 'function': function[1]}
            return {'bucket': function[0], 'key': function[1]}
        if self._language == 'javascript' and '{' not in function:
            return {'name': function}
        return {'source': function}

    def to_array(self, keep=None):
        """
        Returns the phase as the JSON-ready ``{kind: {...}}`` mapping
        Riak expects. ``keep`` overrides the phase's own flag.

        :rtype: dict
        """
        if keep is None:
            keep = self._keep
        stepdef = {'keep': keep,
                   'language': self._language,
                   'arg': self._arg}
        stepdef.update(self._function_fields())
        return {self._type: stepdef}


class RiakLinkPhase(object):
    """
    A link-walking step of a :class:`RiakMapReduce` job.
    """

    def __init__(self, bucket, tag, keep):
        self._bucket = bucket
        self._tag = tag
        self._keep = keep

    @property
    def kind(self):
        return 'link'

    @property
    def keep(self):
        return self._keep

    @property
    def erlang_source(self):
        return False

    def to_array(self, keep=None):
        if keep is None:
            keep = self._keep
        return {'link': {'bucket': self._bucket,
                         'tag': self._tag,
                         'keep': keep}}


class RiakKeyFilter(object):
    """
    Builds key filter lists for bucket inputs. Any public method name
    becomes a filter with that name and the call's arguments, so
    filters read like the Riak documentation. ``+`` chains filters,
    while ``&`` and ``|`` combine them into ``and``/``or`` filters::

        recent = RiakKeyFilter().tokenize('-', 1).greater_than_eq('2010')
        admins = RiakKeyFilter().ends_with('-admin')
        list(recent & admins)
        # [['and', [['tokenize', '-', 1], ['greater_than_eq', '2010']],
        #          [['ends_with', '-admin']]]]

    Operators return new filters and leave their operands unchanged.
    """

    def __init__(self, *args):
        """
        :param args: an optional first filter, as its name followed by
          its arguments
        """
        self._filters = [list(args)] if args else []

    def __add__(self, other):
        combined = RiakKeyFilter()
        combined._filters = self._filters + other._filters
        return combined

    def _bool_op(self, op, other):
        if self._filters and self._filters[0][0] == op:
            # extend an existing conjunction/disjunction
            combined = RiakKeyFilter()
            combined._filters = [self._filters[0] + [other._filters]]
            return combined
        return RiakKeyFilter(op, self._filters, other._filters)

    def __and__(self, other):
        return self._bool_op("and", other)

    def __or__(self, other):
        return self._bool_op("or", other)

    def __repr__(self):
        return str(self._filters)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)

        def add_filter(*args):
            return self + RiakKeyFilter(name, *args)
        return add_filter

    def __iter__(self):
        return iter(self._filters)


class RiakMapReduceChain(object):
    """
    Client mixin whose methods each start a new :class:`RiakMapReduce`
    job bound to the client, so a query can begin with
    ``client.add(...)`` or ``client.map(...)``.
    """
    def add(self, bucket, key=None, data=None):
        """
        New job with inputs; see :meth:`RiakMapReduce.add`.

        :rtype: :class:`RiakMapReduce`
        """
        return RiakMapReduce(self).add(bucket, key, data)

    def search(self, index, query):
        """
        New job fed by a search query; see :meth:`RiakMapReduce.search`.

        :rtype: :class:`RiakMapReduce`
        """
        return RiakMapReduce(self).search(index, query)

    def index(self, bucket, index, startkey, endkey=None):
        """
        New job fed by a secondary index query; see
        :meth:`RiakMapReduce.index`.

        :rtype: :class:`RiakMapReduce`
        """
        return RiakMapReduce(self).index(bucket, index, startkey, endkey)

    def link(self, bucket='_', tag='_', keep=False):
        return RiakMapReduce(self).link(bucket, tag, keep)

    def map(self, function, arg=None, keep=False, language=None):
        return RiakMapReduce(self).map(function, arg, keep, language)

    def reduce(self, function, arg=None, keep=False, language=None):
        return RiakMapReduce(self).reduce(function, arg, keep, language)
