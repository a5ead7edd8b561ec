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
import os
import sys

distutils_debug = os.environ.get('DISTUTILS_DEBUG', '0')
if distutils_debug == '1':
    logger = logging.getLogger()
    logger.level = logging.DEBUG
    logger.addHandler(logging.StreamHandler(sys.stdout))

HOST = os.environ.get('RIAK_TEST_HOST', '127.0.0.1')
HTTP_PORT = int(os.environ.get('RIAK_TEST_HTTP_PORT', '8098'))

# this port is used to simulate errors, there shouldn't
# be anything listening on it.
DUMMY_HTTP_PORT = int(os.environ.get('DUMMY_HTTP_PORT', '1023'))

RUN_CLIENT = int(os.environ.get('RUN_CLIENT', '0'))
RUN_MAPREDUCE = int(os.environ.get('RUN_MAPREDUCE', '0'))
