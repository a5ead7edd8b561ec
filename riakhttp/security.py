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

import ssl

from riakhttp.riak_error import RiakError


class SecurityError(RiakError):
    """
    Raised when credentials cannot be turned into a working TLS
    configuration.
    """
    def __init__(self, message="Security error"):
        super(SecurityError, self).__init__(message)


class SecurityCreds(object):
    def __init__(self,
                 username=None,
                 password=None,
                 pkey_file=None,
                 pkey_password=None,
                 cert_file=None,
                 cacert_file=None,
                 crl_file=None,
                 ciphers=None):
        """
        Credentials for a Riak node with security enabled. A username
        turns on HTTP basic authentication; any of the certificate or
        key files turns on HTTPS.

        :param username: basic-auth user
        :type username: str
        :param password: basic-auth password
        :type password: str
        :param pkey_file: path of the client's private key (PEM)
        :type pkey_file: str
        :param pkey_password: passphrase of the private key
        :type pkey_password: str
        :param cert_file: path of the client certificate (PEM)
        :type cert_file: str
        :param cacert_file: path of the CA bundle used to verify the node
        :type cacert_file: str
        :param crl_file: path of a certificate revocation list
        :type crl_file: str
        :param ciphers: OpenSSL cipher list string
        :type ciphers: str
        """
        self._username = username
        self._password = password
        self._pkey_file = pkey_file
        self._pkey_password = pkey_password
        self._cert_file = cert_file
        self._cacert_file = cacert_file
        self._crl_file = crl_file
        self._ciphers = ciphers

    @property
    def username(self):
        return self._username

    @property
    def password(self):
        return self._password

    @property
    def pkey_file(self):
        return self._pkey_file

    @property
    def pkey_password(self):
        return self._pkey_password

    @property
    def cert_file(self):
        return self._cert_file

    @property
    def cacert_file(self):
        return self._cacert_file

    @property
    def crl_file(self):
        return self._crl_file

    @property
    def ciphers(self):
        return self._ciphers

    def has_tls(self):
        """
        ``True`` if any TLS material has been configured, in which
        case the client talks to Riak over HTTPS.

        :rtype: bool
        """
        return any(f is not None for f in (self._cacert_file,
                                           self._cert_file,
                                           self._pkey_file))

    def has_basic_auth(self):
        return self._username is not None

    def __repr__(self):
        return ('SecurityCreds(username=%r, cert_file=%r, cacert_file=%r)' %
                (self._username, self._cert_file, self._cacert_file))


def configure_ssl_context(credentials):
    """
    Builds the client SSL context for HTTPS connections to Riak. The
    node certificate is always verified against ``cacert_file``.

    :param credentials: the TLS settings
    :type credentials: :class:`~riakhttp.security.SecurityCreds`
    :raises SecurityError: when the settings are incomplete or a file
      cannot be loaded
    :rtype: :class:`~ssl.SSLContext`
    """
    if credentials.cacert_file is None:
        raise SecurityError("cacert_file is required in SecurityCreds")

    pkeyfile = credentials.pkey_file
    certfile = credentials.cert_file
    if pkeyfile and not certfile:
        raise SecurityError("cert_file must be specified with pkey_file")
    if certfile and not pkeyfile:
        pkeyfile = certfile

    ssl_ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ssl_ctx.verify_mode = ssl.CERT_REQUIRED
    ssl_ctx.check_hostname = True
    ssl_ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    try:
        ssl_ctx.load_verify_locations(credentials.cacert_file)
        if credentials.ciphers is not None:
            ssl_ctx.set_ciphers(credentials.ciphers)
        if certfile:
            ssl_ctx.load_cert_chain(certfile, pkeyfile,
                                    password=credentials.pkey_password)
        if credentials.crl_file is not None:
            ssl_ctx.load_verify_locations(credentials.crl_file)
            ssl_ctx.verify_flags = ssl.VERIFY_CRL_CHECK_LEAF
    except (ssl.SSLError, OSError) as e:
        raise SecurityError("Could not load TLS material: %s" % e) from e

    return ssl_ctx
