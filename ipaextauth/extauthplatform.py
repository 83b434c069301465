#
# ipa-extauth: external httpd authentication with IPA
# See COPYING for license
#
"""Platform constants and configuration for ipa-extauth
"""
__all__ = ("ExtAuthConfig",)

import configparser
from typing import Optional

from ipaplatform.constants import constants
from ipaplatform.paths import paths

# version is updated by Makefile
VERSION = "0.1"

# configuration
EXTAUTH_CONFIG = "/etc/ipa/extauth.conf"
EXTAUTH_LOG_FILE = "/var/log/ipa-extauth.log"

# Kerberos client configuration and one-time backup of it
KERBEROS_CONFIG_FILE = paths.KRB5_CONF
KERBEROS_CONFIG_BACKUP_SUFFIX = ".miqbkp"
KERBEROS_LIBDEFAULTS = "libdefaults"
KERBEROS_DNS_LOOKUP_FLAGS = ("dns_lookup_realm", "dns_lookup_kdc")

# httpd service principal and keytab
HTTP_SERVICE = "HTTP"
HTTP_KEYTAB = "/etc/http.keytab"
HTTP_KEYTAB_MODE = 0o600
HTTPD_USER = constants.HTTPD_USER

# services restarted after activation
HTTPD_SERVICE = "httpd"
SSSD_SERVICE = "sssd"

SSSD_CONFIG = paths.SSSD_CONF

# external commands
IPA_CLI = "/usr/bin/ipa"
KINIT = paths.KINIT
IPA_GETKEYTAB = paths.IPA_GETKEYTAB
IPA_CLIENT_INSTALL = paths.IPA_CLIENT_INSTALL
SETSEBOOL = paths.SETSEBOOL

SELINUX_BOOLEANS = ("allow_httpd_mod_auth_pam", "httpd_dbus_sssd")

DEFAULT_PRINCIPAL = "admin"


class ExtAuthConfig:
    _defaults = {
        "krb5_conf": KERBEROS_CONFIG_FILE,
        "http_keytab": HTTP_KEYTAB,
        "default_principal": DEFAULT_PRINCIPAL,
    }

    _section = "extauth"

    def __init__(self, filename: str = EXTAUTH_CONFIG):
        self._cp = configparser.ConfigParser(
            defaults=self._defaults,
            interpolation=configparser.ExtendedInterpolation(),
        )
        self._cp.add_section(self._section)
        self._cp.read(filename)

    @property
    def krb5_conf(self) -> str:
        """Kerberos client configuration file"""
        return self._cp.get(self._section, "krb5_conf")

    @property
    def http_keytab(self) -> str:
        """Keytab of the HTTP service principal"""
        return self._cp.get(self._section, "http_keytab")

    @property
    def default_principal(self) -> str:
        """IPA principal used to kinit and register the HTTP service"""
        return self._cp.get(self._section, "default_principal")

    @property
    def ipaserver(self) -> Optional[str]:
        """Default IPA server host name"""
        return self._cp.get(self._section, "ipaserver", fallback=None)
