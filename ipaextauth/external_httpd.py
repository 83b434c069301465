#
# ipa-extauth: external httpd authentication with IPA
# See COPYING for license
#
"""Configure httpd external authentication against an IPA server

The activation sequence:

- join the IPA domain with ipa-client-install
- kinit as IPA admin principal, register the HTTP service principal of
  this host, and fetch its keytab for httpd
- turn on SELinux booleans for mod_auth_pam and sssd D-Bus access
- enable DNS lookups of realm and KDC in krb5.conf
- restart httpd (only if it is running) and sssd

A failing step stops the sequence. Steps that already ran are not
rolled back.
"""
import contextlib
import enum
import logging
import os
import typing

from ipaextauth import extauthplatform
from ipaextauth.commands import ExternalCommandRunner
from ipaextauth.errors import FileIOError, ValidationError
from ipaextauth.hostidentity import HostIdentity, domain_from_host, fqdn
from ipaextauth.krb5conf import KerberosConfigPatcher
from ipaextauth.principal import Principal
from ipaextauth.prompts import ConsolePrompter, Prompter
from ipaextauth.services import ServiceController

logger = logging.getLogger(__name__)


class State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    PARAMETERS_COLLECTED = "parameters collected"
    IDENTITY_RESOLVED = "identity resolved"
    PRINCIPAL_CONFIGURED = "principal configured"
    ACTIVATED = "activated"
    FAILED = "failed"


class ExternalHttpdAuthentication:
    def __init__(
        self,
        host: typing.Optional[str] = None,
        ipaserver: typing.Optional[str] = None,
        domain: typing.Optional[str] = None,
        realm: typing.Optional[str] = None,
        principal: typing.Optional[str] = None,
        password: typing.Optional[str] = None,
        prompter: typing.Optional[Prompter] = None,
        runner: typing.Optional[ExternalCommandRunner] = None,
        services: typing.Optional[ServiceController] = None,
        krb5_patcher: typing.Optional[KerberosConfigPatcher] = None,
        config: typing.Optional[extauthplatform.ExtAuthConfig] = None,
    ):
        if config is None:
            config = extauthplatform.ExtAuthConfig()
        self.config = config
        # this host, owner of the HTTP service principal
        self.host = host
        self.domain = (
            domain or domain_from_host(ipaserver) or domain_from_host(host)
        )
        self.ipaserver = fqdn(ipaserver or config.ipaserver, self.domain)
        self._realm = realm
        self.principal = principal or config.default_principal
        self.password = password
        self.http_keytab = config.http_keytab
        self.httpd_user = extauthplatform.HTTPD_USER

        self.prompter = prompter if prompter is not None else ConsolePrompter()
        self.runner = runner if runner is not None else ExternalCommandRunner()
        if services is None:
            services = ServiceController()
        self.services = services
        if krb5_patcher is None:
            krb5_patcher = KerberosConfigPatcher(config.krb5_conf)
        self.krb5_patcher = krb5_patcher

        self.identity = None  # type: typing.Optional[HostIdentity]
        self.state = State.UNINITIALIZED

    @property
    def realm(self) -> typing.Optional[str]:
        realm = self._realm or self.domain
        return realm.upper() if realm else None

    @contextlib.contextmanager
    def _transition(self, target: typing.Optional[State]):
        try:
            yield
        except Exception:
            logger.debug("Step failed in state '%s'.", self.state.value)
            self.state = State.FAILED
            raise
        if target is not None:
            self.state = target

    def ask_for_parameters(self) -> bool:
        with self._transition(State.PARAMETERS_COLLECTED):
            p = self.prompter
            p.say("\nIPA Server Parameters:\n")
            self.ipaserver = p.ask_for_hostname(
                "IPA Server Hostname", self.ipaserver
            )
            self.domain = p.ask_for_domain(
                "IPA Server Domain",
                self.domain or domain_from_host(self.ipaserver),
            )
            self._realm = p.ask_for_realm("IPA Server Realm", self.realm)
            self.principal = p.ask_for_principal(
                "IPA Server Principal", self.principal
            )
            self.password = p.ask_for_password(
                "IPA Server Principal Password", self.password
            )
        self.resolve_identity()
        return True

    def resolve_identity(self) -> HostIdentity:
        """Complete IPA server host name, domain, and realm"""
        with self._transition(State.IDENTITY_RESOLVED):
            identity = HostIdentity.resolve(
                self.ipaserver, self.domain, self.realm
            )
            if not identity.domain or not identity.realm:
                raise ValidationError(
                    f"Cannot derive domain and realm of IPA server "
                    f"'{identity.fqdn}', use a fully qualified name or "
                    f"pass the domain."
                )
            self.identity = identity
            self.ipaserver = self.identity.fqdn
            self.domain = self.identity.domain
            self._realm = self.identity.realm
        return self.identity

    def show_parameters(self) -> typing.Dict[str, typing.Optional[str]]:
        params = {
            "Hostname": self.ipaserver,
            "Domain": self.domain,
            "Realm": self.realm,
            "Principal": self.principal,
        }
        logger.info("IPA Server Details:")
        for key, value in params.items():
            logger.info("  %-10s %s", key + ":", value)
        return params

    def configure_ipa(self):
        logger.info("Configuring the IPA Client ...")
        with self._transition(None):
            self.runner.ipa_client_install(
                server=self.ipaserver,
                domain=self.domain,
                realm=self.realm,
                principal=self.principal,
                password=self.password,
            )

    def configure_ipa_http_service(self) -> Principal:
        logger.info("Configuring IPA HTTP Service and Keytab ...")
        with self._transition(State.PRINCIPAL_CONFIGURED):
            if not self.host:
                raise ValidationError("Host name of this machine is missing.")
            self.runner.kinit(self.principal, self.password)
            service = Principal(
                hostname=self.host,
                realm=self.realm,
                service=extauthplatform.HTTP_SERVICE,
                runner=self.runner,
            )
            service.register()
            self.runner.ipa_getkeytab(
                self.ipaserver, service.name, self.http_keytab
            )
            try:
                self.httpd_user.chown(self.http_keytab)
                os.chmod(self.http_keytab, extauthplatform.HTTP_KEYTAB_MODE)
            except (OSError, ValueError) as e:
                raise FileIOError(
                    f"Unable to set permissions of '{self.http_keytab}': {e}"
                ) from e
        logger.debug(
            "Created keytab '%s' for principal '%s'",
            self.http_keytab,
            service.name,
        )
        return service

    def configure_selinux(self):
        logger.info("Configuring SELinux ...")
        with self._transition(None):
            for boolean in extauthplatform.SELINUX_BOOLEANS:
                self.runner.setsebool(boolean, True)

    def enable_kerberos_dns_lookups(self) -> bool:
        with self._transition(None):
            return self.krb5_patcher.enable_kerberos_dns_lookups()

    def post_activation(self):
        with self._transition(State.ACTIVATED):
            logger.info("Restarting httpd, if running ...")
            httpd = self.services.httpd
            if httpd.is_running():
                httpd.restart()
            logger.info(
                "Restarting sssd and configure it to start on reboots ..."
            )
            self.services.sssd.restart().enable()

    def activate(self):
        """Run the full activation sequence"""
        if self.identity is None:
            self.resolve_identity()
        self.configure_ipa()
        self.configure_ipa_http_service()
        self.configure_selinux()
        self.enable_kerberos_dns_lookups()
        self.post_activation()
        logger.info("External authentication with IPA is configured.")

    @classmethod
    def ipa_client_configured(cls) -> bool:
        return os.path.isfile(extauthplatform.SSSD_CONFIG)

    def unconfigure(self) -> bool:
        if not self.ipa_client_configured():
            logger.info("IPA client is not configured.")
            return False
        logger.info("Un-Configuring the IPA Client ...")
        self.runner.ipa_client_uninstall()
        if os.path.isfile(self.krb5_patcher.backup_path):
            self.krb5_patcher.restore_backup()
        return True
