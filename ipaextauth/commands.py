#
# ipa-extauth: external httpd authentication with IPA
# See COPYING for license
#
"""Run Kerberos and IPA client commands
"""
import logging
import typing

from ipapython.ipautil import CalledProcessError, run

from ipaextauth import extauthplatform
from ipaextauth.errors import CommandExecutionError

logger = logging.getLogger(__name__)


class ExternalCommandRunner:
    """Invoke external commands without a shell

    Arguments are passed as a list. Secrets are only ever passed on
    stdin or listed in ``nolog`` so they are redacted from debug logs.
    """

    def __init__(self, env: typing.Optional[typing.Dict[str, str]] = None):
        self.env = env

    def _run(self, cmd, stdin=None, nolog=(), raiseonerr=True):
        try:
            return run(
                cmd,
                stdin=stdin,
                nolog=nolog,
                env=self.env,
                capture_output=True,
                capture_error=True,
                raiseonerr=raiseonerr,
            )
        except CalledProcessError as e:
            raise CommandExecutionError(
                cmd,
                e.returncode,
                getattr(e, "stderr", None),
                nolog=nolog,
            ) from e

    def kinit(self, principal: str, password: str):
        """Get a TGT for principal, password is sent on stdin"""
        logger.debug("Obtaining Kerberos ticket for '%s'.", principal)
        cmd = [extauthplatform.KINIT, principal]
        return self._run(cmd, stdin=password, nolog=(password,))

    def ipa_getkeytab(self, server: str, principal: str, keytab: str):
        """Retrieve keytab with ipa-getkeytab"""
        # fmt: off
        cmd = [
            extauthplatform.IPA_GETKEYTAB,
            "-s", server,
            "-p", principal,
            "-k", keytab,
        ]
        # fmt: on
        return self._run(cmd)

    def ipa(self, *args: str, raiseonerr: bool = True):
        """Run an ipa CLI command with the current Kerberos ticket"""
        cmd = [extauthplatform.IPA_CLI, "-e", "skip_version_check=1"]
        cmd.extend(args)
        return self._run(cmd, raiseonerr=raiseonerr)

    def ipa_client_install(
        self,
        server: str,
        domain: str,
        realm: str,
        principal: str,
        password: str,
        hostname: typing.Optional[str] = None,
    ):
        # fmt: off
        cmd = [
            extauthplatform.IPA_CLIENT_INSTALL,
            "-N",
            "--force-join",
            "--fixed-primary",
            "--unattended",
            "--realm", realm,
            "--domain", domain,
            "--server", server,
            "--principal", principal,
            "--password", password,
        ]
        # fmt: on
        if hostname:
            cmd.extend(["--hostname", hostname])
        return self._run(cmd, nolog=(password,))

    def ipa_client_uninstall(self):
        cmd = [extauthplatform.IPA_CLIENT_INSTALL, "--uninstall", "-U"]
        return self._run(cmd)

    def setsebool(self, boolean: str, value: bool = True):
        """Persistently set an SELinux boolean"""
        setting = "{}={}".format(boolean, "on" if value else "off")
        return self._run([extauthplatform.SETSEBOOL, "-P", setting])
