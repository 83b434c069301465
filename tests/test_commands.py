from unittest import mock

from ipapython.ipautil import CalledProcessError
from ipaplatform.paths import paths

import conftest
from ipaextauth import commands
from ipaextauth.commands import ExternalCommandRunner
from ipaextauth.errors import CommandExecutionError


class TestExternalCommandRunner(conftest.IPABaseTests):
    def setUp(self):
        super().setUp()
        p = mock.patch.object(commands, "run")
        self.m_run = p.start()
        self.addCleanup(p.stop)
        self.runner = ExternalCommandRunner()

    def assert_run(self, cmd, **kwargs):
        self.m_run.assert_called_once()
        args, run_kwargs = self.m_run.call_args
        self.assertEqual(args, (cmd,))
        for key, value in kwargs.items():
            self.assertEqual(run_kwargs[key], value)
        return run_kwargs

    def test_kinit_password_on_stdin(self):
        self.runner.kinit(conftest.PRINCIPAL, conftest.PASSWORD)
        kwargs = self.assert_run(
            [paths.KINIT, conftest.PRINCIPAL],
            stdin="$my_password",
            env=None,
        )
        self.assertIn(conftest.PASSWORD, kwargs["nolog"])
        args = self.m_run.call_args[0][0]
        self.assertNotIn(conftest.PASSWORD, args)

    def test_ipa_getkeytab(self):
        self.runner.ipa_getkeytab(
            conftest.SERVER_FQDN, conftest.HTTP_PRINCIPAL, "/etc/http.keytab"
        )
        # fmt: off
        self.assert_run(
            [
                paths.IPA_GETKEYTAB,
                "-s", conftest.SERVER_FQDN,
                "-p", conftest.HTTP_PRINCIPAL,
                "-k", "/etc/http.keytab",
            ],
            stdin=None,
        )
        # fmt: on

    def test_ipa(self):
        self.runner.ipa("service-find", "--principal", "x", raiseonerr=False)
        self.assert_run(
            [
                "/usr/bin/ipa",
                "-e",
                "skip_version_check=1",
                "service-find",
                "--principal",
                "x",
            ],
            raiseonerr=False,
        )

    def test_ipa_client_install(self):
        self.runner.ipa_client_install(
            server=conftest.SERVER_FQDN,
            domain=conftest.DOMAIN,
            realm=conftest.REALM,
            principal=conftest.PRINCIPAL,
            password=conftest.PASSWORD,
        )
        cmd = self.m_run.call_args[0][0]
        self.assertEqual(cmd[0], paths.IPA_CLIENT_INSTALL)
        self.assertIn("--unattended", cmd)
        self.assertEqual(cmd[cmd.index("--server") + 1], conftest.SERVER_FQDN)
        self.assertEqual(cmd[cmd.index("--realm") + 1], conftest.REALM)
        self.assertEqual(self.m_run.call_args[1]["nolog"], (conftest.PASSWORD,))

    def test_ipa_client_uninstall(self):
        self.runner.ipa_client_uninstall()
        self.assert_run([paths.IPA_CLIENT_INSTALL, "--uninstall", "-U"])

    def test_setsebool(self):
        self.runner.setsebool("httpd_dbus_sssd", True)
        self.assert_run([paths.SETSEBOOL, "-P", "httpd_dbus_sssd=on"])

    def test_failure(self):
        self.m_run.side_effect = CalledProcessError(
            1, "kinit admin", stderr="kinit: Password incorrect"
        )
        with self.assertRaises(CommandExecutionError) as cm:
            self.runner.kinit(conftest.PRINCIPAL, conftest.PASSWORD)
        e = cm.exception
        self.assertEqual(e.returncode, 1)
        self.assertEqual(e.stderr, "kinit: Password incorrect")
        self.assertEqual(e.cmd, [paths.KINIT, conftest.PRINCIPAL])
        self.assertIn("Password incorrect", str(e))
        self.assertNotIn(conftest.PASSWORD, str(e))
        self.assertEqual(self.m_run.call_count, 1)

    def test_failure_hides_password(self):
        self.m_run.side_effect = CalledProcessError(
            1, "ipa-client-install", stderr="Joining realm failed"
        )
        with self.assertRaises(CommandExecutionError) as cm:
            self.runner.ipa_client_install(
                server=conftest.SERVER_FQDN,
                domain=conftest.DOMAIN,
                realm=conftest.REALM,
                principal=conftest.PRINCIPAL,
                password=conftest.PASSWORD,
            )
        e = cm.exception
        self.assertNotIn(conftest.PASSWORD, e.cmd)
        self.assertEqual(e.cmd[e.cmd.index("--password") + 1], "XXXXXXXX")
        self.assertEqual(
            e.cmd[e.cmd.index("--principal") + 1], conftest.PRINCIPAL
        )
        self.assertNotIn(conftest.PASSWORD, repr(e))
        self.assertNotIn(conftest.PASSWORD, str(e))
