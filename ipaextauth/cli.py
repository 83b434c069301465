"""ipa-extauth CLI tool
"""
import logging
import socket
from optparse import OptionGroup  # pylint: disable=deprecated-module

from ipapython import admintool

from ipaextauth import extauthplatform
from ipaextauth.errors import ExtAuthError
from ipaextauth.external_httpd import ExternalHttpdAuthentication
from ipaextauth.prompts import ConsolePrompter, StaticPrompter

logger = logging.getLogger(__name__)


class IPAExtAuthCli(admintool.AdminTool):
    command_name = "ipa-extauth"
    log_file_name = extauthplatform.EXTAUTH_LOG_FILE
    usage = "\n".join(
        [
            "%prog [options] activate",
            "%prog [options] unconfigure",
            "%prog [options] status",
        ]
    )
    description = "Configure httpd external authentication with IPA"

    @classmethod
    def add_options(cls, parser):
        super(IPAExtAuthCli, cls).add_options(parser)

        parser.add_option(
            "--hostname",
            dest="hostname",
            default=socket.getfqdn(),
            help="The hostname of this machine (FQDN)",
        )
        parser.add_option(
            "-U",
            "--unattended",
            dest="unattended",
            action="store_true",
            default=False,
            help="do not prompt, all IPA server options are required",
        )

        ipa_group = OptionGroup(parser, "IPA server options")
        ipa_group.add_option(
            "--ipaserver",
            dest="ipaserver",
            metavar="SERVER",
            help="IPA server host name",
        )
        ipa_group.add_option(
            "--domain",
            dest="domain",
            metavar="DOMAIN_NAME",
            help="primary DNS domain of the IPA deployment",
        )
        ipa_group.add_option(
            "--realm",
            dest="realm",
            metavar="REALM",
            help="Kerberos realm name of the IPA deployment",
        )
        ipa_group.add_option(
            "-p",
            "--principal",
            dest="principal",
            help="IPA principal to register the HTTP service",
        )
        ipa_group.add_option(
            "-w",
            "--password",
            dest="password",
            sensitive=True,
            help="password of the IPA principal",
        )
        parser.add_option_group(ipa_group)

    def validate_options(self):
        super(IPAExtAuthCli, self).validate_options(needs_root=True)

        parser = self.option_parser
        if not self.args:
            parser.error("command not provided")
        if len(self.args) != 1:
            parser.error("too many arguments")

        self.command = self.args[0]
        if self.command not in ("activate", "unconfigure", "status"):
            parser.error(
                "Unknown command {command}".format(command=self.command)
            )

        if self.command == "activate" and self.options.unattended:
            for name in ("ipaserver", "password"):
                if not getattr(self.options, name):
                    parser.error(
                        "--{name} is required in unattended mode".format(
                            name=name
                        )
                    )

    def get_prompter(self):
        if self.options.unattended:
            return StaticPrompter(
                hostname=self.options.ipaserver,
                domain=self.options.domain,
                realm=self.options.realm,
                principal=self.options.principal,
                password=self.options.password,
            )
        return ConsolePrompter()

    def run(self):
        super(IPAExtAuthCli, self).run()

        extauth = ExternalHttpdAuthentication(
            host=self.options.hostname,
            ipaserver=self.options.ipaserver,
            domain=self.options.domain,
            realm=self.options.realm,
            principal=self.options.principal,
            password=self.options.password,
            prompter=self.get_prompter(),
        )
        try:
            if self.command == "activate":
                extauth.ask_for_parameters()
                extauth.show_parameters()
                extauth.activate()
            elif self.command == "unconfigure":
                extauth.unconfigure()
            elif self.command == "status":
                if extauth.ipa_client_configured():
                    print("IPA client is configured.")
                else:
                    print("IPA client is not configured.")
            else:
                raise ValueError(self.command)
        except ExtAuthError as e:
            logger.debug("Step failed", exc_info=True)
            raise admintool.ScriptError(e.msg, rval=e.rval)
        return 0


def main(args=None):
    if args is None:
        IPAExtAuthCli.run_cli()
    else:
        raise SystemExit(IPAExtAuthCli.main(["ipa-extauth"] + list(args)))


if __name__ == "__main__":
    IPAExtAuthCli.run_cli()
