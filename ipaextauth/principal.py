"""Kerberos service principal registration with IPA
"""
import logging

from ipapython.kerberos import Principal as KerberosPrincipal

from ipaextauth import extauthplatform
from ipaextauth.commands import ExternalCommandRunner
from ipaextauth.errors import CommandExecutionError, RegistrationError

logger = logging.getLogger(__name__)


class Principal:
    """Service principal SERVICE/HOSTNAME@REALM

    Registration uses the ipa CLI and requires a valid Kerberos ticket
    of an IPA administrator.
    """

    def __init__(
        self,
        hostname: str,
        realm: str,
        service: str = extauthplatform.HTTP_SERVICE,
        ca_name: str = "ipa",
        runner: ExternalCommandRunner = None,
    ):
        self.hostname = hostname
        self.realm = realm.upper()
        self.service = service
        self.ca_name = ca_name
        self.runner = runner if runner is not None else ExternalCommandRunner()
        self._principal = KerberosPrincipal(
            (self.service, self.hostname), self.realm
        )

    @property
    def name(self) -> str:
        return str(self._principal)

    @property
    def subject_name(self) -> str:
        return f"CN={self.hostname},OU={self.service},O={self.realm}"

    def is_ipa(self) -> bool:
        return self.ca_name == "ipa"

    def exists(self) -> bool:
        result = self.runner.ipa(
            "service-find", "--principal", self.name, raiseonerr=False
        )
        return result.returncode == 0

    def register(self) -> bool:
        """Add service principal unless it is already registered"""
        if not self.is_ipa():
            return False
        try:
            if self.exists():
                logger.info("Service '%s' already exists.", self.name)
                return False
            logger.info("Adding service '%s'.", self.name)
            self.runner.ipa("service-add", "--force", self.name)
        except CommandExecutionError as e:
            raise RegistrationError(
                f"Failed to register service '{self.name}': {e}"
            ) from e
        return True
