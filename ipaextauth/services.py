"""Control httpd and sssd through the platform service manager
"""
import logging
import subprocess
import typing

import ipalib
from ipaplatform.services import knownservices, service

from ipaextauth import extauthplatform
from ipaextauth.errors import ServiceControlError

logger = logging.getLogger(__name__)

# ipautil.CalledProcessError is a subclass of subprocess.CalledProcessError
SERVICE_ERRORS = (subprocess.CalledProcessError, OSError)


class ServiceHandle:
    """A named system service"""

    def __init__(self, name: str, platform_service=None):
        self.name = name
        if platform_service is None:
            platform_service = self._lookup(name)
        self._service = platform_service

    @staticmethod
    def _lookup(name):
        try:
            return knownservices[name]
        except KeyError:
            return service(name, ipalib.api)

    def _call(self, action: str, *args, **kwargs):
        method = getattr(self._service, action)
        try:
            return method(*args, **kwargs)
        except SERVICE_ERRORS as e:
            raise ServiceControlError(
                f"Failed to {action.replace('_', ' ')} service "
                f"'{self.name}': {e}"
            ) from e

    def is_running(self) -> bool:
        return bool(self._call("is_running"))

    def restart(self) -> "ServiceHandle":
        logger.debug("Restarting service '%s'.", self.name)
        self._call("restart")
        return self

    def enable(self) -> "ServiceHandle":
        logger.debug("Enabling service '%s' at boot.", self.name)
        self._call("enable")
        return self


class ServiceController:
    """Registry of service handles looked up by name"""

    def __init__(self, factory: typing.Callable[[str], ServiceHandle] = None):
        self._factory = factory if factory is not None else ServiceHandle
        self._handles = {}  # type: dict[str, ServiceHandle]

    def get(self, name: str) -> ServiceHandle:
        handle = self._handles.get(name)
        if handle is None:
            handle = self._handles[name] = self._factory(name)
        return handle

    def is_running(self, name: str) -> bool:
        return self.get(name).is_running()

    def restart(self, name: str):
        self.get(name).restart()

    def enable(self, name: str):
        self.get(name).enable()

    @property
    def httpd(self) -> ServiceHandle:
        return self.get(extauthplatform.HTTPD_SERVICE)

    @property
    def sssd(self) -> ServiceHandle:
        return self.get(extauthplatform.SSSD_SERVICE)
