#
# ipa-extauth: external httpd authentication with IPA
# See COPYING for license
#
"""Errors raised while configuring external authentication

Every error carries an exit code (``rval``) that the ipa-extauth tool
passes on as process exit status.
"""
import typing


class ExtAuthError(Exception):
    """Base class of ipa-extauth errors"""

    rval = 1

    def __init__(self, msg: str = "", rval: typing.Optional[int] = None):
        super().__init__(msg)
        if rval is not None:
            self.rval = rval

    @property
    def msg(self) -> str:
        return str(self)


class ValidationError(ExtAuthError):
    """Operator input cannot be turned into a usable host identity"""

    rval = 2


class FileIOError(ExtAuthError):
    """Config file is missing or cannot be read or written"""

    rval = 3


class CommandExecutionError(ExtAuthError):
    """External command returned a non-zero exit status"""

    rval = 4

    def __init__(
        self,
        cmd: typing.Sequence[str],
        returncode: int,
        stderr: typing.Optional[str] = None,
        nolog: typing.Iterable[str] = (),
    ):
        # same mask as ipautil.run uses in its log output
        secrets = {value for value in nolog if value}
        self.cmd = [
            "XXXXXXXX" if arg in secrets else arg for arg in cmd
        ]
        self.returncode = returncode
        self.stderr = stderr
        msg = (
            f"Command '{self.cmd[0]}' returned non-zero exit status "
            f"{returncode}"
        )
        if stderr:
            msg += f": {stderr.strip()}"
        super().__init__(msg)

    def __repr__(self):
        clsname = self.__class__.__name__
        return f"{clsname}({self.cmd!r}, {self.returncode!r}, {self.stderr!r})"


class ServiceControlError(ExtAuthError):
    """Service manager failed to query, restart, or enable a service"""

    rval = 5


class RegistrationError(ExtAuthError):
    """Service principal could not be registered with IPA"""

    rval = 6
