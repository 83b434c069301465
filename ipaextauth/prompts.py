"""Ask the operator for IPA server parameters
"""
import abc
import getpass
import typing

from ipapython.ipautil import user_input


class Prompter(abc.ABC):
    """Supplies IPA server parameters, one method per parameter

    Every method gets the current default (or None) and returns the
    value to use.
    """

    def say(self, message: str):
        pass

    @abc.abstractmethod
    def ask_for_hostname(
        self, label: str, default: typing.Optional[str]
    ) -> str:
        pass

    @abc.abstractmethod
    def ask_for_domain(
        self, label: str, default: typing.Optional[str]
    ) -> str:
        pass

    @abc.abstractmethod
    def ask_for_realm(
        self, label: str, default: typing.Optional[str]
    ) -> str:
        pass

    @abc.abstractmethod
    def ask_for_principal(
        self, label: str, default: typing.Optional[str]
    ) -> str:
        pass

    @abc.abstractmethod
    def ask_for_password(
        self, label: str, default: typing.Optional[str]
    ) -> str:
        pass


class ConsolePrompter(Prompter):
    """Prompt on the terminal"""

    def say(self, message: str):
        print(message)

    def _ask(self, label, default):
        return user_input(label, default, allow_empty=False)

    ask_for_hostname = _ask
    ask_for_domain = _ask
    ask_for_realm = _ask
    ask_for_principal = _ask

    def ask_for_password(self, label, default):
        if default:
            return default
        while True:
            password = getpass.getpass(f"{label}: ")
            if password:
                return password


class StaticPrompter(Prompter):
    """Answer with preset values, used for unattended runs"""

    def __init__(self, **values: typing.Optional[str]):
        self.values = values

    def _get(self, key, default):
        value = self.values.get(key)
        return value if value else default

    def ask_for_hostname(self, label, default):
        return self._get("hostname", default)

    def ask_for_domain(self, label, default):
        return self._get("domain", default)

    def ask_for_realm(self, label, default):
        return self._get("realm", default)

    def ask_for_principal(self, label, default):
        return self._get("principal", default)

    def ask_for_password(self, label, default):
        return self._get("password", default)
