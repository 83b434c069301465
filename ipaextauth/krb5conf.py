#
# ipa-extauth: external httpd authentication with IPA
# See COPYING for license
#
"""Edit the Kerberos client configuration in place

krb5.conf is scanned line by line. Only known flags inside a single
section are rewritten, all other lines (comments, indentation, other
sections) are carried through unmodified.
"""
import logging
import os
import re
import shutil
import typing

from ipaextauth import extauthplatform
from ipaextauth.errors import FileIOError

logger = logging.getLogger(__name__)

SECTION_RE = re.compile(r"^\s*\[\s*(?P<name>[^\]\s]+)\s*\]\s*$")
OPTION_RE = re.compile(
    r"^(?P<prefix>\s*(?P<key>[\w.-]+)\s*=\s*)(?P<value>.*?)(?P<suffix>\s*)$"
)


def split_eol(line: str) -> typing.Tuple[str, str]:
    """Split a line into text and line terminator"""
    text = line.rstrip("\r\n")
    return text, line[len(text):]


def rewrite_section(
    lines: typing.Iterable[str],
    section: str,
    options: typing.Dict[str, str],
) -> typing.Iterator[str]:
    """Set values of options inside section

    Options that are not present are not added.
    """
    current = None
    for line in lines:
        text, eol = split_eol(line)
        mo = SECTION_RE.match(text)
        if mo is not None:
            current = mo.group("name")
            yield line
            continue
        if current == section:
            mo = OPTION_RE.match(text)
            if mo is not None and mo.group("key") in options:
                value = options[mo.group("key")]
                yield mo.group("prefix") + value + mo.group("suffix") + eol
                continue
        yield line


class KerberosConfigPatcher:
    """Patch a krb5.conf file, keeping a one-time backup of the original"""

    def __init__(
        self,
        path: str = extauthplatform.KERBEROS_CONFIG_FILE,
        backup_suffix: str = extauthplatform.KERBEROS_CONFIG_BACKUP_SUFFIX,
    ):
        self.path = path
        self.backup_path = path + backup_suffix

    def read(self) -> str:
        try:
            with open(
                self.path,
                encoding="utf-8",
                errors="surrogateescape",
                newline="",
            ) as f:
                return f.read()
        except (OSError, UnicodeError) as e:
            raise FileIOError(
                f"Unable to read Kerberos config '{self.path}': {e}"
            ) from e

    def write(self, content: str):
        try:
            with open(
                self.path,
                "w",
                encoding="utf-8",
                errors="surrogateescape",
                newline="",
            ) as f:
                f.write(content)
        except (OSError, UnicodeError) as e:
            raise FileIOError(
                f"Unable to write Kerberos config '{self.path}': {e}"
            ) from e

    def backup(self) -> bool:
        """Copy config to backup path unless a backup already exists

        The first backup is never replaced, it keeps the content from
        before the first modification.
        """
        if os.path.exists(self.backup_path):
            logger.debug("Backup '%s' already exists.", self.backup_path)
            return False
        try:
            shutil.copy2(self.path, self.backup_path)
        except OSError as e:
            raise FileIOError(
                f"Unable to create backup '{self.backup_path}': {e}"
            ) from e
        logger.debug("Saved '%s' as '%s'.", self.path, self.backup_path)
        return True

    def restore_backup(self):
        if not os.path.isfile(self.backup_path):
            raise FileIOError(f"Backup '{self.backup_path}' does not exist.")
        try:
            shutil.copy2(self.backup_path, self.path)
        except OSError as e:
            raise FileIOError(
                f"Unable to restore '{self.path}' from backup: {e}"
            ) from e
        logger.info("Restored '%s' from '%s'.", self.path, self.backup_path)

    def set_options(
        self, section: str, options: typing.Dict[str, str]
    ) -> bool:
        content = self.read()
        self.backup()
        lines = content.splitlines(keepends=True)
        new_content = "".join(rewrite_section(lines, section, options))
        if new_content == content:
            logger.debug("%s is up to date.", self.path)
            return False
        logger.debug("Updating [%s] in %s.", section, self.path)
        self.write(new_content)
        return True

    def enable_kerberos_dns_lookups(self) -> bool:
        """Set dns_lookup_realm and dns_lookup_kdc to true"""
        options = {
            flag: "true" for flag in extauthplatform.KERBEROS_DNS_LOOKUP_FLAGS
        }
        return self.set_options(extauthplatform.KERBEROS_LIBDEFAULTS, options)
