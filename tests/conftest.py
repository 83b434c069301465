import contextlib
import io
import logging
import os
import sys
import tempfile
import unittest
from unittest import mock

BASEDIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
TESTDATA = os.path.join(BASEDIR, "tests", "data")

DOMAIN = "ipa-extauth.test"
REALM = DOMAIN.upper()
CLIENT_FQDN = "appliance.ipa-extauth.test"
SERVER_FQDN = "ipa.ipa-extauth.test"
HTTP_PRINCIPAL = f"HTTP/{CLIENT_FQDN}@{REALM}"
PRINCIPAL = "admin"
PASSWORD = "$my_password"  # noqa: S105

KRB5_CONF = os.path.join(TESTDATA, "krb5.conf")
NO_FILE = os.path.join(TESTDATA, "file-does-not-exist")

ALL_FALSE_KRB5_CONF = """\
[libdefaults]
  default_realm = MY.REALM
  dns_lookup_realm = false
  dns_lookup_kdc = false
  rdns = false
  ticket_lifetime = 24h
  forwardable = yes
  udp_preference_limit = 0
"""

SOME_FALSE_KRB5_CONF = """\
[libdefaults]
  default_realm = MY.REALM
  dns_lookup_realm = false
  dns_lookup_kdc = true
  rdns = false
  ticket_lifetime = 24h
  forwardable = yes
  udp_preference_limit = 0
"""

EXPECTED_KRB5_CONF = """\
[libdefaults]
  default_realm = MY.REALM
  dns_lookup_realm = true
  dns_lookup_kdc = true
  rdns = false
  ticket_lifetime = 24h
  forwardable = yes
  udp_preference_limit = 0
"""


class CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class IPABaseTests(unittest.TestCase):
    maxDiff = None

    def log_capture_start(self):
        self.log_capture = CaptureHandler()
        self.log_capture.setFormatter(
            logging.Formatter("%(levelname)s:%(name)s:%(message)s")
        )

        root_logger = logging.getLogger(None)
        self._old_handlers = root_logger.handlers[:]
        self._old_level = root_logger.level
        root_logger.handlers = [self.log_capture]
        root_logger.setLevel(logging.DEBUG)
        self.addCleanup(self.log_capture_stop)

    def log_capture_stop(self):
        root_logger = logging.getLogger(None)
        root_logger.handlers = self._old_handlers
        root_logger.setLevel(self._old_level)

    def setUp(self):
        super().setUp()
        self.log_capture_start()

    def mkdtemp(self):
        td = tempfile.TemporaryDirectory()
        self.addCleanup(td.cleanup)
        return td.name

    def write_file(self, filename, content):
        with open(filename, "w", encoding="utf-8") as f:
            f.write(content)

    def read_file(self, filename):
        with open(filename, encoding="utf-8") as f:
            return f.read()

    def mock_service(self, running=True):
        """Mock platform service; restart/enable return the service"""
        svc = mock.Mock()
        svc.is_running.return_value = running
        return svc

    def assert_cli_run(self, mainfunc, *args, **kwargs):
        try:
            with capture_output() as out:
                mainfunc(list(args))
        except SystemExit as e:
            self.assertEqual(e.code, kwargs.get("exitcode", 0))
        else:  # pragma: no cover
            self.fail("SystemExit expected")
        return out.read()

    def assert_log_entry(self, msg):
        msgs = [r.getMessage() for r in self.log_capture.records]
        self.assertIn(msg, msgs)

    def assert_not_logged(self, text):
        for record in self.log_capture.records:
            self.assertNotIn(text, record.getMessage())


@contextlib.contextmanager
def capture_output():
    out = io.StringIO()
    orig_stdout = sys.stdout
    orig_stderr = sys.stderr
    sys.stdout = out
    sys.stderr = out
    try:
        yield out
    finally:
        sys.stdout = orig_stdout
        sys.stderr = orig_stderr
        out.seek(0)
