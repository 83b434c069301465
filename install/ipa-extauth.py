#!/usr/bin/python3 -I
"""Configure httpd external authentication with IPA
"""
from ipaextauth.cli import IPAExtAuthCli

if __name__ == "__main__":
    IPAExtAuthCli.run_cli()
