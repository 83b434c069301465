#
# ipa-extauth: external httpd authentication with IPA
# See COPYING for license
#
"""Configure httpd external authentication against an IPA domain
"""
