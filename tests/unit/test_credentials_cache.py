# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for CredentialsCache
"""

from nuget_gallery.models import ResolvedCredential
from nuget_gallery.services.credentials import CredentialsCache


class TestCredentialsCache:
    """Test set/get/has/clear"""

    def test_get_unknown_source_returns_none(self):
        cache = CredentialsCache()
        assert cache.get("Private") is None
        assert not cache.has("Private")

    def test_set_then_get(self):
        cache = CredentialsCache()
        cache.set("Private", "user", "cGFzcw==")

        assert cache.has("Private")
        assert cache.get("Private") == ResolvedCredential(username="user", password="cGFzcw==")

    def test_names_are_case_sensitive(self):
        cache = CredentialsCache()
        cache.set("Private", "user", "pw")
        assert cache.get("private") is None

    def test_set_overwrites(self):
        cache = CredentialsCache()
        cache.set("Private", "user", "old")
        cache.set("Private", "user", "new")

        assert cache.get("Private").password == "new"
        assert len(cache) == 1

    def test_partial_credentials(self):
        cache = CredentialsCache()
        cache.set("TokenOnly", password="token")

        credential = cache.get("TokenOnly")
        assert credential.username is None
        assert credential.password == "token"

    def test_clear(self):
        cache = CredentialsCache()
        cache.set("A", "u", "p")
        cache.set("B", "u", "p")

        cache.clear()

        assert len(cache) == 0
        assert not cache.has("A")
