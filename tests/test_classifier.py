"""Tests for hostname classification."""
import pytest

from healtara.models.routing import Primary, LocalDev, PlatformSubdomain, CustomDomain
from healtara.services.classifier import classify, strip_port


class TestStripPort:
    @pytest.mark.parametrize(
        "host, expected",
        [
            ("example.com", "example.com"),
            ("Example.COM:8443", "example.com"),
            ("apollo-care.example.com:3000", "apollo-care.example.com"),
            ("example.com.", "example.com"),
            ("[::1]:8000", "[::1]"),
            ("", ""),
        ],
    )
    def test_strip_port(self, host, expected):
        assert strip_port(host) == expected


class TestClassify:
    def test_primary_domain(self, settings):
        assert classify("example.com", settings) == Primary()

    def test_platform_subdomain(self, settings):
        assert classify("apollo-care.example.com", settings) == PlatformSubdomain("apollo-care")

    def test_port_is_ignored(self, settings):
        assert classify("apollo-care.example.com:8080", settings) == PlatformSubdomain("apollo-care")
        assert classify("example.com:8080", settings) == Primary()

    def test_case_insensitive(self, settings):
        assert classify("Apollo-Care.Example.com", settings) == PlatformSubdomain("apollo-care")

    def test_custom_domain(self, settings):
        assert classify("mycare.health", settings) == CustomDomain("mycare.health")

    def test_www_is_primary(self, settings):
        assert classify("www.example.com", settings) == Primary()

    @pytest.mark.parametrize(
        "host",
        ["example.com", "apollo-care.example.com", "mycare.health", "localhost", "a.b.c.d"],
    )
    def test_kill_switch(self, disabled_settings, host):
        assert classify(host, disabled_settings) == Primary()

    @pytest.mark.parametrize("host", ["localhost", "localhost:3000", "127.0.0.1", "127.0.0.1:8000"])
    def test_localhost(self, settings, host):
        assert classify(host, settings) == LocalDev()

    def test_localhost_subdomain_is_local_by_default(self, settings):
        assert classify("apollo-care.localhost:3000", settings) == LocalDev()

    def test_localhost_subdomain_override(self, settings):
        settings = settings.model_copy(update={"allow_localhost_subdomains": True})
        assert classify("apollo-care.localhost:3000", settings) == PlatformSubdomain("apollo-care")
        # bare localhost stays local even with the override
        assert classify("localhost", settings) == LocalDev()

    @pytest.mark.parametrize("host", ["my-app-git-main.vercel.app", "preview.vercel.dev", "vercel.app"])
    def test_platform_hosting_domain_is_primary(self, settings, host):
        assert classify(host, settings) == Primary()

    def test_bare_ip_is_primary(self, settings):
        assert classify("10.0.0.12:8000", settings) == Primary()

    def test_no_primary_domain_never_yields_custom_domain(self, settings):
        settings = settings.model_copy(update={"primary_domain": ""})
        assert classify("mycare.health", settings) == Primary()
        assert classify("apollo-care.example.com", settings) == PlatformSubdomain("apollo-care")

    def test_single_label_host_is_custom_domain(self, settings):
        # Anything that is not the primary domain belongs to a tenant
        assert classify("intranet", settings) == CustomDomain("intranet")

    def test_multi_label_primary_domain(self, settings):
        settings = settings.model_copy(update={"primary_domain": "healtara.co.in"})
        assert classify("healtara.co.in", settings) == Primary()
        assert classify("healtara.co.in:443", settings) == Primary()
        assert classify("www.healtara.co.in", settings) == Primary()
        assert classify("apollo-care.healtara.co.in", settings) == PlatformSubdomain("apollo-care")

    @pytest.mark.parametrize("host", ["www.apollocare.health", "portal.apollocare.health"])
    def test_multi_label_custom_domain(self, settings, host):
        assert classify(host, settings) == CustomDomain(host)

    def test_lookalike_of_primary_is_custom_domain(self, settings):
        assert classify("apollo-care.notexample.com", settings) == CustomDomain("apollo-care.notexample.com")
