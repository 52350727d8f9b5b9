import django
from django.conf import settings


def pytest_configure(config):
    # The management commands need a minimal Django configuration to be found
    settings.configure(
        INSTALLED_APPS = ["openstack_messaging"],
        OPENSTACK_MESSAGING = {},
    )
    django.setup()
