"""
Settings helpers for the ``openstack_messaging`` Django app.
"""

import os

import yaml

from settings_object import Setting, SettingsObject

from . import api, client_id


class MessagingSettings(SettingsObject):
    """
    Settings object for the ``OPENSTACK_MESSAGING`` setting.
    """

    #: The clouds.yaml file containing the cloud and credentials to use
    CLOUDS_FILE = Setting(
        default = os.environ.get(
            "OS_CLIENT_CONFIG_FILE",
            os.path.expanduser("~/.config/openstack/clouds.yaml")
        )
    )
    #: The name of the cloud to use from the clouds file
    #: If not given, OS_CLOUD is used if set, otherwise the first cloud in the file
    CLOUD = Setting(default = None)
    #: The file that the Client-ID for this client is persisted to
    CLIENT_ID_FILE = Setting(
        default = os.path.expanduser("~/.config/openstack-messaging/client-id")
    )
    #: The default maximum number of messages per page when streaming
    DEFAULT_STREAM_LIMIT = Setting(default = 10)
    #: The number of seconds to wait before polling again after an empty page
    POLL_INTERVAL = Setting(default = 5)


messaging_settings = MessagingSettings("OPENSTACK_MESSAGING")


def connection_from_settings(settings = messaging_settings):
    """
    Returns an authenticated connection for the cloud in the given settings.
    """
    with open(settings.CLOUDS_FILE) as fh:
        clouds = yaml.safe_load(fh)
    return api.Connection.from_clouds(clouds, settings.CLOUD)


def client_id_from_settings(settings = messaging_settings):
    """
    Returns the Client-ID for this process using the given settings.
    """
    return client_id.for_process(settings.CLIENT_ID_FILE)
