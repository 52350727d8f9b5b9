import os
from unittest import TestCase
from unittest.mock import Mock, patch

from .. import api
from ..api.core import CloudNotFound, UnsupportedAuthType
from ..api.messaging import MessagingService
from ..api.orchestration import OrchestrationService


TOKEN_DATA = {
    "methods": ["password"],
    "user": {"id": "u-123", "name": "demo"},
    "project": {"id": "p-456", "name": "demo-project"},
    "catalog": [
        {
            "type": "messaging",
            "endpoints": [
                {
                    "interface": "internal",
                    "region": "RegionOne",
                    "url": "http://10.0.0.1:8888",
                },
                {
                    "interface": "public",
                    "region": "RegionOne",
                    "url": "https://messaging.example.com:8888/",
                },
            ],
        },
        {
            "type": "orchestration",
            "endpoints": [
                {
                    "interface": "public",
                    "region": "RegionTwo",
                    "url": "https://heat.example.com:8004/v1/p-456",
                },
            ],
        },
    ],
}


def clouds(auth_type, **auth):
    auth.setdefault("auth_url", "https://keystone.example.com:5000/v3/")
    return {
        "clouds": {
            "openstack": {
                "auth_type": auth_type,
                "auth": auth,
                "region_name": "RegionOne",
            },
            "other": {
                "auth_type": "v3token",
                "auth": {"auth_url": "https://other.example.com", "token": "other"},
            },
        },
    }


def token_response(token = "issued-token"):
    return Mock(
        headers = {"X-Subject-Token": token},
        **{"json.return_value": {"token": TOKEN_DATA}}
    )


class ConnectionTestCase(TestCase):

    @patch("requests.post", return_value = token_response())
    def test_password(self, mock_post):
        conn = api.Connection.from_clouds(
            clouds(
                "password",
                username = "demo",
                password = "secret",
                project_name = "demo-project",
                user_domain_name = "Users",
            ),
            "openstack"
        )
        self.assertEqual(mock_post.call_args.args[0], "https://keystone.example.com:5000/v3/auth/tokens")
        identity = mock_post.call_args.kwargs["json"]["auth"]["identity"]
        self.assertEqual(identity["methods"], ["password"])
        self.assertEqual(
            identity["password"]["user"],
            {"name": "demo", "password": "secret", "domain": {"name": "Users"}}
        )
        self.assertEqual(
            mock_post.call_args.kwargs["json"]["auth"]["scope"],
            {"project": {"name": "demo-project", "domain": {"name": "Default"}}}
        )
        self.assertEqual(conn.token, "issued-token")
        self.assertEqual(conn.project_id, "p-456")
        self.assertEqual(conn.username, "demo")
        # Only the public endpoint in the correct region is used, without its path
        self.assertEqual(conn.endpoints, {"messaging": "https://messaging.example.com:8888"})

    @patch("requests.post", return_value = token_response())
    def test_application_credential(self, mock_post):
        api.Connection.from_clouds(
            clouds(
                "v3applicationcredential",
                application_credential_id = "ac-id",
                application_credential_secret = "ac-secret",
            ),
            "openstack"
        )
        self.assertEqual(
            mock_post.call_args.kwargs["json"]["auth"]["identity"]["application_credential"],
            {"id": "ac-id", "secret": "ac-secret"}
        )

    @patch("requests.get", return_value = token_response())
    def test_token(self, mock_get):
        conn = api.Connection.from_clouds(clouds("v3token", token = "existing"), "openstack")
        self.assertEqual(
            mock_get.call_args.kwargs["headers"],
            {"X-Auth-Token": "existing", "X-Subject-Token": "existing"}
        )
        self.assertEqual(conn.token, "existing")

    @patch("requests.get", return_value = token_response())
    def test_cloud_from_environment(self, mock_get):
        with patch.dict(os.environ, {"OS_CLOUD": "other"}):
            conn = api.Connection.from_clouds(clouds("password"))
        self.assertEqual(conn.auth_url, "https://other.example.com/v3")
        self.assertEqual(conn.token, "other")

    def test_cloud_not_found(self):
        with self.assertRaises(CloudNotFound):
            api.Connection.from_clouds(clouds("password"), "missing")

    def test_unsupported_auth_type(self):
        with self.assertRaises(UnsupportedAuthType):
            api.Connection.from_clouds(clouds("v2password"), "openstack")

    def test_auth_header(self):
        conn = api.Connection(
            "https://keystone.example.com/v3",
            "abc",
            None,
            "public",
            True,
            "password",
            "u-123",
            "demo",
            "p-456",
            "demo-project",
            {},
        )
        request = conn(Mock(headers = {}))
        self.assertEqual(request.headers, {"X-Auth-Token": "abc"})

    def test_service_discovery(self):
        conn = api.Connection(
            "https://keystone.example.com/v3",
            "abc",
            None,
            "public",
            True,
            "password",
            "u-123",
            "demo",
            "p-456",
            "demo-project",
            {"messaging": "https://messaging.example.com"},
        )
        self.assertIsInstance(conn.messaging, MessagingService)
        self.assertEqual(conn.messaging.path_prefix, "/v1")
        with self.assertRaises(api.ServiceNotSupported):
            conn.orchestration
        conn.endpoints["orchestration"] = "https://heat.example.com"
        self.assertIsInstance(conn.orchestration, OrchestrationService)
        self.assertEqual(conn.orchestration.path_prefix, "/v1/p-456")
