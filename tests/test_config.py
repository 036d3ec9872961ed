import unittest
from unittest.mock import patch

from issueflow.config import Settings


class SettingsTests(unittest.TestCase):
    def test_repository_list_is_trimmed_and_ordered(self):
        settings = Settings(_env_file=None, gh_repos=" octo-org/api ,octo-org/web,, ")
        self.assertEqual(settings.repository_list, ["octo-org/api", "octo-org/web"])

    def test_repository_list_empty_when_unset(self):
        self.assertEqual(Settings(_env_file=None, gh_repos=None).repository_list, [])

    def test_service_options(self):
        self.assertEqual(
            Settings(_env_file=None, services="checkout_api, buyer3").service_options,
            ["checkout_api", "buyer3"],
        )
        self.assertEqual(Settings(_env_file=None, services="").service_options, ["default"])

    def test_env_variable_names(self):
        env = {"GH_TOKEN": "abc", "GH_REPOS": "octo-org/api", "SYNC_INTERVAL_MINUTES": "15"}
        with patch.dict("os.environ", env):
            settings = Settings(_env_file=None)

        self.assertEqual(settings.gh_token, "abc")
        self.assertEqual(settings.repository_list, ["octo-org/api"])
        self.assertEqual(settings.sync_interval_minutes, 15)


if __name__ == "__main__":
    unittest.main()
