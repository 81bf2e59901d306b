import unittest

from vault.config import Settings


class TestSettings(unittest.TestCase):
    def test_gateway_host_is_normalised(self) -> None:
        for raw in ("gw.example.com", "https://gw.example.com/", "http://gw.example.com", " gw.example.com/ "):
            self.assertEqual(Settings(_env_file=None, GATEWAY_URL=raw).GATEWAY_URL, "gw.example.com")

    def test_is_configured_needs_both_values(self) -> None:
        self.assertFalse(Settings(_env_file=None, PINATA_JWT="t", GATEWAY_URL=None).is_configured)
        self.assertFalse(Settings(_env_file=None, PINATA_JWT=None, GATEWAY_URL="gw").is_configured)
        self.assertTrue(Settings(_env_file=None, PINATA_JWT="t", GATEWAY_URL="gw").is_configured)

    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        self.assertEqual(s.PINATA_API_URL, "https://api.pinata.cloud")
        self.assertEqual(s.DEFAULT_CONTENT_TYPE, "application/octet-stream")
        self.assertIsNone(s.PINATA_TIMEOUT_SECONDS)


if __name__ == "__main__":
    unittest.main()
