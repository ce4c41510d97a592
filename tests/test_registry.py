# tests/test_registry.py

"""Tests for building providers from the market registry."""

import unittest

from src.providers.angeloni_provider import AngeloniProvider
from src.providers.minhacooper_provider import MinhacooperProvider
from src.providers.registry import build_providers

ANGELONI = {
    "id": "angeloni",
    "label": "Angeloni",
    "provider": "src.providers.angeloni_provider.AngeloniProvider",
}


class TestBuildProviders(unittest.TestCase):
    """build_providers unit tests."""

    def test_default_registry_order(self) -> None:
        """Settings' markets are built in declared order."""
        providers = build_providers()
        self.assertIsInstance(providers[0], AngeloniProvider)
        self.assertIsInstance(providers[1], MinhacooperProvider)
        self.assertEqual(
            [p.name for p in providers], ["Angeloni", "Minhacooper"]
        )

    def test_explicit_market_list(self) -> None:
        """A custom declaration list is honoured."""
        providers = build_providers([ANGELONI])
        self.assertEqual([p.name for p in providers], ["Angeloni"])

    def test_empty_market_list(self) -> None:
        """An empty declaration builds nothing."""
        self.assertEqual(build_providers([]), [])

    def test_duplicate_names_rejected(self) -> None:
        """Two providers with the same identity are refused."""
        with self.assertRaises(ValueError):
            build_providers([ANGELONI, dict(ANGELONI, id="again")])

    def test_unknown_class_path_raises(self) -> None:
        """A typo in the dotted path fails loudly at startup."""
        with self.assertRaises((ImportError, AttributeError)):
            build_providers(
                [dict(ANGELONI, provider="src.providers.nope.Nope")]
            )

    def test_provider_matches_case_insensitively(self) -> None:
        """Identity lookups ignore case and surrounding spaces."""
        provider = AngeloniProvider()
        self.assertTrue(provider.matches("angeloni"))
        self.assertTrue(provider.matches(" ANGELONI "))
        self.assertFalse(provider.matches("minhacooper"))


if __name__ == "__main__":
    unittest.main()
