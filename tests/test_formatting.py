import math
import unittest

from errors import InvalidInput
from formatting import format_score, format_emissions


class TestFormatting(unittest.TestCase):
    def test_format_score(self):
        self.assertEqual(format_score(71), "71.0")
        self.assertEqual(format_score(89.54), "89.5")

    def test_format_emissions_scales(self):
        self.assertEqual(format_emissions(950), "950.0 tCO₂e")
        self.assertEqual(format_emissions(12_500), "12.5K tCO₂e")
        self.assertEqual(format_emissions(3_400_000), "3.4M tCO₂e")
        self.assertEqual(format_emissions(1_000), "1.0K tCO₂e")

    def test_rejects_non_finite(self):
        with self.assertRaises(InvalidInput):
            format_score(math.nan)
        with self.assertRaises(InvalidInput):
            format_emissions(math.inf)


if __name__ == "__main__":
    unittest.main()
