import math
import unittest

from errors import InvalidInput, InvalidScoreRange
from models import BenchmarkThresholds, RegulatoryThresholds
from benchmarks import compare_to_benchmarks, regulatory_readiness, industry_position, sector_average


class TestCompareToBenchmarks(unittest.TestCase):
    def test_high_score_joins_both_indices(self):
        flags = compare_to_benchmarks(89.5, 65)
        self.assertTrue(flags.ftse4good_included)
        self.assertTrue(flags.djsi_world_member)
        self.assertEqual(flags.industry_average, 65.0)
        self.assertEqual(flags.sp500_average, 68.0)

    def test_ftse4good_threshold_is_inclusive(self):
        self.assertTrue(compare_to_benchmarks(75.0, 70).ftse4good_included)
        self.assertFalse(compare_to_benchmarks(74.99, 70).ftse4good_included)

    def test_djsi_threshold_is_inclusive(self):
        self.assertTrue(compare_to_benchmarks(78.0, 70).djsi_world_member)
        self.assertFalse(compare_to_benchmarks(77.99, 70).djsi_world_member)
        self.assertTrue(compare_to_benchmarks(77.99, 70).ftse4good_included)

    def test_alternate_thresholds(self):
        strict = BenchmarkThresholds(name="strict", ftse4good=80, djsi_world=90)
        flags = compare_to_benchmarks(85, 70, strict)
        self.assertTrue(flags.ftse4good_included)
        self.assertFalse(flags.djsi_world_member)

    def test_rejects_bad_inputs(self):
        with self.assertRaises(InvalidScoreRange):
            compare_to_benchmarks(101, 70)
        with self.assertRaises(InvalidInput):
            compare_to_benchmarks(math.nan, 70)
        with self.assertRaises(InvalidScoreRange):
            compare_to_benchmarks(80, 140)
        with self.assertRaises(InvalidInput):
            compare_to_benchmarks(80, math.inf)
        with self.assertRaises(InvalidInput):
            compare_to_benchmarks("high", 70)

    def test_both_scores_accept_numeric_strings(self):
        self.assertEqual(compare_to_benchmarks("75", "70"), compare_to_benchmarks(75, 70))
        self.assertEqual(regulatory_readiness("75"), regulatory_readiness(75.0))
        self.assertEqual(industry_position("72", 65), "above")

    def test_both_scores_reject_non_finite_alike(self):
        for bad in (math.nan, math.inf, -math.inf):
            with self.assertRaises(InvalidInput) as overall_error:
                compare_to_benchmarks(bad, 70)
            with self.assertRaises(InvalidInput) as average_error:
                compare_to_benchmarks(70, bad)
            self.assertEqual(overall_error.exception.field, "overall")
            self.assertEqual(average_error.exception.field, "industry_average")


class TestRegulatoryReadiness(unittest.TestCase):
    def test_default_thresholds(self):
        readiness = regulatory_readiness(75.0)
        self.assertFalse(readiness.eu_taxonomy_aligned)
        self.assertTrue(readiness.csrd_ready)
        self.assertTrue(readiness.tcfd_compliant)
        self.assertTrue(readiness.sec_climate_ready)

    def test_just_below_everything(self):
        readiness = regulatory_readiness(69.99)
        self.assertEqual(readiness.to_dict(), {
            "eu_taxonomy_aligned": False,
            "csrd_ready": False,
            "tcfd_compliant": False,
            "sec_climate_ready": False,
        })

    def test_custom_thresholds(self):
        self.assertTrue(regulatory_readiness(60, RegulatoryThresholds(eu_taxonomy_alignment=60)).eu_taxonomy_aligned)


class TestIndustryPosition(unittest.TestCase):
    def test_positions(self):
        self.assertEqual(industry_position(72.0, 65), "above")
        self.assertEqual(industry_position(65.4, 65), "in_line")
        self.assertEqual(industry_position(64.5, 65), "in_line")
        self.assertEqual(industry_position(60.0, 65), "below")


class TestSectorAverage(unittest.TestCase):
    def test_lookup(self):
        self.assertEqual(sector_average("energy"), 58.0)
        self.assertEqual(sector_average("Financial Services"), 70.0)
        self.assertEqual(sector_average("utilities", "environmental"), 78.0)

    def test_unknown_sector(self):
        with self.assertRaises(InvalidInput):
            sector_average("mining")
        with self.assertRaises(InvalidInput):
            sector_average("energy", "economic")


if __name__ == "__main__":
    unittest.main()
