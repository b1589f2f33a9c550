import math
import unittest

from errors import InvalidInput, InvalidScoreRange
from models import CategoryScores, RatingBand, MSCI_WEIGHTING, EQUAL_WEIGHTING
from scoring import aggregate, classify, evaluate, score_breakdown, RATING_BANDS


class TestAggregate(unittest.TestCase):
    def test_msci_example(self):
        overall = aggregate(CategoryScores(80, 70, 60), MSCI_WEIGHTING)
        self.assertEqual(overall, 71.0)
        self.assertEqual(classify(overall), RatingBand.BBB)

    def test_high_scores_are_aaa(self):
        # 90*0.4 + 85*0.3 + 95*0.3 = 36 + 25.5 + 28.5
        overall = aggregate(CategoryScores(90, 85, 95), MSCI_WEIGHTING)
        self.assertEqual(overall, 90.0)
        self.assertEqual(classify(overall), RatingBand.AAA)

    def test_rounds_to_two_decimals(self):
        overall = aggregate(CategoryScores(77.777, 66.666, 55.555), MSCI_WEIGHTING)
        self.assertEqual(overall, round(overall, 2))
        self.assertAlmostEqual(overall, 77.777 * 0.4 + 66.666 * 0.3 + 55.555 * 0.3, places=2)

    def test_equal_weighting(self):
        self.assertEqual(aggregate(CategoryScores(90, 60, 30), EQUAL_WEIGHTING), 60.0)

    def test_range_invariant(self):
        grid = [0, 0.01, 12.5, 49.99, 50, 77.3, 99.99, 100]
        for env in grid:
            for soc in grid:
                for gov in grid:
                    overall = aggregate(CategoryScores(env, soc, gov), MSCI_WEIGHTING)
                    self.assertGreaterEqual(overall, 0.0)
                    self.assertLessEqual(overall, 100.0)

    def test_extremes(self):
        self.assertEqual(aggregate(CategoryScores(100, 100, 100), MSCI_WEIGHTING), 100.0)
        self.assertEqual(aggregate(CategoryScores(0, 0, 0), MSCI_WEIGHTING), 0.0)

    def test_monotonic_in_each_category(self):
        base = {"environmental": 50.0, "social": 50.0, "governance": 50.0}
        for category in base:
            previous = None
            for value in range(0, 101, 5):
                scores = dict(base, **{category: float(value)})
                overall = aggregate(CategoryScores(**scores), MSCI_WEIGHTING)
                if previous is not None:
                    self.assertGreaterEqual(overall, previous)
                previous = overall

    def test_accepts_a_plain_mapping(self):
        overall = aggregate({"environmental": 80, "social": 70, "governance": 60}, MSCI_WEIGHTING)
        self.assertEqual(overall, 71.0)

    def test_plain_mapping_is_validated(self):
        with self.assertRaises(InvalidScoreRange):
            aggregate({"environmental": 180, "social": 70, "governance": 60}, MSCI_WEIGHTING)
        with self.assertRaises(InvalidInput):
            aggregate({"environmental": 80, "social": 70}, MSCI_WEIGHTING)

    def test_rejects_other_score_containers(self):
        for bad_scores in ([80, 70, 60], (80, 70, 60), "80,70,60", None):
            with self.assertRaises(InvalidInput) as ctx:
                aggregate(bad_scores, MSCI_WEIGHTING)
            self.assertEqual(ctx.exception.field, "scores")

    def test_deterministic(self):
        scores = CategoryScores(63.21, 71.4, 58.09)
        self.assertEqual(aggregate(scores, MSCI_WEIGHTING), aggregate(scores, MSCI_WEIGHTING))

    def test_breakdown_contributions(self):
        breakdown = score_breakdown(CategoryScores(80, 70, 60), MSCI_WEIGHTING)
        self.assertEqual(breakdown, {"environmental": 32.0, "social": 21.0, "governance": 18.0})


class TestClassify(unittest.TestCase):
    def test_threshold_is_inclusive(self):
        self.assertEqual(classify(84.999), RatingBand.AA)
        self.assertEqual(classify(85.0), RatingBand.AAA)
        self.assertEqual(classify(84.99), RatingBand.AA)

    def test_every_band_boundary(self):
        expected = {
            85: RatingBand.AAA,
            80: RatingBand.AA,
            75: RatingBand.A,
            70: RatingBand.BBB,
            65: RatingBand.BB,
            60: RatingBand.B,
            59.99: RatingBand.CCC,
            0: RatingBand.CCC,
            100: RatingBand.AAA,
        }
        for score, band in expected.items():
            self.assertEqual(classify(score), band, score)

    def test_bands_cover_whole_range(self):
        seen = set()
        for hundredths in range(0, 10001):
            band = classify(hundredths / 100)
            self.assertIsInstance(band, RatingBand)
            seen.add(band)
        self.assertEqual(seen, set(RatingBand))

    def test_band_table_is_ordered(self):
        lower_bounds = [lower_bound for _band, lower_bound in RATING_BANDS]
        self.assertEqual(lower_bounds, sorted(lower_bounds, reverse=True))
        self.assertEqual(lower_bounds[-1], float("-inf"))

    def test_rejects_out_of_range(self):
        for bad_score in (-0.01, 100.01, math.nan, math.inf, -math.inf):
            with self.assertRaises(InvalidScoreRange):
                classify(bad_score)

    def test_rejects_non_numbers(self):
        for bad_score in ("80", None, True):
            with self.assertRaises(InvalidScoreRange):
                classify(bad_score)

    def test_rating_order(self):
        self.assertGreater(RatingBand.AAA, RatingBand.AA)
        self.assertLess(RatingBand.CCC, RatingBand.B)
        self.assertLessEqual(RatingBand.B, RatingBand.B)
        self.assertEqual(sorted([RatingBand.BB, RatingBand.AAA, RatingBand.CCC]),
                         [RatingBand.CCC, RatingBand.BB, RatingBand.AAA])


class TestEvaluate(unittest.TestCase):
    def test_full_result(self):
        result = evaluate(CategoryScores(90, 85, 95), MSCI_WEIGHTING, 65)
        self.assertEqual(result.overall, 90.0)
        self.assertEqual(result.rating, RatingBand.AAA)
        self.assertEqual(result.environmental, 90.0)
        self.assertTrue(result.benchmarks.ftse4good_included)
        self.assertTrue(result.benchmarks.djsi_world_member)
        self.assertEqual(result.benchmarks.industry_average, 65.0)
        self.assertEqual(result.benchmarks.sp500_average, 68.0)

    def test_to_dict(self):
        result = evaluate(CategoryScores(80, 70, 60), MSCI_WEIGHTING, 70)
        body = result.to_dict()
        self.assertEqual(body["overall"], 71.0)
        self.assertEqual(body["rating"], "BBB")
        self.assertFalse(body["benchmarks"]["ftse4good_included"])


if __name__ == "__main__":
    unittest.main()
