import unittest

from runcast.weather_codes import UNKNOWN_WEATHER, WEATHER_CATEGORIES, classify


class TestWeatherCodes(unittest.TestCase):
    def test_every_table_code_round_trips(self):
        for category in WEATHER_CATEGORIES:
            result = classify(category.code)
            self.assertEqual(result.code, category.code)
            self.assertEqual((result.label, result.icon), (category.label, category.icon))

    def test_canonical_buckets_present(self):
        self.assertEqual([c.code for c in WEATHER_CATEGORIES], [0, 1, 2, 3, 45, 51, 61, 71, 95])

    def test_unknown_code_falls_back(self):
        self.assertIs(classify(999), UNKNOWN_WEATHER)
        self.assertEqual(classify(999).icon, "thermometer")
        self.assertIsNone(classify(999).code)

    def test_odd_inputs_never_raise(self):
        for value in (None, -1, "61", 61.5, True, object()):
            self.assertIs(classify(value), UNKNOWN_WEATHER)

    def test_integral_float_code_is_accepted(self):
        self.assertEqual(classify(61.0).icon, "cloud-rain")

    def test_classify_is_idempotent(self):
        self.assertEqual(classify(3), classify(3))


if __name__ == "__main__":
    unittest.main()
