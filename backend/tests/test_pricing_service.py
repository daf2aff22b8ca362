import unittest

from jewelry_admin.services.pricing_service import GRAMS_PER_TICKAL, calculate_gold_price
from jewelry_admin.validation import ValidationError


class GoldPriceTests(unittest.TestCase):
    def test_sell_price_for_fifteen_pe(self):
        result = calculate_gold_price(weight=GRAMS_PER_TICKAL, gold_price=1700, quality='p15')

        self.assertAlmostEqual(result['weight_tickal'], 1.0)
        # 16 / (16 + 1) * 1700
        self.assertAlmostEqual(result['gold_price'], 1600.0)
        self.assertAlmostEqual(result['final_price'], 1600.0)
        self.assertEqual(result['deduction_value'], 0.0)

    def test_buy_price_rounds_half_grade_down_and_deducts_loss(self):
        result = calculate_gold_price(
            weight=GRAMS_PER_TICKAL * 2, gold_price=1600, quality='p14_2', mode='buy', yway=8, pe=1,
        )

        # 14 / 16 * 1600
        self.assertAlmostEqual(result['gold_price'], 1400.0)
        self.assertAlmostEqual(result['total_weight_value'], 2800.0)
        # ((8 / 8 + 1) / 16) * 1400
        self.assertAlmostEqual(result['deduction_value'], 175.0)
        self.assertAlmostEqual(result['final_price'], 2625.0)

    def test_unknown_quality_falls_back_to_fifteen_pe(self):
        result = calculate_gold_price(weight='16.6', gold_price='1,700', quality='p99')

        self.assertEqual(result['quality'], 'p15')
        self.assertAlmostEqual(result['final_price'], 1600.0)

    def test_invalid_input(self):
        with self.assertRaises(ValidationError):
            calculate_gold_price(weight=None, gold_price=1700)
        with self.assertRaises(ValidationError):
            calculate_gold_price(weight=10, gold_price=1700, mode='swap')
        with self.assertRaises(ValidationError):
            calculate_gold_price(weight=-1, gold_price=1700)


if __name__ == "__main__":
    unittest.main()
