import unittest

from credit_model.constant_product_math import ConstantProductMath
from credit_model.constants import MINIMUM_LIQUIDITY
from credit_model.errors import InsufficientLiquidity, InsufficientOutputAmount, InvalidAmount

E18 = 10 ** 18


class TestConstantProductMath(unittest.TestCase):
    def test_quote(self):
        self.assertEqual(ConstantProductMath.quote(1 * E18, 100 * E18, 10 * E18), E18 // 10)
        with self.assertRaises(InvalidAmount):
            ConstantProductMath.quote(0, 100, 10)
        with self.assertRaises(InsufficientLiquidity):
            ConstantProductMath.quote(1, 0, 10)

    def test_get_amount_out(self):
        # 10 * 997 * 100 / (10 * 1000 + 10 * 997)
        self.assertEqual(ConstantProductMath.get_amount_out(10, 10, 100), 49)
        amount_out = ConstantProductMath.get_amount_out(10000 * E18, 100 * E18, 10 * E18)
        self.assertEqual(amount_out, 9970000 * E18 * 10 * E18 // (100000 * E18 + 9970000 * E18))
        with self.assertRaises(InvalidAmount):
            ConstantProductMath.get_amount_out(0, 10, 100)
        with self.assertRaises(InsufficientLiquidity):
            ConstantProductMath.get_amount_out(10, 0, 100)

    def test_get_amount_in_covers_amount_out(self):
        reserve_in, reserve_out = 100 * E18, 10 * E18
        amount_out = 3 * E18
        amount_in = ConstantProductMath.get_amount_in(amount_out, reserve_in, reserve_out)
        self.assertGreaterEqual(ConstantProductMath.get_amount_out(amount_in, reserve_in, reserve_out), amount_out)
        self.assertLess(ConstantProductMath.get_amount_out(amount_in - 2, reserve_in, reserve_out), amount_out)
        with self.assertRaises(InsufficientLiquidity):
            ConstantProductMath.get_amount_in(reserve_out, reserve_in, reserve_out)

    def test_calc_swap_increases_k(self):
        reserve_in, reserve_out = 100 * E18, 10 * E18
        for amount_in in (1 * E18, 37 * E18, 10000 * E18):
            amount_out, new_in, new_out = ConstantProductMath.calc_swap(amount_in, reserve_in, reserve_out)
            self.assertEqual(new_in, reserve_in + amount_in)
            self.assertEqual(new_out, reserve_out - amount_out)
            self.assertGreater(new_in * new_out, reserve_in * reserve_out)
            reserve_in, reserve_out = new_in, new_out

    def test_calc_swap_zero_output(self):
        with self.assertRaises(InsufficientOutputAmount):
            ConstantProductMath.calc_swap(1, 100 * E18, 10 * E18)

    def test_calc_shares_first_deposit(self):
        shares = ConstantProductMath.calc_shares_given_deposit(100 * E18, 10 * E18, 0, 0, 0)
        self.assertEqual(shares, 31622776601683793319 - MINIMUM_LIQUIDITY)
        # below the locked minimum nothing is minted
        self.assertLessEqual(ConstantProductMath.calc_shares_given_deposit(10, 10, 0, 0, 0), 0)

    def test_calc_shares_pro_rata(self):
        shares = ConstantProductMath.calc_shares_given_deposit(50, 5, 100, 10, 1000)
        self.assertEqual(shares, 500)
        # the smaller side decides
        shares = ConstantProductMath.calc_shares_given_deposit(50, 10, 100, 10, 1000)
        self.assertEqual(shares, 500)

    def test_calc_optimal_deposit(self):
        self.assertEqual(ConstantProductMath.calc_optimal_deposit(50, 10, 100, 10), (50, 5))
        self.assertEqual(ConstantProductMath.calc_optimal_deposit(500, 2, 100, 10), (20, 2))
        self.assertEqual(ConstantProductMath.calc_optimal_deposit(7, 3, 0, 0), (7, 3))

    def test_calc_amounts_given_shares(self):
        self.assertEqual(ConstantProductMath.calc_amounts_given_shares(250, 100, 10, 1000), (25, 2))
        with self.assertRaises(InsufficientLiquidity):
            ConstantProductMath.calc_amounts_given_shares(1, 0, 0, 0)


if __name__ == '__main__':
    unittest.main()
