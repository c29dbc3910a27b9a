import unittest
from decimal import Decimal

from credit_model.constants import MAX_UINT256
from credit_model.errors import (CollateralTransferFailed, DebtExceeded, InsufficientAllowance, InsufficientCollateral,
                                 InsufficientLiquidity, InvalidAmount)
from credit_model.genesis_states import bootstrap
from credit_model.lending_pool import LendingPool

E18 = 10 ** 18


class TestLendingPool(unittest.TestCase):
    def setUp(self):
        self.deployment = bootstrap()
        self.pool = self.deployment.lending_pool
        self.dvt = self.deployment.tokens['DVT']
        self.weth = self.deployment.tokens['WETH']

    def approve_pool(self, account='attacker'):
        self.weth.approve(account, self.pool.address, MAX_UINT256)
        self.dvt.approve(account, self.pool.address, MAX_UINT256)

    def test_deployment(self):
        self.assertEqual(self.pool.collateral_factor, Decimal('3'))
        self.assertEqual(self.pool.reserve_of_borrow_asset, 1000000 * E18)
        self.assertEqual(self.dvt.balance_of(self.pool.address), 1000000 * E18)
        self.assertEqual(self.pool.total_debt(), 0)

    def test_calculate_deposit_required(self):
        self.assertEqual(self.pool.calculate_deposit_required(1 * E18), 3 * E18 // 10)
        self.assertEqual(self.pool.calculate_deposit_required(1000000 * E18), 300000 * E18)
        self.assertEqual(self.pool.calculate_deposit_required(0), 0)

    def test_deposit_rounds_up(self):
        # exact figure is 0.3 base units
        self.assertEqual(self.pool.calculate_deposit_required(1), 1)
        self.assertEqual(self.pool.calculate_deposit_required(10), 3)
        self.assertEqual(self.pool.calculate_deposit_required(11), 4)

    def test_deposit_is_linear_in_amount(self):
        for amount in (1 * E18, 7 * E18 + 3, 123456789):
            single = self.pool.calculate_deposit_required(amount)
            for n in (2, 5, 1000):
                combined = self.pool.calculate_deposit_required(n * amount)
                self.assertLessEqual(combined, n * single)
                self.assertLess(n * single - combined, n)

    def test_deposit_scales_with_spot_price(self):
        before = self.pool.calculate_deposit_required(1000 * E18)
        self.weth.approve('attacker', self.deployment.pair.address, MAX_UINT256)
        self.deployment.pair.swap('attacker', 10 * E18, 'WETH')
        after = self.pool.calculate_deposit_required(1000 * E18)
        self.assertGreater(after, before)
        reserve_dvt, reserve_weth = self.deployment.pair.get_reserves()
        self.assertEqual(after, -(-1000 * E18 * reserve_weth * 3 // reserve_dvt))

    def test_borrow(self):
        self.approve_pool()
        required = self.pool.borrow('attacker', 10 * E18)
        self.assertEqual(required, 3 * E18)
        self.assertEqual(self.weth.balance_of('attacker'), 17 * E18)
        self.assertEqual(self.dvt.balance_of('attacker'), 10010 * E18)
        self.assertEqual(self.weth.balance_of(self.pool.address), 3 * E18)
        self.assertEqual(self.pool.reserve_of_borrow_asset, (1000000 - 10) * E18)
        position = self.pool.position_of('attacker')
        self.assertEqual((position.debt_amount, position.collateral_deposited), (10 * E18, 3 * E18))
        event = self.deployment.chain.events_named('Borrowed')[-1]
        self.assertEqual(event.args['deposit_required'], 3 * E18)
        self.assertEqual(event.args['borrow_amount'], 10 * E18)

    def test_borrow_adds_to_the_position(self):
        self.approve_pool()
        self.pool.borrow('attacker', 10 * E18)
        self.pool.borrow('attacker', 20 * E18)
        position = self.pool.position_of('attacker')
        self.assertEqual((position.debt_amount, position.collateral_deposited), (30 * E18, 9 * E18))
        self.assertEqual(self.pool.total_debt(), 30 * E18)
        self.assertEqual(self.pool.total_collateral(), 9 * E18)

    def test_position_of_is_a_copy(self):
        self.approve_pool()
        self.pool.borrow('attacker', 10 * E18)
        self.pool.position_of('attacker').debt_amount = 0
        self.assertEqual(self.pool.position_of('attacker').debt_amount, 10 * E18)

    def test_positions_view_is_a_copy(self):
        self.approve_pool()
        self.pool.borrow('attacker', 10 * E18)
        self.pool.positions['attacker'].debt_amount = 0
        self.pool.positions['attacker'].collateral_deposited = 0
        position = self.pool.position_of('attacker')
        self.assertEqual((position.debt_amount, position.collateral_deposited), (10 * E18, 3 * E18))
        self.assertEqual(self.pool.repay('attacker', 10 * E18), 3 * E18)

    def test_round_trip(self):
        self.approve_pool()
        weth_before = self.weth.balance_of('attacker')
        dvt_before = self.dvt.balance_of('attacker')
        self.pool.borrow('attacker', 33 * E18 + 1)
        released = self.pool.repay('attacker', 33 * E18 + 1)
        self.assertEqual(released, self.pool.calculate_deposit_required(33 * E18 + 1))
        self.assertEqual(self.weth.balance_of('attacker'), weth_before)
        self.assertEqual(self.dvt.balance_of('attacker'), dvt_before)
        self.assertEqual(self.pool.reserve_of_borrow_asset, 1000000 * E18)
        self.assertFalse(self.pool.position_of('attacker').is_open)
        self.assertEqual(self.pool.positions, {})

    def test_partial_repay_releases_pro_rata(self):
        self.approve_pool()
        self.pool.borrow('attacker', 10 * E18)
        released = self.pool.repay('attacker', 4 * E18)
        self.assertEqual(released, 12 * E18 // 10)
        position = self.pool.position_of('attacker')
        self.assertEqual((position.debt_amount, position.collateral_deposited), (6 * E18, 18 * E18 // 10))
        self.assertEqual(self.pool.repay('attacker', 6 * E18), 18 * E18 // 10)

    def test_repay_more_than_debt(self):
        self.approve_pool()
        with self.assertRaises(DebtExceeded):
            self.pool.repay('attacker', 1)
        self.pool.borrow('attacker', 10 * E18)
        with self.assertRaises(DebtExceeded):
            self.pool.repay('attacker', 10 * E18 + 1)
        self.assertEqual(self.pool.position_of('attacker').debt_amount, 10 * E18)

    def test_borrow_without_approval_changes_nothing(self):
        chain = self.deployment.chain
        events_before = len(chain.events)
        with self.assertRaises(CollateralTransferFailed):
            self.pool.borrow('attacker', 10 * E18)
        self.assertEqual(len(chain.events), events_before)
        self.assertEqual(self.pool.reserve_of_borrow_asset, 1000000 * E18)
        self.assertEqual(self.weth.balance_of('attacker'), 20 * E18)
        self.assertEqual(self.dvt.balance_of('attacker'), 10000 * E18)
        self.assertEqual(self.pool.positions, {})

    def test_failed_repay_changes_nothing(self):
        self.weth.approve('attacker', self.pool.address, MAX_UINT256)
        self.pool.borrow('attacker', 10 * E18)
        chain = self.deployment.chain
        events_before = len(chain.events)
        weth_before = self.weth.balance_of('attacker')
        dvt_before = self.dvt.balance_of('attacker')

        # the borrow asset was never approved, so pulling the repayment fails
        with self.assertRaises(InsufficientAllowance):
            self.pool.repay('attacker', 4 * E18)

        position = self.pool.position_of('attacker')
        self.assertEqual((position.debt_amount, position.collateral_deposited), (10 * E18, 3 * E18))
        self.assertEqual(self.pool.reserve_of_borrow_asset, (1000000 - 10) * E18)
        self.assertEqual(self.weth.balance_of('attacker'), weth_before)
        self.assertEqual(self.dvt.balance_of('attacker'), dvt_before)
        self.assertEqual(self.weth.balance_of(self.pool.address), 3 * E18)
        self.assertEqual(len(chain.events), events_before)

    def test_borrow_without_enough_collateral(self):
        self.approve_pool()
        with self.assertRaises(InsufficientCollateral):
            self.pool.borrow('attacker', 100 * E18)
        self.assertEqual(self.weth.balance_of('attacker'), 20 * E18)
        self.assertEqual(self.pool.reserve_of_borrow_asset, 1000000 * E18)

    def test_borrow_more_than_the_reserve(self):
        self.approve_pool()
        with self.assertRaises(InsufficientLiquidity):
            self.pool.borrow('attacker', 1000000 * E18 + 1)

    def test_invalid_amounts(self):
        self.approve_pool()
        with self.assertRaises(InvalidAmount):
            self.pool.borrow('attacker', 0)
        with self.assertRaises(InvalidAmount):
            self.pool.repay('attacker', 0)
        with self.assertRaises(InvalidAmount):
            self.pool.calculate_deposit_required(-1)

    def test_is_undercollateralized(self):
        self.approve_pool()
        self.pool.borrow('attacker', 10 * E18)
        self.assertFalse(self.pool.is_undercollateralized('attacker'))
        self.assertFalse(self.pool.is_undercollateralized('nobody'))
        # buying DVT makes it more expensive, the posted collateral no longer covers the loan
        self.weth.approve('attacker', self.deployment.pair.address, MAX_UINT256)
        self.deployment.pair.swap('attacker', 5 * E18, 'WETH')
        self.assertTrue(self.pool.is_undercollateralized('attacker'))

    def test_fund(self):
        self.dvt.mint('deployer', 5 * E18)
        self.dvt.approve('deployer', self.pool.address, 5 * E18)
        self.pool.fund('deployer', 5 * E18)
        self.assertEqual(self.pool.reserve_of_borrow_asset, 1000005 * E18)

    def test_collateral_factor_must_exceed_one(self):
        d = self.deployment
        with self.assertRaises(ValueError):
            LendingPool(d.chain, d.oracle, d.tokens['WETH'], d.tokens['DVT'], collateral_factor=Decimal('1'))
        with self.assertRaises(ValueError):
            LendingPool(d.chain, d.oracle, d.tokens['DVT'], d.tokens['DVT'])


if __name__ == '__main__':
    unittest.main()
