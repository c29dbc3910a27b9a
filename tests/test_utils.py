import copy
import unittest

import pandas as pd

from credit_model.constants import MAX_UINT256
from credit_model.genesis_states import bootstrap
from credit_model.parts.utils import get_param, post_processing

E18 = 10 ** 18


class TestUtils(unittest.TestCase):
    def test_get_param(self):
        self.assertEqual(get_param([{'spot_price_of': 'DVT'}], 'spot_price_of'), 'DVT')
        self.assertEqual(get_param({'spot_price_of': 'DVT'}, 'spot_price_of'), 'DVT')
        self.assertEqual(get_param([], 'spot_price_of', 'WETH'), 'WETH')
        self.assertIsNone(get_param({}, 'spot_price_of'))

    def test_post_processing_world_destructuring(self):
        world_0 = bootstrap()
        world_1 = copy.deepcopy(world_0)
        world_1.tokens['DVT'].approve('attacker', world_1.pair.address, MAX_UINT256)
        amount_out = world_1.pair.swap('attacker', 100 * E18, 'DVT')
        world_1.last_outcome = 'ok'

        df = pd.DataFrame({
            'world': [world_0, world_1],
            'action_type': ['', 'swap'],
            'action_status': ['', 'ok'],
            'spot_price': [world_0.oracle.spot_price_decimal('DVT', 'WETH'),
                           world_1.oracle.spot_price_decimal('DVT', 'WETH')],
            'simulation': [0, 0],
            'subset': [0, 0],
            'run': [1, 1],
            'substep': [0, 2],
            'timestep': [0, 1],
        })
        result = post_processing(df)

        self.assertNotIn('world', result.columns)
        self.assertEqual(list(result['reserve_dvt']), [100.0, 200.0])
        self.assertAlmostEqual(result['reserve_weth'][1], 10 - amount_out / E18)
        self.assertEqual(result['invariant'][0], 1000.0)
        self.assertEqual(result['lending_pool_reserve'][0], 1000000.0)
        self.assertEqual(result['attacker_dvt_balance'][1], 9900.0)
        self.assertEqual(result['attacker_debt'][1], 0.0)
        self.assertAlmostEqual(result['spot_price'][0], 0.1)
        self.assertEqual(result['spot_price_change'][0], 0.0)
        self.assertLess(result['spot_price_change'][1], 0)
        self.assertEqual(list(result['reverted']), [False, False])


if __name__ == '__main__':
    unittest.main()
