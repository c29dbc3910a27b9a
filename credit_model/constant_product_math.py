from credit_model import fixed_point
from credit_model.constants import MINIMUM_LIQUIDITY, SWAP_FEE_DENOMINATOR, SWAP_FEE_NUMERATOR
from credit_model.errors import InsufficientLiquidity, InsufficientOutputAmount, InvalidAmount


class ConstantProductMath:

    # **********************************************************************************************
    # quote                                                                                     //
    # aB = amount_b                        aA * rB                                              //
    # aA = amount_a                 aB = ---------                                              //
    # rA = reserve_a                         rA                                                 //
    # rB = reserve_b                                                                            //
    # **********************************************************************************************/
    @staticmethod
    def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
        if amount_a <= 0:
            raise InvalidAmount('ERR_INSUFFICIENT_AMOUNT')
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientLiquidity()
        return fixed_point.mul_div(amount_a, reserve_b, reserve_a)

    # **********************************************************************************************
    # getAmountOut                                                                              //
    # aO = amount_out                          aI * 997 * rO                                    //
    # aI = amount_in               aO = ----------------------------                            //
    # rI = reserve_in                     rI * 1000 + aI * 997                                  //
    # rO = reserve_out                                                                          //
    # **********************************************************************************************/
    @staticmethod
    def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        if amount_in <= 0:
            raise InvalidAmount('ERR_INSUFFICIENT_INPUT_AMOUNT')
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity()
        amount_in_with_fee = fixed_point.mul(amount_in, SWAP_FEE_NUMERATOR)
        numerator = fixed_point.mul(amount_in_with_fee, reserve_out)
        denominator = fixed_point.add(fixed_point.mul(reserve_in, SWAP_FEE_DENOMINATOR), amount_in_with_fee)
        return fixed_point.div(numerator, denominator)

    # **********************************************************************************************
    # getAmountIn                                                                               //
    # aI = amount_in                         rI * aO * 1000                                     //
    # aO = amount_out              aI = ------------------------  + 1                           //
    # rI = reserve_in                     ( rO - aO ) * 997                                     //
    # rO = reserve_out                                                                          //
    # **********************************************************************************************/
    @staticmethod
    def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int) -> int:
        if amount_out <= 0:
            raise InvalidAmount('ERR_INSUFFICIENT_OUTPUT_AMOUNT')
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity()
        if amount_out >= reserve_out:
            raise InsufficientLiquidity('cannot buy {} out of a reserve of {}'.format(amount_out, reserve_out))
        numerator = fixed_point.mul(fixed_point.mul(reserve_in, amount_out), SWAP_FEE_DENOMINATOR)
        denominator = fixed_point.mul(reserve_out - amount_out, SWAP_FEE_NUMERATOR)
        return fixed_point.add(fixed_point.div(numerator, denominator), 1)

    # **********************************************************************************************
    # swapReserves                                                                              //
    # rI' = rI + aI                                                                             //
    # rO' = rO - aO               with   rI' * rO'  >=  rI * rO                                 //
    # **********************************************************************************************/
    @staticmethod
    def calc_swap(amount_in: int, reserve_in: int, reserve_out: int) -> (int, int, int):
        amount_out = ConstantProductMath.get_amount_out(amount_in, reserve_in, reserve_out)
        if amount_out == 0:
            raise InsufficientOutputAmount('{} in rounds to 0 out'.format(amount_in))
        if amount_out >= reserve_out:
            raise InsufficientLiquidity()
        return amount_out, fixed_point.add(reserve_in, amount_in), reserve_out - amount_out

    # **********************************************************************************************
    # calcSharesGivenDeposit                                                                    //
    # empty pool:      s = sqrt( aA * aB ) - MINIMUM_LIQUIDITY                                  //
    # otherwise:       s = min( aA * S / rA , aB * S / rB )                                     //
    # S = total_shares                                                                          //
    # **********************************************************************************************/
    @staticmethod
    def calc_shares_given_deposit(amount_a: int, amount_b: int, reserve_a: int, reserve_b: int, total_shares: int) -> int:
        if total_shares == 0:
            return fixed_point.sqrt(fixed_point.mul(amount_a, amount_b)) - MINIMUM_LIQUIDITY
        return min(
            fixed_point.mul_div(amount_a, total_shares, reserve_a),
            fixed_point.mul_div(amount_b, total_shares, reserve_b),
        )

    # **********************************************************************************************
    # calcOptimalDeposit                                                                        //
    # Keeps the pool ratio: take all of one side and quote the other one. Whatever is           //
    # not taken stays with the provider.                                                        //
    # **********************************************************************************************/
    @staticmethod
    def calc_optimal_deposit(amount_a_desired: int, amount_b_desired: int, reserve_a: int, reserve_b: int) -> (int, int):
        if reserve_a == 0 and reserve_b == 0:
            return amount_a_desired, amount_b_desired
        amount_b_optimal = ConstantProductMath.quote(amount_a_desired, reserve_a, reserve_b)
        if amount_b_optimal <= amount_b_desired:
            return amount_a_desired, amount_b_optimal
        amount_a_optimal = ConstantProductMath.quote(amount_b_desired, reserve_b, reserve_a)
        return amount_a_optimal, amount_b_desired

    # **********************************************************************************************
    # calcAmountsGivenShares                                                                    //
    # aA = s * rA / S                                                                           //
    # aB = s * rB / S                                                                           //
    # **********************************************************************************************/
    @staticmethod
    def calc_amounts_given_shares(shares: int, reserve_a: int, reserve_b: int, total_shares: int) -> (int, int):
        if total_shares == 0:
            raise InsufficientLiquidity()
        return (
            fixed_point.mul_div(shares, reserve_a, total_shares),
            fixed_point.mul_div(shares, reserve_b, total_shares),
        )
