"""Pool parameters shared by the pricing math and the price oracle."""

# Swap fee in basis points (30 = 0.3%)
FEE_BPS = 30

# Basis-point denominator used by the fee-adjusted swap formula
FEE_BASE = 10_000

# Fixed-point scaling factor for spot prices (18 fractional decimal digits)
PRICE_SCALE = 10**18

# Smallest amount a swap may leave behind in the output reserve
MIN_OUTPUT_RESERVE = 1
