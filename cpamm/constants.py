"""Protocol constants for the constant-product exchange.

Centralizes the sentinel address and pricing parameters.
"""

# Reserved "no asset" identity; never accepted where a real asset is required
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Pricing fee is expressed in percent of the input amount.
# 1% fee -> input is scaled by (100 - 1) / 100 before entering the curve
FEE_SCALE = 100
DEFAULT_FEE_PERCENT = 1

# Share-token metadata: symbol = "<asset symbol>_LP", name = "<asset name>-<base symbol>"
SHARE_SYMBOL_SUFFIX = "_LP"
DEFAULT_BASE_SYMBOL = "Eth"

# One whole unit of an 18-decimal asset
WEI = 10**18
