"""
Kernel layer.

`ammcore/kernels/python/` holds the integer-only arithmetic the pricing and
liquidity engines are built from: the fixed-point helpers, the CPMM swap
kernel and the LP mint/burn kernel.
"""
