"""
EVM mechanisms
"""

from x402_memeputer.mechanisms.evm.exact import ExactEvmClientMechanism

__all__ = ["ExactEvmClientMechanism"]
