from x402_memeputer.mechanisms.evm.exact.client import ExactEvmClientMechanism

__all__ = ["ExactEvmClientMechanism"]
