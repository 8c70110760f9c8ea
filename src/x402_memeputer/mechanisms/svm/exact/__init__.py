from x402_memeputer.mechanisms.svm.exact.client import ExactSvmClientMechanism

__all__ = ["ExactSvmClientMechanism"]
