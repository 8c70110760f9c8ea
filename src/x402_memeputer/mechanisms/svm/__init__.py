"""
Solana (SVM) mechanisms
"""

from x402_memeputer.mechanisms.svm.exact import ExactSvmClientMechanism

__all__ = ["ExactSvmClientMechanism"]
