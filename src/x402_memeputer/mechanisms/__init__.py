"""
x402 Mechanisms - Payment mechanisms for different chain families

Structure:
    _base/          - ABC interface (ClientMechanism)
    _exact_base/    - Shared base class and EIP-712 types for the "exact" scheme
    svm/exact/      - Fee-sponsored SPL transfer transaction (Solana)
    evm/exact/      - EIP-3009 TransferWithAuthorization (Base and other EVM chains)
"""

from x402_memeputer.mechanisms import evm, svm
from x402_memeputer.mechanisms._base import ClientMechanism
from x402_memeputer.mechanisms._exact_base import ExactBaseClientMechanism
from x402_memeputer.mechanisms.evm import ExactEvmClientMechanism
from x402_memeputer.mechanisms.svm import ExactSvmClientMechanism

__all__ = [
    "ClientMechanism",
    "ExactBaseClientMechanism",
    "ExactEvmClientMechanism",
    "ExactSvmClientMechanism",
    "evm",
    "svm",
]
