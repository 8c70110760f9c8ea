from x402_memeputer.mechanisms._base.client import ClientMechanism

__all__ = ["ClientMechanism"]
