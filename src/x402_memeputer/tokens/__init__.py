from x402_memeputer.tokens.registry import USDC, TokenInfo, TokenRegistry

__all__ = ["USDC", "TokenInfo", "TokenRegistry"]
