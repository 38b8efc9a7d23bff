from wichteln.services.pairing import PairingError, generate_pairings
from wichteln.services.rate_limit import RateLimiter

__all__ = ["PairingError", "RateLimiter", "generate_pairings"]
