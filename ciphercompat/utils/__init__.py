from .random_gen import SecureRandom
from .log        import configure_logging

__all__ = ["SecureRandom", "configure_logging"]
