"""Operations on Vault KV v2 secrets and a command-line health check."""

__version__ = "0.1.0"