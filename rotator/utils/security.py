"""
Security utilities for masking sensitive data in logs.

Provides functions to safely mask sensitive information like:
- Wallet addresses
- Transaction signatures
- Secret keys
"""


def mask_address(address: str | None) -> str:
    """
    Mask wallet address for logging: 7xKX...sAsU

    Args:
        address: Base58 wallet address to mask

    Returns:
        Masked address showing first 4 and last 4 characters

    Examples:
        >>> mask_address("7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")
        '7xKX...gAsU'
        >>> mask_address(None)
        '***'
        >>> mask_address("short")
        '***'
    """
    if not address or len(address) < 10:
        return "***"
    return f"{address[:4]}...{address[-4:]}"


def mask_signature(signature: str | None) -> str:
    """
    Mask transaction signature for logging.

    Examples:
        >>> mask_signature("5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW")
        '5VERv8NM...SZkQUW'
    """
    if not signature or len(signature) < 16:
        return "***"
    return f"{signature[:8]}...{signature[-6:]}"
