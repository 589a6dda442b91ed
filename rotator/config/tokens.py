"""
Token configuration.

Static table of the stablecoins rotated through the tripool.
Loaded once at import, immutable for the process lifetime.
"""

from dataclasses import dataclass

from rotator.config.constants import TOKEN_2022_PROGRAM_ID, TOKEN_PROGRAM_ID


@dataclass(frozen=True)
class TokenConfig:
    """Fungible token entry: name, mint, decimals and owning program."""

    name: str
    mint: str
    decimals: int
    program_id: str


USDC = TokenConfig(
    name="USDC",
    mint="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    decimals=6,
    program_id=TOKEN_PROGRAM_ID,
)
USDT = TokenConfig(
    name="USDT",
    mint="Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
    decimals=6,
    program_id=TOKEN_PROGRAM_ID,
)
PYUSD = TokenConfig(
    name="PYUSD",
    mint="2b1kV6DkPAnxd5ixfnxCpjxmKwqjjaYmCZfHsFu24GXo",
    decimals=6,
    program_id=TOKEN_2022_PROGRAM_ID,
)
USD_STAR = TokenConfig(
    name="USD*",
    mint="BenJy1n3WTx9mTjEvy63e8Q1j4RqUc6E4VBMz3ir4Wo6",
    decimals=6,
    program_id=TOKEN_PROGRAM_ID,
)

# Configured order matters: ties on the highest balance go to the first entry
TOKENS: tuple[TokenConfig, ...] = (USDC, USDT, PYUSD, USD_STAR)


def get_token_config(
    identifier: str,
    tokens: tuple[TokenConfig, ...] = TOKENS,
) -> TokenConfig | None:
    """
    Get token configuration by name or mint address.

    Args:
        identifier: Token name (e.g. "USDC") or mint address
        tokens: Token table to search

    Returns:
        TokenConfig or None if not found
    """
    for token in tokens:
        if token.name == identifier:
            return token

    for token in tokens:
        if token.mint == identifier:
            return token

    return None
