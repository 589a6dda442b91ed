"""
Application constants.

Centralized constants for the application.
"""

from decimal import Decimal

# ========================================================================
# SOLANA PROGRAM IDS
# ========================================================================

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

# RPC operation timeouts (in seconds)
RPC_TIMEOUT = 30.0  # Balance reads, account lookups
RPC_CONFIRM_TIMEOUT = 60.0  # Waiting for a signature to reach "confirmed"
RPC_CONFIRM_POLL_INTERVAL = 0.5

# Expected secret key length for base58 encoded keypairs
KEYPAIR_SECRET_LENGTH = 64

# ========================================================================
# TRADING CONSTANTS
# ========================================================================

# Share of the fresh balance that may be swapped in one call.
# The remaining 5% absorbs balance drift, fees and slippage variance.
SWAP_SAFETY_MARGIN = Decimal("0.95")

DEFAULT_SWAP_FRACTION = Decimal("0.75")
DEFAULT_SLIPPAGE_TOLERANCE = Decimal("0.15")
DEFAULT_MIN_BALANCE_THRESHOLD = Decimal("1")
DEFAULT_CU_LIMIT = 1_200_000

# Pauses (seconds / hours)
POST_SWAP_REWARDS_DELAY_SECONDS = 300.0  # 5 minutes before checking rewards
FAILURE_DELAY_SECONDS = 3.0
ROUND_DELAY_MIN_HOURS = 3.0
ROUND_DELAY_MAX_HOURS = 5.0

# ========================================================================
# REWARDS SERVICE CONSTANTS
# ========================================================================

REWARDS_URL = "https://api.perena.org/api/rewards"
REWARDS_REFERER = "https://app.perena.org/"
REWARDS_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
REWARDS_SEASON_KEY = "preseason1RewardsData"

REWARDS_MIN_REQUEST_INTERVAL = 60.0  # Minimum 1 minute between API calls (all wallets)
REWARDS_TIMEOUT = 15.0
REWARDS_MAX_RETRIES = 3
REWARDS_DEFAULT_RETRY_AFTER = 30.0  # Used when a 429 carries no Retry-After header
REWARDS_MAX_JITTER = 10.0
REWARDS_BACKOFF_BASE = 2.0  # 4s, 8s, 16s...
REWARDS_BACKOFF_CAP = 30.0

# ========================================================================
# NOTIFICATION CONSTANTS
# ========================================================================

NOTIFICATION_TIMEOUT = 10.0  # Discord / Telegram delivery timeout
