"""
Associated token account operations.

This module handles:
- Associated token account address derivation
- Creating missing token accounts before trading starts
"""

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from rotator.config.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    RPC_TIMEOUT,
    SYSTEM_PROGRAM_ID,
)
from rotator.config.tokens import TokenConfig
from rotator.utils.exceptions import ConfigurationError
from rotator.utils.security import mask_signature

from .rpc_wrapper import timeout_decorator, with_timeout
from .transaction_operations import send_and_confirm
from .wallet_operations import WalletAccount

# Associated token program instruction: CreateIdempotent
_CREATE_IDEMPOTENT = bytes([1])


def derive_token_account(owner: Pubkey, mint: Pubkey, program_id: Pubkey) -> Pubkey:
    """
    Derive the associated token account address.

    Args:
        owner: Wallet public key
        mint: Token mint
        program_id: Token program owning the mint (classic or Token-2022)

    Returns:
        Associated token account address
    """
    address, _bump = Pubkey.find_program_address(
        [bytes(owner), bytes(program_id), bytes(mint)],
        Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID),
    )
    return address


def token_account_for(account: WalletAccount, token: TokenConfig) -> Pubkey:
    """Associated token account of `account` for `token`."""
    return derive_token_account(
        Pubkey.from_string(account.address),
        Pubkey.from_string(token.mint),
        Pubkey.from_string(token.program_id),
    )


def build_create_instruction(
    payer: Pubkey,
    owner: Pubkey,
    token: TokenConfig,
) -> Instruction:
    """Build an idempotent create-associated-token-account instruction."""
    mint = Pubkey.from_string(token.mint)
    program_id = Pubkey.from_string(token.program_id)
    token_account = derive_token_account(owner, mint, program_id)

    return Instruction(
        Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID),
        _CREATE_IDEMPOTENT,
        [
            AccountMeta(payer, is_signer=True, is_writable=True),
            AccountMeta(token_account, is_signer=False, is_writable=True),
            AccountMeta(owner, is_signer=False, is_writable=False),
            AccountMeta(mint, is_signer=False, is_writable=False),
            AccountMeta(Pubkey.from_string(SYSTEM_PROGRAM_ID), is_signer=False, is_writable=False),
            AccountMeta(program_id, is_signer=False, is_writable=False),
        ],
    )


class TokenAccountProvisioner:
    """
    Ensures every configured token has an associated token account.
    """

    def __init__(self, client: AsyncClient, rpc_timeout: float = RPC_TIMEOUT) -> None:
        """
        Initialize provisioner.

        Args:
            client: Solana RPC client
            rpc_timeout: Timeout per RPC request
        """
        self.client = client
        self.rpc_timeout = rpc_timeout

    async def token_account_exists(self, account: WalletAccount, token: TokenConfig) -> bool:
        resp = await with_timeout(
            self.client.get_account_info(token_account_for(account, token)),
            timeout=self.rpc_timeout,
            operation_name=f"get_account_info({token.name})",
        )
        return resp.value is not None

    @timeout_decorator(operation_name="get_latest_blockhash")
    async def _latest_blockhash(self) -> Hash:
        resp = await self.client.get_latest_blockhash()
        return resp.value.blockhash

    async def ensure_token_accounts(
        self,
        account: WalletAccount,
        tokens: tuple[TokenConfig, ...],
    ) -> list[str]:
        """
        Create missing token accounts.

        Args:
            account: Wallet to provision
            tokens: Configured tokens

        Returns:
            Names of tokens whose accounts were created

        Raises:
            ConfigurationError: If the wallet has no keypair to pay with
        """
        created = []
        for token in tokens:
            if await self.token_account_exists(account, token):
                logger.info(f"[{account.label}] ✅ Token account already exists for {token.name}")
                continue

            if account.keypair is None:
                raise ConfigurationError(
                    f"{account.label} has no keypair, cannot create {token.name} token account"
                )

            logger.info(f"[{account.label}] 🔨 Creating token account for {token.name}...")
            owner = Pubkey.from_string(account.address)
            instruction = build_create_instruction(owner, owner, token)
            blockhash = await self._latest_blockhash()
            message = Message.new_with_blockhash([instruction], owner, blockhash)
            tx = Transaction([account.keypair], message, blockhash)

            signature = await send_and_confirm(
                self.client, bytes(tx), rpc_timeout=self.rpc_timeout
            )
            logger.success(
                f"[{account.label}] ✅ Token account created for {token.name}. "
                f"Signature: {mask_signature(signature)}"
            )
            created.append(token.name)

        return created
