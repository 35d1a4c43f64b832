"""CLI entrypoint for gravity-transfer."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer

from .cosmos.messages import (
    create_send_to_ethereum_amino_message,
    create_send_to_ethereum_message,
)
from .domain import (
    HUB_CHAIN,
    BridgeFee,
    Erc20Token,
    NativeToken,
    SupportedChain,
    Token,
    Transfer,
)
from .exceptions import GravityTransferError
from .formatter import format_fee_table, format_message_dump
from .logger import setup_logging
from .settings import TransferSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Gravity Bridge transfers, message encoding and bridge fee quotes.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("gravity_transfer")


def _state(ctx: typer.Context) -> AppState:
    return ctx.obj


def _build_token(
    token_address: str | None, denom: str | None, decimals: int, symbol: str
) -> Token:
    if token_address and denom:
        raise typer.BadParameter("Pass either --token-address or --denom, not both")
    if token_address:
        return Erc20Token(address=token_address, decimals=decimals, symbol=symbol)
    if denom:
        return NativeToken(denom=denom, decimals=decimals, symbol=symbol)
    raise typer.BadParameter("One of --token-address or --denom is required")


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [gravity_transfer] table).",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
):
    """Load settings and configure logging for every command."""
    if config_path:
        os.environ["GRAVITY_TRANSFER_CONFIG"] = str(config_path)

    init_kwargs: dict[str, str] = {}
    if log_level is not None:
        init_kwargs["log_level"] = log_level

    settings = TransferSettings(**init_kwargs)
    setup_logging(settings.log_level, secrets=(settings.eth_private_key_value,))
    ctx.obj = AppState(settings=settings, logger=_build_logger())


@app.command("show-config")
def show_config(ctx: typer.Context):
    """Print effective config (with secrets redacted)."""
    typer.echo(json.dumps(_state(ctx).settings.as_safe_dict(), indent=2))


@app.command()
def fees(
    ctx: typer.Context,
    price: Annotated[
        str, typer.Option("--price", help="Price of one token in the quote currency.")
    ],
    symbol: Annotated[str, typer.Option("--symbol", help="Token symbol.")],
    token_address: Annotated[
        str | None, typer.Option("--token-address", help="ERC20 contract address.")
    ] = None,
    decimals: Annotated[int, typer.Option("--decimals")] = 18,
    from_chain: Annotated[
        SupportedChain, typer.Option("--from-chain", help="Source chain.")
    ] = HUB_CHAIN,
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON.")] = False,
):
    """Quote Slow / Fast / Instant bridge fees from current relay congestion."""
    state = _state(ctx)
    token = _build_token(token_address, None, decimals, symbol)

    estimator = state.fee_estimator()
    try:
        quotes = asyncio.run(estimator.get_fees(from_chain, token, price))
    except GravityTransferError as e:
        state.logger.error("Fee estimation failed: %s", e)
        raise typer.Exit(code=1) from e

    if as_json:
        typer.echo(json.dumps([fee.to_dict() for fee in quotes], indent=2))
    else:
        format_fee_table(quotes)


@app.command("build-msg")
def build_msg(
    sender: Annotated[str, typer.Option("--sender", help="Gravity Bridge sender address.")],
    eth_dest: Annotated[str, typer.Option("--eth-dest", help="Ethereum recipient address.")],
    amount: Annotated[str, typer.Option("--amount", help="Amount in token units.")],
    symbol: Annotated[str, typer.Option("--symbol")],
    token_address: Annotated[str | None, typer.Option("--token-address")] = None,
    denom: Annotated[str | None, typer.Option("--denom")] = None,
    decimals: Annotated[int, typer.Option("--decimals")] = 18,
    bridge_fee: Annotated[
        str | None, typer.Option("--bridge-fee", help="Bridge fee in token units.")
    ] = None,
    chain_fee: Annotated[
        str | None, typer.Option("--chain-fee", help="Chain fee in token units.")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON.")] = False,
):
    """Print the amino JSON and protobuf encodings of a MsgSendToEth."""
    token = _build_token(token_address, denom, decimals, symbol)
    transfer = Transfer(
        from_chain=SupportedChain.GRAVITY_BRIDGE,
        to_chain=SupportedChain.ETH,
        from_address=sender,
        to_address=eth_dest,
        amount=amount,
        token=token,
        bridge_fee=(
            BridgeFee(
                id=0,
                label="Custom",
                denom=symbol,
                amount=bridge_fee,
                amount_in_currency="",
            )
            if bridge_fee
            else None
        ),
        chain_fee=chain_fee,
    )

    try:
        amino_message = create_send_to_ethereum_amino_message(transfer)
        proto_message = create_send_to_ethereum_message(transfer)
    except GravityTransferError as e:
        raise typer.BadParameter(str(e)) from e

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "amino": amino_message,
                    "direct": {
                        "type_url": proto_message.type_url,
                        "value": proto_message.value.hex(),
                    },
                },
                indent=2,
            )
        )
    else:
        format_message_dump(amino_message, proto_message.type_url, proto_message.value)


@app.command("send-to-cosmos")
def send_to_cosmos(
    ctx: typer.Context,
    token_address: Annotated[str, typer.Option("--token-address")],
    symbol: Annotated[str, typer.Option("--symbol")],
    amount: Annotated[str, typer.Option("--amount", help="Amount in token units.")],
    destination: Annotated[
        str, typer.Option("--destination", help="Gravity Bridge recipient address.")
    ],
    decimals: Annotated[int, typer.Option("--decimals")] = 18,
):
    """Bridge an ERC20 token from Ethereum to Gravity Bridge with the configured key."""
    state = _state(ctx)
    if not state.settings.eth_private_key:
        raise typer.BadParameter(
            "eth_private_key is required to send from Ethereum.",
            param_hint=["GRAVITY_TRANSFER_ETH_PRIVATE_KEY"],
        )

    wallets = state.eth_wallets()
    router = state.transfer_router(eth_wallets=wallets)
    transfer = Transfer(
        from_chain=SupportedChain.ETH,
        to_chain=SupportedChain.GRAVITY_BRIDGE,
        from_address=wallets.address or "",
        to_address=destination,
        amount=amount,
        token=Erc20Token(address=token_address, decimals=decimals, symbol=symbol),
    )

    try:
        tx_hash = asyncio.run(router.route(transfer))
    except GravityTransferError as e:
        state.logger.error("Transfer failed: %s", e)
        raise typer.Exit(code=1) from e

    typer.echo(tx_hash)


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
