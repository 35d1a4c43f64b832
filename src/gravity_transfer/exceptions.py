"""Errors raised while quoting, building and submitting bridge transfers."""


class GravityTransferError(Exception):
    """Base class for all transfer errors."""


class MissingTokenInfoError(GravityTransferError):
    """Token is neither an ERC20 token nor a native denom."""


class InvalidInputError(GravityTransferError, ValueError):
    """An amount, price or token argument is malformed."""


class UnsupportedRouteError(GravityTransferError):
    """No handler exists for the (source, destination) chain pair."""


class UnsupportedChainError(GravityTransferError):
    """The source chain cannot be used by the selected handler."""


class WrongTokenTypeError(GravityTransferError):
    """The handler needs a different token variant."""


class WalletCapabilityError(GravityTransferError):
    """The connected wallet cannot sign or submit the transfer."""


class FeeRetrievalError(GravityTransferError):
    """Relay congestion data is unavailable or unusable."""


class BroadcastError(GravityTransferError):
    """The network accepted the call but did not return a transaction hash."""
