"""Bridge endpoints, contract addresses and protocol constants."""

DEFAULT_HUB_CHAIN_ID = "gravity-bridge-3"
DEFAULT_LCD_URL = "https://gravitychain.io:1317"
DEFAULT_RELAY_INFO_URL = "https://info.gravitychain.io:9000/gravity_bridge_info"
DEFAULT_ETH_RPC_URL = "https://eth.drpc.org"

# Gravity.sol on Ethereum mainnet
GRAVITY_ETH_CONTRACT = "0xa4108aA1Ec4967F8b52220a4f7e94A8201F2D906"

# Prefix Gravity Bridge uses for vouchers of bridged ERC20 tokens
GRAVITY_DENOM_PREFIX = "gravity"

SEND_TO_ETH_TYPE_URL = "/gravity.v1.MsgSendToEth"
SEND_TO_ETH_AMINO_TYPE = "gravity/MsgSendToEth"
SECP256K1_PUBKEY_TYPE_URL = "/cosmos.crypto.secp256k1.PubKey"
SECP256K1_AMINO_PUBKEY_TYPE = "tendermint/PubKeySecp256k1"

DEFAULT_GAS_LIMIT = 200_000

# Used when a chain fee has to be scaled for a token without decimals
DEFAULT_FEE_DECIMALS = 6

# Fee quotes are expressed with at most this many decimal places
FEE_QUOTE_DECIMALS = 6
