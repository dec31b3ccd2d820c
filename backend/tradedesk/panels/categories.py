from __future__ import annotations

# CoinCap ids grouped for the quick-pick buttons of the crypto panel.
CRYPTO_CATEGORIES: dict[str, list[str]] = {
    "Top Coins": ["bitcoin", "ethereum", "binance-coin", "solana", "toncoin", "dogecoin"],
    "Layer 1": ["ethereum", "solana", "avalanche", "cardano", "polkadot", "near-protocol"],
    "DeFi": ["uniswap", "aave", "maker", "compound", "curve-dao-token", "sushi"],
    "AI & Data": [
        "fetch-ai",
        "singularitynet",
        "ocean-protocol",
        "numeraire",
        "cortex",
        "deepbrain-chain",
    ],
    "Gaming": ["axie-infinity", "the-sandbox", "decentraland", "enjin-coin", "gala", "immutable-x"],
    "Meme": ["dogecoin", "shiba-inu", "pepe", "bonk", "floki", "baby-doge-coin"],
}

DEFAULT_CATEGORY = "Top Coins"

_LABELS = {
    "binance-coin": "BNB",
    "avalanche": "AVAX",
    "toncoin": "TON",
    "curve-dao-token": "CRV",
    "enjin-coin": "ENJ",
    "near-protocol": "NEAR",
}


def display_label(asset_id: str) -> str:
    if asset_id in _LABELS:
        return _LABELS[asset_id]
    # Only the first hyphen is replaced, matching the button captions.
    return asset_id.replace("-", " ", 1).title()


def all_popular_cryptos() -> list[str]:
    return list(dict.fromkeys(asset for assets in CRYPTO_CATEGORIES.values() for asset in assets))
