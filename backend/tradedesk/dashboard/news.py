from __future__ import annotations

from tradedesk.schemas.dashboard import NewsDigest, NewsItem

# Canned headlines; "{asset}" is replaced with the upper-cased asset name.
_STOCK_NEWS = [
    ("{asset} Reports Strong Q4 Earnings, Beats Expectations",
     "{asset} reported quarterly earnings that exceeded analyst expectations, driven by strong revenue growth.",
     "positive", 0.85, "Reuters", "2 hours ago", "high"),
    ("Tech Stocks Rally as Market Conditions Improve",
     "Major technology stocks including {asset} saw significant gains as investor confidence returns to the sector.",
     "positive", 0.72, "Bloomberg", "4 hours ago", "medium"),
    ("Supply Chain Concerns Continue to Affect Manufacturing",
     "Ongoing supply chain disruptions may impact production schedules for major companies in the coming quarter.",
     "negative", -0.45, "Financial Times", "6 hours ago", "medium"),
    ("New Product Launch Expected to Drive Growth",
     "Industry analysts predict that {asset}'s upcoming product launches will significantly boost revenue.",
     "positive", 0.68, "WSJ", "8 hours ago", "high"),
]

_CRYPTO_NEWS = [
    ("{asset} Surges on Institutional Adoption News",
     "{asset} has gained significant momentum following announcements of major institutional adoption and integration.",
     "positive", 0.88, "CoinDesk", "1 hour ago", "high"),
    ("Crypto Market Shows Strong Recovery Signs",
     "{asset} and other major cryptocurrencies are showing bullish momentum as market sentiment improves.",
     "positive", 0.76, "CryptoNews", "3 hours ago", "medium"),
    ("Regulatory Clarity Brings Optimism to Crypto Space",
     "Recent regulatory developments provide clearer guidelines for cryptocurrency operations and trading.",
     "positive", 0.65, "Cointelegraph", "5 hours ago", "high"),
    ("{asset} Network Upgrades Show Technical Progress",
     "Latest network improvements and upgrades demonstrate {asset}'s commitment to scalability and efficiency.",
     "positive", 0.71, "The Block", "7 hours ago", "medium"),
]


def news_for(asset: str, asset_type: str) -> NewsDigest:
    name = asset.upper()
    templates = _STOCK_NEWS if asset_type == "stocks" else _CRYPTO_NEWS
    items = [
        NewsItem(
            id=index,
            title=title.format(asset=name),
            summary=summary.format(asset=name),
            sentiment=sentiment,
            sentiment_score=score,
            source=source,
            published_at=published,
            impact=impact,
        )
        for index, (title, summary, sentiment, score, source, published, impact) in enumerate(
            templates, start=1
        )
    ]
    overall = sum(item.sentiment_score for item in items) / len(items)
    return NewsDigest(
        asset=name,
        asset_type=asset_type,
        overall_sentiment=overall,
        overall_label="Positive" if overall > 0 else "Negative",
        positive=sum(1 for item in items if item.sentiment == "positive"),
        negative=sum(1 for item in items if item.sentiment == "negative"),
        items=items,
    )
