"""
이 파일은 심볼 검색에 사용할 기본 심볼 디렉터리를 중앙에서 관리합니다.
EODHD 코드 형식(예: EURUSD.FOREX, BTC-USD.CC, AAPL.US)을 사용합니다.
"""

from typing import Dict, List, Optional

SYMBOL_DIRECTORY: List[Dict[str, str]] = [
    # Major Forex Pairs
    {"symbol": "EURUSD.FOREX", "name": "EUR/USD", "category": "forex"},
    {"symbol": "GBPUSD.FOREX", "name": "GBP/USD", "category": "forex"},
    {"symbol": "USDJPY.FOREX", "name": "USD/JPY", "category": "forex"},
    {"symbol": "AUDUSD.FOREX", "name": "AUD/USD", "category": "forex"},
    {"symbol": "USDCHF.FOREX", "name": "USD/CHF", "category": "forex"},
    {"symbol": "USDCAD.FOREX", "name": "USD/CAD", "category": "forex"},
    {"symbol": "NZDUSD.FOREX", "name": "NZD/USD", "category": "forex"},
    {"symbol": "EURGBP.FOREX", "name": "EUR/GBP", "category": "forex"},
    {"symbol": "EURJPY.FOREX", "name": "EUR/JPY", "category": "forex"},
    {"symbol": "GBPJPY.FOREX", "name": "GBP/JPY", "category": "forex"},
    {"symbol": "CHFJPY.FOREX", "name": "CHF/JPY", "category": "forex"},
    {"symbol": "CADJPY.FOREX", "name": "CAD/JPY", "category": "forex"},
    {"symbol": "AUDCAD.FOREX", "name": "AUD/CAD", "category": "forex"},
    {"symbol": "AUDCHF.FOREX", "name": "AUD/CHF", "category": "forex"},
    {"symbol": "AUDJPY.FOREX", "name": "AUD/JPY", "category": "forex"},
    {"symbol": "CADCHF.FOREX", "name": "CAD/CHF", "category": "forex"},
    {"symbol": "EURCHF.FOREX", "name": "EUR/CHF", "category": "forex"},
    {"symbol": "EURCAD.FOREX", "name": "EUR/CAD", "category": "forex"},
    {"symbol": "GBPCAD.FOREX", "name": "GBP/CAD", "category": "forex"},
    {"symbol": "GBPCHF.FOREX", "name": "GBP/CHF", "category": "forex"},
    # Cryptocurrencies
    {"symbol": "BTC-USD.CC", "name": "Bitcoin (BTC/USD)", "category": "crypto"},
    {"symbol": "ETH-USD.CC", "name": "Ethereum (ETH/USD)", "category": "crypto"},
    {"symbol": "XRP-USD.CC", "name": "XRP (XRP/USD)", "category": "crypto"},
    {"symbol": "LTC-USD.CC", "name": "Litecoin (LTC/USD)", "category": "crypto"},
    {"symbol": "ADA-USD.CC", "name": "Cardano (ADA/USD)", "category": "crypto"},
    {"symbol": "DOT-USD.CC", "name": "Polkadot (DOT/USD)", "category": "crypto"},
    {"symbol": "LINK-USD.CC", "name": "Chainlink (LINK/USD)", "category": "crypto"},
    {"symbol": "BCH-USD.CC", "name": "Bitcoin Cash (BCH/USD)", "category": "crypto"},
    {"symbol": "BNB-USD.CC", "name": "Binance Coin (BNB/USD)", "category": "crypto"},
    {"symbol": "SOL-USD.CC", "name": "Solana (SOL/USD)", "category": "crypto"},
    {"symbol": "MATIC-USD.CC", "name": "Polygon (MATIC/USD)", "category": "crypto"},
    {"symbol": "AVAX-USD.CC", "name": "Avalanche (AVAX/USD)", "category": "crypto"},
    {"symbol": "UNI-USD.CC", "name": "Uniswap (UNI/USD)", "category": "crypto"},
    {"symbol": "ATOM-USD.CC", "name": "Cosmos (ATOM/USD)", "category": "crypto"},
    # Major Indices
    {"symbol": "GSPC.INDX", "name": "S&P 500", "category": "indices"},
    {"symbol": "IXIC.INDX", "name": "NASDAQ Composite", "category": "indices"},
    {"symbol": "DJI.INDX", "name": "Dow Jones Industrial Average", "category": "indices"},
    {"symbol": "RUT.INDX", "name": "Russell 2000", "category": "indices"},
    {"symbol": "VIX.INDX", "name": "VIX Volatility Index", "category": "indices"},
    {"symbol": "N225.INDX", "name": "Nikkei 225", "category": "indices"},
    {"symbol": "HSI.INDX", "name": "Hang Seng Index", "category": "indices"},
    {"symbol": "FTSE.INDX", "name": "FTSE 100", "category": "indices"},
    {"symbol": "DAX.INDX", "name": "DAX", "category": "indices"},
    {"symbol": "CAC.INDX", "name": "CAC 40", "category": "indices"},
    {"symbol": "ASX.INDX", "name": "ASX 200", "category": "indices"},
    {"symbol": "KOSPI.INDX", "name": "KOSPI", "category": "indices"},
    {"symbol": "TWII.INDX", "name": "Taiwan Weighted", "category": "indices"},
    # Major Stocks
    {"symbol": "AAPL.US", "name": "Apple Inc.", "category": "stocks"},
    {"symbol": "MSFT.US", "name": "Microsoft Corporation", "category": "stocks"},
    {"symbol": "GOOGL.US", "name": "Alphabet Inc.", "category": "stocks"},
    {"symbol": "AMZN.US", "name": "Amazon.com Inc.", "category": "stocks"},
    {"symbol": "TSLA.US", "name": "Tesla Inc.", "category": "stocks"},
    {"symbol": "META.US", "name": "Meta Platforms Inc.", "category": "stocks"},
    {"symbol": "NVDA.US", "name": "NVIDIA Corporation", "category": "stocks"},
    {"symbol": "NFLX.US", "name": "Netflix Inc.", "category": "stocks"},
    {"symbol": "AMD.US", "name": "Advanced Micro Devices", "category": "stocks"},
    {"symbol": "INTC.US", "name": "Intel Corporation", "category": "stocks"},
    {"symbol": "CRM.US", "name": "Salesforce Inc.", "category": "stocks"},
    {"symbol": "ORCL.US", "name": "Oracle Corporation", "category": "stocks"},
    {"symbol": "ADBE.US", "name": "Adobe Inc.", "category": "stocks"},
    {"symbol": "PYPL.US", "name": "PayPal Holdings", "category": "stocks"},
    {"symbol": "DIS.US", "name": "Walt Disney Company", "category": "stocks"},
    {"symbol": "UBER.US", "name": "Uber Technologies", "category": "stocks"},
    {"symbol": "SPOT.US", "name": "Spotify Technology", "category": "stocks"},
    {"symbol": "ZM.US", "name": "Zoom Video Communications", "category": "stocks"},
    {"symbol": "SQ.US", "name": "Block Inc.", "category": "stocks"},
    {"symbol": "SHOP.US", "name": "Shopify Inc.", "category": "stocks"},
    # Commodities
    {"symbol": "XAUUSD.FOREX", "name": "Gold (XAU/USD)", "category": "commodities"},
    {"symbol": "XAGUSD.FOREX", "name": "Silver (XAG/USD)", "category": "commodities"},
    {"symbol": "XPTUSD.FOREX", "name": "Platinum (XPT/USD)", "category": "commodities"},
    {"symbol": "XPDUSD.FOREX", "name": "Palladium (XPD/USD)", "category": "commodities"},
    {"symbol": "CL.F", "name": "Crude Oil WTI", "category": "commodities"},
    {"symbol": "BZ.F", "name": "Brent Crude Oil", "category": "commodities"},
    {"symbol": "NG.F", "name": "Natural Gas", "category": "commodities"},
    {"symbol": "HG.F", "name": "Copper", "category": "commodities"},
    {"symbol": "SI.F", "name": "Silver Futures", "category": "commodities"},
    {"symbol": "GC.F", "name": "Gold Futures", "category": "commodities"},
]


def search_symbols(
    query: Optional[str] = None, category: Optional[str] = None, limit: int = 20
) -> List[Dict[str, str]]:
    """심볼/이름/카테고리 부분 일치 검색 후 카테고리 필터와 limit을 적용합니다."""
    results = SYMBOL_DIRECTORY
    if query:
        term = query.lower()
        results = [
            entry
            for entry in results
            if term in entry["name"].lower()
            or term in entry["symbol"].lower()
            or term in entry["category"].lower()
        ]
    if category:
        results = [entry for entry in results if entry["category"] == category.lower()]
    return results[: max(limit, 0)]
