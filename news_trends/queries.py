from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

RETAIL_QUERY = (
    '((retail OR "retail industry" OR 小売 OR "小売業" OR e-commerce OR ecommerce OR EC '
    'OR "supply chain" OR 店舗 OR オムニチャネル OR omnichannel OR Amazon OR Walmart '
    "OR Shopify OR Target OR Costco))"
)

# Brands and concepts that signal a topic is being widely talked about.
TREND_KEYWORDS = (
    "ai", "生成", "omnichannel", "オムニ", "supply", "chain", "inflation", "物価",
    "price", "価格", "walmart", "amazon", "shopify", "costco", "target", "tesla",
    "logistics", "物流", "inventory", "在庫", "demand", "需要", "holiday", "セール",
    "sale", "決算", "earnings", "expansion", "出店", "閉店", "撤退", "labor", "雇用",
    "strike", "ストライキ", "sustainability", "サステナ", "eco", "脱炭素", "digital",
    "デジタル", "loyalty", "ロイヤルティ", "membership", "サブスク", "subscription",
)

INDUSTRY_KEYWORDS: Dict[str, List[str]] = {
    "AI": ["AI", "人工知能", "machine learning", "生成AI", "LLM"],
    "半導体": ["半導体", "semiconductor", "chip", "TSMC", "NVIDIA", "ASML"],
    "自動車": ["自動車", "automotive", "EV", "電気自動車", "Tesla", "トヨタ"],
    "金融": ["金融", "finance", "bank", "fintech", "証券"],
    "ヘルスケア": ["ヘルスケア", "healthcare", "医療", "pharma", "製薬"],
    "エネルギー": ["エネルギー", "energy", "renewable", "再生可能エネルギー", "脱炭素"],
    "小売": ["小売", "retail", "e-commerce", "EC", "supply chain"],
    "通信": ["通信", "telecom", "5G", "モバイル通信"],
    "宇宙・防衛": ["宇宙", "space", "satellite", "defense", "衛星"],
    "サイバーセキュリティ": ["サイバーセキュリティ", "cybersecurity", "情報セキュリティ", "脆弱性"],
    "クラウド": ["クラウド", "cloud", "SaaS", "IaaS", "data center"],
    "ゲーム": ["ゲーム", "gaming", "video game", "e-sports"],
}

_WHITESPACE_RE = re.compile(r"\s")


def build_or_query(terms: Iterable[str]) -> Optional[str]:
    """Join search terms into a parenthesised ``OR`` expression.

    Terms containing whitespace are quoted so the search API treats them as
    phrases. Returns ``None`` when no usable term remains.
    """
    parts: List[str] = []
    for term in terms:
        trimmed = term.strip()
        if not trimmed:
            continue
        parts.append(f'"{trimmed}"' if _WHITESPACE_RE.search(trimmed) else trimmed)
    if not parts:
        return None
    return f"({' OR '.join(parts)})"


def build_industry_query(industry: str) -> Optional[str]:
    terms = INDUSTRY_KEYWORDS.get(industry)
    if not terms:
        return None
    return build_or_query(terms)
