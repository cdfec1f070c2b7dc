import logging
import re
from typing import List, Optional

from liirat_api.adapters.calendar import adapt_calendar_event
from liirat_api.adapters.fields import records
from liirat_api.adapters.quote import normalize_quote_payload
from liirat_api.config import Settings
from liirat_api.core.exceptions import ProviderFailure
from liirat_api.providers.eodhd import EodhdClient
from liirat_api.providers.openai_chat import ChatClient
from liirat_api.schemas.calendar import CalendarEvent, Importance
from liirat_api.schemas.quote import Quote
from liirat_api.utils.date_utils import default_calendar_range, utc_now_iso

logger = logging.getLogger(__name__)

PRICE_QUERY_RE = re.compile(
    r"\b(price|سعر|أسعار|EUR|USD|GBP|JPY|BTC|ETH|bitcoin|forex)\b", re.IGNORECASE
)
NEWS_QUERY_RE = re.compile(r"\b(news|أخبار|events|أحداث|calendar|تقويم)\b", re.IGNORECASE)

CONTEXT_SYMBOLS = ["EURUSD.FOREX", "GBPUSD.FOREX", "USDJPY.FOREX", "BTC-USD.CC"]

MESSAGES = {
    "message_required": {"ar": "الرسالة مطلوبة", "en": "Message is required"},
    "unavailable": {
        "ar": "عذراً، الخدمة غير متوفرة حالياً. يرجى المحاولة لاحقاً.",
        "en": "Sorry, the service is not available right now. Please try again later.",
    },
    "no_response": {
        "ar": "عذراً، لم أستطع إنشاء رد.",
        "en": "Sorry, I could not generate a response.",
    },
    "technical": {
        "ar": "عذراً، أواجه صعوبات تقنية. يرجى المحاولة مرة أخرى.",
        "en": "Sorry, I'm experiencing technical difficulties. Please try again.",
    },
    "auth": {
        "ar": "خطأ في المصادقة مع خدمة الذكاء الاصطناعي.",
        "en": "Authentication error with AI service.",
    },
    "rate_limited": {
        "ar": "تم تجاوز الحد المسموح. يرجى الانتظار والمحاولة مرة أخرى.",
        "en": "Rate limit exceeded. Please wait and try again.",
    },
    "temporarily_down": {
        "ar": "الخدمة غير متوفرة مؤقتاً. يرجى المحاولة لاحقاً.",
        "en": "Service is temporarily unavailable. Please try again later.",
    },
    "no_data": {"ar": "لا توجد بيانات متاحة حالياً", "en": "No data available currently"},
    "greeting": {
        "ar": "مرحباً، أنا مساعد ليرات الافتراضي. كيف يمكنني مساعدتك اليوم؟",
        "en": "Hi, I'm Liirat News AI Assistant. How can I help you today?",
    },
    "out_of_scope": {
        "ar": "أستطيع فقط مساعدتك في الأخبار والبيانات الاقتصادية والمالية. يرجى طرح أسئلة حول هذه المواضيع.",
        "en": "I'm only able to assist with economic and financial news or market data. Please ask about these topics.",
    },
    "data_unavailable": {
        "ar": "عذراً، البيانات غير متاحة حالياً. يرجى المحاولة لاحقاً أو التواصل مع admin@ruyaacapital.com",
        "en": "Sorry, data is currently unavailable. Please try again later or contact admin@ruyaacapital.com",
    },
    "live_data": {"ar": "البيانات المباشرة", "en": "Live market data"},
    "key_events": {"ar": "أحداث اقتصادية مهمة:", "en": "Important economic events:"},
}

SYSTEM_PROMPT = """You are Liirat News AI Assistant, a professional economic and financial news agent serving users in both Arabic and English.

CORE FUNCTIONS:
- Instantly deliver economic calendar events, real-time news, and market price alerts
- Explain news/event impact on markets in a concise, user-friendly way, no lengthy or complex answers
- Always detect and reply in the user's language ({language_name}). Never mix languages in a single reply
- Use ONLY real market data provided below. NEVER invent or guess prices/events

REAL-TIME DATA:
{real_time_data}

PROFESSIONAL STANDARDS:
- Never reveal internal methods, private information, or implementation details
- Never leave your defined role. Never answer non-economic or off-topic questions
- Never guess, assume, or provide uncertain information. If data is unavailable or unclear, state so directly
- When explaining market impact, refer to specific events/data with exact timestamps from the data above

GREETING RESPONSE (always the same):
{greeting}

ROLE RESTRICTIONS (absolute):
- You are strictly limited to financial/economic topics
- Never discuss internal logic, AI, your limitations, or "how you work"
- Always keep answers short, clear, and actionable

ERROR RESPONSES:
If user's request is outside your scope:
{out_of_scope}

If real-time data is unavailable:
{data_unavailable}

RESPONSE FORMAT:
- Present market data clearly with timestamps
- This is for educational and informational purposes only, not investment advice"""


def localized(key: str, language: str) -> str:
    texts = MESSAGES[key]
    return texts["ar"] if language == "ar" else texts["en"]


def error_message_for(status: Optional[int], language: str) -> str:
    """Localized chat failure text chosen by the upstream status."""
    if status == 401:
        return localized("auth", language)
    if status == 429:
        return localized("rate_limited", language)
    if status is not None and status >= 500:
        return localized("temporarily_down", language)
    return localized("technical", language)


def format_quotes(quotes: List[Quote], language: str) -> str:
    lines = []
    for quote in quotes:
        price = f"{quote.price:.4f}" if quote.price is not None else "N/A"
        pct = quote.changePercent or 0.0
        sign = "+" if pct >= 0 else ""
        lines.append(f"- {quote.symbol}: {price} ({sign}{pct:.2f}%)")
    return f"{localized('live_data', language)} ({utc_now_iso()}):\n" + "\n".join(lines)


def format_events(events: List[CalendarEvent], language: str) -> str:
    lines = [
        f"- {event.event} ({event.country}) - {(event.datetimeUtc or '')[:10]}"
        for event in events
    ]
    return localized("key_events", language) + "\n" + "\n".join(lines)


class ChatService:
    """Market assistant: live quotes and key events folded into the system prompt."""

    def __init__(self, settings: Settings, chat_client: ChatClient, eodhd_client: EodhdClient):
        self._settings = settings
        self._chat = chat_client
        self._eodhd = eodhd_client

    @property
    def configured(self) -> bool:
        return bool(self._settings.OPENAI_API_KEY)

    async def live_quotes(self) -> List[Quote]:
        try:
            payload = await self._eodhd.real_time(CONTEXT_SYMBOLS)
        except ProviderFailure as e:
            logger.warning(f"Chat price context unavailable: {e}")
            return []
        return [quote for quote in normalize_quote_payload(payload) if quote.price is not None]

    async def key_events(self, limit: int = 3) -> List[CalendarEvent]:
        from_date, to_date = default_calendar_range()
        try:
            payload = await self._eodhd.economic_events(
                from_date, to_date, importance=3, limit=5
            )
        except ProviderFailure as e:
            logger.warning(f"Chat calendar context unavailable: {e}")
            return []
        events = [adapt_calendar_event(row) for row in records(payload)]
        high = [event for event in events if event.importance == Importance.HIGH] or events
        return high[:limit]

    async def build_context(self, message: str, language: str) -> str:
        sections = []
        if PRICE_QUERY_RE.search(message):
            quotes = await self.live_quotes()
            if quotes:
                sections.append(format_quotes(quotes, language))
        if NEWS_QUERY_RE.search(message):
            events = await self.key_events()
            if events:
                sections.append(format_events(events, language))
        return "\n\n".join(sections)

    def system_prompt(self, real_time_data: str, language: str) -> str:
        return SYSTEM_PROMPT.format(
            language_name="Arabic" if language == "ar" else "English",
            real_time_data=real_time_data or localized("no_data", language),
            greeting=localized("greeting", language),
            out_of_scope=localized("out_of_scope", language),
            data_unavailable=localized("data_unavailable", language),
        )

    async def reply(self, message: str, language: str = "ar") -> str:
        context = await self.build_context(message, language)
        response = await self._chat.complete(
            [
                {"role": "system", "content": self.system_prompt(context, language)},
                {"role": "user", "content": message},
            ],
            model=self._settings.OPENAI_CHAT_MODEL,
        )
        logger.info(f"Chat response received ({len(response)} chars)")
        return response or localized("no_response", language)

    async def quick_reply(self, prompt: Optional[str]) -> str:
        """Single-turn completion for ``/api/ai-chat``."""
        response = await self._chat.complete(
            [{"role": "user", "content": prompt or "Hello, I'm Liirat's assistant!"}],
            model=self._settings.OPENAI_QUICK_MODEL,
        )
        return response or "No response"
