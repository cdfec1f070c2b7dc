from .quote import Quote, CachedQuote, ConnectionStatus
from .calendar import CalendarEvent, Importance
from .news import NewsArticle
from .alert import Alert, AlertCreate, AlertUpdate
