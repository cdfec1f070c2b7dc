"""Glossary translation for calendar and dashboard terms (English -> Arabic)."""

from typing import Dict

GLOSSARY_AR: Dict[str, str] = {
    # Economic events
    "Exports": "الصادرات",
    "Imports": "الواردات",
    "GDP": "الناتج المحلي الإجمالي",
    "Inflation": "التضخم",
    "Unemployment": "البطالة",
    "Interest Rate": "سعر الفائدة",
    "Trade Balance": "الميزان التجاري",
    "Consumer Price Index": "مؤشر أسعار المستهلك",
    "Producer Price Index": "مؤشر أسعار المنتجين",
    "Industrial Production": "الإنتاج الصناعي",
    "Retail Sales": "مبيعات التجزئة",
    "Employment": "التوظيف",
    "Payrolls": "كشوف المرتبات",
    "Wages": "الأجور",
    "Manufacturing": "التصنيع",
    "Services": "الخدمات",
    "Housing": "الإسكان",
    "Construction": "البناء",
    "Central Bank": "البنك المركزي",
    "Federal Reserve": "الاحتياطي الفيدرالي",
    "ECB": "البنك المركزي الأوروبي",
    "Bank of England": "بنك إنجلترا",
    "Bank of Japan": "بنك اليابان",
    # Categories
    "Financial": "مالي",
    "Economic": "اقتصادي",
    "Earnings": "الأرباح",
    "Central Banks": "البنوك المركزية",
    "Forex": "تداول العملات",
    "All Categories": "جميع الفئات",
    "All Countries": "جميع البلدان",
    # Common terms
    "High": "عالي",
    "Medium": "متوسط",
    "Low": "منخفض",
    "Previous": "السابق",
    "Forecast": "المتوقع",
    "Actual": "الفعلي",
    "Impact": "التأثير",
    "Country": "الدولة",
    "Event": "الحدث",
    "Date & Time": "التاريخ والوقت",
    "Actions": "الإجراءات",
    "Search": "البحث",
    "Category": "الفئة",
    "Countries": "البلدان",
    "Importance": "الأهمية",
    "Filters": "الفلاتر",
    "Clear All": "مسح الكل",
    "Refresh": "تحديث",
    "Period": "الفترة",
    "Time": "الوقت",
    "This Week": "هذا الأسبوع",
    "Next Week": "الأسبوع القادم",
    "This Month": "هذا الشهر",
    "Custom Range": "فترة مخصصة",
}


def translate(text: str, target_language: str) -> str:
    """Exact glossary hit for Arabic targets; anything else is returned unchanged."""
    if target_language.lower().startswith("ar"):
        return GLOSSARY_AR.get(text, text)
    return text
