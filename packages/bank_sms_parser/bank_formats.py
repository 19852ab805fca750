"""Built-in notification formats for Saudi/Gulf banks, wallets and card schemes.

Each entry maps a format name to field regular expressions (source strings,
compiled at registration). Every field captures exactly one group, except
``amount`` which captures the value and the three-letter currency code.
Table order is the matcher's tie-break order, so ``generic`` comes first.
"""

from __future__ import annotations

# Shared fragments
_DATE = r"(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})"
_MASKED = r"(\d+\*+)"
_AMOUNT = r"([\d,\.]+)\s*([A-Z]{3})"
_FIRST_LINE = r"^([^\n]+)"
_CODE = r"([A-Z0-9]+)"
_REST_OF_LINE = r"([^\n]+)"

BANK_FORMATS: dict[str, dict[str, str]] = {
    # Works for the common "شراء ... بـ ... من ..." phrasing used by most banks
    "generic": {
        "description": _FIRST_LINE,
        "amount": r"بـ\s*" + _AMOUNT,
        "merchant": r"من\s+" + _REST_OF_LINE,
        "card": r"مدى\s*(\d+\*)",
        "account": r"حساب\s*(\d+\*)",
        "date": r"في\s*(\d{2}-\d{2}-\d{1,2})",
    },
    "alrajhi": {
        "description": _FIRST_LINE,
        "amount": r"(?:قيمة|مبلغ|بقيمة)\s*" + _AMOUNT,
        "merchant": r"(?:من|لدى|عند)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة|كارت)\s*" + _MASKED,
        "account": r"(?:حساب|رقم الحساب)\s*" + _MASKED,
        "date": r"(?:بتاريخ|في|تاريخ)\s*" + _DATE,
        "reference": r"(?:مرجع|رقم مرجع)\s*" + _CODE,
        "terminal": r"(?:طرفية|جهاز)\s*" + _CODE,
    },
    "ncb": {
        "description": _FIRST_LINE,
        "amount": r"(?:المبلغ|القيمة|بمبلغ)\s*" + _AMOUNT,
        "merchant": r"(?:التاجر|من|لدى)\s+" + _REST_OF_LINE,
        "card": r"(?:البطاقة|كارت)\s*" + _MASKED,
        "account": r"(?:الحساب|حساب رقم)\s*" + _MASKED,
        "date": r"(?:التاريخ|في)\s*" + _DATE,
        "branch": r"(?:الفرع|فرع)\s*(\d+)",
        "reference": r"(?:الرقم المرجعي|مرجع)\s*" + _CODE,
    },
    "riyad": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|المبلغ|قدره)\s*" + _AMOUNT,
        "merchant": r"(?:من|لصالح|إلى)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة رقم|البطاقة)\s*" + _MASKED,
        "account": r"(?:من الحساب|الحساب)\s*" + _MASKED,
        "date": r"(?:بتاريخ|في يوم)\s*" + _DATE,
        "time": r"(?:الساعة|وقت)\s*(\d{1,2}:\d{2})",
        "location": r"(?:في|بـ)\s+([^0-9\n]+)",
    },
    # Now part of SNB
    "samba": {
        "description": _FIRST_LINE,
        "amount": r"(?:بقيمة|مقدار|بمبلغ)\s*" + _AMOUNT,
        "merchant": r"(?:من|عند|لدى)\s+" + _REST_OF_LINE,
        "card": r"(?:بالبطاقة|البطاقة)\s*" + _MASKED,
        "account": r"(?:الحساب|من حساب)\s*" + _MASKED,
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "approval": r"(?:رقم الموافقة|الموافقة)\s*" + _CODE,
    },
    "snb": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|القيمة|المبلغ)\s*" + _AMOUNT,
        "merchant": r"(?:من|التاجر|عند)\s+" + _REST_OF_LINE,
        "card": r"(?:البطاقة|بطاقة رقم)\s*" + _MASKED,
        "account": r"(?:الحساب|حساب)\s*" + _MASKED,
        "date": r"(?:في|التاريخ|بتاريخ)\s*" + _DATE,
        "channel": r"(?:القناة|عبر)\s+" + _REST_OF_LINE,
        "reference": r"(?:المرجع|رقم مرجعي)\s*" + _CODE,
    },
    "saib": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|قيمة|مقدار)\s*" + _AMOUNT,
        "merchant": r"(?:من|لدى|عند)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة|كرت)\s*" + _MASKED,
        "account": r"(?:حساب|الحساب رقم)\s*" + _MASKED,
        "date": r"(?:بتاريخ|في)\s*" + _DATE,
        "type": r"(?:نوع العملية|العملية)\s+" + _REST_OF_LINE,
    },
    "bsf": {
        "description": _FIRST_LINE,
        "amount": r"(?:مبلغ|بقيمة|القيمة)\s*" + _AMOUNT,
        "merchant": r"(?:من|عند|التاجر)\s+" + _REST_OF_LINE,
        "card": r"(?:البطاقة|بطاقة)\s*" + _MASKED,
        "account": r"(?:الحساب|حساب رقم)\s*" + _MASKED,
        "date": r"(?:في|التاريخ)\s*" + _DATE,
        "location": r"(?:المكان|في)\s+([^0-9\n]+)",
    },
    "anb": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|المبلغ|قدره)\s*" + _AMOUNT,
        "merchant": r"(?:من|لصالح|عند)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة رقم|البطاقة)\s*" + _MASKED,
        "account": r"(?:من حساب|الحساب)\s*" + _MASKED,
        "date": r"(?:بتاريخ|في)\s*" + _DATE,
        "balance": r"(?:الرصيد|الرصيد المتاح)\s*([\d,\.]+)",
    },
    "sabb": {
        "description": _FIRST_LINE,
        "amount": r"(?:Amount|مبلغ|القيمة)\s*" + _AMOUNT,
        "merchant": r"(?:من|From|Merchant)\s+" + _REST_OF_LINE,
        "card": r"(?:Card|البطاقة|بطاقة)\s*" + _MASKED,
        "account": r"(?:Account|الحساب|حساب)\s*" + _MASKED,
        "date": r"(?:Date|في|التاريخ)\s*" + _DATE,
        "reference": r"(?:Ref|مرجع|Reference)\s*" + _CODE,
    },
    "aljazira": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|قيمة|المبلغ)\s*" + _AMOUNT,
        "merchant": r"(?:من|عند|لدى)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة|البطاقة)\s*" + _MASKED,
        "account": r"(?:حساب|الحساب)\s*" + _MASKED,
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "terminal": r"(?:الجهاز|طرفية)\s*" + _CODE,
    },
    "albilad": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|القيمة|مقدار)\s*" + _AMOUNT,
        "merchant": r"(?:من|التاجر|عند)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة|البطاقة رقم)\s*" + _MASKED,
        "account": r"(?:الحساب|حساب)\s*" + _MASKED,
        "date": r"(?:بتاريخ|في|التاريخ)\s*" + _DATE,
        "branch": r"(?:الفرع|فرع رقم)\s*(\d+)",
    },
    "fab": {
        "description": _FIRST_LINE,
        "amount": r"(?:Amount|مبلغ|بقيمة)\s*" + _AMOUNT,
        "merchant": r"(?:من|From|at)\s+" + _REST_OF_LINE,
        "card": r"(?:Card|بطاقة)\s*" + _MASKED,
        "account": r"(?:Account|حساب)\s*" + _MASKED,
        "date": r"(?:Date|في|on)\s*" + _DATE,
        "reference": r"(?:Ref|مرجع)\s*" + _CODE,
    },
    # Wallets
    "stcpay": {
        "description": _FIRST_LINE,
        "amount": r"(?:مبلغ|بقيمة|القيمة)\s*" + _AMOUNT,
        "merchant": r"(?:إلى|من|للتاجر)\s+" + _REST_OF_LINE,
        "account": r"(?:محفظة|الرقم)\s*" + _MASKED,
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "time": r"(?:الساعة|وقت)\s*(\d{1,2}:\d{2})",
        "type": r"(?:نوع العملية|العملية)\s+" + _REST_OF_LINE,
        "reference": r"(?:رقم العملية|مرجع)\s*" + _CODE,
    },
    "mobilypay": {
        "description": _FIRST_LINE,
        "amount": r"(?:مبلغ|بقيمة|القيمة)\s*" + _AMOUNT,
        "merchant": r"(?:إلى|من|للتاجر)\s+" + _REST_OF_LINE,
        "account": r"(?:محفظة|رقم المحفظة)\s*" + _MASKED,
        "date": r"(?:في|التاريخ)\s*" + _DATE,
        "reference": r"(?:رقم المرجع|مرجع)\s*" + _CODE,
    },
    "zainpay": {
        "description": _FIRST_LINE,
        "amount": r"(?:مبلغ|القيمة|بقيمة)\s*" + _AMOUNT,
        "merchant": r"(?:إلى|من|التاجر)\s+" + _REST_OF_LINE,
        "account": r"(?:محفظة|الرقم)\s*" + _MASKED,
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "reference": r"(?:رقم العملية|مرجع)\s*" + _CODE,
    },
    "alinma": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|المبلغ|قيمة)\s*" + _AMOUNT,
        "merchant": r"(?:من|عند|لدى)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة|البطاقة)\s*" + _MASKED,
        "account": r"(?:الحساب|حساب رقم)\s*" + _MASKED,
        "date": r"(?:بتاريخ|في|التاريخ)\s*" + _DATE,
        "islamic": r"(وفقاً للشريعة|شريعة|إسلامي)",
    },
    "rajhiislamic": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|القيمة|مقدار)\s*" + _AMOUNT,
        "merchant": r"(?:من|لدى|عند)\s+" + _REST_OF_LINE,
        "card": r"(?:بطاقة|البطاقة)\s*" + _MASKED,
        "account": r"(?:الحساب|حساب)\s*" + _MASKED,
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "islamic": r"(حلال|شرعي|إسلامي)",
    },
    # Device wallets and card schemes
    "applepay": {
        "description": _FIRST_LINE,
        "amount": r"(?:بـ|بمبلغ|Amount)\s*" + _AMOUNT,
        "merchant": r"(?:من|From|at)\s+" + _REST_OF_LINE,
        "card": r"(?:Apple Pay|آبل باي).*" + _MASKED,
        "date": r"(?:في|on|Date)\s*" + _DATE,
        "device": r"(iPhone|iPad|Apple Watch|آيفون|آيباد)",
    },
    "samsungpay": {
        "description": _FIRST_LINE,
        "amount": r"(?:بـ|بمبلغ|Amount)\s*" + _AMOUNT,
        "merchant": r"(?:من|From|at)\s+" + _REST_OF_LINE,
        "card": r"(?:Samsung Pay|سامسونج باي).*" + _MASKED,
        "date": r"(?:في|on|Date)\s*" + _DATE,
        "device": r"(Galaxy|سامسونج)",
    },
    "mada": {
        "description": _FIRST_LINE,
        "amount": r"(?:بـ|بمبلغ|مبلغ)\s*" + _AMOUNT,
        "merchant": r"(?:من|عند|لدى)\s+" + _REST_OF_LINE,
        "card": r"(?:مدى|MADA)\s*" + _MASKED,
        "account": r"(?:حساب|الحساب)\s*" + _MASKED,
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "terminal": r"(?:طرفية|جهاز)\s*" + _CODE,
    },
    "visa": {
        "description": _FIRST_LINE,
        "amount": r"(?:Amount|مبلغ|بـ)\s*" + _AMOUNT,
        "merchant": r"(?:من|From|at)\s+" + _REST_OF_LINE,
        "card": r"(?:VISA|فيزا).*" + _MASKED,
        "date": r"(?:في|on|Date)\s*" + _DATE,
        "reference": r"(?:Ref|مرجع)\s*" + _CODE,
    },
    "mastercard": {
        "description": _FIRST_LINE,
        "amount": r"(?:Amount|مبلغ|بـ)\s*" + _AMOUNT,
        "merchant": r"(?:من|From|at)\s+" + _REST_OF_LINE,
        "card": r"(?:MasterCard|Mastercard|ماستركارد).*" + _MASKED,
        "date": r"(?:في|on|Date)\s*" + _DATE,
        "reference": r"(?:Ref|مرجع)\s*" + _CODE,
    },
    # Buy now, pay later
    "tamara": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|القيمة|مبلغ)\s*" + _AMOUNT,
        "merchant": r"(?:من|عند|لدى)\s+" + _REST_OF_LINE,
        "installment": r"(?:قسط|دفعة)\s*(\d+\s*من\s*\d+)",
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "reference": r"(?:رقم الطلب|رقم المرجع)\s*" + _CODE,
    },
    "tabby": {
        "description": _FIRST_LINE,
        "amount": r"(?:بمبلغ|القيمة|مبلغ)\s*" + _AMOUNT,
        "merchant": r"(?:من|عند|التاجر)\s+" + _REST_OF_LINE,
        "installment": r"(?:قسط|دفعة)\s*(\d+)",
        "date": r"(?:في|بتاريخ)\s*" + _DATE,
        "reference": r"(?:رقم الطلب|Order)\s*" + _CODE,
    },
}


__all__ = ["BANK_FORMATS"]
